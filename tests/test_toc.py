"""Unit tests for heading anchors, slugs, and table-of-contents collection.

These tests drive ``HeadingAnchorGenerator`` directly with events from
``MarkdownEventSource`` (and hand-built tokens for malformed streams) to pin
down slug derivation, id handling, bucket ordering, and stream shape.

Usage
-----
Run ``pytest tests/test_toc.py -v``. No fixtures beyond pytest's built-ins are
required.
"""

from __future__ import annotations

import re

import pytest
from markdown_it.token import Token

from pagecraft.errors import StructuralError
from pagecraft.markdown import HeadingAnchorGenerator, MarkdownEventSource, slugify

SLUG_SHAPE = re.compile(r"^(?:[a-z0-9]+(?:-[a-z0-9]+)*)?$")


def _drain(markdown: str) -> tuple[list[Token], HeadingAnchorGenerator]:
    """Run the generator over ``markdown`` and return its output events."""
    generator = HeadingAnchorGenerator(MarkdownEventSource().events(markdown))
    return list(generator), generator


def _headings(events: list[Token]) -> list[str]:
    return [event.content.rstrip("\n") for event in events if event.type == "html_block"]


@pytest.mark.parametrize(
    "text",
    [
        "Hello World",
        "  --Leading and trailing--  ",
        "Ünïcödé & Friends!",
        "C++ / Rust :: FFI",
        "already-a-slug",
        "",
        "---",
        "Tabs\tand\nnewlines",
        "日本語のタイトル",
    ],
)
def test_slugify_is_idempotent_and_well_formed(text: str) -> None:
    slug = slugify(text)
    assert slugify(slug) == slug
    assert SLUG_SHAPE.match(slug), f"unexpected slug shape: {slug!r}"


def test_slugify_collapses_and_trims_hyphens() -> None:
    assert slugify("Hello, World!") == "hello-world"
    assert slugify("--A  B--") == "a-b"


def test_heading_markup_is_exact() -> None:
    events, _ = _drain("## Getting Started\n")
    assert _headings(events) == [
        '<h2 id="getting-started">Getting Started'
        '<a hidden="" class="anchor" aria-hidden="true" href="#getting-started">#</a>'
        "</h2>"
    ]


def test_duplicate_headings_share_an_id() -> None:
    _, generator = _drain("# Hello World\n\n# Hello World\n")
    toc = generator.get_toc()
    assert toc is not None
    assert [entry.id for entry in toc["h1"]] == ["hello-world", "hello-world"]


def test_explicit_id_is_kept_verbatim() -> None:
    events, generator = _drain("## Ünïcode!! Heading {#custom_ID}\n")
    assert _headings(events)[0].startswith('<h2 id="custom_ID">Ünïcode!! Heading<a')
    toc = generator.get_toc()
    assert toc is not None
    assert toc.as_dict() == {
        "h2": [{"title": "Ünïcode!! Heading", "permalink": "#custom_ID"}]
    }


def test_toc_is_absent_without_headings() -> None:
    _, generator = _drain("Just a paragraph.\n\n- and a list\n")
    assert generator.get_toc() is None


def test_toc_buckets_follow_document_order() -> None:
    _, generator = _drain("# Guide\n\n## Install\n\ntext\n\n## Configure\n")
    toc = generator.get_toc()
    assert toc is not None
    assert set(toc) == {"h1", "h2"}
    assert len(toc["h1"]) == 1
    assert [entry.title for entry in toc["h2"]] == ["Install", "Configure"]
    assert toc.as_dict()["h2"][1] == {"title": "Configure", "permalink": "#configure"}


def test_multi_run_heading_keeps_last_text_run() -> None:
    events, generator = _drain("# Hello *World*\n")
    toc = generator.get_toc()
    assert toc is not None
    assert toc["h1"][0].title == "World"
    assert _headings(events)[0].startswith('<h1 id="world">World<a')


def test_stream_shape_is_preserved() -> None:
    upstream = list(MarkdownEventSource().events("# A\n\npara *em*\n\n### B\n"))
    downstream = list(HeadingAnchorGenerator(upstream))
    assert len(downstream) == len(upstream)
    assert [event.type for event in downstream[-3:]] == ["text", "text", "html_block"]


def test_text_outside_headings_passes_through() -> None:
    events, _ = _drain("plain words\n")
    assert [event.content for event in events if event.type == "text"] == [
        "plain words"
    ]


def test_heading_close_without_open_is_structural_error() -> None:
    stray = Token("heading_close", "h2", -1, block=True)
    generator = HeadingAnchorGenerator([stray])
    with pytest.raises(StructuralError, match="without a matching heading start"):
        list(generator)


def test_toc_requested_before_drain_is_structural_error() -> None:
    generator = HeadingAnchorGenerator(MarkdownEventSource().events("# Early\n"))
    next(generator)
    with pytest.raises(StructuralError, match="before the event stream was drained"):
        generator.get_toc()


def test_heading_text_is_escaped() -> None:
    events, generator = _drain("# Fish & Chips < 5\n")
    assert _headings(events)[0].startswith(
        '<h1 id="fish-chips-5">Fish &amp; Chips &lt; 5<a'
    )
    toc = generator.get_toc()
    assert toc is not None
    assert toc["h1"][0].title == "Fish & Chips < 5"
