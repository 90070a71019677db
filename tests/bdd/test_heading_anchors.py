"""Behaviour tests for heading anchors and the table of contents.

These pytest-bdd scenarios render Markdown through ``MarkdownRenderer`` and
check that headings gain ids and hidden self-links, and that the table of
contents groups headings by level in document order.

Usage
-----
Run ``pytest tests/bdd/test_heading_anchors.py -v``. The scenarios are driven
by ``features/heading_anchors.feature`` and need no external services.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, scenarios, then, when

from pagecraft.markdown import MarkdownRenderer

if typ.TYPE_CHECKING:
    from pagecraft.markdown import TableOfContents

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "heading_anchors.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a markdown document with nested headings")
def given_nested_headings(scenario_state: dict[str, object]) -> None:
    scenario_state["markdown"] = (
        "# Release Notes\n\n"
        "Summary paragraph.\n\n"
        "## Breaking Changes\n\n"
        "- renamed `--out`\n\n"
        "### Migration {#migrate}\n\n"
        "## Fixes & Tweaks\n"
    )


@given("a markdown document without headings")
def given_no_headings(scenario_state: dict[str, object]) -> None:
    scenario_state["markdown"] = "Just prose.\n\n> and a quote\n"


@when("I render the markdown document")
def when_render(scenario_state: dict[str, object]) -> None:
    """Render the stored markdown and keep the HTML and TOC."""
    markdown = typ.cast("str", scenario_state["markdown"])
    html, toc = MarkdownRenderer().parse(markdown)
    scenario_state["html"] = html
    scenario_state["toc"] = toc


@then("every heading carries an anchor link to its own id")
def then_anchors(scenario_state: dict[str, object]) -> None:
    soup = BeautifulSoup(typ.cast("str", scenario_state["html"]), "html.parser")
    headings = soup.select("h1, h2, h3")
    assert [heading["id"] for heading in headings] == [
        "release-notes",
        "breaking-changes",
        "migrate",
        "fixes-tweaks",
    ]
    for heading in headings:
        anchor = heading.find("a", class_="anchor")
        assert anchor is not None, f"missing anchor in {heading}"
        assert anchor["href"] == f"#{heading['id']}"
        assert anchor["aria-hidden"] == "true"


@then("the table of contents lists the headings by level")
def then_toc(scenario_state: dict[str, object]) -> None:
    toc = typ.cast("TableOfContents | None", scenario_state["toc"])
    assert toc is not None
    assert toc.as_dict() == {
        "h1": [{"title": "Release Notes", "permalink": "#release-notes"}],
        "h2": [
            {"title": "Breaking Changes", "permalink": "#breaking-changes"},
            {"title": "Fixes & Tweaks", "permalink": "#fixes-tweaks"},
        ],
        "h3": [{"title": "Migration", "permalink": "#migrate"}],
    }


@then("no table of contents is produced")
def then_no_toc(scenario_state: dict[str, object]) -> None:
    assert scenario_state["toc"] is None
    assert 'class="anchor"' not in typ.cast("str", scenario_state["html"])
