"""Anchor headings and collect a table of contents in a single stream pass.

:class:`HeadingAnchorGenerator` wraps an upstream event iterator. Each
upstream event produces exactly one downstream event: heading sub-events are
blanked to empty text rather than dropped, and the closing heading event is
replaced by one HTML event carrying the anchored heading markup. Once the
stream is drained, :meth:`HeadingAnchorGenerator.get_toc` returns the
collected :class:`TableOfContents`, or ``None`` for documents without
headings.

Example
-------
>>> from pagecraft.markdown.events import MarkdownEventSource
>>> from pagecraft.markdown.toc import HeadingAnchorGenerator
>>> generator = HeadingAnchorGenerator(MarkdownEventSource().events("# Hello"))
>>> [event.content for event in generator if event.type == "html_block"]
['<h1 id="hello">Hello<a hidden="" class="anchor" aria-hidden="true" href="#hello">#</a></h1>\\n']
>>> generator.get_toc().as_dict()
{'h1': [{'title': 'Hello', 'permalink': '#hello'}]}
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re
from html import escape

from markdown_it.token import Token

from pagecraft._constants import HEADING_TAGS, HEADING_TEMPLATE
from pagecraft.errors import StructuralError

NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9]")
HYPHEN_RUN_PATTERN = re.compile(r"-{2,}")


def slugify(text: str) -> str:
    """Return a URL-fragment-safe identifier derived from ``text``.

    Parameters
    ----------
    text : str
        Heading text to convert.

    Returns
    -------
    str
        Lowercase ASCII alphanumerics separated by single hyphens, with no
        leading or trailing hyphen. ``slugify(slugify(x)) == slugify(x)``.

    Examples
    --------
    >>> slugify("Hello, World!")
    'hello-world'
    >>> slugify("--Über  cool--")
    'ber-cool'
    """
    slug = NON_ALNUM_PATTERN.sub("-", text.lower())
    slug = HYPHEN_RUN_PATTERN.sub("-", slug)
    return slug.strip("-")


@dc.dataclass(frozen=True, slots=True)
class TocEntry:
    """A single heading recorded in the table of contents."""

    title: str
    id: str

    @property
    def permalink(self) -> str:
        """Return the fragment link pointing at the heading."""
        return f"#{self.id}"

    def as_dict(self) -> dict[str, str]:
        """Return the template-facing ``title``/``permalink`` mapping."""
        return {"title": self.title, "permalink": self.permalink}


class TableOfContents(cabc.Mapping[str, tuple[TocEntry, ...]]):
    """Read-only mapping of heading tags to entries in encounter order."""

    def __init__(self, buckets: cabc.Mapping[str, cabc.Sequence[TocEntry]]) -> None:
        unknown = set(buckets) - set(HEADING_TAGS)
        if unknown:
            msg = f"Unknown heading levels: {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        self._buckets = {tag: tuple(entries) for tag, entries in buckets.items()}

    def __getitem__(self, tag: str) -> tuple[TocEntry, ...]:
        return self._buckets[tag]

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        return f"TableOfContents({self._buckets!r})"

    def as_dict(self) -> dict[str, list[dict[str, str]]]:
        """Return the plain structure exposed to templates and JSON output."""
        return {
            tag: [entry.as_dict() for entry in entries]
            for tag, entries in self._buckets.items()
        }


@dc.dataclass(slots=True)
class HeadingAccumulator:
    """Transient state for the heading currently being rewritten."""

    explicit_id: str | None = None
    text: str = ""
    active: bool = False

    def reset(self) -> None:
        """Forget everything captured for the finished heading."""
        self.explicit_id = None
        self.text = ""
        self.active = False


def _placeholder() -> Token:
    return Token("text", "", 0, content="")


class HeadingAnchorGenerator(cabc.Iterator[Token]):
    """Rewrite heading events into anchored HTML and aggregate a TOC.

    Parameters
    ----------
    events : Iterable[Token]
        Upstream flat event stream, usually from
        :class:`~pagecraft.markdown.events.MarkdownEventSource`.

    Notes
    -----
    When a heading contains several text runs (for example plain text
    followed by emphasised text) only the last run is kept as the heading
    text.

    The heading text is HTML-escaped before it is placed in the markup, so
    text containing ``&``, ``<`` or ``>`` appears as ``&amp;``, ``&lt;`` or
    ``&gt;`` rather than verbatim. TOC titles keep the unescaped text.
    """

    def __init__(self, events: cabc.Iterable[Token]) -> None:
        self._events = iter(events)
        self._heading = HeadingAccumulator()
        self._toc_entries: dict[str, list[TocEntry]] = {}
        self._exhausted = False

    def __iter__(self) -> HeadingAnchorGenerator:
        return self

    def __next__(self) -> Token:
        try:
            event = next(self._events)
        except StopIteration:
            self._exhausted = True
            raise
        match event.type:
            case "heading_open":
                return self._start_heading(event)
            case "text" if self._heading.active:
                self._heading.text = event.content
                return _placeholder()
            case "heading_close":
                return self._finish_heading(event)
            case _:
                return event

    def get_toc(self) -> TableOfContents | None:
        """Return the collected TOC, or ``None`` when no headings were seen.

        Raises
        ------
        StructuralError
            If the upstream stream has not been fully consumed yet.
        """
        if not self._exhausted:
            msg = "Table of contents requested before the event stream was drained."
            raise StructuralError(msg)
        if not self._toc_entries:
            return None
        return TableOfContents(self._toc_entries)

    def _start_heading(self, event: Token) -> Token:
        self._heading.reset()
        self._heading.active = True
        explicit_id = event.attrGet("id")
        if explicit_id is not None:
            self._heading.explicit_id = str(explicit_id)
        return _placeholder()

    def _finish_heading(self, event: Token) -> Token:
        if not self._heading.active:
            msg = f"Closing <{event.tag}> without a matching heading start."
            raise StructuralError(msg, _line_of(event), tag=event.tag)
        if event.tag not in HEADING_TAGS:
            msg = f"Unsupported heading level '{event.tag}'."
            raise StructuralError(msg, _line_of(event), tag=event.tag)

        text = self._heading.text
        anchor = self._heading.explicit_id
        if anchor is None:
            anchor = slugify(text)
        self._toc_entries.setdefault(event.tag, []).append(TocEntry(text, anchor))
        markup = HEADING_TEMPLATE.format(
            tag=event.tag,
            id=escape(anchor, quote=True),
            text=escape(text, quote=False),
        )
        self._heading.reset()
        return Token("html_block", "", 0, content=f"{markup}\n", block=True)


def _line_of(event: Token) -> int:
    return event.map[0] + 1 if event.map else 0


__all__ = [
    "HeadingAccumulator",
    "HeadingAnchorGenerator",
    "TableOfContents",
    "TocEntry",
    "slugify",
]
