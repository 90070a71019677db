"""Markdown event-stream pipeline: highlighting, heading anchors, and TOC.

Exports
-------
- ``MarkdownRenderer``: end-to-end ``parse(text) -> (html, toc)``.
- ``HeadingAnchorGenerator``: stream transform collecting the TOC.
- ``CodeBlockDecorator`` / ``Highlighter`` / ``ThemeRegistry``: Pygments
  highlighting and theme lookup.
- ``slugify``: heading-id derivation.
"""

from __future__ import annotations

from .events import MarkdownEventSource
from .highlight import CodeBlockDecorator, Highlighter, ThemeRegistry
from .renderer import HtmlRenderer, MarkdownRenderer
from .toc import HeadingAnchorGenerator, TableOfContents, TocEntry, slugify

__all__ = [
    "CodeBlockDecorator",
    "HeadingAnchorGenerator",
    "Highlighter",
    "HtmlRenderer",
    "MarkdownEventSource",
    "MarkdownRenderer",
    "TableOfContents",
    "ThemeRegistry",
    "TocEntry",
    "slugify",
]
