"""Render Markdown and templates into final HTML for static sites.

This package turns author-written Markdown into HTML with anchored headings
and a table of contents, and extends Jinja templates with blocks for math
(``{% equation %}``), ASCII-art diagrams (``{% ascii_art %}``), and
highlighted code (``{% highlight %}``).

Exports
-------
- ``MarkdownRenderer``: ``parse(text) -> (html, toc)``.
- ``TemplateEngineBuilder`` / ``TemplateEngine``: Jinja engine with partials
  and the custom blocks.
- ``app`` / ``main``: Cyclopts CLI entry points.

Examples
--------
>>> from pagecraft import MarkdownRenderer
>>> html, toc = MarkdownRenderer().parse("# Title")
>>> html.startswith('<h1 id="title">Title')
True
"""

from __future__ import annotations

from .cli import app, main
from .markdown import MarkdownRenderer
from .templates import TemplateEngine, TemplateEngineBuilder

__all__ = ["MarkdownRenderer", "TemplateEngine", "TemplateEngineBuilder", "app", "main"]
