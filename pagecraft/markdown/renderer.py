r"""Render Markdown into HTML with anchored headings and a table of contents.

:class:`MarkdownRenderer` wires the stream stages together::

    MarkdownEventSource -> CodeBlockDecorator -> HeadingAnchorGenerator
        -> HtmlRenderer

and returns the HTML alongside the optional TOC collected on the way.

Example
-------
>>> from pagecraft.markdown import MarkdownRenderer
>>> html, toc = MarkdownRenderer().parse("## Setup\nRun it.")
>>> html.splitlines()[1]
'<p>Run it.</p>'
>>> toc.as_dict()
{'h2': [{'title': 'Setup', 'permalink': '#setup'}]}
"""

from __future__ import annotations

import logging
import typing as typ

from markdown_it.renderer import RendererHTML
from markdown_it.token import Token

from .events import MarkdownEventSource
from .highlight import CodeBlockDecorator, Highlighter
from .toc import HeadingAnchorGenerator, TableOfContents

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown_it.utils import OptionsDict

    from pagecraft.typesetting import MathTypesetter

logger = logging.getLogger(__name__)


class HtmlRenderer:
    """Serialize a flat event sequence into an HTML string.

    Consecutive inline events are regrouped under a synthetic ``inline``
    token so ``markdown-it``'s own renderer handles block spacing exactly as
    it would for an unflattened token tree. Pass the parser's own renderer
    when plugins registered extra render rules on it.
    """

    def __init__(
        self, options: OptionsDict, renderer: RendererHTML | None = None
    ) -> None:
        self._options = options
        self._renderer = renderer or RendererHTML()

    def render(self, events: cabc.Iterable[Token]) -> str:
        """Return the HTML for ``events``, consuming them once in order."""
        tokens = list(self._regroup(events))
        return self._renderer.render(tokens, self._options, {})

    @staticmethod
    def _regroup(events: cabc.Iterable[Token]) -> cabc.Iterator[Token]:
        run: list[Token] = []
        for event in events:
            if not event.block:
                run.append(event)
                continue
            if run:
                yield Token("inline", "", 0, children=run)
                run = []
            yield event
        if run:
            yield Token("inline", "", 0, children=run)


class MarkdownRenderer:
    """Render Markdown documents with highlighted code and heading anchors.

    Parameters
    ----------
    highlighter : Highlighter, optional
        Shared highlighting resource; one is built from ``theme`` when omitted.
    theme : str, optional
        Pygments style used when ``highlighter`` is not supplied.
    preset : str, optional
        ``markdown-it`` preset name. Defaults to ``"commonmark"``.
    typesetter : MathTypesetter, optional
        Typesetter for ``$`` math in the document.

    Raises
    ------
    ResourceError
        If ``theme`` names an unknown syntax theme.
    """

    def __init__(
        self,
        highlighter: Highlighter | None = None,
        *,
        theme: str | None = None,
        preset: str = "commonmark",
        typesetter: MathTypesetter | None = None,
    ) -> None:
        self._source = MarkdownEventSource(preset, typesetter=typesetter)
        self._decorator = CodeBlockDecorator(highlighter or Highlighter(theme))
        self._html = HtmlRenderer(self._source.options, self._source.renderer)

    def parse(self, content: str) -> tuple[str, TableOfContents | None]:
        """Render ``content`` and return the HTML with its optional TOC.

        Raises
        ------
        StructuralError
            If the event stream contains an unbalanced heading.
        """
        anchors = HeadingAnchorGenerator(
            self._decorator.decorate(self._source.events(content))
        )
        html = self._html.render(anchors)
        toc = anchors.get_toc()
        logger.debug(
            "Rendered %d characters of markdown (%d heading levels)",
            len(content),
            len(toc) if toc else 0,
        )
        return html, toc


__all__ = ["HtmlRenderer", "MarkdownRenderer"]
