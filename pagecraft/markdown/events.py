r"""Produce a flat Markdown event stream from ``markdown-it-py`` tokens.

``MarkdownIt`` returns block-level tokens whose inline content hangs off
``inline`` tokens as children. The pipeline stages in this package operate
on a single ordered stream instead, so :class:`MarkdownEventSource` splices
each inline token's children into the block sequence in place.

Besides CommonMark the source enables tables, strikethrough, footnotes,
task lists, definition lists, and ``$…$`` / ``$$…$$`` math (typeset
through a :class:`~pagecraft.typesetting.MathTypesetter`). The parser's own
renderer carries the render rules those plugins register, so
:class:`~pagecraft.markdown.renderer.HtmlRenderer` is handed it as well.

Headings may carry an explicit anchor written as a trailing attribute block
(``## Install {#setup}``); the attribute is stripped from the heading text
and stored on the ``heading_open`` token as its ``id`` attribute.

Example
-------
>>> from pagecraft.markdown.events import MarkdownEventSource
>>> [event.type for event in MarkdownEventSource().events("# Hi")]
['heading_open', 'text', 'heading_close']
"""

from __future__ import annotations

import re
import typing as typ

from markdown_it import MarkdownIt
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from pagecraft.typesetting import Latex2MathmlTypesetter

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown_it.renderer import RendererHTML
    from markdown_it.rules_core import StateCore
    from markdown_it.token import Token
    from markdown_it.utils import OptionsDict

    from pagecraft.typesetting import MathTypesetter

HEADING_ATTRS_PATTERN = re.compile(r"\s*\{\s*#([^\s}]+)[^}]*\}\s*$")


def heading_attributes_rule(state: StateCore) -> None:
    """Move a trailing ``{#id}`` block from heading text onto ``heading_open``."""
    tokens = state.tokens
    for idx, token in enumerate(tokens[:-1]):
        if token.type != "heading_open":
            continue
        inline = tokens[idx + 1]
        if inline.type != "inline":
            continue
        match = HEADING_ATTRS_PATTERN.search(inline.content)
        if match is None:
            continue
        token.attrSet("id", match.group(1))
        inline.content = inline.content[: match.start()]


def heading_attributes_plugin(md: MarkdownIt) -> None:
    """Register :func:`heading_attributes_rule` ahead of inline parsing."""
    md.core.ruler.before("inline", "heading_attributes", heading_attributes_rule)


def math_renderer(
    typesetter: MathTypesetter,
) -> cabc.Callable[[str, dict[str, typ.Any]], str]:
    """Adapt ``typesetter`` to the callback ``dollarmath_plugin`` expects."""

    def render(content: str, options: dict[str, typ.Any]) -> str:
        return typesetter.typeset(content, display=bool(options.get("display_mode")))

    return render


class MarkdownEventSource:
    """Tokenize Markdown into an ordered, flat sequence of events.

    Parameters
    ----------
    preset : str, optional
        ``markdown-it`` preset name. Defaults to ``"commonmark"``.
    typesetter : MathTypesetter, optional
        Typesetter for ``$`` math; a :class:`Latex2MathmlTypesetter` when
        omitted.
    """

    def __init__(
        self,
        preset: str = "commonmark",
        *,
        typesetter: MathTypesetter | None = None,
    ) -> None:
        self._md = (
            MarkdownIt(preset, {"html": True})
            .enable("table")
            .enable("strikethrough")
            .use(footnote_plugin)
            .use(tasklists_plugin)
            .use(deflist_plugin)
            .use(
                dollarmath_plugin,
                allow_digits=False,
                renderer=math_renderer(typesetter or Latex2MathmlTypesetter()),
            )
            .use(heading_attributes_plugin)
        )

    @property
    def options(self) -> OptionsDict:
        """Return the parser options, shared with the HTML renderer."""
        return self._md.options

    @property
    def renderer(self) -> RendererHTML:
        """Return the renderer holding the plugins' render rules."""
        return typ.cast("RendererHTML", self._md.renderer)

    def events(self, text: str) -> cabc.Iterator[Token]:
        """Yield block tokens with inline children spliced in document order."""
        for token in self._md.parse(text):
            if token.type == "inline":
                yield from token.children or ()
            else:
                yield token


__all__ = [
    "HEADING_ATTRS_PATTERN",
    "MarkdownEventSource",
    "heading_attributes_plugin",
    "heading_attributes_rule",
    "math_renderer",
]
