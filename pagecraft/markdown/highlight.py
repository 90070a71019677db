"""Syntax highlighting for fenced code and the theme registry behind it.

:class:`Highlighter` is the shared, read-only resource holding the Pygments
formatter for one theme. :class:`CodeBlockDecorator` uses it to replace code
events in a Markdown event stream with pre-rendered HTML, and
:class:`ThemeRegistry` answers whether a theme exists so template engines can
refuse unknown themes before they are used.

Example
-------
>>> from pagecraft.markdown.highlight import Highlighter
>>> html = Highlighter("monokai").code_block("print(1)", "python")
>>> 'data-language="python"' in html
True
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown_it.token import Token
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_all_styles, get_style_by_name
from pygments.util import ClassNotFound

from pagecraft._constants import CODEHILITE_CLASS
from pagecraft.errors import ResourceError, ThemeLookupError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

CODEHILITE_OPEN_TAG = re.compile(rf'<div class="{CODEHILITE_CLASS}"')
CODE_EVENT_TYPES = frozenset({"fence", "code_block"})


class ThemeRegistry:
    """Look up syntax themes known to Pygments, including plugin styles."""

    def has_theme(self, name: str) -> bool:
        """Return whether ``name`` is an installed Pygments style.

        Raises
        ------
        ThemeLookupError
            If the style registry itself fails, for example when a plugin
            style cannot be imported.
        """
        try:
            get_style_by_name(name)
        except ClassNotFound:
            return False
        except (ImportError, AttributeError, OSError) as exc:
            msg = f"Unable to query syntax theme '{name}': {exc}"
            raise ThemeLookupError(msg) from exc
        return True

    def themes(self) -> list[str]:
        """Return the sorted names of every available theme."""
        try:
            return sorted(get_all_styles())
        except (ImportError, AttributeError, OSError) as exc:
            msg = f"Unable to list syntax themes: {exc}"
            raise ThemeLookupError(msg) from exc


class Highlighter:
    """Render code snippets into highlighted HTML with consistent styling.

    Parameters
    ----------
    theme : str, optional
        Pygments style name. When given, colours are inlined into the markup;
        when ``None``, CSS classes are emitted and :attr:`stylesheet` supplies
        the matching rules.

    Raises
    ------
    ResourceError
        If ``theme`` is not a known Pygments style.
    ThemeLookupError
        If Pygments fails while looking the style up.
    """

    def __init__(self, theme: str | None = None) -> None:
        self.theme = theme
        try:
            self._formatter = HtmlFormatter(
                style=theme or "default",
                cssclass=CODEHILITE_CLASS,
                noclasses=theme is not None,
            )
        except ClassNotFound as exc:
            msg = f"Syntax theme '{theme}' is unsupported"
            raise ResourceError(msg) from exc
        except (ImportError, AttributeError, OSError) as exc:
            msg = f"Unable to load syntax theme '{theme}': {exc}"
            raise ThemeLookupError(msg) from exc

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for class-based highlighted code blocks."""
        return self._formatter.get_style_defs(f".{CODEHILITE_CLASS}")

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML with an optional language tag.

        Parameters
        ----------
        code : str
            Source snippet to highlight.
        language : str, optional
            Pygments lexer name; defaults to ``"text"`` when not provided or
            when the lexer lookup fails.

        Returns
        -------
        str
            HTML containing the highlighted block with ``data-language``
            metadata applied.
        """
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        html = highlight(code, lexer, self._formatter)
        return self._attach_language_attribute(html, lang)

    @staticmethod
    def _attach_language_attribute(html: str, language: str) -> str:
        """Add a single language attribute to an already highlighted block."""
        safe_lang = escape(language or "text", quote=True)

        def _repl(match: re.Match[str]) -> str:
            return f'<div class="{CODEHILITE_CLASS}" data-language="{safe_lang}"'

        return CODEHILITE_OPEN_TAG.sub(_repl, html, 1)


def _fence_language(info: str) -> str | None:
    """Return the language from a fence info string such as ``rust,no_run``."""
    label = info.strip().split(maxsplit=1)[0] if info.strip() else ""
    label = label.split(",", 1)[0]
    return label or None


class CodeBlockDecorator:
    """Replace code events with highlighted HTML, preserving event order."""

    def __init__(self, highlighter: Highlighter) -> None:
        self._highlighter = highlighter

    def decorate(self, events: cabc.Iterable[Token]) -> cabc.Iterator[Token]:
        """Yield ``events`` with each code event swapped for an HTML event."""
        for event in events:
            if event.type not in CODE_EVENT_TYPES:
                yield event
                continue
            language = _fence_language(event.info) if event.type == "fence" else None
            html = self._highlighter.code_block(event.content, language)
            yield Token("html_block", "", 0, content=html, map=event.map, block=True)


__all__ = [
    "CODEHILITE_OPEN_TAG",
    "CodeBlockDecorator",
    "Highlighter",
    "ThemeRegistry",
]
