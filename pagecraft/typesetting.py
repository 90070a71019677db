"""Typeset LaTeX math into MathML for templates and Markdown alike.

The ``equation`` template block and ``$…$`` / ``$$…$$`` math in Markdown
share one :class:`MathTypesetter`, so both produce identical markup for the
same source.

Example
-------
>>> from pagecraft.typesetting import Latex2MathmlTypesetter
>>> 'display="inline"' in Latex2MathmlTypesetter().typeset("x^2", display=False)
True
"""

from __future__ import annotations

import logging
import typing as typ
from html import escape

from latex2mathml.converter import convert

from pagecraft.errors import ExternalToolError

logger = logging.getLogger(__name__)


class MathTypesetter(typ.Protocol):
    """Convert LaTeX math source into HTML-embeddable markup."""

    def typeset(self, source: str, *, display: bool) -> str:
        """Return markup for ``source``; raise :class:`ExternalToolError` if
        the typesetting engine cannot be used."""
        ...


class Latex2MathmlTypesetter:
    """Typeset LaTeX into MathML with :mod:`latex2mathml`.

    Parameters
    ----------
    throw_on_error : bool, optional
        When ``False`` (the default) malformed math is rendered as an inline
        error annotation showing the source. When ``True`` the failure is
        raised as :class:`ExternalToolError`.
    """

    def __init__(self, *, throw_on_error: bool = False) -> None:
        self.throw_on_error = throw_on_error

    def typeset(self, source: str, *, display: bool) -> str:
        """Return MathML for ``source`` in display or inline mode."""
        mode = "block" if display else "inline"
        try:
            return convert(source.strip(), display=mode)
        except Exception as exc:  # noqa: BLE001 - converter raises many error types
            if self.throw_on_error:
                msg = f"Unable to typeset {source!r}: {exc}"
                raise ExternalToolError(msg) from exc
            logger.warning("Math typesetting failed for %r: %s", source, exc)
            return error_annotation(source, exc)


def error_annotation(source: str, error: Exception) -> str:
    """Return inline markup flagging ``source`` as untypesettable."""
    return (
        f'<span class="math-error" title="{escape(str(error), quote=True)}" '
        f'style="color:#cc0000">{escape(source)}</span>'
    )


__all__ = ["Latex2MathmlTypesetter", "MathTypesetter", "error_annotation"]
