"""``{% equation [inline] %}…{% endequation %}`` block typeset to MathML.

The body is LaTeX math source. It is typeset exactly once, while the template
is parsed, and the resulting markup is cached in the compiled template so
rendering never repeats the work. Passing ``inline`` selects inline layout;
any other argument value, or none, selects display layout.
"""

from __future__ import annotations

import typing as typ

from pagecraft.errors import ExternalToolError
from pagecraft.typesetting import (
    Latex2MathmlTypesetter,
    MathTypesetter,
    error_annotation,
)

from .base import BlockExtension, BlockInvocation, BlockResult, RenderableNode

if typ.TYPE_CHECKING:
    from jinja2 import Environment

INLINE_ARGUMENT = "inline"


class EquationBlock(BlockExtension):
    """Typeset LaTeX math once at parse time and cache the markup."""

    start_tag = "equation"
    end_tag = "endequation"
    max_arguments = 1

    def __init__(self, environment: Environment) -> None:
        super().__init__(environment)
        environment.extend(math_typesetter=Latex2MathmlTypesetter())

    def build(self, invocation: BlockInvocation) -> BlockResult:
        """Typeset the block body in inline or display mode."""
        inline = any(arg.value == INLINE_ARGUMENT for arg in invocation.arguments)
        typesetter: MathTypesetter = self.environment.math_typesetter  # type: ignore[attr-defined]
        try:
            markup = typesetter.typeset(invocation.raw_inner_text, display=not inline)
        except ExternalToolError as exc:
            raise invocation.error(f"math typesetting failed: {exc}") from exc
        return BlockResult(RenderableNode(markup))


__all__ = [
    "EquationBlock",
    "INLINE_ARGUMENT",
    "Latex2MathmlTypesetter",
    "MathTypesetter",
    "error_annotation",
]
