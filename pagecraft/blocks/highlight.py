"""``{% highlight ["lang"] %}…{% endhighlight %}`` block for code snippets.

The snippet is highlighted once at parse time with the environment's shared
:class:`~pagecraft.markdown.highlight.Highlighter`, so every page rendered
from the template reuses the same markup.
"""

from __future__ import annotations

import typing as typ

from pagecraft.markdown.highlight import Highlighter

from .base import BlockExtension, BlockInvocation, BlockResult, RenderableNode

if typ.TYPE_CHECKING:
    from jinja2 import Environment


class HighlightBlock(BlockExtension):
    """Highlight the block body with Pygments."""

    start_tag = "highlight"
    end_tag = "endhighlight"
    max_arguments = 1

    def __init__(self, environment: Environment) -> None:
        super().__init__(environment)
        environment.extend(highlighter=Highlighter())

    def build(self, invocation: BlockInvocation) -> BlockResult:
        """Render the body as a highlighted code block."""
        language = invocation.arguments[0].value if invocation.arguments else None
        highlighter: Highlighter = self.environment.highlighter  # type: ignore[attr-defined]
        code = invocation.raw_inner_text.strip("\n")
        return BlockResult(RenderableNode(highlighter.code_block(code, language)))


__all__ = ["HighlightBlock"]
