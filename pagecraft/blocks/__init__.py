"""Custom template blocks for math, diagrams, and highlighted code.

Exports
-------
- ``BlockExtension``: base Jinja extension implementing the block contract.
- ``EquationBlock`` / ``AsciiArtBlock`` / ``HighlightBlock``: concrete blocks.
- ``BlockKind`` / ``build_block_registry``: closed registry of known blocks.
- ``ApplyEffects`` / ``CollectEffects``: parse-time effect sinks.
"""

from __future__ import annotations

from .ascii_art import AafigureRenderer, AsciiArtBlock, DiagramRenderer
from .base import (
    ApplyEffects,
    BlockArgument,
    BlockExtension,
    BlockInvocation,
    BlockResult,
    CollectEffects,
    FileWrite,
    RenderableNode,
)
from .equation import EquationBlock, Latex2MathmlTypesetter, MathTypesetter
from .highlight import HighlightBlock
from .registry import BLOCK_EXTENSIONS, BlockKind, build_block_registry

__all__ = [
    "BLOCK_EXTENSIONS",
    "AafigureRenderer",
    "ApplyEffects",
    "AsciiArtBlock",
    "BlockArgument",
    "BlockExtension",
    "BlockInvocation",
    "BlockKind",
    "BlockResult",
    "CollectEffects",
    "DiagramRenderer",
    "EquationBlock",
    "FileWrite",
    "HighlightBlock",
    "Latex2MathmlTypesetter",
    "MathTypesetter",
    "RenderableNode",
    "build_block_registry",
]
