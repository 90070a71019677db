"""Closed set of block kinds and the tag-to-extension registration map.

Example
-------
>>> from pagecraft.blocks.registry import BlockKind, build_block_registry
>>> sorted(build_block_registry([BlockKind.EQUATION, BlockKind.ASCII_ART]))
['ascii_art', 'equation']
"""

from __future__ import annotations

import enum
import typing as typ

from pagecraft.errors import StructuralError

from .ascii_art import AsciiArtBlock
from .equation import EquationBlock
from .highlight import HighlightBlock

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .base import BlockExtension


class BlockKind(enum.Enum):
    """Every block the template engine knows how to build."""

    EQUATION = "equation"
    ASCII_ART = "ascii_art"
    HIGHLIGHT = "highlight"


BLOCK_EXTENSIONS: dict[BlockKind, type[BlockExtension]] = {
    BlockKind.EQUATION: EquationBlock,
    BlockKind.ASCII_ART: AsciiArtBlock,
    BlockKind.HIGHLIGHT: HighlightBlock,
}


def build_block_registry(
    kinds: cabc.Iterable[BlockKind] = tuple(BlockKind),
    extensions: typ.Mapping[BlockKind, type[BlockExtension]] = BLOCK_EXTENSIONS,
) -> dict[str, type[BlockExtension]]:
    """Map start tags to extension classes, rejecting clashing tags.

    Raises
    ------
    StructuralError
        If two blocks share a start or end tag, or a block reuses its start
        tag as its end tag.
    """
    registry: dict[str, type[BlockExtension]] = {}
    seen: set[str] = set()
    for kind in kinds:
        extension = extensions[kind]
        tags = (extension.start_tag, extension.end_tag)
        for tag in tags:
            if tag in seen:
                msg = f"Duplicate block tag '{tag}' registered by {extension.__name__}"
                raise StructuralError(msg, tag=tag)
            seen.add(tag)
        registry[extension.start_tag] = extension
    return registry


__all__ = ["BLOCK_EXTENSIONS", "BlockKind", "build_block_registry"]
