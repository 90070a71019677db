"""``{% ascii_art "PATH" %}…{% endascii_art %}`` block rendered to SVG.

The body is a line-art diagram. While the template is parsed the diagram is
converted to SVG and written below the configured output directory; the
block itself renders an ``<img>`` referencing the path exactly as written in
the template. The file write happens whether or not the template is ever
rendered.

Target paths should be unique per source document: two documents writing the
same path overwrite each other's diagram.

Example
-------
>>> from jinja2 import Environment
>>> from pagecraft.blocks import AsciiArtBlock, CollectEffects
>>> env = Environment(extensions=[AsciiArtBlock])
>>> env.block_effects = CollectEffects()
>>> env.from_string('{% ascii_art "/a.svg" %}-->{% endascii_art %}').render()
"<div class='ascii_art'><img src=/a.svg/></div>"
"""

from __future__ import annotations

import io
import logging
import typing as typ
from pathlib import Path

import aafigure

from pagecraft._constants import ASCII_ART_TEMPLATE
from pagecraft.errors import ExternalToolError

from .base import BlockExtension, BlockInvocation, BlockResult, FileWrite, RenderableNode

if typ.TYPE_CHECKING:
    from jinja2 import Environment

logger = logging.getLogger(__name__)


class DiagramRenderer(typ.Protocol):
    """Convert line-art diagram source into SVG markup."""

    def render_svg(self, source: str) -> str:
        """Return SVG for ``source``; raise :class:`ExternalToolError` when the
        diagram engine fails."""
        ...


class _SvgBuffer(io.StringIO):
    """Text buffer accepting the bytes or str chunks aafigure writes."""

    def write(self, data: str | bytes) -> int:  # type: ignore[override]
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return super().write(data)


class AafigureRenderer:
    """Render ASCII-art diagrams to SVG with :mod:`aafigure`."""

    def __init__(self, options: typ.Mapping[str, typ.Any] | None = None) -> None:
        self.options = dict(options or {})

    def render_svg(self, source: str) -> str:
        """Return the SVG document for ``source``."""
        options = {**self.options, "format": "svg"}
        buffer = _SvgBuffer()
        try:
            aafigure.render(source, buffer, options)
        except Exception as exc:  # noqa: BLE001 - aafigure raises many error types
            msg = f"Unable to render diagram: {exc}"
            raise ExternalToolError(msg) from exc
        return buffer.getvalue()


def resolve_target(base_dir: Path, target: str) -> Path:
    """Return the filesystem path for ``target`` below ``base_dir``.

    Leading ``/`` separators are treated as "relative to the output root".
    The result may still point outside ``base_dir`` through ``..`` segments;
    callers check containment with :func:`is_within`.

    Examples
    --------
    >>> resolve_target(Path("site"), "/img/flow.svg").as_posix()
    'site/img/flow.svg'
    >>> resolve_target(Path("site"), "flow.svg").as_posix()
    'site/flow.svg'
    >>> resolve_target(Path("site"), "//etc/flow.svg").as_posix()
    'site/etc/flow.svg'
    """
    return base_dir / target.lstrip("/")


def is_within(path: Path, base_dir: Path) -> bool:
    """Return whether ``path`` resolves to a location below ``base_dir``.

    Examples
    --------
    >>> is_within(Path("site/img/a.svg"), Path("site"))
    True
    >>> is_within(Path("site/../a.svg"), Path("site"))
    False
    """
    return path.resolve().is_relative_to(base_dir.resolve())


class AsciiArtBlock(BlockExtension):
    """Convert a diagram to SVG on disk and embed an ``<img>`` for it."""

    start_tag = "ascii_art"
    end_tag = "endascii_art"
    max_arguments = 1

    def __init__(self, environment: Environment) -> None:
        super().__init__(environment)
        environment.extend(
            ascii_art_output_dir=Path(),
            diagram_renderer=AafigureRenderer(),
        )

    def build(self, invocation: BlockInvocation) -> BlockResult:
        """Render the diagram and schedule writing it to the target path."""
        if not invocation.arguments:
            invocation.fail("a quoted target path is expected")
        argument = invocation.arguments[0]
        if not argument.quoted:
            invocation.fail(f"target path must be quoted, got '{argument.value}'")
        target = argument.value
        if not target.strip("/"):
            invocation.fail("target path must not be empty")

        base_dir = Path(self.environment.ascii_art_output_dir)  # type: ignore[attr-defined]
        path = resolve_target(base_dir, target)
        if not is_within(path, base_dir):
            invocation.fail(f"target path '{target}' escapes the output directory")
        renderer: DiagramRenderer = self.environment.diagram_renderer  # type: ignore[attr-defined]
        try:
            svg = renderer.render_svg(invocation.raw_inner_text)
        except ExternalToolError as exc:
            raise invocation.error(f"diagram for '{path}' failed: {exc}") from exc

        logger.debug("Diagram %r resolved to %s", target, path)
        return BlockResult(
            node=RenderableNode(ASCII_ART_TEMPLATE.format(target=target)),
            effects=(FileWrite(path, svg),),
        )


__all__ = [
    "AafigureRenderer",
    "AsciiArtBlock",
    "DiagramRenderer",
    "is_within",
    "resolve_target",
]
