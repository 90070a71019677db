"""Build the Jinja template engine with partials and custom blocks.

:class:`TemplateEngineBuilder` loads partials from the includes directory,
validates the syntax theme, and registers the custom blocks on a
:class:`jinja2.Environment`. The resulting :class:`TemplateEngine` is
read-only after construction and can be shared across concurrent renders.

Example
-------
>>> from pathlib import Path
>>> from pagecraft.templates import TemplateEngineBuilder
>>> engine = TemplateEngineBuilder(
...     includes_dir=Path("_includes"), theme="monokai"
... ).build()  # doctest: +SKIP
>>> engine.parse("{% equation inline %}x{% endequation %}").render()  # doctest: +SKIP
'<math xmlns="http://www.w3.org/1998/Math/MathML" display="inline">…</math>'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

from jinja2 import DictLoader, Environment, StrictUndefined, select_autoescape

from pagecraft._constants import DEFAULT_SYNTAX_THEME
from pagecraft.blocks import (
    AafigureRenderer,
    ApplyEffects,
    BlockKind,
    Latex2MathmlTypesetter,
    build_block_registry,
)
from pagecraft.errors import ResourceError, ThemeLookupError
from pagecraft.markdown.highlight import Highlighter, ThemeRegistry
from pagecraft.partials import load_partials

if typ.TYPE_CHECKING:
    from jinja2 import Template

    from pagecraft.blocks import DiagramRenderer, MathTypesetter
    from pagecraft.blocks.base import EffectSink
    from pagecraft.config import RenderConfig

logger = logging.getLogger(__name__)


def validate_theme(theme: str, registry: ThemeRegistry) -> bool:
    """Refuse a theme the registry confirms is absent.

    Returns
    -------
    bool
        ``True`` when the theme is confirmed present, ``False`` when the
        registry could not answer and only a warning was logged.

    Raises
    ------
    ResourceError
        If the registry reports that ``theme`` does not exist. A registry that
        cannot answer only produces a warning.
    """
    try:
        present = registry.has_theme(theme)
    except ThemeLookupError as exc:
        logger.warning("Syntax theme named '%s' ignored. Reason: %s", theme, exc)
        return False
    if not present:
        msg = f"Syntax theme '{theme}' is unsupported"
        raise ResourceError(msg)
    return True


@dc.dataclass(slots=True)
class TemplateEngineBuilder:
    """Collect engine settings and build a :class:`TemplateEngine`.

    Attributes
    ----------
    includes_dir : Path
        Directory loaded into the partial-source map.
    theme : str
        Syntax theme for the highlight block.
    ascii_art_output_dir : Path
        Base directory for SVG files written by ``ascii_art`` blocks.
    blocks : tuple[BlockKind, ...]
        Blocks to register; defaults to every known block.
    theme_registry : ThemeRegistry
        Registry consulted by the theme gate.
    typesetter : MathTypesetter or None
        Math typesetter; a :class:`Latex2MathmlTypesetter` when ``None``.
    diagram_renderer : DiagramRenderer or None
        Diagram engine; an :class:`AafigureRenderer` when ``None``.
    effect_sink : EffectSink or None
        Destination for parse-time effects; applied immediately when ``None``.
    """

    includes_dir: Path = Path("_includes")
    theme: str = DEFAULT_SYNTAX_THEME
    ascii_art_output_dir: Path = Path("_site")
    blocks: tuple[BlockKind, ...] = tuple(BlockKind)
    theme_registry: ThemeRegistry = dc.field(default_factory=ThemeRegistry)
    typesetter: MathTypesetter | None = None
    diagram_renderer: DiagramRenderer | None = None
    effect_sink: EffectSink | None = None

    @classmethod
    def from_config(
        cls, config: RenderConfig, **overrides: typ.Any
    ) -> TemplateEngineBuilder:
        """Return a builder populated from a :class:`RenderConfig`."""
        settings: dict[str, typ.Any] = {
            "includes_dir": config.includes_dir,
            "theme": config.syntax_theme,
            "ascii_art_output_dir": config.ascii_art_output_dir,
            "typesetter": Latex2MathmlTypesetter(
                throw_on_error=config.math_throw_on_error
            ),
        }
        settings.update(overrides)
        return cls(**settings)

    def build(self) -> TemplateEngine:
        """Validate settings, load partials, and construct the engine.

        Raises
        ------
        ResourceError
            If the theme is confirmed absent or a partial cannot be read.
            An unconfirmable theme falls back to class-based highlighting.
        StructuralError
            If two registered blocks share a tag.
        """
        registry = build_block_registry(self.blocks)
        highlighter = None
        if BlockKind.HIGHLIGHT in self.blocks:
            confirmed = validate_theme(self.theme, self.theme_registry)
            highlighter = Highlighter(self.theme) if confirmed else Highlighter()
        partials = load_partials(self.includes_dir)

        env = Environment(
            loader=DictLoader(partials),
            extensions=list(registry.values()),
            autoescape=select_autoescape(
                enabled_extensions=("html", "xml"), default_for_string=False
            ),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        env.block_effects = self.effect_sink or ApplyEffects()  # type: ignore[attr-defined]
        env.ascii_art_output_dir = self.ascii_art_output_dir  # type: ignore[attr-defined]
        env.math_typesetter = self.typesetter or Latex2MathmlTypesetter()  # type: ignore[attr-defined]
        env.diagram_renderer = self.diagram_renderer or AafigureRenderer()  # type: ignore[attr-defined]
        if highlighter is not None:
            env.highlighter = highlighter  # type: ignore[attr-defined]
        logger.debug(
            "Template engine ready with %d partials and blocks %s",
            len(partials),
            ", ".join(sorted(registry)),
        )
        return TemplateEngine(env, partials)


class TemplateEngine:
    """Parse template source with the configured blocks and partials."""

    def __init__(self, environment: Environment, partials: typ.Mapping[str, str]) -> None:
        self._environment = environment
        self._partials = dict(partials)

    @property
    def environment(self) -> Environment:
        """Return the underlying Jinja environment."""
        return self._environment

    @property
    def partials(self) -> typ.Mapping[str, str]:
        """Return the partial-source map the engine was built with."""
        return self._partials

    def parse(self, source: str, *, name: str | None = None) -> Template:
        """Compile ``source`` into a template.

        Custom blocks run while the template is compiled: equations are
        typeset and diagrams written at this point.

        Raises
        ------
        StructuralError
            If a custom block is malformed or one of its collaborators fails.
        jinja2.TemplateSyntaxError
            For any other template syntax error.
        """
        env = self._environment
        code = env.compile(source, name=name)
        return env.template_class.from_code(env, code, env.make_globals(None), None)

    def get_template(self, name: str) -> Template:
        """Return the compiled partial registered under ``name``."""
        return self._environment.get_template(name)

    def __repr__(self) -> str:
        return f"TemplateEngine(partials={len(self._partials)})"


__all__ = ["TemplateEngine", "TemplateEngineBuilder", "validate_theme"]
