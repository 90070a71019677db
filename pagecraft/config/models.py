"""Typed dataclasses describing pagecraft render configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from pagecraft._constants import DEFAULT_SYNTAX_THEME
from pagecraft.errors import ConfigError


@dc.dataclass(slots=True)
class RenderConfig:
    """Settings consumed by the Markdown renderer and template engine.

    Attributes
    ----------
    includes_dir : Path
        Directory whose files become template partials.
    syntax_theme : str
        Pygments style used by the highlight block and fenced code.
    ascii_art_output_dir : Path
        Base directory receiving SVG files generated by ``ascii_art`` blocks.
    math_throw_on_error : bool
        Raise on malformed math instead of emitting an error annotation.
    markdown_preset : str
        ``markdown-it`` preset used to tokenize Markdown.
    """

    includes_dir: Path = Path("_includes")
    syntax_theme: str = DEFAULT_SYNTAX_THEME
    ascii_art_output_dir: Path = Path("_site")
    math_throw_on_error: bool = False
    markdown_preset: str = "commonmark"


__all__ = ["ConfigError", "RenderConfig"]
