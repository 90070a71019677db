"""Tests for loading ``pagecraft.yaml`` render settings."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from pagecraft.config import ConfigError, RenderConfig, load_render_config

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@pytest.fixture
def write_config(tmp_path: Path) -> cabc.Callable[[str], Path]:
    """Return a helper writing YAML text to ``pagecraft.yaml``."""

    def _write(text: str) -> Path:
        path = tmp_path / "pagecraft.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


def test_full_render_section(
    tmp_path: Path, write_config: cabc.Callable[[str], Path]
) -> None:
    path = write_config(
        "render:\n"
        "  includes_dir: partials\n"
        "  syntax_theme: friendly\n"
        "  ascii_art_output_dir: /srv/site\n"
        "  math_throw_on_error: true\n"
        "  markdown_preset: gfm-like\n"
    )
    assert load_render_config(path) == RenderConfig(
        includes_dir=tmp_path / "partials",
        syntax_theme="friendly",
        ascii_art_output_dir=Path("/srv/site"),
        math_throw_on_error=True,
        markdown_preset="gfm-like",
    )


def test_missing_section_uses_defaults(
    tmp_path: Path, write_config: cabc.Callable[[str], Path]
) -> None:
    config = load_render_config(write_config("other: 1\n"))
    assert config.syntax_theme == "monokai"
    assert config.includes_dir == tmp_path / "_includes"
    assert config.ascii_art_output_dir == tmp_path / "_site"
    assert config.math_throw_on_error is False


def test_empty_file_uses_defaults(write_config: cabc.Callable[[str], Path]) -> None:
    assert load_render_config(write_config("")).markdown_preset == "commonmark"


def test_missing_file_is_reported(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="not found"):
        load_render_config(tmp_path / "nope.yaml")


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("- a\n- b\n", "Top-level YAML structure must be a mapping"),
        ("render: [1, 2]\n", "'render' section must be a mapping"),
        ("render:\n  colour: red\n", "Unknown render settings: colour"),
        ("render:\n  markdown_preset: fancy\n", "Unknown markdown preset 'fancy'"),
        ("render:\n  math_throw_on_error: 'yes'\n", "must be a boolean"),
        ("render:\n  syntax_theme: ''\n", "'syntax_theme' must be a non-empty string"),
        ("render:\n  includes_dir: 3\n", "'includes_dir' must be a non-empty string"),
    ],
)
def test_invalid_settings_raise_config_error(
    write_config: cabc.Callable[[str], Path], text: str, message: str
) -> None:
    with pytest.raises(ConfigError, match=message):
        load_render_config(write_config(text))


def test_config_error_is_a_value_error() -> None:
    assert issubclass(ConfigError, ValueError)
