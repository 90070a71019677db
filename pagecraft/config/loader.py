"""Load render configuration YAML into typed dataclasses."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .models import ConfigError, RenderConfig

MARKDOWN_PRESETS = frozenset({"commonmark", "default", "gfm-like", "js-default", "zero"})


def load_render_config(path: Path) -> RenderConfig:
    """Load the YAML configuration describing how content is rendered.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML file (for example ``pagecraft.yaml``).
        Settings are read from its ``render`` mapping; relative directories
        are resolved against the file's parent directory.

    Returns
    -------
    RenderConfig
        Parsed configuration with defaults applied for omitted keys.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    ConfigError
        If the YAML structure is not a mapping or a value has the wrong type.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from pagecraft.config import load_render_config
    >>> config = load_render_config(Path("pagecraft.yaml"))  # doctest: +SKIP
    >>> config.syntax_theme  # doctest: +SKIP
    'monokai'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ConfigError(msg)
    raw = loaded.get("render", {}) or {}
    if not isinstance(raw, dict):
        msg = "The 'render' section must be a mapping."
        raise ConfigError(msg)
    return _build_render_config(raw, base_dir=path.parent)


def _build_render_config(
    payload: typ.Mapping[str, typ.Any], *, base_dir: Path
) -> RenderConfig:
    """Build a RenderConfig from a mapping, resolving paths against ``base_dir``."""
    defaults = RenderConfig()
    unknown = set(payload) - {field.name for field in dc.fields(RenderConfig)}
    if unknown:
        msg = f"Unknown render settings: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)

    preset = _require_str(payload, "markdown_preset", defaults.markdown_preset)
    if preset not in MARKDOWN_PRESETS:
        msg = f"Unknown markdown preset '{preset}'."
        raise ConfigError(msg)

    throw_on_error = payload.get("math_throw_on_error", defaults.math_throw_on_error)
    if not isinstance(throw_on_error, bool):
        msg = "'math_throw_on_error' must be a boolean."
        raise ConfigError(msg)

    return RenderConfig(
        includes_dir=_resolve_dir(
            base_dir, _require_str(payload, "includes_dir", str(defaults.includes_dir))
        ),
        syntax_theme=_require_str(payload, "syntax_theme", defaults.syntax_theme),
        ascii_art_output_dir=_resolve_dir(
            base_dir,
            _require_str(
                payload, "ascii_art_output_dir", str(defaults.ascii_art_output_dir)
            ),
        ),
        math_throw_on_error=throw_on_error,
        markdown_preset=preset,
    )


def _require_str(payload: typ.Mapping[str, typ.Any], key: str, default: str) -> str:
    """Return a non-empty string setting or raise ConfigError."""
    value = payload.get(key, default)
    if not isinstance(value, str) or not value.strip():
        msg = f"'{key}' must be a non-empty string."
        raise ConfigError(msg)
    return value.strip()


def _resolve_dir(base_dir: Path, value: str) -> Path:
    """Resolve ``value`` against ``base_dir`` unless it is already absolute."""
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path


__all__ = ["MARKDOWN_PRESETS", "load_render_config"]
