"""Load and validate render configuration for pagecraft.

The primary entry point is :func:`load_render_config`, which reads the
``render`` section of a YAML file (``pagecraft.yaml`` by default), applies
defaults, and returns a :class:`RenderConfig` ready for the Markdown renderer
and template engine.

Examples
--------
>>> from pathlib import Path
>>> from pagecraft.config import load_render_config
>>> config = load_render_config(Path("pagecraft.yaml"))  # doctest: +SKIP
>>> config.includes_dir  # doctest: +SKIP
PosixPath('_includes')
"""

from .loader import load_render_config
from .models import ConfigError, RenderConfig

__all__ = ["ConfigError", "RenderConfig", "load_render_config"]
