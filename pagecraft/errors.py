"""Exception hierarchy shared by the Markdown pipeline and template blocks.

Every fallible boundary in :mod:`pagecraft` raises a subclass of
:class:`RenderError`, so build orchestrators can decide whether a failure
aborts the whole build or merely skips the offending document.

Examples
--------
>>> from pagecraft.errors import RenderError, ResourceError
>>> issubclass(ResourceError, RenderError)
True
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import TemplateSyntaxError


class RenderError(Exception):
    """Base class for recoverable rendering failures."""


class StructuralError(RenderError, TemplateSyntaxError):
    """Raised for malformed block syntax or a malformed event stream.

    Subclassing :class:`jinja2.TemplateSyntaxError` keeps line numbers and
    template names attached when the error is raised while Jinja compiles a
    template.
    """

    def __init__(
        self,
        message: str,
        lineno: int = 0,
        name: str | None = None,
        filename: str | None = None,
        *,
        tag: str | None = None,
    ) -> None:
        super().__init__(message, lineno, name, filename)
        self.tag = tag


class ResourceError(RenderError):
    """Raised when a theme, file, or directory cannot be used."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ExternalToolError(RenderError):
    """Raised when a typesetting or diagram engine cannot be invoked."""


class ThemeLookupError(RenderError):
    """Raised when the theme registry cannot confirm or deny a theme."""


class ConfigError(RenderError, ValueError):
    """Raised when the render configuration is invalid or incomplete."""


__all__ = [
    "ConfigError",
    "ExternalToolError",
    "RenderError",
    "ResourceError",
    "StructuralError",
    "ThemeLookupError",
]
