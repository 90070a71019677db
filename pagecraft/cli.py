"""Cyclopts CLI entrypoint for rendering Markdown and templates with pagecraft.

The ``pagecraft`` console script renders a single Markdown document (with
heading anchors and an optional TOC JSON file), compiles and renders a single
template with the custom blocks, or lists the syntax themes available to the
highlighter. Site-wide orchestration is left to the build system calling it.

Examples
--------
Render a Markdown file next to its TOC:

>>> from pagecraft.cli import app
>>> app.run(
...     ["markdown", "docs/intro.md", "--output", "public/intro.html",
...      "--toc-output", "public/intro-toc.json"]
... )  # doctest: +SKIP

List the available syntax themes:

>>> from pagecraft.cli import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

import json
import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import DEFAULT_CONFIG_FILE
from .config import RenderConfig, load_render_config
from .markdown import MarkdownRenderer, ThemeRegistry
from .templates import TemplateEngineBuilder
from .typesetting import Latex2MathmlTypesetter

app = App(name="pagecraft", config=cyclopts.config.Env("PAGECRAFT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _load_config(config: Path) -> RenderConfig:
    """Load ``config`` when it exists, otherwise fall back to defaults."""
    if config.exists():
        return load_render_config(config)
    return RenderConfig()


def _write_output(text: str, output: Path | None) -> None:
    """Write ``text`` to ``output`` or print it when no path is given."""
    if output is None:
        print(text, end="")
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    print(f"wrote {_format_path(output)}")


@app.command(help="Render a Markdown document with heading anchors.")
def markdown(
    source: Path,
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to render config", env_var="PAGECRAFT_CONFIG")
    ] = Path(DEFAULT_CONFIG_FILE),
    output: typ.Annotated[
        Path | None, Parameter(help="Where to write the HTML (default: stdout)")
    ] = None,
    toc_output: typ.Annotated[
        Path | None, Parameter(help="Where to write the table of contents JSON")
    ] = None,
) -> None:
    """Render ``source`` Markdown into HTML.

    Parameters
    ----------
    source : Path
        Markdown file to render.
    config : Path, optional
        Render configuration file; defaults are used when it does not exist.
    output : Path or None, optional
        Destination for the HTML; printed to stdout when omitted.
    toc_output : Path or None, optional
        Destination for the TOC JSON. Nothing is written for documents
        without headings.
    """
    settings = _load_config(config)
    renderer = MarkdownRenderer(
        theme=settings.syntax_theme,
        preset=settings.markdown_preset,
        typesetter=Latex2MathmlTypesetter(
            throw_on_error=settings.math_throw_on_error
        ),
    )
    html, toc = renderer.parse(source.read_text(encoding="utf-8"))
    _write_output(html, output)
    if toc_output is not None and toc is not None:
        _write_output(json.dumps(toc.as_dict(), indent=2) + "\n", toc_output)


@app.command(help="Compile and render a template with the custom blocks.")
def template(
    source: Path,
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to render config", env_var="PAGECRAFT_CONFIG")
    ] = Path(DEFAULT_CONFIG_FILE),
    output: typ.Annotated[
        Path | None, Parameter(help="Where to write the result (default: stdout)")
    ] = None,
) -> None:
    """Compile ``source`` and render it with an empty context.

    Parameters
    ----------
    source : Path
        Template file to compile and render.
    config : Path, optional
        Render configuration file; defaults are used when it does not exist.
    output : Path or None, optional
        Destination for the rendered text; printed to stdout when omitted.
    """
    engine = TemplateEngineBuilder.from_config(_load_config(config)).build()
    compiled = engine.parse(source.read_text(encoding="utf-8"), name=str(source))
    _write_output(compiled.render(), output)


@app.command(help="List the syntax themes available for highlighting.")
def themes() -> None:
    """Print every available syntax theme name, one per line."""
    for name in ThemeRegistry().themes():
        print(name)


def main() -> None:
    """Invoke the Cyclopts application that powers the `pagecraft` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
