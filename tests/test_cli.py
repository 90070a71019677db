"""Tests for the ``pagecraft`` CLI commands, invoked as plain functions."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pagecraft import cli


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_markdown_writes_html_and_toc(
    workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = workdir / "intro.md"
    source.write_text("# Intro\n\n## Next Steps\n\nBody.\n", encoding="utf-8")
    output = workdir / "public" / "intro.html"
    toc_output = workdir / "public" / "intro-toc.json"

    cli.markdown(
        source,
        config=workdir / "missing.yaml",
        output=output,
        toc_output=toc_output,
    )

    assert output.read_text(encoding="utf-8").startswith('<h1 id="intro">Intro<a')
    assert json.loads(toc_output.read_text(encoding="utf-8")) == {
        "h1": [{"title": "Intro", "permalink": "#intro"}],
        "h2": [{"title": "Next Steps", "permalink": "#next-steps"}],
    }
    assert capsys.readouterr().out.splitlines() == [
        "wrote public/intro.html",
        "wrote public/intro-toc.json",
    ]


def test_markdown_without_headings_skips_toc(
    workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = workdir / "plain.md"
    source.write_text("No headings.\n", encoding="utf-8")
    toc_output = workdir / "toc.json"

    cli.markdown(source, config=workdir / "missing.yaml", toc_output=toc_output)

    assert capsys.readouterr().out == "<p>No headings.</p>\n"
    assert not toc_output.exists()


def test_template_uses_config_directories(
    workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (workdir / "site" / "partials").mkdir(parents=True)
    (workdir / "site" / "partials" / "head.html").write_text(
        "<h1>Title</h1>", encoding="utf-8"
    )
    config = workdir / "site" / "pagecraft.yaml"
    config.write_text(
        "render:\n  includes_dir: partials\n  ascii_art_output_dir: out\n",
        encoding="utf-8",
    )
    source = workdir / "page.html"
    source.write_text(
        '{% include "head.html" %}\n{% highlight "python" %}x = 1{% endhighlight %}\n',
        encoding="utf-8",
    )

    cli.template(source, config=config)

    out = capsys.readouterr().out
    assert out.startswith("<h1>Title</h1>\n")
    assert 'data-language="python"' in out


def test_themes_lists_pygments_styles(capsys: pytest.CaptureFixture[str]) -> None:
    cli.themes()
    names = capsys.readouterr().out.splitlines()
    assert "monokai" in names
    assert names == sorted(names)
