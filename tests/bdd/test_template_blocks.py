"""Behaviour tests for the ``equation`` and ``ascii_art`` template blocks.

The scenarios build a template engine whose diagram output directory is a
temporary site root, parse a template mixing both blocks, and inspect both
the rendered markup and the files written while parsing.

Usage
-----
Run ``pytest tests/bdd/test_template_blocks.py -v``. The scenarios are driven
by ``features/template_blocks.feature``. Math is typeset with the real
``latex2mathml`` converter; diagrams use a stub renderer so the scenarios do
not depend on aafigure's exact SVG output.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, scenarios, then, when

from pagecraft.blocks import BlockKind
from pagecraft.errors import StructuralError
from pagecraft.templates import TemplateEngine, TemplateEngineBuilder

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "template_blocks.feature"
)
scenarios(FEATURE_FILE)


class StubDiagrams:
    """Diagram renderer returning a fixed SVG document."""

    def render_svg(self, source: str) -> str:
        return f'<svg xmlns="http://www.w3.org/2000/svg"><!-- {len(source)} --></svg>'


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a template engine writing diagrams to a temporary site")
def given_engine(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    site_dir = tmp_path / "site"
    scenario_state["site_dir"] = site_dir
    scenario_state["engine"] = TemplateEngineBuilder(
        includes_dir=tmp_path / "_includes",
        ascii_art_output_dir=site_dir,
        blocks=(BlockKind.EQUATION, BlockKind.ASCII_ART),
        diagram_renderer=StubDiagrams(),
    ).build()


@given("a template using an equation and an ascii_art block")
def given_mixed_template(scenario_state: dict[str, object]) -> None:
    scenario_state["source"] = (
        "<article>\n"
        "<p>{% equation %}\\sum_{i=1}^{n} i{% endequation %}</p>\n"
        '{% ascii_art "/img/pipeline.svg" %}\n'
        "+-------+     +--------+\n"
        "| parse |---->| render |\n"
        "+-------+     +--------+\n"
        "{% endascii_art %}\n"
        "</article>\n"
    )


@given("a template with an unquoted ascii_art target")
def given_bad_template(scenario_state: dict[str, object]) -> None:
    scenario_state["source"] = "{% ascii_art pipeline %}-->{% endascii_art %}"


@when("I parse and render the template")
def when_render(scenario_state: dict[str, object]) -> None:
    engine = typ.cast("TemplateEngine", scenario_state["engine"])
    template = engine.parse(typ.cast("str", scenario_state["source"]))
    scenario_state["html"] = template.render()


@when("I try to parse the template")
def when_try_parse(scenario_state: dict[str, object]) -> None:
    engine = typ.cast("TemplateEngine", scenario_state["engine"])
    with pytest.raises(StructuralError) as excinfo:
        engine.parse(typ.cast("str", scenario_state["source"]))
    scenario_state["error"] = excinfo.value


@then("the rendered page embeds MathML in display mode")
def then_mathml(scenario_state: dict[str, object]) -> None:
    soup = BeautifulSoup(typ.cast("str", scenario_state["html"]), "html.parser")
    math = soup.select_one("article p math")
    assert math is not None
    assert math["display"] == "block"


@then("the rendered page references the diagram image")
def then_image(scenario_state: dict[str, object]) -> None:
    html = typ.cast("str", scenario_state["html"])
    assert "<div class='ascii_art'><img src=/img/pipeline.svg/></div>" in html


@then("the diagram SVG exists in the site directory")
def then_svg_written(scenario_state: dict[str, object]) -> None:
    site_dir = typ.cast("Path", scenario_state["site_dir"])
    svg = (site_dir / "img" / "pipeline.svg").read_text(encoding="utf-8")
    assert svg.startswith("<svg")


@then("a structural error naming the ascii_art block is raised")
def then_structural(scenario_state: dict[str, object]) -> None:
    error = typ.cast("StructuralError", scenario_state["error"])
    assert error.tag == "ascii_art"
    assert "must be quoted" in str(error)
