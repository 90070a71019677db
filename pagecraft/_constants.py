"""Common literal values used across pagecraft.

Markup templates and tag names live here so the Markdown pipeline, the
template blocks, and the tests share one definition.

Examples
--------
>>> from pagecraft import _constants
>>> _constants.HEADING_TEMPLATE.format(tag="h2", id="intro", text="Intro")
'<h2 id="intro">Intro<a hidden="" class="anchor" aria-hidden="true" href="#intro">#</a></h2>'
>>> _constants.ASCII_ART_TEMPLATE.format(target="/flow.svg")
"<div class='ascii_art'><img src=/flow.svg/></div>"
"""

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
HEADING_TEMPLATE = (
    '<{tag} id="{id}">{text}'
    '<a hidden="" class="anchor" aria-hidden="true" href="#{id}">#</a></{tag}>'
)
ASCII_ART_TEMPLATE = "<div class='ascii_art'><img src={target}/></div>"
CODEHILITE_CLASS = "codehilite"
DEFAULT_SYNTAX_THEME = "monokai"
DEFAULT_CONFIG_FILE = "pagecraft.yaml"
