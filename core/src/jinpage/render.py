from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from jinpage.params import AppletPage

TEMPLATES_DIR = Path(__file__).resolve().parent / "ui" / "templates"
APPLET_TEMPLATE = "applet.html"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=True,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def render_applet_page_text(page: AppletPage) -> str:
    return _env.get_template(APPLET_TEMPLATE).render(page=page)


def render_applet_page(page: AppletPage) -> bytes:
    """Render the page embedding the applet and its parameter list.

    Pure: the same page always renders to the same bytes. Values are
    attribute-escaped, so a browser reads them back verbatim.
    """

    return render_applet_page_text(page).encode("utf-8")
