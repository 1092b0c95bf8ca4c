from jinpage.config import PageConfig, load_page_config
from jinpage.home import JinPagePaths, ensure_jinpage_layout, resolve_jinpage_home
from jinpage.params import AppletPage, ParameterSet, build_applet_page, build_parameter_set
from jinpage.plugins import parse_parameters, read_plugin_classnames
from jinpage.render import render_applet_page

__version__ = "0.1.0"

__all__ = [
    "AppletPage",
    "JinPagePaths",
    "PageConfig",
    "ParameterSet",
    "__version__",
    "build_applet_page",
    "build_parameter_set",
    "ensure_jinpage_layout",
    "load_page_config",
    "parse_parameters",
    "read_plugin_classnames",
    "render_applet_page",
    "resolve_jinpage_home",
]
