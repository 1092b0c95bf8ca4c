from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from jinpage.config import load_page_config
from jinpage.home import ensure_jinpage_layout, resolve_jinpage_home
from jinpage.params import build_applet_page
from jinpage.plugins import read_plugin_classnames
from jinpage.render import render_applet_page


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m jinpage.internal.render_page",
        description="Write the applet page for static hosting (no server).",
    )
    parser.add_argument("--home", type=Path, default=None, help="Override JINPAGE_HOME")
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Write the page to this file instead of stdout",
    )
    parser.add_argument(
        "--list-params",
        action="store_true",
        help="Print the parameter set and plugin list as JSON instead of the page",
    )
    args = parser.parse_args(argv)

    environ = None
    if args.home is not None:
        environ = {"JINPAGE_HOME": str(args.home)}

    home = resolve_jinpage_home(environ)
    paths = ensure_jinpage_layout(home)
    config = load_page_config(paths)

    page = build_applet_page(config.applet, config.prefs)

    if args.list_params:
        payload = {
            "parameters": [{"name": name, "value": value} for name, value in page.parameters],
            "plugins": read_plugin_classnames(page.parameters),
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    body = render_applet_page(page)
    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_bytes(body)
    else:
        sys.stdout.buffer.write(body)
        sys.stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
