from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class JinPagePaths:
    home: Path
    config_dir: Path
    logs_dir: Path
    prefs_dir: Path

    @property
    def page_config_path(self) -> Path:
        return self.config_dir / "page.json"


def resolve_jinpage_home(environ: dict[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ

    raw = (env.get("JINPAGE_HOME") or "").strip()
    if raw:
        candidate = Path(raw).expanduser()
        # Relative values are anchored at the user's home, never at the CWD.
        if not candidate.is_absolute():
            candidate = (Path.home() / candidate).resolve()
        else:
            candidate = candidate.resolve()
        return candidate

    def default_home() -> Path:
        if sys.platform.startswith("win"):
            base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
            if base:
                return Path(base) / "JinPage"
            return Path.home() / "AppData" / "Local" / "JinPage"

        if sys.platform == "darwin":
            return Path.home() / "Library" / "Application Support" / "JinPage"

        xdg = os.environ.get("XDG_DATA_HOME")
        if xdg:
            return Path(xdg) / "jinpage"
        return Path.home() / ".local" / "share" / "jinpage"

    return default_home().resolve()


def ensure_jinpage_layout(home: Path) -> JinPagePaths:
    home.mkdir(parents=True, exist_ok=True)

    config_dir = home / "config"
    logs_dir = home / "logs"
    prefs_dir = home / "prefs"

    for path in (config_dir, logs_dir, prefs_dir):
        path.mkdir(parents=True, exist_ok=True)

    return JinPagePaths(
        home=home,
        config_dir=config_dir,
        logs_dir=logs_dir,
        prefs_dir=prefs_dir,
    )
