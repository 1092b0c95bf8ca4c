from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from jinpage.home import JinPagePaths

DEFAULT_ARCHIVE: tuple[str, ...] = (
    "jin.jar",
    "libs/swingall.jar",
    "libs/chess.jar",
    "libs/util.jar",
    "libs/jregex.jar",
    "libs/timesealing.jar",
    "servers/freechess.jar",
    "libs/console.jar",
    "plugins/fics/console.jar",
    "libs/board.jar",
    "plugins/fics/board.jar",
    "libs/seek.jar",
    "plugins/fics/seek.jar",
    "libs/sound.jar",
    "plugins/fics/sound.jar",
)

DEFAULT_PLUGINS: tuple[str, ...] = (
    "free.jin.console.fics.FreechessConsoleManager",
    "free.jin.board.fics.FreechessBoardManager",
    "free.jin.seek.fics.FreechessSoughtGraphPlugin",
    "free.jin.sound.fics.FreechessSoundManager",
)

DEFAULT_BOARDS: tuple[str, ...] = (
    "cold-marble",
    "gray-tiles",
    "green-marble",
    "pale-wood",
    "plain",
    "red-marble",
    "slate",
    "winter",
    "wooden-dark",
)

DEFAULT_PIECES: tuple[str, ...] = ("eboard", "xboard")


class NetworkConfig(BaseModel):
    bind_host: str = Field(default="127.0.0.1")
    http_port: int = Field(default=8780, ge=1, le=65535)


class AppletConfig(BaseModel):
    """What the emitted page hands to the applet container.

    The defaults reproduce the FICS applet page parameter for parameter.
    """

    title: str = Field(default="Jin Applet")
    code: str = Field(default="free.jin.JinApplet", min_length=1)
    archive: list[str] = Field(default_factory=lambda: list(DEFAULT_ARCHIVE))
    width: int = Field(default=400, ge=1)
    height: int = Field(default=300, ge=1)
    fallback_text: str = Field(default="Please enable Java to run Jin")

    port: int = Field(default=5000, ge=1, le=65535, description="Chess server port")
    server_classname: str = Field(default="free.jin.freechess.FreechessServer", min_length=1)
    plugins: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PLUGINS),
        description="Plugin class names; order is significant",
    )
    boards: list[str] = Field(default_factory=lambda: list(DEFAULT_BOARDS))
    pieces: list[str] = Field(default_factory=lambda: list(DEFAULT_PIECES))


class PrefsConfig(BaseModel):
    enabled: bool = Field(
        default=False,
        description="Apply stored per-user overrides before rendering",
    )
    save_prefs_url: str | None = Field(
        default=None,
        description="Emitted as savePrefsUrl when set (e.g. save_prefs.php)",
    )
    reserve_space_url: str | None = Field(
        default=None,
        description="Emitted as reserveSpaceUrl when set (e.g. reserve_space.php)",
    )


class PathOverrides(BaseModel):
    logs_dir: str | None = None
    prefs_dir: str | None = None


class LoggingConfig(BaseModel):
    max_size_mb: int = Field(
        default=10, ge=1, description="Max size of a log file in MB before rolling."
    )
    backup_count: int = Field(default=5, ge=1, description="Number of log archives to keep.")


class PageConfig(BaseModel):
    version: str = Field(default="1")
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    applet: AppletConfig = Field(default_factory=AppletConfig)
    prefs: PrefsConfig = Field(default_factory=PrefsConfig)
    paths: PathOverrides = Field(default_factory=PathOverrides)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _read_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_page_config(paths: JinPagePaths) -> PageConfig:
    """Load config from ${JINPAGE_HOME}/config/page.json.

    - If missing: returns defaults.
    - Validation is performed by Pydantic.
    """

    config_path = paths.page_config_path
    if not config_path.exists():
        return PageConfig()

    raw = _read_json(config_path)
    return PageConfig.model_validate(raw)


def write_page_config(paths: JinPagePaths, config: PageConfig) -> None:
    payload = config.model_dump(mode="json", exclude_none=True)
    paths.config_dir.mkdir(parents=True, exist_ok=True)
    paths.page_config_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def resolve_configured_paths(paths: JinPagePaths, config: PageConfig) -> JinPagePaths:
    """Apply path overrides from config; config/ itself is not configurable."""

    def _resolve_dir(raw: str | None, default: Path) -> Path:
        if raw is None or not str(raw).strip():
            return default
        candidate = Path(raw).expanduser()
        if not candidate.is_absolute():
            candidate = (paths.home / candidate).resolve()
        else:
            candidate = candidate.resolve()
        return candidate

    logs_dir = _resolve_dir(config.paths.logs_dir, paths.logs_dir)
    prefs_dir = _resolve_dir(config.paths.prefs_dir, paths.prefs_dir)

    for p in (logs_dir, prefs_dir):
        p.mkdir(parents=True, exist_ok=True)

    return JinPagePaths(
        home=paths.home,
        config_dir=paths.config_dir,
        logs_dir=logs_dir,
        prefs_dir=prefs_dir,
    )
