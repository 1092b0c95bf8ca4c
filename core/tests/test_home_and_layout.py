from __future__ import annotations

from pathlib import Path

from jinpage.home import ensure_jinpage_layout, resolve_jinpage_home


def test_resolve_jinpage_home_from_env(tmp_path: Path) -> None:
    home = resolve_jinpage_home({"JINPAGE_HOME": str(tmp_path)})
    assert home == tmp_path.resolve()


def test_resolve_jinpage_home_relative_is_under_user_home() -> None:
    home = resolve_jinpage_home({"JINPAGE_HOME": "jinpage-test-home"})
    assert home == (Path.home() / "jinpage-test-home").resolve()


def test_ensure_jinpage_layout_creates_required_dirs(tmp_path: Path) -> None:
    paths = ensure_jinpage_layout(tmp_path)

    assert paths.home.exists()
    assert paths.config_dir.is_dir()
    assert paths.logs_dir.is_dir()
    assert paths.prefs_dir.is_dir()
    assert paths.page_config_path == tmp_path / "config" / "page.json"
