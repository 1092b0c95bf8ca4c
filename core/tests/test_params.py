from __future__ import annotations

import pytest

from jinpage.config import AppletConfig, PrefsConfig
from jinpage.params import (
    DuplicateParameterError,
    InvalidParameterError,
    ParameterSet,
    build_applet_page,
    build_parameter_set,
    join_tokens,
    split_tokens,
)

EXPECTED_DEFAULTS: list[tuple[str, str]] = [
    ("port", "5000"),
    ("server.classname", "free.jin.freechess.FreechessServer"),
    ("plugins.count", "4"),
    ("plugins.0.classname", "free.jin.console.fics.FreechessConsoleManager"),
    ("plugins.1.classname", "free.jin.board.fics.FreechessBoardManager"),
    ("plugins.2.classname", "free.jin.seek.fics.FreechessSoughtGraphPlugin"),
    ("plugins.3.classname", "free.jin.sound.fics.FreechessSoundManager"),
    (
        "resources.boards",
        "cold-marble gray-tiles green-marble pale-wood plain red-marble slate winter wooden-dark",
    ),
    ("resources.pieces", "eboard xboard"),
]


def test_default_parameter_set_matches_fics_page() -> None:
    params = build_parameter_set(AppletConfig())
    assert list(params) == EXPECTED_DEFAULTS


def test_prefs_urls_only_emitted_when_configured() -> None:
    plain = build_parameter_set(AppletConfig(), PrefsConfig())
    assert "savePrefsUrl" not in plain
    assert "reserveSpaceUrl" not in plain

    with_urls = build_parameter_set(
        AppletConfig(),
        PrefsConfig(save_prefs_url="save_prefs.php", reserve_space_url="reserve_space.php"),
    )
    assert with_urls.names()[-2:] == ["savePrefsUrl", "reserveSpaceUrl"]
    assert with_urls["savePrefsUrl"] == "save_prefs.php"
    assert with_urls["reserveSpaceUrl"] == "reserve_space.php"


def test_plugins_count_follows_plugin_list() -> None:
    params = build_parameter_set(AppletConfig(plugins=["a.B", "c.D"]))
    assert params["plugins.count"] == "2"
    assert "plugins.2.classname" not in params
    assert params["plugins.1.classname"] == "c.D"


def test_duplicate_names_are_rejected() -> None:
    with pytest.raises(DuplicateParameterError) as excinfo:
        ParameterSet((("port", "5000"), ("port", "5001")))
    assert excinfo.value.name == "port"


@pytest.mark.parametrize("name", ["", "has space", "tab\tname"])
def test_invalid_names_are_rejected(name: str) -> None:
    with pytest.raises(InvalidParameterError):
        ParameterSet(((name, "x"),))


def test_non_string_values_are_rejected() -> None:
    with pytest.raises(InvalidParameterError):
        ParameterSet((("port", 5000),))  # type: ignore[arg-type]


def test_parameter_set_is_immutable() -> None:
    params = ParameterSet.from_mapping({"port": "5000"})
    with pytest.raises(AttributeError):
        params.entries = ()  # type: ignore[misc]


def test_with_overrides_keeps_positions_and_appends_new_names() -> None:
    params = ParameterSet.from_mapping({"a": "1", "b": "2", "c": "3"})

    merged = params.with_overrides({"b": "two", "d": "4"})

    assert list(merged) == [("a", "1"), ("b", "two"), ("c", "3"), ("d", "4")]
    # The original is untouched.
    assert params["b"] == "2"
    assert params.with_overrides({}) is params


def test_equal_sets_compare_and_hash_equal() -> None:
    a = ParameterSet.from_mapping({"x": "1", "y": "2"})
    b = ParameterSet((("x", "1"), ("y", "2")))
    assert a == b
    assert hash(a) == hash(b)
    assert a != ParameterSet((("y", "2"), ("x", "1")))


def test_join_tokens_preserves_order() -> None:
    assert join_tokens(["winter", "plain", "slate"]) == "winter plain slate"


@pytest.mark.parametrize(
    "tokens",
    [["plain", "plain"], ["", "plain"], ["pale wood"]],
)
def test_join_tokens_rejects_bad_lists(tokens: list[str]) -> None:
    with pytest.raises(InvalidParameterError):
        join_tokens(tokens)


def test_split_tokens_accepts_any_whitespace() -> None:
    assert split_tokens("  eboard\txboard \n") == ["eboard", "xboard"]


def test_default_token_lists_have_no_duplicates() -> None:
    params = build_parameter_set(AppletConfig())
    boards = split_tokens(params["resources.boards"])
    pieces = split_tokens(params["resources.pieces"])

    assert len(boards) == 9
    assert len(set(boards)) == len(boards)
    assert pieces == ["eboard", "xboard"]


def test_build_parameter_set_rejects_duplicate_board_tokens() -> None:
    with pytest.raises(InvalidParameterError):
        build_parameter_set(AppletConfig(boards=["plain", "plain"]))


def test_applet_page_defaults_and_overrides() -> None:
    page = build_applet_page(AppletConfig())

    assert page.title == "Jin Applet"
    assert page.code == "free.jin.JinApplet"
    assert page.archive[0] == "jin.jar"
    assert page.archive[-1] == "plugins/fics/sound.jar"
    assert len(page.archive) == 15
    assert (page.width, page.height) == (400, 300)

    themed = page.with_overrides({"resources.pieces": "xboard"})
    assert themed.parameters["resources.pieces"] == "xboard"
    assert themed.code == page.code
    assert page.parameters["resources.pieces"] == "eboard xboard"


def test_names_are_unique_ignoring_case() -> None:
    with pytest.raises(DuplicateParameterError):
        ParameterSet((("port", "5000"), ("PORT", "5001")))


def test_overrides_match_existing_names_ignoring_case() -> None:
    params = build_parameter_set(AppletConfig())

    merged = params.with_overrides({"Resources.Pieces": "xboard"})

    assert merged.names() == params.names()
    assert merged["resources.pieces"] == "xboard"
