from __future__ import annotations

from dataclasses import replace

from jinpage.config import AppletConfig, PrefsConfig
from jinpage.params import ParameterSet, build_applet_page
from jinpage.plugins import parse_parameters
from jinpage.render import render_applet_page, render_applet_page_text


def test_render_is_byte_identical_across_calls() -> None:
    page = build_applet_page(AppletConfig())
    first = render_applet_page(page)
    second = render_applet_page(build_applet_page(AppletConfig()))
    assert isinstance(first, bytes)
    assert first == second


def test_every_parameter_appears_exactly_once_with_its_value() -> None:
    page = build_applet_page(AppletConfig())
    text = render_applet_page_text(page)

    for name, value in page.parameters:
        tag = f'<param name="{name}" value="{value}">'
        assert text.count(f'name="{name}"') == 1
        assert tag in text


def test_parameters_are_emitted_in_set_order() -> None:
    page = build_applet_page(AppletConfig())
    text = render_applet_page_text(page)

    positions = [text.index(f'name="{name}"') for name in page.parameters.names()]
    assert positions == sorted(positions)


def test_applet_tag_and_page_chrome() -> None:
    text = render_applet_page_text(build_applet_page(AppletConfig()))

    assert "<title>Jin Applet</title>" in text
    assert 'code="free.jin.JinApplet"' in text
    assert 'archive="jin.jar, libs/swingall.jar, libs/chess.jar,' in text
    assert 'width="400" height="300"' in text
    assert "Please enable Java to run Jin" in text
    assert text.rstrip().endswith("</html>")


def test_disabled_prefs_hooks_are_not_emitted() -> None:
    text = render_applet_page_text(build_applet_page(AppletConfig(), PrefsConfig()))
    assert "savePrefsUrl" not in text
    assert "reserveSpaceUrl" not in text


def test_markup_in_values_is_escaped_and_reads_back_verbatim() -> None:
    page = build_applet_page(AppletConfig())
    tricky = '"><script>alert(1)</script>&amp;'
    page = page.with_overrides({"note": tricky})

    body = render_applet_page(page)
    assert b"<script>" not in body

    parsed = parse_parameters(body)
    assert parsed["note"] == tricky


def test_non_ascii_values_are_utf8_encoded() -> None:
    page = build_applet_page(AppletConfig(title="Jin – Schach"))
    body = render_applet_page(page)
    assert "Jin – Schach".encode() in body


def test_empty_parameter_set_renders() -> None:
    page = build_applet_page(AppletConfig())
    bare = replace(page, parameters=ParameterSet())
    text = render_applet_page_text(bare)
    assert "<param" not in text
    assert "</applet>" in text
