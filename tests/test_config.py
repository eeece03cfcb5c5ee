"""Tests for custom_contextmenu.config."""

from __future__ import annotations

import json
from pathlib import Path
from unittest import mock

import pytest

from custom_contextmenu.config import (
    ENV_INSTALL_PATH,
    ENV_SETTINGS_FILE,
    Configuration,
    _strip_jsonc,
    default_settings_path,
    load_configuration,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv(ENV_SETTINGS_FILE, raising=False)
    monkeypatch.delenv(ENV_INSTALL_PATH, raising=False)


def _write(path: Path, text: str) -> str:
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestLoadConfiguration:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        cfg = load_configuration(str(tmp_path / "nope.json"))
        assert cfg == Configuration()
        assert cfg.show_go_tos is True
        assert cfg.show_clipboard_items is True

    def test_flat_keys(self, tmp_path: Path):
        settings = _write(tmp_path / "settings.json", json.dumps({
            "custom-contextmenu.vscodeInstallPath": "  /opt/code/out  ",
            "custom-contextmenu.showGoTos": False,
            "custom-contextmenu.showClipboardItems": False,
            "custom-contextmenu.restartCommand": "code -r",
            "editor.fontSize": 14,
        }))
        cfg = load_configuration(settings)
        assert cfg == Configuration(
            vscode_install_path="/opt/code/out",
            show_go_tos=False,
            show_clipboard_items=False,
            restart_command="code -r",
        )

    def test_nested_section(self, tmp_path: Path):
        settings = _write(tmp_path / "settings.json", json.dumps({
            "custom-contextmenu": {"showGoTos": False},
        }))
        assert load_configuration(settings).show_go_tos is False

    def test_jsonc(self, tmp_path: Path):
        settings = _write(tmp_path / "settings.json", """{
    // user settings
    "http.proxy": "http://example.com//path",
    /* block
       comment */
    "custom-contextmenu.showClipboardItems": false,
}
""")
        cfg = load_configuration(settings)
        assert cfg.show_clipboard_items is False

    def test_malformed_gives_defaults(self, tmp_path: Path):
        settings = _write(tmp_path / "settings.json", "{not json")
        assert load_configuration(settings) == Configuration()

    def test_non_object_gives_defaults(self, tmp_path: Path):
        settings = _write(tmp_path / "settings.json", "[1, 2]")
        assert load_configuration(settings) == Configuration()

    def test_non_bool_falls_back(self, tmp_path: Path):
        settings = _write(tmp_path / "settings.json", json.dumps({
            "custom-contextmenu.showGoTos": "no",
        }))
        assert load_configuration(settings).show_go_tos is True

    def test_settings_file_from_env(self, tmp_path: Path, monkeypatch):
        settings = _write(tmp_path / "s.json", json.dumps({
            "custom-contextmenu.showGoTos": False,
        }))
        monkeypatch.setenv(ENV_SETTINGS_FILE, settings)
        assert load_configuration().show_go_tos is False

    def test_install_path_priority(self, tmp_path: Path, monkeypatch):
        settings = _write(tmp_path / "settings.json", json.dumps({
            "custom-contextmenu.vscodeInstallPath": "/from/settings",
        }))
        assert load_configuration(settings).vscode_install_path == "/from/settings"

        monkeypatch.setenv(ENV_INSTALL_PATH, "/from/env")
        assert load_configuration(settings).vscode_install_path == "/from/env"

        cfg = load_configuration(settings, install_path="/from/arg")
        assert cfg.vscode_install_path == "/from/arg"

    def test_read_fresh_each_time(self, tmp_path: Path):
        path = tmp_path / "settings.json"
        _write(path, json.dumps({"custom-contextmenu.showGoTos": True}))
        assert load_configuration(str(path)).show_go_tos is True
        _write(path, json.dumps({"custom-contextmenu.showGoTos": False}))
        assert load_configuration(str(path)).show_go_tos is False


class TestStripJsonc:
    def test_keeps_comment_markers_inside_strings(self):
        text = '{"a": "x // y /* z */", "b": "q\\"//"}'
        assert json.loads(_strip_jsonc(text)) == {"a": "x // y /* z */", "b": 'q"//'}

    def test_trailing_commas(self):
        assert json.loads(_strip_jsonc('{"a": [1, 2, ], }')) == {"a": [1, 2]}


class TestDefaultSettingsPath:
    def test_linux_xdg(self, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", "/xdg")
        with mock.patch("custom_contextmenu.config.sys.platform", "linux"):
            assert default_settings_path() == Path("/xdg/Code/User/settings.json")

    def test_windows_appdata(self, monkeypatch):
        monkeypatch.setenv("APPDATA", "/appdata")
        with mock.patch("custom_contextmenu.config.sys.platform", "win32"):
            assert default_settings_path() == Path("/appdata/Code/User/settings.json")

    def test_macos(self):
        with mock.patch("custom_contextmenu.config.sys.platform", "darwin"):
            path = default_settings_path()
        assert path.parts[-5:] == ("Library", "Application Support", "Code", "User", "settings.json")
