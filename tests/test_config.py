"""Tests for env-driven configuration."""

import pytest

import voicebridge.config as config
from voicebridge.config import BridgeConfig, Theme


class TestEnvPort:
    def test_valid(self):
        assert config._env_port("8080") == 8080

    def test_non_numeric_falls_back(self):
        assert config._env_port("abc") == config.DEFAULT_PORT

    @pytest.mark.parametrize("raw, expected", [("0", 1), ("70000", 65535)])
    def test_out_of_range_clamped_at_load(self, raw, expected):
        assert config._env_port(raw) == expected


class TestEnvValues:
    def test_unknown_theme_falls_back(self):
        assert config._env_theme("neon") == "default"

    def test_theme_case_insensitive(self):
        assert config._env_theme(" Dracula ") == "dracula"

    def test_float_floor(self, monkeypatch):
        monkeypatch.setenv("VOICEBRIDGE_POLL_INTERVAL", "0.01")
        assert config._env_float("VOICEBRIDGE_POLL_INTERVAL", 3.0) == 0.1

    def test_float_garbage(self, monkeypatch):
        monkeypatch.setenv("VOICEBRIDGE_POLL_INTERVAL", "soon")
        assert config._env_float("VOICEBRIDGE_POLL_INTERVAL", 3.0) == 3.0

    @pytest.mark.parametrize("raw, expected", [("1", True), ("yes", True), ("0", False), ("off", False)])
    def test_bool(self, monkeypatch, raw, expected):
        monkeypatch.setenv("VOICEBRIDGE_HEADLESS", raw)
        assert config._env_bool("VOICEBRIDGE_HEADLESS", False) is expected


class TestTheme:
    def test_closed_set(self):
        assert Theme.names() == ["default", "dracula", "solar", "minty", "cerulean", "darkplus"]


class TestBridgeConfig:
    def test_defaults(self):
        c = BridgeConfig()
        assert c.port == 3000
        assert c.theme == "default"
        assert c.browser == "chromium"

    def test_from_env(self, monkeypatch):
        monkeypatch.setitem(config.CONFIG, "port", 4000)
        monkeypatch.setitem(config.CONFIG, "theme", "minty")
        c = BridgeConfig.from_env()
        assert c.port == 4000
        assert c.theme == "minty"
