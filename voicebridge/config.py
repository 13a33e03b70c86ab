"""Configuration and shared constants."""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _log(msg: str):
    print(msg, file=sys.stderr)


DEFAULT_PORT = 3000
DEFAULT_BASE_URL = "https://voice.google.com"
DEFAULT_POLL_INTERVAL = 3.0
SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


class Theme(str, Enum):
    DEFAULT = "default"
    DRACULA = "dracula"
    SOLAR = "solar"
    MINTY = "minty"
    CERULEAN = "cerulean"
    DARKPLUS = "darkplus"

    @classmethod
    def names(cls):
        return [t.value for t in cls]


def _env_port(raw: str) -> int:
    """Clamp the configured port at load time; the bridge itself never clamps."""
    try:
        port = int(raw)
    except ValueError:
        _log(f"Invalid VOICEBRIDGE_PORT={raw!r}, falling back to {DEFAULT_PORT}")
        return DEFAULT_PORT
    if not 1 <= port <= 65535:
        clamped = min(max(port, 1), 65535)
        _log(f"VOICEBRIDGE_PORT={port} out of range, clamped to {clamped}")
        return clamped
    return port


def _env_theme(raw: str) -> str:
    value = raw.strip().lower()
    if value not in Theme.names():
        _log(f"Unknown VOICEBRIDGE_THEME={raw!r}, falling back to 'default'")
        return Theme.DEFAULT.value
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        return max(0.1, float(raw))
    except ValueError:
        _log(f"Invalid {name}={raw!r}, falling back to {default}")
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


BROWSER = os.getenv("VOICEBRIDGE_BROWSER", "chromium").strip().lower()
if BROWSER not in SUPPORTED_BROWSERS:
    _log(f"Unsupported VOICEBRIDGE_BROWSER={BROWSER!r}, falling back to 'chromium'")
    BROWSER = "chromium"

CONFIG = {
    "port": _env_port(os.getenv("VOICEBRIDGE_PORT", str(DEFAULT_PORT))),
    "theme": _env_theme(os.getenv("VOICEBRIDGE_THEME", Theme.DEFAULT.value)),
    "base_url": os.getenv("VOICEBRIDGE_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
    "headless": _env_bool("VOICEBRIDGE_HEADLESS", False),
    "browser": BROWSER,
    "user_data_dir": os.getenv(
        "VOICEBRIDGE_USER_DATA_DIR", str(Path.home() / ".voicebridge" / "profile")
    ),
    "poll_interval": _env_float("VOICEBRIDGE_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
}


# ── Typed config ────────────────────────────────────────────


@dataclass
class BridgeConfig:
    """Typed view over CONFIG, handed to the app wiring."""

    port: int = DEFAULT_PORT
    theme: str = Theme.DEFAULT.value
    base_url: str = DEFAULT_BASE_URL
    headless: bool = False
    browser: str = "chromium"
    user_data_dir: str = ""
    poll_interval: float = DEFAULT_POLL_INTERVAL

    @classmethod
    def from_env(cls) -> "BridgeConfig":
        """Create BridgeConfig from the already-loaded CONFIG dict."""
        return cls(
            port=CONFIG["port"],
            theme=CONFIG["theme"],
            base_url=CONFIG["base_url"],
            headless=CONFIG["headless"],
            browser=CONFIG["browser"],
            user_data_dir=CONFIG["user_data_dir"],
            poll_interval=CONFIG["poll_interval"],
        )
