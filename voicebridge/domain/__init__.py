"""Domain layer: pure Python, no framework dependencies."""

from voicebridge.domain.errors import (
    BridgeError,
    CommandDecodeError,
    InvalidPort,
    PageUnavailable,
    UnknownTheme,
    UnknownVariant,
)
from voicebridge.domain.models import (
    ActionResult,
    CallCommandResult,
    CallCommandStatus,
    CallRecord,
    ClickOutcome,
    Contact,
    DomDump,
    Message,
    UserInfo,
    Voicemail,
)
from voicebridge.domain.phone import build_call_url, normalize_number, with_country_code

__all__ = [
    "BridgeError",
    "CommandDecodeError",
    "InvalidPort",
    "PageUnavailable",
    "UnknownTheme",
    "UnknownVariant",
    "ActionResult",
    "CallCommandResult",
    "CallCommandStatus",
    "CallRecord",
    "ClickOutcome",
    "Contact",
    "DomDump",
    "Message",
    "UserInfo",
    "Voicemail",
    "build_call_url",
    "normalize_number",
    "with_country_code",
]
