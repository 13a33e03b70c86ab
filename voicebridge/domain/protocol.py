"""Agent command / app event tagged unions.

Both unions travel as flat JSON objects with a ``type`` discriminant, e.g.
``{"type": "makeCall", "number": "+15551234567"}``. Decoding an unknown
discriminant raises ``UnknownVariant``; a missing or mistyped field raises
``CommandDecodeError``. Optional fields are omitted when encoding ``None``.
"""

from dataclasses import MISSING, dataclass, field, fields
from typing import Any, ClassVar, Dict, Optional, Type, Union

from voicebridge.domain.errors import CommandDecodeError, UnknownVariant


def _wire(kind: type, *, optional: bool = False, name: Optional[str] = None):
    """Declare a wire field: its JSON type and (optionally) its JSON key."""
    metadata = {"kind": kind, "wire": name}
    if optional:
        return field(default=None, metadata=metadata)
    return field(metadata=metadata)


# ---------------------------------------------------------------------------
# Commands (agent -> app)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MakeCall:
    type: ClassVar[str] = "makeCall"
    number: str = _wire(str)


@dataclass(frozen=True)
class SendSMS:
    type: ClassVar[str] = "sendSMS"
    number: str = _wire(str)
    text: str = _wire(str)


@dataclass(frozen=True)
class GetStatus:
    type: ClassVar[str] = "getStatus"


@dataclass(frozen=True)
class GetNotifications:
    type: ClassVar[str] = "getNotifications"


@dataclass(frozen=True)
class SetTheme:
    type: ClassVar[str] = "setTheme"
    theme: str = _wire(str)


@dataclass(frozen=True)
class Reload:
    type: ClassVar[str] = "reload"


Command = Union[MakeCall, SendSMS, GetStatus, GetNotifications, SetTheme, Reload]

COMMAND_TYPES: Dict[str, Type] = {
    cls.type: cls for cls in (MakeCall, SendSMS, GetStatus, GetNotifications, SetTheme, Reload)
}


# ---------------------------------------------------------------------------
# Events (app -> agent)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Connected:
    type: ClassVar[str] = "connected"


@dataclass(frozen=True)
class CallInitiated:
    type: ClassVar[str] = "callInitiated"
    number: str = _wire(str)


@dataclass(frozen=True)
class CallEnded:
    type: ClassVar[str] = "callEnded"
    number: str = _wire(str)
    duration: Optional[int] = _wire(int, optional=True)


@dataclass(frozen=True)
class SmsSent:
    type: ClassVar[str] = "smsSent"
    number: str = _wire(str)


@dataclass(frozen=True)
class IncomingCall:
    type: ClassVar[str] = "incomingCall"
    number: str = _wire(str)


@dataclass(frozen=True)
class MessageReceived:
    type: ClassVar[str] = "messageReceived"
    sender: str = _wire(str, name="from")
    preview: Optional[str] = _wire(str, optional=True)


@dataclass(frozen=True)
class NotificationCountChanged:
    type: ClassVar[str] = "notificationCountChanged"
    count: int = _wire(int)


@dataclass(frozen=True)
class Status:
    type: ClassVar[str] = "status"
    notifications: int = _wire(int)
    theme: str = _wire(str)
    connected: bool = _wire(bool)


@dataclass(frozen=True)
class ThemeChanged:
    type: ClassVar[str] = "themeChanged"
    theme: str = _wire(str)


@dataclass(frozen=True)
class Error:
    type: ClassVar[str] = "error"
    message: str = _wire(str)


@dataclass(frozen=True)
class Acknowledgment:
    type: ClassVar[str] = "acknowledgment"
    command: str = _wire(str)
    success: bool = _wire(bool)
    message: Optional[str] = _wire(str, optional=True)


Event = Union[
    Connected, CallInitiated, CallEnded, SmsSent, IncomingCall, MessageReceived,
    NotificationCountChanged, Status, ThemeChanged, Error, Acknowledgment,
]

EVENT_TYPES: Dict[str, Type] = {
    cls.type: cls
    for cls in (
        Connected, CallInitiated, CallEnded, SmsSent, IncomingCall, MessageReceived,
        NotificationCountChanged, Status, ThemeChanged, Error, Acknowledgment,
    )
}


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------

def _matches(kind: type, value: Any) -> bool:
    # bool is an int subclass; keep the JSON types distinct
    if kind is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, kind)


def _decode(kind: str, registry: Dict[str, Type], obj: Any):
    if not isinstance(obj, dict):
        raise CommandDecodeError(f"{kind} must be a JSON object")
    tag = obj.get("type")
    if not isinstance(tag, str):
        raise CommandDecodeError(f"{kind} is missing the 'type' field")
    cls = registry.get(tag)
    if cls is None:
        raise UnknownVariant(kind, tag)

    kwargs = {}
    for f in fields(cls):
        key = f.metadata.get("wire") or f.name
        optional = f.default is not MISSING
        value = obj.get(key)
        if value is None:
            if not optional:
                raise CommandDecodeError(f"{tag}: missing field '{key}'")
            kwargs[f.name] = None
            continue
        if not _matches(f.metadata["kind"], value):
            raise CommandDecodeError(f"{tag}: field '{key}' has the wrong type")
        kwargs[f.name] = value
    return cls(**kwargs)


def decode_command(obj: Any) -> Command:
    """Decode a JSON object into a Command variant."""
    return _decode("command", COMMAND_TYPES, obj)


def decode_event(obj: Any) -> Event:
    """Decode a JSON object into an Event variant."""
    return _decode("event", EVENT_TYPES, obj)


def encode(variant) -> Dict[str, Any]:
    """Encode a Command or Event variant into its wire dict."""
    out: Dict[str, Any] = {"type": variant.type}
    for f in fields(variant):
        value = getattr(variant, f.name)
        if value is None:
            continue
        out[f.metadata.get("wire") or f.name] = value
    return out
