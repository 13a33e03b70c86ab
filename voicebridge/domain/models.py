"""Domain data models: pure Python dataclasses.

Scraped entities are read-only projections of whatever the page currently
renders. ``from_page`` never rejects an item: absent nodes or attributes
degrade to placeholder values.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

UNKNOWN = "Unknown"


def _text(raw: Dict[str, Any], key: str, default: str = "") -> str:
    value = raw.get(key)
    if value is None:
        return default
    value = str(value).strip()
    return value or default


def _optional_text(raw: Dict[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _as_dict(raw: Any) -> Dict[str, Any]:
    return raw if isinstance(raw, dict) else {}


def _as_list(raw: Any) -> list:
    return raw if isinstance(raw, list) else []


@dataclass
class Message:
    name: str = UNKNOWN
    phone: str = ""
    preview: str = ""
    timestamp: str = ""
    is_unread: bool = False
    thread_id: Optional[str] = None

    @classmethod
    def from_page(cls, raw: Any) -> "Message":
        raw = _as_dict(raw)
        return cls(
            name=_text(raw, "name", UNKNOWN),
            phone=_text(raw, "phone"),
            preview=_text(raw, "preview"),
            timestamp=_text(raw, "timestamp"),
            is_unread=raw.get("isUnread") is True,
            thread_id=_optional_text(raw, "threadId"),
        )


@dataclass
class Contact:
    name: str = UNKNOWN
    phone: str = ""
    contact_id: Optional[str] = None

    @classmethod
    def from_page(cls, raw: Any) -> "Contact":
        raw = _as_dict(raw)
        return cls(
            name=_text(raw, "name", UNKNOWN),
            phone=_text(raw, "phone"),
            contact_id=_optional_text(raw, "contactId"),
        )


@dataclass
class CallRecord:
    name: str = UNKNOWN
    phone: str = ""
    timestamp: str = ""
    type: str = "unknown"
    duration: str = ""

    @classmethod
    def from_page(cls, raw: Any) -> "CallRecord":
        raw = _as_dict(raw)
        return cls(
            name=_text(raw, "name", UNKNOWN),
            phone=_text(raw, "phone"),
            timestamp=_text(raw, "timestamp"),
            type=_text(raw, "type", "unknown"),
            duration=_text(raw, "duration"),
        )


@dataclass
class Voicemail:
    name: str = UNKNOWN
    phone: str = ""
    timestamp: str = ""
    transcript: str = ""
    duration: str = ""

    @classmethod
    def from_page(cls, raw: Any) -> "Voicemail":
        raw = _as_dict(raw)
        return cls(
            name=_text(raw, "name", UNKNOWN),
            phone=_text(raw, "phone"),
            timestamp=_text(raw, "timestamp"),
            transcript=_text(raw, "transcript"),
            duration=_text(raw, "duration"),
        )


@dataclass
class UserInfo:
    name: Optional[str] = None
    phone: Optional[str] = None

    @classmethod
    def from_page(cls, raw: Any) -> "UserInfo":
        raw = _as_dict(raw)
        return cls(name=_optional_text(raw, "name"), phone=_optional_text(raw, "phone"))


@dataclass
class ActionResult:
    """Verdict of a best-effort UI action plus a free-text diagnostic."""

    success: bool
    message: str


@dataclass
class InteractiveElement:
    tag: str = ""
    id: str = ""
    classes: List[str] = field(default_factory=list)
    aria_label: Optional[str] = None
    data_attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""

    @classmethod
    def from_page(cls, raw: Any) -> "InteractiveElement":
        raw = _as_dict(raw)
        data_attrs = _as_dict(raw.get("dataAttributes"))
        return cls(
            tag=_text(raw, "tag"),
            id=_text(raw, "id"),
            classes=[str(c) for c in _as_list(raw.get("classes"))],
            aria_label=_optional_text(raw, "ariaLabel"),
            data_attributes={str(k): str(v) for k, v in data_attrs.items()},
            text=_text(raw, "text"),
        )


@dataclass
class DomDump:
    """Diagnostic snapshot used to recalibrate selectors."""

    url: str = ""
    title: str = ""
    root_exists: bool = False
    nav_items: List[Dict[str, Any]] = field(default_factory=list)
    buttons: List[Dict[str, Any]] = field(default_factory=list)
    inputs: List[Dict[str, Any]] = field(default_factory=list)
    interactive_elements: List[InteractiveElement] = field(default_factory=list)

    @classmethod
    def from_page(cls, raw: Any) -> "DomDump":
        raw = _as_dict(raw)
        return cls(
            url=_text(raw, "url"),
            title=_text(raw, "title"),
            root_exists=raw.get("gvRootExists") is True,
            nav_items=[_as_dict(i) for i in _as_list(raw.get("navItems"))],
            buttons=[_as_dict(i) for i in _as_list(raw.get("buttons"))],
            inputs=[_as_dict(i) for i in _as_list(raw.get("inputs"))],
            interactive_elements=[
                InteractiveElement.from_page(i)
                for i in _as_list(raw.get("interactiveElements"))[:100]
            ],
        )


@dataclass
class ClickOutcome:
    """Result of a click-with-retry run; ``detail`` is always populated."""

    clicked: bool
    detail: str


class CallCommandStatus(str, Enum):
    """Furthest stage the local call automation reached."""

    QUEUED = "queued"
    DIALER_OPEN = "dialer_open"
    CALL_BUTTON_CLICKED = "call_button_clicked"
    FAILED = "failed"


@dataclass
class CallCommandResult:
    status: CallCommandStatus
    number: str
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data
