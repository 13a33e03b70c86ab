"""DOM automation routines for the Google Voice web app.

Each routine pairs a template from ``scripts`` with a decoder from
``domain.models``. Read routines are single evaluations; action routines
(``dial_number``, ``send_sms``) are step sequences gated by readiness
probes instead of fixed delays.
"""

import asyncio
import sys
from typing import Any, Dict, List

from voicebridge.automation import scripts
from voicebridge.automation.retry import Sleep, click_with_retry, wait_for_ready
from voicebridge.domain.models import (
    ActionResult,
    CallRecord,
    Contact,
    DomDump,
    Message,
    UserInfo,
    Voicemail,
)
from voicebridge.ports.outbound import PagePort

DEFAULT_LIMITS = {
    "messages": 10,
    "contacts": 20,
    "calls": 10,
    "voicemails": 10,
}

STEP_TIMEOUT = 5.0
STEP_INTERVAL = 0.3
SEARCH_SETTLE_SECONDS = 1.0


def _log(msg: str):
    print(msg, file=sys.stderr)


def _clamp_limit(limit, default: int) -> int:
    try:
        value = int(limit)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0


class VoicePage:
    """Automation routines bound to one embedded page."""

    def __init__(
        self,
        page: PagePort,
        *,
        step_timeout: float = STEP_TIMEOUT,
        step_interval: float = STEP_INTERVAL,
        sleep: Sleep = asyncio.sleep,
    ):
        self.page = page
        self._step_timeout = step_timeout
        self._step_interval = step_interval
        self._sleep = sleep

    # ── Read routines ───────────────────────────────────────

    async def get_unread_count(self) -> int:
        result = await self.page.execute(
            scripts.UNREAD_COUNT, {"selectors": scripts.UNREAD_BADGE_SELECTORS}
        )
        return _as_int(result)

    async def _scrape(self, spec: Dict[str, Any], limit: int) -> List[Any]:
        arg = dict(spec, limit=limit)
        result = await self.page.execute(scripts.SCRAPE_LIST, arg)
        rows = result if isinstance(result, list) else []
        return rows[:limit]

    async def get_messages(self, limit: int = DEFAULT_LIMITS["messages"]) -> List[Message]:
        limit = _clamp_limit(limit, DEFAULT_LIMITS["messages"])
        return [Message.from_page(r) for r in await self._scrape(scripts.MESSAGES_SPEC, limit)]

    async def get_contacts(self, limit: int = DEFAULT_LIMITS["contacts"]) -> List[Contact]:
        limit = _clamp_limit(limit, DEFAULT_LIMITS["contacts"])
        return [Contact.from_page(r) for r in await self._scrape(scripts.CONTACTS_SPEC, limit)]

    async def get_call_history(self, limit: int = DEFAULT_LIMITS["calls"]) -> List[CallRecord]:
        limit = _clamp_limit(limit, DEFAULT_LIMITS["calls"])
        return [CallRecord.from_page(r) for r in await self._scrape(scripts.CALLS_SPEC, limit)]

    async def get_voicemails(self, limit: int = DEFAULT_LIMITS["voicemails"]) -> List[Voicemail]:
        limit = _clamp_limit(limit, DEFAULT_LIMITS["voicemails"])
        return [Voicemail.from_page(r) for r in await self._scrape(scripts.VOICEMAILS_SPEC, limit)]

    async def is_logged_in(self) -> bool:
        result = await self.page.execute(
            scripts.ANY_PRESENT, {"selectors": scripts.LOGGED_IN_SELECTORS}
        )
        return result is True

    async def get_current_user(self) -> UserInfo:
        result = await self.page.execute(scripts.CURRENT_USER, scripts.CURRENT_USER_SELECTORS)
        return UserInfo.from_page(result)

    async def dump_dom(self) -> DomDump:
        result = await self.page.execute(scripts.DUMP_DOM, scripts.DUMP_SELECTORS)
        return DomDump.from_page(result)

    # ── Navigation ──────────────────────────────────────────

    async def _click_once(self, selectors: List[str]) -> bool:
        result = await self.page.execute(
            scripts.CLICK_CONTROL, {"keywords": [], "selectors": selectors}
        )
        return isinstance(result, str) and result.startswith("clicked:")

    async def navigate_to_messages(self) -> bool:
        return await self._click_once(scripts.NAV_MESSAGES_SELECTORS)

    async def navigate_to_calls(self) -> bool:
        return await self._click_once(scripts.NAV_CALLS_SELECTORS)

    async def open_dialpad(self) -> bool:
        return await self._click_once(scripts.DIALPAD_SELECTORS)

    # ── Action routines ─────────────────────────────────────

    async def _wait_for(self, selectors: List[str]) -> bool:
        return await wait_for_ready(
            self.page,
            scripts.ANY_PRESENT,
            {"selectors": selectors},
            timeout=self._step_timeout,
            poll_interval=self._step_interval,
            sleep=self._sleep,
        )

    async def _fill(self, selectors: List[str], value: str, press_enter: bool = False) -> bool:
        result = await self.page.execute(
            scripts.FILL_FIELD,
            {"selectors": selectors, "value": value, "pressEnter": press_enter},
        )
        return result is True

    async def _click(self, keywords: List[str], selectors: List[str], exclude=None, not_found: str = ""):
        arg = {"keywords": keywords, "selectors": selectors, "exclude": exclude or []}
        return await click_with_retry(
            self.page,
            scripts.CLICK_CONTROL,
            arg,
            max_attempts=max(1, int(self._step_timeout / max(self._step_interval, 0.1))),
            poll_interval=self._step_interval,
            sleep=self._sleep,
            not_found_detail=not_found,
        )

    async def dial_number(self, phone_number: str) -> ActionResult:
        """Dialpad flow: open dialpad -> fill number -> click call."""
        opened = await self._click([], scripts.DIALPAD_SELECTORS, not_found="Dialpad button not found")
        if not opened.clicked:
            return ActionResult(success=False, message="Dialpad button not found")

        if not await self._wait_for(scripts.PHONE_INPUT_SELECTORS):
            return ActionResult(success=False, message="Phone input not found")
        if not await self._fill(scripts.PHONE_INPUT_SELECTORS, phone_number):
            return ActionResult(success=False, message="Phone input not found")

        outcome = await self._click(
            scripts.CALL_KEYWORDS, scripts.CALL_BUTTON_SELECTORS, not_found="Call button not found"
        )
        if not outcome.clicked:
            return ActionResult(success=False, message=f"Call button not found: {outcome.detail}")
        return ActionResult(success=True, message=f"Call initiated ({outcome.detail})")

    async def send_sms(self, phone_number: str, message: str) -> ActionResult:
        """Compose flow: compose -> recipient -> body -> send."""
        composed = await self._click(
            scripts.COMPOSE_KEYWORDS, scripts.COMPOSE_SELECTORS, not_found="Compose button not found"
        )
        if not composed.clicked:
            return ActionResult(success=False, message="Compose button not found")

        if not await self._wait_for(scripts.RECIPIENT_INPUT_SELECTORS):
            return ActionResult(success=False, message="To field not found")
        if not await self._fill(scripts.RECIPIENT_INPUT_SELECTORS, phone_number, press_enter=True):
            return ActionResult(success=False, message="To field not found")

        if not await self._wait_for(scripts.MESSAGE_INPUT_SELECTORS):
            return ActionResult(success=False, message="Message input not found")
        if not await self._fill(scripts.MESSAGE_INPUT_SELECTORS, message):
            return ActionResult(success=False, message="Message input not found")

        sent = await self._click(
            scripts.SEND_KEYWORDS,
            scripts.SEND_BUTTON_SELECTORS,
            exclude=scripts.SEND_EXCLUDE_KEYWORDS,
            not_found="Send button not found",
        )
        if not sent.clicked:
            _log(f"[sms] send button not clicked: {sent.detail}")
            return ActionResult(success=False, message=f"Send button not found: {sent.detail}")
        return ActionResult(success=True, message="SMS sent")

    async def search(self, query: str) -> ActionResult:
        if not await self._fill(scripts.SEARCH_INPUT_SELECTORS, query):
            return ActionResult(success=False, message="Search input not found")
        await self._sleep(SEARCH_SETTLE_SECONDS)
        return ActionResult(success=True, message="Search executed")

    async def is_blank(self) -> bool:
        """Blank-page heuristic: the body exists but has no child nodes."""
        result = await self.page.execute(scripts.BODY_CHILD_COUNT)
        return isinstance(result, (int, float)) and not isinstance(result, bool) and result == 0
