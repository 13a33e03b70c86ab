"""Page-owning side of the bridge: runs agent commands against the page."""

import asyncio
import sys
from typing import Any, Awaitable, Callable, Optional, Tuple, TypeVar

from voicebridge.automation import scripts
from voicebridge.automation.retry import click_with_retry, wait_for_ready
from voicebridge.automation.routines import VoicePage
from voicebridge.config import DEFAULT_BASE_URL, Theme
from voicebridge.domain.errors import PageUnavailable, UnknownTheme
from voicebridge.domain.models import ActionResult, CallCommandResult, CallCommandStatus
from voicebridge.domain.phone import build_call_url, normalize_number, with_country_code
from voicebridge.notifications import NotificationPoller
from voicebridge.ports.outbound import PagePort

T = TypeVar("T")


def _log(msg: str):
    print(msg, file=sys.stderr)


class VoiceController:
    """Implements CommandHandler on top of one embedded page.

    Page-mutating commands (call, SMS, reload, navigation) are serialized
    through one lock so a navigation can't invalidate another command's
    in-flight probe.
    """

    def __init__(
        self,
        poller: Optional[NotificationPoller] = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        theme: str = Theme.DEFAULT.value,
        on_theme_changed: Optional[Callable[[str], Any]] = None,
        on_count_changed: Optional[Callable[[int], Any]] = None,
        ready_timeout: float = 10.0,
        ready_interval: float = 0.4,
        click_attempts: int = 8,
        click_interval: float = 0.5,
        sleep=asyncio.sleep,
    ):
        self.base_url = base_url
        self.poller = poller or NotificationPoller(base_url=base_url)
        self.on_theme_changed = on_theme_changed
        self.on_count_changed = on_count_changed
        self._theme = theme
        self._page: Optional[PagePort] = None
        self._routines: Optional[VoicePage] = None
        self._lock = asyncio.Lock()
        self._ready_timeout = ready_timeout
        self._ready_interval = ready_interval
        self._click_attempts = click_attempts
        self._click_interval = click_interval
        self._sleep = sleep

    # ── Page binding ────────────────────────────────────────

    async def attach_page(self, page: PagePort, poll: bool = True):
        self._page = page
        self._routines = VoicePage(page, sleep=self._sleep)
        if poll:
            await self.poller.start_polling(page, self.on_count_changed, exclusive=self.run_exclusive)
        _log("[controller] page attached")

    def detach_page(self):
        self.poller.stop_polling()
        self._page = None
        self._routines = None
        _log("[controller] page detached")

    def routines(self) -> Optional[VoicePage]:
        page = self._page
        if page is None or not page.is_available:
            return None
        return self._routines

    async def run_exclusive(self, action: Callable[[], Awaitable[T]]) -> T:
        async with self._lock:
            return await action()

    # ── Commands ────────────────────────────────────────────

    async def make_call(self, number: str) -> CallCommandResult:
        _log(f"[call] requested: {number}")
        digits = normalize_number(number)
        if not digits:
            return CallCommandResult(CallCommandStatus.FAILED, number, "No digits found in number")
        full_number = with_country_code(digits)

        page = self._page
        if page is None or not page.is_available:
            return CallCommandResult(CallCommandStatus.FAILED, full_number, "Page unavailable")

        async with self._lock:
            return await self._place_call(page, full_number)

    async def _place_call(self, page: PagePort, full_number: str) -> CallCommandResult:
        call_url = build_call_url(self.base_url, full_number)
        _log(f"[call] loading {call_url}")
        try:
            await page.load(call_url)
        except Exception as e:
            return CallCommandResult(CallCommandStatus.FAILED, full_number, f"Could not load call URL: {e}")

        ready = await wait_for_ready(
            page,
            scripts.DIALER_READY,
            {"path": "/calls", "keywords": ["call", "dial"]},
            timeout=self._ready_timeout,
            poll_interval=self._ready_interval,
            sleep=self._sleep,
        )
        if not ready:
            _log("[call] dialer UI still loading after timeout, leaving request queued")
            return CallCommandResult(CallCommandStatus.QUEUED, full_number, "Call UI still loading")

        outcome = await click_with_retry(
            page,
            scripts.CLICK_CONTROL,
            {"keywords": scripts.CALL_KEYWORDS, "selectors": scripts.CALL_BUTTON_SELECTORS},
            max_attempts=self._click_attempts,
            poll_interval=self._click_interval,
            sleep=self._sleep,
        )
        if outcome.clicked:
            _log(f"[call] call button clicked: {outcome.detail}")
            return CallCommandResult(CallCommandStatus.CALL_BUTTON_CLICKED, full_number, outcome.detail)

        _log(f"[call] dialer opened but call button was not clicked: {outcome.detail}")
        return CallCommandResult(CallCommandStatus.DIALER_OPEN, full_number, outcome.detail)

    async def send_sms(self, number: str, text: str) -> ActionResult:
        routines = self.routines()
        if routines is None:
            return ActionResult(success=False, message="Page unavailable")
        async with self._lock:
            try:
                return await routines.send_sms(number, text)
            except PageUnavailable as e:
                return ActionResult(success=False, message=str(e))

    async def reload(self) -> None:
        page = self._page
        if page is None:
            _log("[controller] reload requested without a page")
            return
        async with self._lock:
            try:
                await page.load(self.base_url)
            except Exception as e:
                _log(f"[controller] reload failed: {e}")

    def set_theme(self, theme: str) -> None:
        if theme not in Theme.names():
            raise UnknownTheme(f"Unknown theme: {theme}. Expected one of {', '.join(Theme.names())}")
        self._theme = theme
        _log(f"[controller] theme -> {theme}")
        if self.on_theme_changed is not None:
            self.on_theme_changed(theme)

    def get_status(self) -> Tuple[int, str]:
        return self.poller.count, self._theme
