"""Unread-count observer for the embedded page.

Idle until a page is bound; then probes the unread badges every
``interval`` seconds and reports changes. The poller is the only writer of
the observed count; readers get the int snapshot from ``count``. All of it
runs on the bridge's event loop, so no lock is needed.
"""

import asyncio
import inspect
import sys
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

from voicebridge.automation.routines import VoicePage
from voicebridge.config import DEFAULT_BASE_URL, DEFAULT_POLL_INTERVAL
from voicebridge.ports.outbound import PagePort

OnCountChanged = Callable[[int], Any]
RunExclusive = Callable[[Callable[[], Awaitable[Any]]], Awaitable[Any]]


def _log(msg: str):
    print(msg, file=sys.stderr)


class NotificationPoller:
    """Polls unread badges and self-heals blank pages."""

    def __init__(self, interval: float = DEFAULT_POLL_INTERVAL, base_url: str = DEFAULT_BASE_URL):
        self.interval = interval
        self.base_url = base_url
        self.last_poll_time: Optional[datetime] = None
        self._count = 0
        self._page: Optional[PagePort] = None
        self._routines: Optional[VoicePage] = None
        self._on_change: Optional[OnCountChanged] = None
        self._exclusive: Optional[RunExclusive] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def count(self) -> int:
        return self._count

    @property
    def is_polling(self) -> bool:
        return self._page is not None

    async def start_polling(
        self,
        page: PagePort,
        on_change: Optional[OnCountChanged] = None,
        exclusive: Optional[RunExclusive] = None,
    ):
        """Idle -> Polling: bind the page, probe once now, then on a timer.

        ``exclusive`` wraps the blank-page reload so it queues behind any
        in-flight call or SMS instead of navigating under it.
        """
        self.stop_polling()
        self._page = page
        self._routines = VoicePage(page)
        self._on_change = on_change
        self._exclusive = exclusive
        await self.poll_once()
        self._task = asyncio.create_task(self._run())
        _log(f"[poller] polling every {self.interval}s")

    def stop_polling(self):
        """Polling -> Idle. Safe to call repeatedly."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
        if self._page is not None:
            _log("[poller] stopped")
        self._page = None
        self._routines = None
        self._on_change = None
        self._exclusive = None

    async def _run(self):
        while self._page is not None:
            await asyncio.sleep(self.interval)
            await self.poll_once()

    async def poll_once(self):
        """One timer tick: unread count, then the blank-page check."""
        page, routines = self._page, self._routines
        if page is None or routines is None:
            return

        self.last_poll_time = datetime.now()
        try:
            count = await routines.get_unread_count()
        except Exception as e:
            _log(f"[poller] notification poll error: {e}")
        else:
            if count != self._count:
                self._count = count
                await self._notify(count)

        try:
            blank = await routines.is_blank()
        except Exception as e:
            _log(f"[poller] blank page check failed: {e}")
            return
        if blank:
            _log("[poller] blank page detected, reloading...")
            try:
                await self._reload(page)
            except Exception as e:
                _log(f"[poller] reload failed: {e}")

    async def _reload(self, page: PagePort):
        async def load():
            await page.load(self.base_url)

        if self._exclusive is None:
            await load()
        else:
            await self._exclusive(load)

    async def _notify(self, count: int):
        callback = self._on_change
        if callback is None:
            return
        try:
            result = callback(count)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            _log(f"[poller] count change handler failed: {e}")
