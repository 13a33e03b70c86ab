"""Readiness polling and click retries against the embedded page.

The page is not ours and its timing depends on the network, so fixed delays
are replaced with bounded polling: every loop here gives up after a known
number of attempts and reports that, instead of hanging.
"""

import asyncio
import sys
from typing import Any, Awaitable, Callable, Optional

from voicebridge.domain.models import ClickOutcome
from voicebridge.ports.outbound import PagePort

Sleep = Callable[[float], Awaitable[Any]]

MIN_POLL_INTERVAL = 0.1
DEFAULT_READY_TIMEOUT = 10.0
DEFAULT_READY_INTERVAL = 0.4
DEFAULT_CLICK_ATTEMPTS = 8
DEFAULT_CLICK_INTERVAL = 0.5
NOT_FOUND_DETAIL = "Call button not found"
CLICKED_PREFIX = "clicked:"


def _log(msg: str):
    print(msg, file=sys.stderr)


async def _evaluate(page: PagePort, script: str, arg: Optional[Any]) -> Any:
    """Run one probe; any failure reads as 'no answer' for this attempt."""
    try:
        return await page.execute(script, arg)
    except Exception as e:
        _log(f"[retry] probe evaluation failed: {e}")
        return None


async def wait_for_ready(
    page: PagePort,
    probe: str,
    arg: Optional[Any] = None,
    *,
    timeout: float = DEFAULT_READY_TIMEOUT,
    poll_interval: float = DEFAULT_READY_INTERVAL,
    sleep: Sleep = asyncio.sleep,
) -> bool:
    """Poll a boolean probe until it returns true or the attempts run out.

    Each attempt waits one interval before probing, so a page that is still
    showing its previous document right after a load is not mistaken for
    ready. Returns False on give-up; the caller decides what that means.
    """
    interval = max(MIN_POLL_INTERVAL, poll_interval)
    max_attempts = max(1, int(timeout / interval))

    for attempt in range(1, max_attempts + 1):
        await sleep(interval)
        if await _evaluate(page, probe, arg) is True:
            _log(f"[retry] ready after {attempt} attempt(s)")
            return True

    _log(f"[retry] not ready after {max_attempts} attempt(s)")
    return False


async def click_with_retry(
    page: PagePort,
    script: str,
    arg: Optional[Any] = None,
    *,
    max_attempts: int = DEFAULT_CLICK_ATTEMPTS,
    poll_interval: float = DEFAULT_CLICK_INTERVAL,
    sleep: Sleep = asyncio.sleep,
    not_found_detail: str = NOT_FOUND_DETAIL,
) -> ClickOutcome:
    """Re-run a click probe until it reports ``clicked:...``.

    The last string diagnostic (usually ``not-found:<sample>``) is returned
    on exhaustion so callers can surface it verbatim.
    """
    interval = max(MIN_POLL_INTERVAL, poll_interval)
    attempts = max(1, max_attempts)
    last_detail = not_found_detail

    for attempt in range(1, attempts + 1):
        result = await _evaluate(page, script, arg)
        if isinstance(result, str):
            if result.startswith(CLICKED_PREFIX):
                return ClickOutcome(clicked=True, detail=result)
            last_detail = result
            _log(f"[retry] click attempt {attempt} did not click: {result}")
        if attempt < attempts:
            await sleep(interval)

    return ClickOutcome(clicked=False, detail=last_detail)
