"""Tests for readiness polling and click retries."""

import pytest

from voicebridge.automation.retry import click_with_retry, wait_for_ready

PROBE = "(args) => probe"
CLICK = "(args) => click"


class TestWaitForReady:
    @pytest.mark.asyncio
    async def test_ready_on_third_probe(self, fake_page, clock):
        fake_page.responses[PROBE] = fake_page.sequence(False, None, True)
        ready = await wait_for_ready(fake_page, PROBE, sleep=clock)
        assert ready is True
        assert fake_page.count(PROBE) == 3
        assert clock.elapsed == pytest.approx(0.4 * 3)

    @pytest.mark.asyncio
    async def test_gives_up_after_bounded_attempts(self, fake_page, clock):
        fake_page.responses[PROBE] = False
        ready = await wait_for_ready(fake_page, PROBE, sleep=clock)
        assert ready is False
        assert fake_page.count(PROBE) == 25
        assert clock.elapsed == pytest.approx(10.0)

    @pytest.mark.asyncio
    async def test_sleeps_before_first_probe(self, fake_page, clock):
        order = []

        async def sleep(seconds):
            order.append("sleep")

        fake_page.responses[PROBE] = lambda arg: order.append("probe") or True
        await wait_for_ready(fake_page, PROBE, sleep=sleep)
        assert order == ["sleep", "probe"]

    @pytest.mark.asyncio
    async def test_truthy_non_bool_is_not_ready(self, fake_page, clock):
        fake_page.responses[PROBE] = "true"
        assert await wait_for_ready(fake_page, PROBE, timeout=1.0, poll_interval=0.5, sleep=clock) is False
        assert fake_page.count(PROBE) == 2

    @pytest.mark.asyncio
    async def test_probe_errors_count_as_not_ready(self, fake_page, clock):
        fake_page.responses[PROBE] = fake_page.sequence(RuntimeError("navigated"), True)
        assert await wait_for_ready(fake_page, PROBE, sleep=clock) is True

    @pytest.mark.asyncio
    async def test_interval_floor(self, fake_page, clock):
        fake_page.responses[PROBE] = False
        await wait_for_ready(fake_page, PROBE, timeout=1.0, poll_interval=0.01, sleep=clock)
        assert set(clock.sleeps) == {0.1}
        assert fake_page.count(PROBE) == 10

    @pytest.mark.asyncio
    async def test_passes_bound_argument(self, fake_page, clock):
        seen = []
        fake_page.responses[PROBE] = lambda arg: seen.append(arg) or True
        await wait_for_ready(fake_page, PROBE, {"path": "/calls"}, sleep=clock)
        assert seen == [{"path": "/calls"}]


class TestClickWithRetry:
    @pytest.mark.asyncio
    async def test_clicks_on_first_attempt_without_sleeping(self, fake_page, clock):
        fake_page.responses[CLICK] = "clicked:text:call"
        outcome = await click_with_retry(fake_page, CLICK, sleep=clock)
        assert outcome.clicked is True
        assert outcome.detail == "clicked:text:call"
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_stops_at_first_click(self, fake_page, clock):
        fake_page.responses[CLICK] = fake_page.sequence("not-found:a", "not-found:b", "clicked:selector:x")
        outcome = await click_with_retry(fake_page, CLICK, sleep=clock)
        assert outcome.clicked is True
        assert fake_page.count(CLICK) == 3
        assert clock.elapsed == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_exhaustion_returns_last_diagnostic(self, fake_page, clock):
        fake_page.responses[CLICK] = fake_page.sequence("not-found:one", "not-found:last")
        outcome = await click_with_retry(fake_page, CLICK, sleep=clock)
        assert outcome.clicked is False
        assert outcome.detail == "not-found:last"
        assert fake_page.count(CLICK) == 8
        assert len(clock.sleeps) == 7

    @pytest.mark.asyncio
    async def test_exhaustion_without_any_string(self, fake_page, clock):
        fake_page.responses[CLICK] = None
        outcome = await click_with_retry(fake_page, CLICK, max_attempts=3, sleep=clock)
        assert outcome.clicked is False
        assert outcome.detail == "Call button not found"

    @pytest.mark.asyncio
    async def test_unavailable_page_is_a_failed_attempt(self, fake_page, clock):
        fake_page.is_available = False
        outcome = await click_with_retry(fake_page, CLICK, max_attempts=2, sleep=clock)
        assert outcome.clicked is False
