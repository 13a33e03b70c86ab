"""Tests for the control server routes."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from voicebridge.adapters.web.server import create_app
from voicebridge.automation import scripts
from voicebridge.controller import VoiceController
from voicebridge.notifications import NotificationPoller

BASE = "https://voice.google.com"


@pytest_asyncio.fixture
async def controller(fake_page, clock):
    c = VoiceController(NotificationPoller(base_url=BASE), base_url=BASE, sleep=clock)
    await c.attach_page(fake_page, poll=False)
    return c


@pytest_asyncio.fixture
async def client(controller):
    transport = ASGITransport(app=create_app(controller))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def bare_client():
    transport = ASGITransport(app=create_app(None))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestActionRoutes:
    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_theme_then_status(self, client):
        resp = await client.post("/theme", json={"theme": "dracula"})
        assert resp.json() == {"status": "theme_changed"}
        resp = await client.get("/status")
        assert resp.json() == {"notifications": 0, "theme": "dracula", "connected": True}

    @pytest.mark.asyncio
    async def test_unknown_theme_is_400(self, client):
        resp = await client.post("/theme", json={"theme": "neon"})
        assert resp.status_code == 400
        assert "neon" in resp.json()["error"]

    @pytest.mark.asyncio
    async def test_sms_missing_text_never_touches_page(self, client, fake_page):
        resp = await client.post("/sms", json={"number": "5551234567"})
        assert resp.status_code == 400
        assert "text" in resp.json()["error"]
        assert fake_page.calls == []

    @pytest.mark.asyncio
    async def test_invalid_json(self, client):
        resp = await client.post(
            "/call", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid JSON"}

    @pytest.mark.asyncio
    async def test_sms_failure_is_200_with_status(self, client, fake_page):
        fake_page.responses[scripts.CLICK_CONTROL] = "not-found:nothing"
        resp = await client.post("/sms", json={"number": "5551234567", "text": "hi"})
        assert resp.status_code == 200
        assert resp.json() == {"status": "failed", "message": "Compose button not found"}

    @pytest.mark.asyncio
    async def test_sms_sent(self, client, fake_page):
        fake_page.responses[scripts.CLICK_CONTROL] = "clicked:text:send"
        fake_page.responses[scripts.ANY_PRESENT] = True
        fake_page.responses[scripts.FILL_FIELD] = True
        resp = await client.post("/sms", json={"number": "5551234567", "text": "hi"})
        assert resp.json() == {"status": "sent"}

    @pytest.mark.asyncio
    async def test_call_without_digits(self, client, fake_page):
        resp = await client.post("/call", json={"number": "call me"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "failed"
        assert fake_page.loads == []

    @pytest.mark.asyncio
    async def test_call_clicked(self, client, fake_page):
        fake_page.responses[scripts.DIALER_READY] = True
        fake_page.responses[scripts.CLICK_CONTROL] = "clicked:text:call"
        resp = await client.post("/call", json={"number": "5551234567"})
        assert resp.json() == {
            "status": "call_button_clicked", "number": "15551234567", "message": "clicked:text:call",
        }

    @pytest.mark.asyncio
    async def test_reload(self, client, fake_page):
        resp = await client.post("/reload")
        assert resp.json() == {"status": "reloaded"}
        assert fake_page.loads == [BASE]


class TestNoHandler:
    @pytest.mark.asyncio
    async def test_status_defaults(self, bare_client):
        resp = await bare_client.get("/status")
        assert resp.json() == {"notifications": 0, "theme": "default", "connected": True}

    @pytest.mark.asyncio
    async def test_call_fails(self, bare_client):
        resp = await bare_client.post("/call", json={"number": "5551234567"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "failed"
        assert resp.json()["message"] == "Call handler unavailable"

    @pytest.mark.asyncio
    async def test_theme_fails(self, bare_client):
        resp = await bare_client.post("/theme", json={"theme": "dracula"})
        assert resp.status_code == 200
        assert resp.json() == {"status": "failed", "message": "Theme handler unavailable"}

    @pytest.mark.asyncio
    async def test_reads_are_503(self, bare_client):
        resp = await bare_client.get("/messages")
        assert resp.status_code == 503
        assert resp.json() == {"error": "Page unavailable"}


class TestCommandRoute:
    @pytest.mark.asyncio
    async def test_get_status(self, client):
        resp = await client.post("/command", json={"type": "getStatus"})
        assert resp.json() == {"type": "status", "notifications": 0, "theme": "default", "connected": True}

    @pytest.mark.asyncio
    async def test_set_theme(self, client):
        resp = await client.post("/command", json={"type": "setTheme", "theme": "minty"})
        assert resp.json() == {"type": "themeChanged", "theme": "minty"}

    @pytest.mark.asyncio
    async def test_get_notifications(self, client):
        resp = await client.post("/command", json={"type": "getNotifications"})
        assert resp.json() == {"type": "notificationCountChanged", "count": 0}

    @pytest.mark.asyncio
    async def test_unknown_type(self, client):
        resp = await client.post("/command", json={"type": "selfDestruct"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Unknown command type: selfDestruct"}

    @pytest.mark.asyncio
    async def test_make_call_without_digits_acknowledged_as_failure(self, client):
        resp = await client.post("/command", json={"type": "makeCall", "number": "x"})
        data = resp.json()
        assert data["type"] == "acknowledgment"
        assert data["success"] is False
        assert data["command"] == "makeCall"


class TestQueryRoutes:
    @pytest.mark.asyncio
    async def test_messages_limit(self, client, fake_page):
        fake_page.responses[scripts.SCRAPE_LIST] = [
            {"name": f"C{i}", "isUnread": i == 0} for i in range(5)
        ]
        resp = await client.get("/messages", params={"limit": 2})
        data = resp.json()
        assert len(data) == 2
        assert data[0]["name"] == "C0"
        assert data[0]["is_unread"] is True

    @pytest.mark.asyncio
    async def test_unread(self, client, fake_page):
        fake_page.responses[scripts.UNREAD_COUNT] = 5
        resp = await client.get("/unread")
        assert resp.json() == {"count": 5}

    @pytest.mark.asyncio
    async def test_search_requires_query(self, client):
        resp = await client.get("/search")
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_session(self, client, fake_page):
        fake_page.responses[scripts.ANY_PRESENT] = True
        fake_page.responses[scripts.CURRENT_USER] = {"name": "Me"}
        resp = await client.get("/session")
        data = resp.json()
        assert data["isLoggedIn"] is True
        assert data["status"] == "ready"
        assert data["user"]["name"] == "Me"

    @pytest.mark.asyncio
    async def test_dialpad_without_number(self, client, fake_page):
        fake_page.responses[scripts.CLICK_CONTROL] = "clicked:selector:dialpad"
        resp = await client.post("/dialpad")
        assert resp.json() == {"success": True}

    @pytest.mark.asyncio
    async def test_query_error_is_500(self, client, fake_page):
        def boom(arg):
            raise RuntimeError("evaluation failed")

        fake_page.responses[scripts.DUMP_DOM] = boom
        resp = await client.get("/dump-dom")
        assert resp.status_code == 500
        assert "evaluation failed" in resp.json()["error"]

    @pytest.mark.asyncio
    async def test_unknown_route_lists_endpoints(self, client):
        resp = await client.get("/nope")
        assert resp.status_code == 404
        assert "GET  /health" in resp.json()["availableEndpoints"]
