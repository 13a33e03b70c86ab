"""Tests for the aiohttp bridge client."""

import socket

import pytest
import pytest_asyncio

from voicebridge.adapters.client import HINT, BridgeClient, BridgeUnavailable
from voicebridge.adapters.web.server import ControlServer
from voicebridge.controller import VoiceController
from voicebridge.domain.errors import BridgeError


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest_asyncio.fixture
async def running():
    server = ControlServer(VoiceController(), port=_free_port())
    await server.start()
    yield server
    await server.stop()


class TestBridgeClient:
    @pytest.mark.asyncio
    async def test_unreachable(self):
        client = BridgeClient(_free_port())
        with pytest.raises(BridgeUnavailable) as exc:
            await client.status()
        assert exc.value.hint == HINT

    @pytest.mark.asyncio
    async def test_status_and_theme(self, running):
        client = BridgeClient(running.port)
        assert (await client.set_theme("solar")) == {"status": "theme_changed"}
        assert (await client.status())["theme"] == "solar"

    @pytest.mark.asyncio
    async def test_http_error_raises(self, running):
        client = BridgeClient(running.port)
        with pytest.raises(BridgeError, match="HTTP 400"):
            await client.set_theme("neon")

    @pytest.mark.asyncio
    async def test_reads_without_page_are_503(self, running):
        client = BridgeClient(running.port)
        with pytest.raises(BridgeError, match="503"):
            await client.messages(3)

    @pytest.mark.asyncio
    async def test_command(self, running):
        client = BridgeClient(running.port)
        assert (await client.command({"type": "getNotifications"})) == {
            "type": "notificationCountChanged", "count": 0,
        }
