"""HTTP client for a running bridge, used by the CLI and the MCP tools."""

from typing import Any, Dict, Optional

import aiohttp

from voicebridge.config import CONFIG
from voicebridge.domain.errors import BridgeError

HINT = "Make sure the app is running"


class BridgeUnavailable(BridgeError):
    """Raised when the control server can't be reached"""

    def __init__(self, message: str, hint: str = HINT):
        self.hint = hint
        super().__init__(message)


class BridgeClient:
    """Async client over the loopback control server (one method per route)."""

    def __init__(self, port: Optional[int] = None, host: str = "127.0.0.1", timeout: float = 30.0):
        self.port = port if port is not None else CONFIG["port"]
        self.base_url = f"http://{host}:{self.port}"
        self.timeout = timeout

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, params=params, json=body) as resp:
                    data = await resp.json(content_type=None)
                    if resp.status >= 400:
                        message = data.get("error") if isinstance(data, dict) else None
                        raise BridgeError(f"HTTP {resp.status}: {message or data}")
                    return data
        except aiohttp.ClientConnectionError as e:
            raise BridgeUnavailable(f"Cannot reach bridge at {self.base_url}: {e}") from e

    # ── Actions ─────────────────────────────────────────────

    async def health(self) -> dict:
        return await self._request("GET", "/health")

    async def status(self) -> dict:
        return await self._request("GET", "/status")

    async def call(self, number: str) -> dict:
        return await self._request("POST", "/call", body={"number": number})

    async def send_sms(self, number: str, text: str) -> dict:
        return await self._request("POST", "/sms", body={"number": number, "text": text})

    async def reload(self) -> dict:
        return await self._request("POST", "/reload")

    async def set_theme(self, theme: str) -> dict:
        return await self._request("POST", "/theme", body={"theme": theme})

    async def command(self, payload: Dict[str, Any]) -> dict:
        return await self._request("POST", "/command", body=payload)

    # ── Queries ─────────────────────────────────────────────

    async def unread(self) -> dict:
        return await self._request("GET", "/unread")

    async def messages(self, limit: int = 10) -> list:
        return await self._request("GET", "/messages", params={"limit": limit})

    async def contacts(self, limit: int = 20) -> list:
        return await self._request("GET", "/contacts", params={"limit": limit})

    async def calls(self, limit: int = 10) -> list:
        return await self._request("GET", "/calls", params={"limit": limit})

    async def voicemails(self, limit: int = 10) -> list:
        return await self._request("GET", "/voicemails", params={"limit": limit})

    async def session(self) -> dict:
        return await self._request("GET", "/session")

    async def search(self, query: str) -> dict:
        return await self._request("GET", "/search", params={"q": query})

    async def dump_dom(self) -> dict:
        return await self._request("GET", "/dump-dom")

    async def navigate_messages(self) -> dict:
        return await self._request("POST", "/navigate/messages")

    async def navigate_calls(self) -> dict:
        return await self._request("POST", "/navigate/calls")

    async def dialpad(self, number: Optional[str] = None) -> dict:
        body = {"number": number} if number else {}
        return await self._request("POST", "/dialpad", body=body)
