"""MCP tools: each one is a single call against the running bridge."""

import sys
from typing import Any, Awaitable, Callable

from voicebridge.adapters.client import HINT, BridgeClient, BridgeUnavailable
from voicebridge.adapters.mcp.server import mcp


def _log(msg: str):
    print(msg, file=sys.stderr)


def _client() -> BridgeClient:
    return BridgeClient()


async def _call(tool: str, fn: Callable[[BridgeClient], Awaitable[Any]]) -> Any:
    try:
        return await fn(_client())
    except BridgeUnavailable as e:
        return {"error": str(e), "tool": tool, "hint": e.hint}
    except Exception as e:
        _log(f"[mcp] {tool} failed: {e}")
        return {"error": str(e), "tool": tool, "hint": HINT}


@mcp.tool()
async def gv_check_status() -> dict:
    """Check whether the Voice app is running and logged in.

    Returns the bridge status (unread count, theme) together with the
    session info (logged in, current user).
    """
    async def run(client: BridgeClient):
        status = await client.status()
        session = await client.session()
        return {**status, "session": session}

    return await _call("gv_check_status", run)


@mcp.tool()
async def gv_get_unread_count() -> dict:
    """Get the number of unread conversations."""
    return await _call("gv_get_unread_count", lambda c: c.unread())


@mcp.tool()
async def gv_get_messages(limit: int = 10) -> Any:
    """List recent message threads.

    Args:
        limit: Max threads to return (default: 10).
    """
    return await _call("gv_get_messages", lambda c: c.messages(limit))


@mcp.tool()
async def gv_send_sms(phone_number: str, message: str) -> dict:
    """Send a text message.

    Args:
        phone_number: Recipient number, any formatting.
        message: Text to send.
    """
    return await _call("gv_send_sms", lambda c: c.send_sms(phone_number, message))


@mcp.tool()
async def gv_make_call(phone_number: str) -> dict:
    """Place a call. The status field tells how far the automation got.

    Args:
        phone_number: Number to dial, any formatting. 10-digit numbers get a +1.
    """
    return await _call("gv_make_call", lambda c: c.call(phone_number))


@mcp.tool()
async def gv_get_call_history(limit: int = 10) -> Any:
    """List recent calls.

    Args:
        limit: Max entries (default: 10).
    """
    return await _call("gv_get_call_history", lambda c: c.calls(limit))


@mcp.tool()
async def gv_get_voicemails(limit: int = 10) -> Any:
    """List recent voicemails with transcriptions when available.

    Args:
        limit: Max entries (default: 10).
    """
    return await _call("gv_get_voicemails", lambda c: c.voicemails(limit))


@mcp.tool()
async def gv_search(query: str) -> dict:
    """Run a search in the Voice UI."""
    return await _call("gv_search", lambda c: c.search(query))


@mcp.tool()
async def gv_get_contacts(limit: int = 20) -> Any:
    """List contacts.

    Args:
        limit: Max contacts (default: 20).
    """
    return await _call("gv_get_contacts", lambda c: c.contacts(limit))


@mcp.tool()
async def gv_dump_dom() -> dict:
    """Dump page structure (interactive elements, aria labels) for selector debugging."""
    return await _call("gv_dump_dom", lambda c: c.dump_dom())


@mcp.tool()
async def gv_set_theme(theme: str) -> dict:
    """Switch the app theme.

    Args:
        theme: One of default, dracula, solar, minty, cerulean, darkplus.
    """
    return await _call("gv_set_theme", lambda c: c.set_theme(theme))


@mcp.tool()
async def gv_reload() -> dict:
    """Reload the Voice page."""
    return await _call("gv_reload", lambda c: c.reload())
