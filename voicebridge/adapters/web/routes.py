"""Control server routes.

Two families share one surface:
- action routes (``/call``, ``/sms``, ``/theme``, ``/reload``, ``/command``)
- read/query routes (``/unread``, ``/messages``, ``/dump-dom``, ...)

Malformed requests answer 4xx ``{"error": ...}``. A well-formed command
whose automation did not succeed still answers 200; the payload's
``status`` carries the outcome.
"""

import sys
from dataclasses import asdict
from typing import Any, Awaitable, Callable, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from pydantic import BaseModel

from voicebridge.automation.routines import DEFAULT_LIMITS, VoicePage
from voicebridge.domain import protocol
from voicebridge.domain.errors import CommandDecodeError, PageUnavailable, UnknownTheme
from voicebridge.domain.models import CallCommandResult, CallCommandStatus
from voicebridge.ports.inbound import CommandHandler

action_router = APIRouter(tags=["Actions"])
query_router = APIRouter(tags=["Queries"])


def _log(msg: str):
    print(msg, file=sys.stderr)


# ── Request / response models ───────────────────────────


class CallRequest(BaseModel):
    number: str


class SMSRequest(BaseModel):
    number: str
    text: str


class ThemeRequest(BaseModel):
    theme: str


class DialpadRequest(BaseModel):
    number: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


class StatusResponse(BaseModel):
    notifications: int
    theme: str
    connected: bool


class CallResponse(BaseModel):
    status: str
    number: str
    message: Optional[str] = None


class CommandResponse(BaseModel):
    status: str
    message: Optional[str] = None


# ── Dependencies ────────────────────────────────────────


def get_handler(request: Request) -> Optional[CommandHandler]:
    return request.app.state.handler


def get_routines(handler: Optional[CommandHandler] = Depends(get_handler)) -> VoicePage:
    routines = handler.routines() if handler is not None else None
    if routines is None:
        raise HTTPException(status_code=503, detail="Page unavailable")
    return routines


async def _query(fn: Callable[[], Awaitable[Any]]) -> Any:
    try:
        return await fn()
    except PageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        _log(f"[bridge] query failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# ── Action routes ───────────────────────────────────────


@action_router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok")


@action_router.get("/status", response_model=StatusResponse)
async def status(handler: Optional[CommandHandler] = Depends(get_handler)):
    notifications, theme = handler.get_status() if handler is not None else (0, "default")
    return StatusResponse(notifications=notifications, theme=theme, connected=True)


@action_router.post("/call", response_model=CallResponse, response_model_exclude_none=True)
async def call(req: CallRequest, handler: Optional[CommandHandler] = Depends(get_handler)):
    if handler is None:
        result = CallCommandResult(CallCommandStatus.FAILED, req.number, "Call handler unavailable")
    else:
        result = await handler.make_call(req.number)
    return CallResponse(**result.to_dict())


@action_router.post("/sms", response_model=CommandResponse, response_model_exclude_none=True)
async def sms(req: SMSRequest, handler: Optional[CommandHandler] = Depends(get_handler)):
    if handler is None:
        return CommandResponse(status="failed", message="SMS handler unavailable")
    result = await handler.send_sms(req.number, req.text)
    if result.success:
        return CommandResponse(status="sent")
    return CommandResponse(status="failed", message=result.message or "SMS automation did not complete")


@action_router.post("/reload", response_model=CommandResponse, response_model_exclude_none=True)
async def reload(handler: Optional[CommandHandler] = Depends(get_handler)):
    if handler is not None:
        await handler.reload()
    return CommandResponse(status="reloaded")


@action_router.post("/theme", response_model=CommandResponse, response_model_exclude_none=True)
async def theme(req: ThemeRequest, handler: Optional[CommandHandler] = Depends(get_handler)):
    if handler is None:
        return CommandResponse(status="failed", message="Theme handler unavailable")
    try:
        handler.set_theme(req.theme)
    except UnknownTheme as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CommandResponse(status="theme_changed")


@action_router.post("/command")
async def command(payload: Any = Body(...), handler: Optional[CommandHandler] = Depends(get_handler)):
    """Dispatch one tagged Command and answer with an encoded Event."""
    try:
        cmd = protocol.decode_command(payload)
    except CommandDecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return protocol.encode(await _dispatch(cmd, handler))


async def _dispatch(cmd, handler: Optional[CommandHandler]):
    if isinstance(cmd, protocol.GetStatus):
        notifications, theme_name = handler.get_status() if handler is not None else (0, "default")
        return protocol.Status(notifications=notifications, theme=theme_name, connected=True)
    if isinstance(cmd, protocol.GetNotifications):
        notifications = handler.get_status()[0] if handler is not None else 0
        return protocol.NotificationCountChanged(count=notifications)
    if handler is None:
        return protocol.Acknowledgment(command=cmd.type, success=False, message="Command handler unavailable")

    if isinstance(cmd, protocol.MakeCall):
        result = await handler.make_call(cmd.number)
        message = result.status.value if not result.message else f"{result.status.value}: {result.message}"
        return protocol.Acknowledgment(
            command=cmd.type, success=result.status is not CallCommandStatus.FAILED, message=message
        )
    if isinstance(cmd, protocol.SendSMS):
        sms_result = await handler.send_sms(cmd.number, cmd.text)
        return protocol.Acknowledgment(command=cmd.type, success=sms_result.success, message=sms_result.message)
    if isinstance(cmd, protocol.SetTheme):
        try:
            handler.set_theme(cmd.theme)
        except UnknownTheme as e:
            raise HTTPException(status_code=400, detail=str(e))
        return protocol.ThemeChanged(theme=cmd.theme)
    if isinstance(cmd, protocol.Reload):
        await handler.reload()
        return protocol.Acknowledgment(command=cmd.type, success=True)
    return protocol.Error(message=f"Unsupported command: {cmd.type}")


# ── Read / query routes ─────────────────────────────────


@query_router.get("/unread")
async def unread(routines: VoicePage = Depends(get_routines)):
    return {"count": await _query(routines.get_unread_count)}


@query_router.get("/messages")
async def messages(limit: int = DEFAULT_LIMITS["messages"], routines: VoicePage = Depends(get_routines)):
    items = await _query(lambda: routines.get_messages(limit))
    return [asdict(m) for m in items]


@query_router.get("/contacts")
async def contacts(limit: int = DEFAULT_LIMITS["contacts"], routines: VoicePage = Depends(get_routines)):
    items = await _query(lambda: routines.get_contacts(limit))
    return [asdict(c) for c in items]


@query_router.get("/calls")
async def calls(limit: int = DEFAULT_LIMITS["calls"], routines: VoicePage = Depends(get_routines)):
    items = await _query(lambda: routines.get_call_history(limit))
    return [asdict(c) for c in items]


@query_router.get("/voicemails")
async def voicemails(limit: int = DEFAULT_LIMITS["voicemails"], routines: VoicePage = Depends(get_routines)):
    items = await _query(lambda: routines.get_voicemails(limit))
    return [asdict(v) for v in items]


@query_router.get("/session")
async def session(routines: VoicePage = Depends(get_routines)):
    logged_in = await _query(routines.is_logged_in)
    user = await _query(routines.get_current_user)
    return {
        "isLoggedIn": logged_in,
        "user": asdict(user),
        "status": "ready" if logged_in else "not_logged_in",
    }


@query_router.get("/dump-dom")
async def dump_dom(routines: VoicePage = Depends(get_routines)):
    return asdict(await _query(routines.dump_dom))


@query_router.get("/search")
async def search(
    q: Optional[str] = None,
    routines: VoicePage = Depends(get_routines),
    handler: Optional[CommandHandler] = Depends(get_handler),
):
    if not q:
        raise HTTPException(status_code=400, detail="Missing query parameter: q")
    result = await _query(lambda: handler.run_exclusive(lambda: routines.search(q)))
    return asdict(result)


@query_router.post("/navigate/messages")
async def navigate_messages(
    routines: VoicePage = Depends(get_routines),
    handler: Optional[CommandHandler] = Depends(get_handler),
):
    ok = await _query(lambda: handler.run_exclusive(routines.navigate_to_messages))
    return {"success": ok}


@query_router.post("/navigate/calls")
async def navigate_calls(
    routines: VoicePage = Depends(get_routines),
    handler: Optional[CommandHandler] = Depends(get_handler),
):
    ok = await _query(lambda: handler.run_exclusive(routines.navigate_to_calls))
    return {"success": ok}


@query_router.post("/dialpad")
async def dialpad(
    req: Optional[DialpadRequest] = None,
    routines: VoicePage = Depends(get_routines),
    handler: Optional[CommandHandler] = Depends(get_handler),
):
    """Open the dialpad, or run the dialpad call flow when a number is given."""
    if req is not None and req.number:
        result = await _query(lambda: handler.run_exclusive(lambda: routines.dial_number(req.number)))
        return asdict(result)
    ok = await _query(lambda: handler.run_exclusive(routines.open_dialpad))
    return {"success": ok}


ENDPOINTS = [
    "GET  /health",
    "GET  /status",
    "POST /call { number }",
    "POST /sms { number, text }",
    "POST /reload",
    "POST /theme { theme }",
    "POST /command { type, ... }",
    "GET  /unread",
    "GET  /messages?limit=10",
    "GET  /contacts?limit=20",
    "GET  /calls?limit=10",
    "GET  /voicemails?limit=10",
    "GET  /session",
    "GET  /search?q=query",
    "GET  /dump-dom",
    "POST /navigate/messages",
    "POST /navigate/calls",
    "POST /dialpad { number? }",
]
