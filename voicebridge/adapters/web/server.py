"""Loopback control server: FastAPI app plus a start/stop/rebind lifecycle."""

import asyncio
import errno
import socket
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from voicebridge.adapters.web.routes import ENDPOINTS, action_router, query_router
from voicebridge.config import DEFAULT_PORT
from voicebridge.domain.errors import BridgeError, InvalidPort
from voicebridge.ports.inbound import CommandHandler

LOOPBACK = "127.0.0.1"


def _log(msg: str):
    print(msg, file=sys.stderr)


class PortInUse(BridgeError):
    """Raised when the requested control port is already bound"""

    def __init__(self, port: int):
        self.port = port
        super().__init__(f"Port {port} is already in use")


def create_app(handler: Optional[CommandHandler] = None) -> FastAPI:
    app = FastAPI(title="Voice Bridge")
    app.state.handler = handler
    app.include_router(action_router)
    app.include_router(query_router)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if any(err.get("type") == "json_invalid" for err in errors):
            return JSONResponse(status_code=400, content={"error": "Invalid JSON"})
        fields = sorted({".".join(str(p) for p in err.get("loc", ())[1:]) or "body" for err in errors})
        return JSONResponse(status_code=400, content={"error": f"Invalid request: {', '.join(fields)}"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        content = {"error": exc.detail}
        if exc.status_code == 404:
            content = {"error": "Not found", "availableEndpoints": ENDPOINTS}
        return JSONResponse(status_code=exc.status_code, content=content)

    return app


def _validate_port(port) -> int:
    if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
        raise InvalidPort(port)
    return port


def _bind(host: str, port: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        if e.errno == errno.EADDRINUSE:
            raise PortInUse(port) from e
        raise
    sock.set_inheritable(True)
    return sock


class ControlServer:
    """Runs the control app on a loopback port inside the current event loop.

    The port is never auto-incremented: a busy port fails ``start`` so the
    agent side doesn't silently end up talking to something else.
    """

    def __init__(self, handler: Optional[CommandHandler] = None, port: int = DEFAULT_PORT, host: str = LOOPBACK):
        self.handler = handler
        self.port = port
        self.host = host
        self.app = create_app(handler)
        self._server: Optional[uvicorn.Server] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self):
        if self.is_running:
            return
        port = _validate_port(self.port)
        await self._serve(_bind(self.host, port), port)

    async def _serve(self, sock: socket.socket, port: int):
        config = uvicorn.Config(self.app, lifespan="off", log_level="warning", access_log=False)
        server = uvicorn.Server(config)
        self._server = server
        self._task = asyncio.create_task(server.serve(sockets=[sock]))

        while not server.started:
            if self._task.done():
                sock.close()
                self._server, task, self._task = None, self._task, None
                exc = task.exception()
                raise BridgeError(f"Control server failed to start on port {port}: {exc}")
            await asyncio.sleep(0.01)
        _log(f"[server] listening on http://{self.host}:{port}")

    async def stop(self):
        """Safe to call when not running."""
        server, task = self._server, self._task
        self._server, self._task = None, None
        if server is None or task is None:
            return
        server.should_exit = True
        try:
            await task
        except asyncio.CancelledError:
            pass
        _log("[server] stopped")

    async def update_port(self, port):
        """Rebind to ``port``. A rejected port leaves the running server untouched.

        The new socket is bound before the old listener is stopped, so a busy
        port raises ``PortInUse`` while the bridge is still serving.
        """
        port = _validate_port(port)
        if not self.is_running:
            self.port = port
            return
        if port == self.port:
            return
        sock = _bind(self.host, port)
        await self.stop()
        try:
            await self._serve(sock, port)
        except BridgeError:
            _log(f"[server] rebind to {port} failed, restoring port {self.port}")
            await self.start()
            raise
        self.port = port

    async def wait_closed(self):
        task = self._task
        if task is not None:
            await task
