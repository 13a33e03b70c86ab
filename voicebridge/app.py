"""Wiring for ``voicebridge serve``: browser page, controller and control server."""

import asyncio
import signal
import sys
from typing import Optional

from voicebridge.adapters.page import PlaywrightPage
from voicebridge.adapters.web import ControlServer
from voicebridge.config import BridgeConfig
from voicebridge.controller import VoiceController
from voicebridge.notifications import NotificationPoller


def _log(msg: str):
    print(msg, file=sys.stderr)


class VoiceBridgeApp:
    """Owns the page, the controller and the control server for one run."""

    def __init__(self, config: BridgeConfig, page: Optional[PlaywrightPage] = None):
        self.config = config
        self.page = page or PlaywrightPage(
            config.user_data_dir,
            base_url=config.base_url,
            headless=config.headless,
            browser=config.browser,
        )
        self.poller = NotificationPoller(interval=config.poll_interval, base_url=config.base_url)
        self.controller = VoiceController(
            self.poller,
            base_url=config.base_url,
            theme=config.theme,
            on_count_changed=self._on_count_changed,
        )
        self.server = ControlServer(self.controller, port=config.port)

    @staticmethod
    def _on_count_changed(count: int):
        _log(f"[bridge] unread count -> {count}")

    async def start(self):
        # Port problems should fail before a browser window appears.
        await self.server.start()
        try:
            await self.page.start()
        except Exception:
            await self.server.stop()
            raise
        await self.controller.attach_page(self.page)

    async def stop(self):
        self.controller.detach_page()
        await self.server.stop()
        await self.page.close()

    async def run(self):
        await self.start()
        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, stop.set)
            except NotImplementedError:
                pass  # Windows

        waiters = [
            asyncio.create_task(stop.wait()),
            asyncio.create_task(self.page.wait_closed()),
            asyncio.create_task(self.server.wait_closed()),
        ]
        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for w in waiters:
                w.cancel()
            _log("[bridge] shutting down")
            await self.stop()


def serve(config: Optional[BridgeConfig] = None):
    """Run the bridge until interrupted or the browser window is closed."""
    config = config or BridgeConfig.from_env()
    _log(f"[bridge] starting on port {config.port} (theme: {config.theme})")
    asyncio.run(VoiceBridgeApp(config).run())
