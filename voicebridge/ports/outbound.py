"""Outbound ports: the embedded page as a capability."""

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class PagePort(Protocol):
    """Interface for the embedded page hosting the web app.

    ``execute`` runs a JavaScript function expression in the page context,
    passing ``arg`` as its single structured argument, and returns the
    JSON-compatible result. Every method raises ``PageUnavailable`` when the
    page was never created or has been torn down. Results may be stale or
    ``None`` if the page navigates mid-flight.
    """

    @property
    def is_available(self) -> bool: ...

    async def execute(self, script: str, arg: Optional[Any] = None) -> Any: ...

    async def load(self, url: str) -> None: ...
