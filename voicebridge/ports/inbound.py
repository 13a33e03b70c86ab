"""Inbound port: what the control server needs from the page-owning side."""

from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Protocol, Tuple, TypeVar, runtime_checkable

from voicebridge.domain.models import ActionResult, CallCommandResult

if TYPE_CHECKING:
    from voicebridge.automation.routines import VoicePage

T = TypeVar("T")


@runtime_checkable
class CommandHandler(Protocol):
    """Handles agent commands.

    The control server is constructed with ``Optional[CommandHandler]``;
    ``None`` means no handler is wired yet and every route treats it as
    unavailable.
    """

    async def make_call(self, number: str) -> CallCommandResult: ...

    async def send_sms(self, number: str, text: str) -> ActionResult: ...

    async def reload(self) -> None: ...

    def set_theme(self, theme: str) -> None: ...

    def get_status(self) -> Tuple[int, str]: ...

    def routines(self) -> Optional["VoicePage"]:
        """Routines bound to the current page, or None when no page is attached."""
        ...

    async def run_exclusive(self, action: Callable[[], Awaitable[T]]) -> T:
        """Await ``action()`` while holding the page-mutation lock."""
        ...
