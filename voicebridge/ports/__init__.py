"""Port interfaces (Hexagonal Architecture)."""

from voicebridge.ports.outbound import PagePort
from voicebridge.ports.inbound import CommandHandler

__all__ = [
    "PagePort",
    "CommandHandler",
]
