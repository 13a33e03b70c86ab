"""In-page automation: script templates, retry engine, routines."""

from voicebridge.automation.retry import click_with_retry, wait_for_ready
from voicebridge.automation.routines import VoicePage

__all__ = [
    "click_with_retry",
    "wait_for_ready",
    "VoicePage",
]
