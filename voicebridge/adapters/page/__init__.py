from voicebridge.adapters.page.playwright_page import PlaywrightPage

__all__ = ["PlaywrightPage"]
