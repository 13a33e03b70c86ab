"""Phone number normalization for URL-based calling."""

import re

_NON_DIGITS_RE = re.compile(r"[^0-9]")


def normalize_number(raw: str) -> str:
    """Strip everything but ASCII digits: '(555) 123-4567' -> '5551234567'."""
    return _NON_DIGITS_RE.sub("", raw or "")


def with_country_code(digits: str) -> str:
    """Assume US numbers: prefix 10-digit numbers with '1'."""
    if len(digits) == 11 and digits.startswith("1"):
        return digits
    if len(digits) == 10:
        return "1" + digits
    return digits


def build_call_url(base_url: str, full_number: str) -> str:
    """URL that opens the calls view with a new call to +<number>.

    '%2B' is the URL-encoded '+'.
    """
    return f"{base_url.rstrip('/')}/u/0/calls?a=nc,%2B{full_number}"
