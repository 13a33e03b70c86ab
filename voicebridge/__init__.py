"""Local automation bridge for Google Voice running in an embedded browser page."""

__version__ = "0.1.0"
