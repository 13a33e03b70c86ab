"""Typed errors shared across the bridge."""


class BridgeError(Exception):
    """Base class for bridge errors"""
    pass


class InvalidPort(BridgeError):
    """Raised when the control server is started or rebound on a bad port"""

    def __init__(self, port):
        self.port = port
        super().__init__(f"Invalid agent port: {port}. Expected a value between 1 and 65535.")


class PageUnavailable(BridgeError):
    """Raised when the embedded page was never created or has been torn down"""

    def __init__(self, message: str = "Page unavailable"):
        super().__init__(message)


class CommandDecodeError(BridgeError):
    """Raised when a tagged command/event object is structurally invalid"""
    pass


class UnknownVariant(CommandDecodeError):
    """Raised when a tagged object carries an unrecognized discriminant"""

    def __init__(self, kind: str, value):
        self.kind = kind
        self.value = value
        super().__init__(f"Unknown {kind} type: {value}")


class UnknownTheme(BridgeError):
    """Raised when a theme name is not one of the built-in themes"""
    pass
