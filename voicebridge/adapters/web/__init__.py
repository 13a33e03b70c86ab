from voicebridge.adapters.web.server import ControlServer, PortInUse, create_app

__all__ = ["ControlServer", "PortInUse", "create_app"]
