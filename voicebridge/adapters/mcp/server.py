"""Voice bridge MCP stdio server: FastMCP entrypoint."""

import builtins
import sys

# === stdout protection ===
# MCP JSON-RPC owns stdout. Route every print to stderr so module logging
# can't corrupt the protocol.
_original_print = builtins.print


def _safe_print(*args, **kwargs):
    kwargs.setdefault("file", sys.stderr)
    _original_print(*args, **kwargs)


builtins.print = _safe_print

from mcp.server.fastmcp import FastMCP  # noqa: E402

mcp = FastMCP(
    "voicebridge",
    instructions=(
        "Google Voice bridge - read messages, calls, voicemails and contacts, "
        "send SMS and place calls through the running desktop app."
    ),
)

# Import tool module to register tools with mcp
from voicebridge.adapters.mcp import tools  # noqa: F401, E402


def main():
    """Run the MCP server via stdio transport."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
