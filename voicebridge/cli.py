"""``voicebridge`` command line: run the bridge, or talk to a running one."""

import argparse
import asyncio
import json
import sys
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

from voicebridge import __version__
from voicebridge.adapters.client import BridgeClient, BridgeUnavailable
from voicebridge.config import CONFIG, BridgeConfig, Theme
from voicebridge.domain.errors import BridgeError

ClientCall = Callable[[BridgeClient, argparse.Namespace], Awaitable[Any]]

COMMANDS: Dict[str, ClientCall] = {
    "status": lambda c, a: c.status(),
    "unread": lambda c, a: c.unread(),
    "messages": lambda c, a: c.messages(a.limit),
    "calls": lambda c, a: c.calls(a.limit),
    "voicemails": lambda c, a: c.voicemails(a.limit),
    "contacts": lambda c, a: c.contacts(a.limit),
    "search": lambda c, a: c.search(a.query),
    "send": lambda c, a: c.send_sms(a.phone, " ".join(a.message)),
    "call": lambda c, a: c.call(a.phone),
    "theme": lambda c, a: c.set_theme(a.name),
    "reload": lambda c, a: c.reload(),
    "dump-dom": lambda c, a: c.dump_dom(),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="voicebridge", description="Google Voice automation bridge")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--port", type=int, default=None, help=f"Bridge port (default: {CONFIG['port']})")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Open the Voice page and start the control server")
    sub.add_parser("status", help="Unread count, theme and connection state")
    sub.add_parser("unread", help="Unread conversation count")
    for name, default in (("messages", 10), ("calls", 10), ("voicemails", 10), ("contacts", 20)):
        p = sub.add_parser(name, help=f"List recent {name}")
        p.add_argument("limit", nargs="?", type=int, default=default)
    p = sub.add_parser("search", help="Search in the Voice UI")
    p.add_argument("query")
    p = sub.add_parser("send", help="Send an SMS")
    p.add_argument("phone")
    p.add_argument("message", nargs="+")
    p = sub.add_parser("call", help="Place a call")
    p.add_argument("phone")
    p = sub.add_parser("theme", help="Switch theme")
    p.add_argument("name", choices=Theme.names())
    sub.add_parser("reload", help="Reload the Voice page")
    sub.add_parser("dump-dom", help="Dump page structure for selector debugging")
    return parser


async def _run_client(args: argparse.Namespace, port: Optional[int]) -> Any:
    client = BridgeClient(port)
    return await COMMANDS[args.command](client, args)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        from voicebridge.app import serve

        config = BridgeConfig.from_env()
        if args.port is not None:
            config.port = args.port
        try:
            serve(config)
        except BridgeError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    try:
        result = asyncio.run(_run_client(args, args.port))
    except BridgeUnavailable as e:
        print(f"Error: {e}", file=sys.stderr)
        print(e.hint, file=sys.stderr)
        return 1
    except BridgeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(result, indent=2, ensure_ascii=False), file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
