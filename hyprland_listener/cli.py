#!/usr/bin/env python3
"""
hyprland-events CLI

Command-line interface for watching and decoding Hyprland socket events.
"""

import argparse
import json
import sys
from typing import Callable, List, Optional, TextIO

from .config import ListenerConfig
from .decoder import decode_many
from .errors import DecodeError, ListenerError
from .listener import EventListener
from .logging_config import setup_logging
from .models import Event, EventKind, Payload
from .reassembler import PartialLinePolicy


def format_event(event: Event, as_json: bool = False) -> str:
    """Render one event for terminal output."""
    if as_json:
        return json.dumps(event.to_dict(), ensure_ascii=False)
    return event.to_line()


class HyprlandEventsCLI:
    """CLI for the Hyprland event listener."""

    def __init__(self, stdout: Optional[TextIO] = None, stdin: Optional[TextIO] = None):
        self.stdout = stdout or sys.stdout
        self.stdin = stdin or sys.stdin

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Watch and decode Hyprland socket events",
            prog="hyprland-events"
        )
        parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
        parser.add_argument("--debug", action="store_true", help="Debug logging")

        subparsers = parser.add_subparsers(dest="command", help="Command to execute")

        # Listen command
        listen_parser = subparsers.add_parser("listen", help="Print events as they arrive")
        listen_parser.add_argument(
            "--kind",
            action="append",
            choices=[kind.value for kind in EventKind],
            help="Only print these event kinds (repeatable, default: all)"
        )
        listen_parser.add_argument("--json", action="store_true", help="Output as JSON lines")
        listen_parser.add_argument("--socket", help="Event socket path (overrides instance signature)")
        listen_parser.add_argument(
            "--flush-partial",
            action="store_true",
            help="Deliver an unterminated final line instead of discarding it"
        )

        # Decode command
        decode_parser = subparsers.add_parser("decode", help="Decode event lines (arguments or stdin)")
        decode_parser.add_argument("lines", nargs="*", help="Event lines; read stdin when omitted")

        # Socket path command
        subparsers.add_parser("socket-path", help="Print the resolved event socket path")

        return parser

    def cmd_listen(self, args: argparse.Namespace) -> int:
        """Run the blocking listener, printing each selected event."""
        overrides = {"socket_path": args.socket}
        if args.flush_partial:
            overrides["partial_line_policy"] = PartialLinePolicy.FLUSH
        config = ListenerConfig.from_env(**overrides)

        listener = EventListener(config)
        kinds = [EventKind(value) for value in args.kind] if args.kind else list(EventKind)
        for kind in kinds:
            listener.add_handler(kind, self._printer(kind, args.json))

        listener.start_listener_blocking()
        return 0

    def cmd_decode(self, args: argparse.Namespace) -> int:
        """Decode lines and print one JSON object per event."""
        if args.lines:
            lines = args.lines
        else:
            lines = [line.rstrip("\r\n") for line in self.stdin if line.strip()]

        try:
            for event in decode_many(lines):
                print(format_event(event, as_json=True), file=self.stdout)
        except DecodeError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1
        return 0

    def cmd_socket_path(self, args: argparse.Namespace) -> int:
        config = ListenerConfig.from_env()
        print(config.resolve_socket_path(), file=self.stdout)
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run CLI."""
        parser = self.build_parser()
        args = parser.parse_args(argv)

        setup_logging(verbose=args.verbose, debug=args.debug)

        if not args.command:
            parser.print_help()
            return 1

        # Route to command handler
        cmd_map = {
            "listen": self.cmd_listen,
            "decode": self.cmd_decode,
            "socket-path": self.cmd_socket_path,
        }

        handler = cmd_map[args.command]

        try:
            return handler(args)
        except KeyboardInterrupt:
            print("\nInterrupted", file=sys.stderr)
            return 130
        except ListenerError as e:
            print(f"❌ Error: {e}", file=sys.stderr)
            if e.suggestion:
                print(f"   {e.suggestion}", file=sys.stderr)
            return 1

    def _printer(self, kind: EventKind, as_json: bool) -> Callable[[Payload], None]:
        def print_event(payload: Payload) -> None:
            print(format_event(Event(kind, payload), as_json), file=self.stdout, flush=True)

        return print_event


def main():
    """Main entry point."""
    cli = HyprlandEventsCLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
