"""suricatasc CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

from .client import DEFAULT_SOCKET_PATH, ClientError
from .context import DEFAULT_HISTORY_PATH, LOG_LEVEL_ENV, SOCKET_ENV, SessionContext, default_socket_path
from .history import HistoryStore
from .output import emit_error, render_raw
from .parser import ParseError, parse_command
from .repl import SuricataREPL

LOG = logging.getLogger("suricatasc.cli")


def _configure_logging(level: str, verbose: bool) -> None:
    numeric = getattr(logging, level.upper(), logging.WARNING)
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    if verbose:
        numeric = min(numeric, logging.INFO)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="suricatasc", description="Suricata unix socket client")
    parser.add_argument(
        "socket",
        nargs="?",
        default=None,
        help=f"Path to the command socket (default: ${SOCKET_ENV} or {DEFAULT_SOCKET_PATH})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("-c", "--command", metavar="COMMAND", help="Execute command and return JSON")
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, "WARNING"),
        help="Logging level (default WARNING)",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=DEFAULT_HISTORY_PATH,
        help="Path to the interactive history file",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Keep interactive history in memory only",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level, args.verbose)
    ctx = SessionContext(
        socket_path=args.socket or default_socket_path(),
        verbose=args.verbose,
        history_path=None if args.no_history else args.history,
    )
    if args.verbose:
        print(f"Using Suricata command socket: {ctx.socket_path}")
    try:
        if args.command is not None:
            return run_batch_command(ctx, args.command)
        return run_interactive(ctx)
    finally:
        ctx.disconnect()


def run_batch_command(ctx: SessionContext, command_line: str) -> int:
    try:
        request = parse_command(command_line, ctx.registry)
    except ParseError as exc:
        emit_error(exc)
        return 1
    try:
        client = ctx.ensure_client()
        client.send(request)
        response = client.read()
    except ClientError as exc:
        LOG.debug("batch command failed", exc_info=True)
        emit_error(exc)
        return 1
    render_raw(response)
    return 0


def run_interactive(ctx: SessionContext) -> int:
    store = HistoryStore(str(ctx.history_path) if ctx.history_path else None)
    repl = SuricataREPL(ctx, history_store=store)
    try:
        return repl.run()
    except KeyboardInterrupt:
        print()
        return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
