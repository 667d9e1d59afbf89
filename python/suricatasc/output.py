"""Output helpers for suricatasc."""

from __future__ import annotations

import json
import sys
from typing import Any, List, Mapping, Optional, TextIO

from .client import Response
from .parser import ParsedRequest


def _compact(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"))


def _pretty(payload: Any) -> str:
    return json.dumps(payload, indent=2)


def render_response(response: Response, stream: Optional[TextIO] = None) -> None:
    """Print an engine reply; the message shape is never interpreted."""
    out = stream or sys.stdout
    if response.ok:
        print("Success:", file=out)
        print(_pretty(response.message), file=out)
    else:
        print(f"Error (status={response.status})", file=out)
        print(_compact(response.message), file=out)


def render_raw(response: Response, stream: Optional[TextIO] = None) -> None:
    """Print the reply exactly as received, as compact JSON."""
    print(_compact(response.raw), file=stream or sys.stdout)


def render_request(request: ParsedRequest, stream: Optional[TextIO] = None) -> None:
    print(_compact(request.to_message()), file=stream or sys.stdout)


def emit_error(message: object, stream: Optional[TextIO] = None) -> None:
    print(f"Error: {message}", file=stream or sys.stderr)


def format_command_list(response: Response) -> List[str]:
    """Extract ``message.commands`` from a ``command-list`` reply."""
    message = response.message
    if not isinstance(message, Mapping):
        return []
    commands = message.get("commands")
    if not isinstance(commands, list):
        return []
    return [str(entry) for entry in commands]


__all__ = [
    "emit_error",
    "format_command_list",
    "render_raw",
    "render_request",
    "render_response",
]
