"""
suricatasc - client for the Suricata unix command socket.

The package is split along the request path:

    commands/    → fixed command catalog and argument schema
    parser.py    → line of text → ParsedRequest
    client.py    → connection, framing, one-request-in-flight cycle
    output.py    → rendering of replies
    repl.py      → interactive prompt (prompt_toolkit)
    cli.py       → argument handling, batch mode

Use ``python -m suricatasc`` or the ``suricatasc`` console script.
"""

from __future__ import annotations

from .cli import main
from .client import (  # noqa: F401
    ClientConfig,
    ClientError,
    ConnectError,
    ConnectionState,
    Response,
    SocketClient,
)
from .commands import CommandRegistry, build_registry  # noqa: F401
from .parser import ParsedRequest, ParseError, parse_command  # noqa: F401

__all__ = [
    "ClientConfig",
    "ClientError",
    "CommandRegistry",
    "ConnectError",
    "ConnectionState",
    "ParseError",
    "ParsedRequest",
    "Response",
    "SocketClient",
    "build_registry",
    "main",
    "parse_command",
]
__version__ = "0.1.0"
