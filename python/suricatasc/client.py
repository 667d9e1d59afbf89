"""
Protocol client for the engine's UNIX command socket.

Responsibilities:
    * Own one stream connection to the command socket.
    * Perform the version handshake before the first command.
    * Encode requests as newline-terminated JSON and decode the replies.
    * Allow exactly one request in flight; ``send`` must be followed by
      ``read`` before the next ``send``.

There is no retry, reconnect, or background reader. A caller that needs a
deadline sets ``ClientConfig.timeout``.
"""

from __future__ import annotations

import errno
import json
import logging
import socket
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from .parser import ParsedRequest

LOGGER = logging.getLogger("suricatasc.client")

DEFAULT_SOCKET_PATH = "/var/run/suricata/suricata-command.socket"
PROTOCOL_VERSION = "0.2"

JsonDict = Dict[str, Any]
Request = Union[ParsedRequest, Mapping[str, Any]]


class ClientError(RuntimeError):
    """Base class for failures below the session driver."""


class ConnectError(ClientError):
    """Raised when the command socket cannot be opened or the handshake fails."""


class SocketNotFoundError(ConnectError):
    """The socket path does not exist or nothing is listening on it."""


class SocketPermissionError(ConnectError):
    """The socket exists but this user may not open it."""


class ClientIOError(ClientError):
    """Raised when the connection breaks during send or read."""


class ProtocolError(ClientError):
    """Raised when a reply does not decode into a response."""


class ClientStateError(ClientError):
    """Raised when send/read are called out of order."""


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    AWAITING_RESPONSE = "awaiting_response"


@dataclass(frozen=True)
class Response:
    status: str
    message: Any
    raw: JsonDict = field(default_factory=dict, compare=False)

    @property
    def ok(self) -> bool:
        return self.status == "OK"

    @classmethod
    def from_payload(cls, payload: Any) -> "Response":
        if not isinstance(payload, dict):
            raise ProtocolError(f"response is not a JSON object: {payload!r}")
        status = payload.get("return", payload.get("status"))
        if not isinstance(status, str):
            raise ProtocolError("response has no status field")
        return cls(status=status, message=payload.get("message"), raw=payload)


@dataclass
class ClientConfig:
    socket_path: str = DEFAULT_SOCKET_PATH
    verbose: bool = False
    protocol_version: Optional[str] = PROTOCOL_VERSION
    terminator: bytes = b"\n"
    recv_size: int = 4096
    max_message_size: int = 16 * 1024 * 1024
    timeout: Optional[float] = None


def encode_message(payload: Request, terminator: bytes = b"\n") -> bytes:
    if isinstance(payload, ParsedRequest):
        payload = payload.to_message()
    try:
        text = json.dumps(payload, separators=(",", ":"), allow_nan=False)
    except ValueError as exc:
        raise ProtocolError(f"request is not valid JSON: {exc}") from exc
    return text.encode("utf-8") + terminator


def decode_message(data: bytes) -> Response:
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProtocolError(f"malformed response: {exc}") from exc
    return Response.from_payload(payload)


@dataclass
class SocketClient:
    """Synchronous request/response client (JSON over a UNIX socket)."""

    config: ClientConfig = field(default_factory=ClientConfig)

    _sock: Optional[socket.socket] = field(init=False, default=None, repr=False)
    _buffer: bytes = field(init=False, default=b"", repr=False)
    _state: ConnectionState = field(init=False, default=ConnectionState.DISCONNECTED)
    server_greeting: Any = field(init=False, default=None)

    @classmethod
    def open(cls, path: str = DEFAULT_SOCKET_PATH, verbose: bool = False, **kwargs: Any) -> "SocketClient":
        client = cls(ClientConfig(socket_path=path, verbose=verbose, **kwargs))
        client.connect()
        return client

    #
    # Connection lifecycle
    #
    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state is not ConnectionState.DISCONNECTED

    def connect(self, path: Optional[str] = None, verbose: Optional[bool] = None) -> None:
        """Open the command socket and negotiate the protocol version."""
        if self._sock is not None:
            if path is not None and path != self.config.socket_path:
                raise ClientStateError(
                    f"already connected to {self.config.socket_path}; close() before connecting to {path}"
                )
            return
        if path is not None:
            self.config.socket_path = path
        if verbose is not None:
            self.config.verbose = verbose
        path = self.config.socket_path
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.config.timeout)
        try:
            sock.connect(path)
        except (FileNotFoundError, ConnectionRefusedError) as exc:
            sock.close()
            raise SocketNotFoundError(f"Unable to connect to socket {path}: {exc}") from exc
        except PermissionError as exc:
            sock.close()
            raise SocketPermissionError(f"Permission denied on socket {path}: {exc}") from exc
        except OSError as exc:
            sock.close()
            if exc.errno == errno.ENOENT:
                raise SocketNotFoundError(f"Unable to connect to socket {path}: {exc}") from exc
            raise ConnectError(f"Unable to connect to socket {path}: {exc}") from exc
        self._sock = sock
        self._buffer = b""
        self._state = ConnectionState.CONNECTED
        LOGGER.debug("connected to %s", path)
        if self.config.protocol_version is not None:
            self._handshake()

    def close(self) -> None:
        sock = self._sock
        self._sock = None
        self._buffer = b""
        self._state = ConnectionState.DISCONNECTED
        if sock is not None:
            try:
                sock.close()
            except OSError as exc:
                LOGGER.debug("socket close failed: %s", exc)

    def __enter__(self) -> "SocketClient":
        self.connect()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    #
    # Request/response cycle
    #
    def send(self, request: Request) -> None:
        """Write one request; the state becomes AWAITING_RESPONSE."""
        if self._state is ConnectionState.AWAITING_RESPONSE:
            raise ClientStateError("a request is already in flight; read() its response first")
        if self._state is ConnectionState.DISCONNECTED or self._sock is None:
            raise ClientStateError("client is not connected")
        data = encode_message(request, self.config.terminator)
        self._echo("SND", data)
        try:
            self._sock.sendall(data)
        except OSError as exc:
            self.close()
            raise ClientIOError(f"send failed: {exc}") from exc
        self._state = ConnectionState.AWAITING_RESPONSE

    def read(self) -> Response:
        """Block until the reply to the outstanding request has arrived."""
        if self._state is not ConnectionState.AWAITING_RESPONSE:
            raise ClientStateError("no request in flight; call send() first")
        data = self._read_frame()
        try:
            response = decode_message(data)
        except ProtocolError:
            self.close()
            raise
        self._state = ConnectionState.CONNECTED
        return response

    def request(self, request: Request) -> Response:
        self.send(request)
        return self.read()

    #
    # Internal helpers
    #
    def _handshake(self) -> None:
        try:
            response = self.request({"version": self.config.protocol_version})
        except ClientError as exc:
            self.close()
            raise ConnectError(f"handshake with {self.config.socket_path} failed: {exc}") from exc
        if not response.ok:
            self.close()
            raise ConnectError(f"Error: {response.message}")
        self.server_greeting = response.message

    def _read_frame(self) -> bytes:
        assert self._sock is not None  # state guard above
        terminator = self.config.terminator
        while terminator not in self._buffer:
            if len(self._buffer) > self.config.max_message_size:
                self.close()
                raise ProtocolError("response exceeds maximum message size")
            try:
                chunk = self._sock.recv(self.config.recv_size)
            except OSError as exc:
                self.close()
                raise ClientIOError(f"read failed: {exc}") from exc
            if not chunk:
                self.close()
                raise ClientIOError("connection closed by engine")
            self._buffer += chunk
        frame, self._buffer = self._buffer.split(terminator, 1)
        self._echo("RCV", frame)
        return frame

    def _echo(self, direction: str, data: bytes) -> None:
        level = logging.INFO if self.config.verbose else logging.DEBUG
        if LOGGER.isEnabledFor(level):
            LOGGER.log(level, "%s: %s", direction, data.decode("utf-8", errors="replace").rstrip())


__all__ = [
    "ClientConfig",
    "ClientError",
    "ClientIOError",
    "ClientStateError",
    "ConnectError",
    "ConnectionState",
    "DEFAULT_SOCKET_PATH",
    "ProtocolError",
    "Response",
    "SocketClient",
    "SocketNotFoundError",
    "SocketPermissionError",
    "decode_message",
    "encode_message",
]
