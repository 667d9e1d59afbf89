"""Session context shared by the batch and interactive drivers."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .client import DEFAULT_SOCKET_PATH, ClientConfig, SocketClient
from .commands import CommandRegistry, build_registry

LOGGER = logging.getLogger("suricatasc.context")

SOCKET_ENV = "SURICATASC_SOCKET"
LOG_LEVEL_ENV = "SURICATASC_LOG"
DEFAULT_HISTORY_PATH = Path.home() / ".suricatasc_history"

ClientFactory = Callable[[ClientConfig], SocketClient]


def default_socket_path() -> str:
    return os.environ.get(SOCKET_ENV) or DEFAULT_SOCKET_PATH


@dataclass
class SessionContext:
    """Holds runtime settings and the lazily opened client."""

    socket_path: str = field(default_factory=default_socket_path)
    verbose: bool = False
    history_path: Optional[Path] = DEFAULT_HISTORY_PATH
    registry: CommandRegistry = field(default_factory=build_registry)
    client_factory: ClientFactory = SocketClient
    _client: Optional[SocketClient] = field(default=None, init=False, repr=False)

    def ensure_client(self) -> SocketClient:
        """Return a connected client, opening one if none is usable."""
        client = self._client
        if client is not None and client.connected:
            return client
        client = self.client_factory(ClientConfig(socket_path=self.socket_path, verbose=self.verbose))
        client.connect()
        self._client = client
        return client

    @property
    def client(self) -> Optional[SocketClient]:
        return self._client

    @property
    def connected(self) -> bool:
        return self._client is not None and self._client.connected

    def disconnect(self) -> None:
        client = self._client
        if client is None:
            return
        client.close()
        self._client = None
        LOGGER.debug("disconnected from %s", self.socket_path)
