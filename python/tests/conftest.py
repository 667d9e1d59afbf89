"""
Pytest configuration and fixtures for suricatasc tests.
"""
import json
import os
import shutil
import socket
import sys
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import pytest

PYTHON_SRC = Path(__file__).resolve().parents[1]
if str(PYTHON_SRC) not in sys.path:
    sys.path.append(str(PYTHON_SRC))

Handler = Callable[[Dict[str, Any]], Union[Dict[str, Any], bytes, None]]

ENGINE_COMMANDS = [
    "shutdown",
    "command-list",
    "help",
    "version",
    "uptime",
    "running-mode",
    "capture-mode",
    "iface-stat",
    "iface-list",
    "memcap-set",
    "memcap-show",
    "memcap-list",
]


class FakeEngine:
    """Minimal engine speaking the command socket protocol on a UNIX socket."""

    def __init__(self, path: str, *, accept_version: bool = True, chunked: bool = False) -> None:
        self.path = path
        self.accept_version = accept_version
        self.chunked = chunked
        self.requests: List[Dict[str, Any]] = []
        self.raw_lines: List[bytes] = []
        self.handlers: Dict[str, Handler] = {}
        self._stop = threading.Event()
        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._sock.bind(path)
        self._sock.listen(5)
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except OSError:
                break
            thread = threading.Thread(target=self._handle_client, args=(conn,), daemon=True)
            thread.start()

    def _handle_client(self, conn: socket.socket) -> None:
        buffer = b""
        conn.settimeout(1.0)
        with conn:
            while not self._stop.is_set():
                try:
                    chunk = conn.recv(4096)
                except socket.timeout:
                    continue
                except OSError:
                    break
                if not chunk:
                    break
                buffer += chunk
                while b"\n" in buffer:
                    line, buffer = buffer.split(b"\n", 1)
                    if not line:
                        continue
                    self.raw_lines.append(line)
                    message = json.loads(line.decode("utf-8"))
                    self.requests.append(message)
                    reply = self._reply(message)
                    if reply is None:
                        return
                    if isinstance(reply, dict):
                        reply = json.dumps(reply).encode("utf-8") + b"\n"
                    try:
                        self._write(conn, reply)
                    except OSError:
                        return

    def _write(self, conn: socket.socket, data: bytes) -> None:
        if not self.chunked or len(data) < 2:
            conn.sendall(data)
            return
        middle = len(data) // 2
        conn.sendall(data[:middle])
        self._stop.wait(0.02)
        conn.sendall(data[middle:])

    def _reply(self, message: Dict[str, Any]) -> Union[Dict[str, Any], bytes, None]:
        if "version" in message:
            if self.accept_version:
                return {"return": "OK", "message": "fake engine ready"}
            return {"return": "NOK", "message": "unsupported protocol version"}
        command = message.get("command")
        handler = self.handlers.get(str(command))
        if handler is not None:
            return handler(message)
        if command == "command-list":
            return {"return": "OK", "message": {"count": len(ENGINE_COMMANDS), "commands": list(ENGINE_COMMANDS)}}
        if command == "uptime":
            return {"return": "OK", "message": 1234}
        if command == "iface-stat":
            iface = (message.get("arguments") or {}).get("iface")
            if iface != "eth0":
                return {"return": "NOK", "message": "Interface does not exist"}
            return {"return": "OK", "message": {"pkts": 42, "drop": 0, "invalid-checksums": 0}}
        if command == "garbage":
            return b"{not json\n"
        if command == "hangup":
            return None
        return {"return": "OK", "message": {"echo": message}}

    def commands_seen(self) -> List[str]:
        return [str(entry.get("command")) for entry in self.requests if "command" in entry]

    def stop(self) -> None:
        self._stop.set()
        try:
            dummy = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            dummy.settimeout(0.2)
            dummy.connect(self.path)
            dummy.close()
        except OSError:
            pass
        self._sock.close()
        self._thread.join(timeout=0.5)


@pytest.fixture
def socket_dir():
    # AF_UNIX paths are limited to ~108 bytes; pytest's tmp_path can exceed that.
    path = tempfile.mkdtemp(prefix="sc-")
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def engine_factory(socket_dir):
    engines: List[FakeEngine] = []

    def factory(**kwargs: Any) -> FakeEngine:
        path = os.path.join(socket_dir, f"engine-{len(engines)}.socket")
        engine = FakeEngine(path, **kwargs)
        engines.append(engine)
        return engine

    yield factory
    for engine in engines:
        engine.stop()


@pytest.fixture
def engine(engine_factory) -> FakeEngine:
    return engine_factory()


@pytest.fixture
def missing_socket(socket_dir) -> str:
    return os.path.join(socket_dir, "absent.socket")


class ScriptedPrompt:
    """Stands in for a PromptSession; replays lines then signals end of input."""

    def __init__(self, lines: List[str], *, end: type = EOFError) -> None:
        self._lines = list(lines)
        self._end = end
        self.prompts: List[str] = []

    def prompt(self, message: Optional[str] = None) -> str:
        self.prompts.append(message or "")
        if not self._lines:
            raise self._end()
        return self._lines.pop(0)


@pytest.fixture
def scripted_prompt():
    return ScriptedPrompt
