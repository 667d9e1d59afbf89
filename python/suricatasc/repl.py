"""Interactive REPL for suricatasc."""

from __future__ import annotations

import logging
from typing import Any, Optional

from prompt_toolkit import PromptSession

from .client import ClientError, Response
from .completion import CommandCompleter
from .context import SessionContext
from .history import HistoryStore, PromptHistory
from .output import emit_error, format_command_list, render_request, render_response
from .parser import ParseError, parse_command

LOGGER = logging.getLogger("suricatasc.repl")

PROMPT = ">>> "


class SessionEnded(Exception):
    """Raised by dispatch when the connection can no longer carry commands."""


class SuricataREPL:
    """prompt_toolkit loop: one line, one request, one rendered reply."""

    def __init__(
        self,
        ctx: SessionContext,
        *,
        history_store: Optional[HistoryStore] = None,
        prompt_session: Optional[Any] = None,
    ) -> None:
        self.ctx = ctx
        self.history_store = history_store
        self._session = prompt_session

    def run(self) -> int:
        try:
            self.ctx.ensure_client()
            self.show_command_list()
        except ClientError as exc:
            emit_error(exc)
            return 1
        session = self._session or self._build_session()
        while True:
            try:
                line = session.prompt(PROMPT)
            except (EOFError, KeyboardInterrupt):
                print()
                return 0
            self._record_history(line)
            try:
                self.dispatch(line)
            except SessionEnded as exc:
                emit_error(exc)
                return 1

    def show_command_list(self) -> None:
        client = self.ctx.ensure_client()
        response = client.request({"command": "command-list"})
        print(f"Command list: {', '.join(format_command_list(response))}")

    def dispatch(self, line: str) -> Optional[Response]:
        """Handle one line; returns the engine reply when one was received."""
        if not line.strip():
            return None
        try:
            request = parse_command(line, self.ctx.registry)
        except ParseError as exc:
            print(exc)
            return None
        render_request(request)
        try:
            response = self.ctx.ensure_client().request(request)
        except ClientError as exc:
            LOGGER.debug("request %s failed", request.command, exc_info=True)
            if not self.ctx.connected:
                raise SessionEnded(f"{exc} (connection lost)") from exc
            print(exc)
            return None
        render_response(response)
        return response

    def _build_session(self) -> PromptSession:
        history = PromptHistory()
        if self.history_store:
            for entry in self.history_store.snapshot():
                history.append_string(entry)
        completer = CommandCompleter(self.ctx.registry)
        return PromptSession(history=history, completer=completer, complete_while_typing=False)

    def _record_history(self, entry: str) -> None:
        if self.history_store:
            self.history_store.append(entry)
