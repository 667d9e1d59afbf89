"""Persistent command history helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from prompt_toolkit.history import InMemoryHistory

LOGGER = logging.getLogger("suricatasc.history")


class HistoryStore:
    """Simple file-backed history list with size limits."""

    def __init__(self, path: Optional[str], *, limit: int = 1000) -> None:
        self.limit = max(1, int(limit or 1))
        self.path = Path(path).expanduser() if path else None
        self.entries: List[str] = []
        self._dirty = False
        if self.path:
            self._load()

    def _load(self) -> None:
        if not self.path:
            return
        try:
            data = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.debug("could not read history %s: %s", self.path, exc)
            return
        lines = [line.strip() for line in data.splitlines() if line.strip()]
        self.entries = lines[-self.limit :]

    @staticmethod
    def should_record(line: str) -> bool:
        """Blank lines and lines typed with a leading space stay out of history."""
        return bool(line.strip()) and not line[:1].isspace()

    def append(self, line: str) -> None:
        if not self.should_record(line):
            return
        text = line.strip()
        if self.entries and self.entries[-1] == text:
            return
        self.entries.append(text)
        if len(self.entries) > self.limit:
            self.entries = self.entries[-self.limit :]
        self._dirty = True
        self._persist()

    def _persist(self) -> None:
        if not self._dirty or not self.path:
            return
        try:
            if not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("\n".join(self.entries) + "\n", encoding="utf-8")
        except OSError as exc:
            # History is a convenience; a read-only home must not break the prompt.
            LOGGER.warning("could not write history %s: %s", self.path, exc)
        self._dirty = False

    def snapshot(self) -> List[str]:
        return list(self.entries)


class PromptHistory(InMemoryHistory):
    """In-session prompt history that applies the HistoryStore recording rule."""

    def append_string(self, string: str) -> None:
        if HistoryStore.should_record(string):
            super().append_string(string)

    def store_string(self, string: str) -> None:
        if HistoryStore.should_record(string):
            super().store_string(string)
