"""prompt_toolkit completer for suricatasc."""

from __future__ import annotations

from typing import Iterable, List

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from .commands import CommandRegistry


def _normalise_tokens(text: str) -> List[str]:
    if not text:
        return []
    tokens = text.split()
    if text[-1].isspace():
        tokens.append("")
    return tokens


class CommandCompleter(Completer):
    """Completes command names and describes the expected argument."""

    def __init__(self, registry: CommandRegistry) -> None:
        self.registry = registry

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        tokens = _normalise_tokens(document.text_before_cursor)
        if len(tokens) <= 1:
            prefix = tokens[0] if tokens else ""
            yield from self._command_completions(prefix)
            return
        spec = self.registry.lookup(tokens[0])
        if spec is None:
            return
        arg = spec.arg_at(len(tokens) - 2)
        if arg is None:
            return
        prefix = tokens[-1]
        for candidate in self._argument_candidates(arg.type.value, prefix):
            yield Completion(candidate, start_position=-len(prefix), display_meta=arg.describe())

    def _command_completions(self, prefix: str) -> Iterable[Completion]:
        for name in sorted(self.registry.names()):
            if name.startswith(prefix):
                spec = self.registry.lookup(name)
                meta = spec.format_usage() if spec is not None else ""
                yield Completion(name, start_position=-len(prefix), display_meta=meta)

    @staticmethod
    def _argument_candidates(type_name: str, prefix: str) -> List[str]:
        if type_name != "boolean":
            return []
        return [value for value in ("true", "false") if value.startswith(prefix)]
