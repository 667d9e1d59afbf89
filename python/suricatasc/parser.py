"""Turn a line of user input into a structured engine request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .commands import CommandRegistry
from .commands.base import ArgConversionError, ArgValue


class ParseError(ValueError):
    """Base class for input that cannot become a request."""


class EmptyCommandError(ParseError):
    def __init__(self) -> None:
        super().__init__("No command provided")


class UnknownCommandError(ParseError):
    def __init__(self, command: str) -> None:
        super().__init__(f"Unknown command {command}")
        self.command = command


class MissingArgumentsError(ParseError):
    def __init__(self, required: int) -> None:
        super().__init__(f"Missing arguments: expected at least {required}")
        self.required = required


class InvalidArgumentError(ParseError):
    def __init__(self, argument: str, token: str, reason: str) -> None:
        super().__init__(f"Bad argument: {reason}")
        self.argument = argument
        self.token = token


@dataclass(frozen=True)
class ParsedRequest:
    command: str
    arguments: Mapping[str, ArgValue] = field(default_factory=dict)

    def to_message(self) -> Dict[str, Any]:
        """Wire form; ``arguments`` is omitted entirely when empty."""
        message: Dict[str, Any] = {"command": self.command}
        if self.arguments:
            message["arguments"] = dict(self.arguments)
        return message


def split_line(line: str) -> List[str]:
    """Split on runs of whitespace; no quoting or escapes."""
    if not line:
        return []
    return line.split()


def parse_command(line: str, registry: CommandRegistry) -> ParsedRequest:
    """Validate *line* against *registry* and build the request.

    Tokens are matched to the command's arguments by position. Tokens beyond
    the last declared argument are ignored. Missing optional arguments are
    left out of the result rather than defaulted.
    """
    tokens = split_line(line)
    if not tokens:
        raise EmptyCommandError()
    command, args = tokens[0], tokens[1:]
    spec = registry.lookup(command)
    if spec is None:
        raise UnknownCommandError(command)

    arguments: Dict[str, ArgValue] = {}
    for index, arg_spec in enumerate(spec.args):
        if index < len(args):
            token = args[index]
            try:
                arguments[arg_spec.name] = arg_spec.type.convert(token)
            except ArgConversionError as exc:
                raise InvalidArgumentError(arg_spec.name, token, str(exc)) from None
        elif arg_spec.required:
            raise MissingArgumentsError(spec.required_count)
    return ParsedRequest(command=command, arguments=arguments)


__all__ = [
    "EmptyCommandError",
    "InvalidArgumentError",
    "MissingArgumentsError",
    "ParseError",
    "ParsedRequest",
    "UnknownCommandError",
    "parse_command",
    "split_line",
]
