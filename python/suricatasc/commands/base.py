"""Argument and command descriptions for the suricatasc registry."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Sequence, Tuple, Union

ArgValue = Union[str, int, float, bool]

_TRUE_TOKENS = ("true", "1")
_FALSE_TOKENS = ("false", "0")


class ArgConversionError(ValueError):
    """Raised when a token does not convert to its declared type."""


def _to_string(token: str) -> ArgValue:
    return token


def _to_boolean(token: str) -> ArgValue:
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    raise ArgConversionError(f"value is not a boolean: {token}")


def _reject_constant(name: str) -> Any:
    raise ValueError(name)


def _to_number(token: str) -> ArgValue:
    # JSON number grammar: no NaN/Infinity, no "1_000" or "0x10".
    try:
        value = json.loads(token, parse_constant=_reject_constant)
    except ValueError:
        raise ArgConversionError(f"not a number: {token}") from None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ArgConversionError(f"not a number: {token}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ArgConversionError(f"not a number: {token}")
    return value


class ArgType(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"

    def convert(self, token: str) -> ArgValue:
        """Convert a raw token according to this type."""
        return _CONVERTERS[self](token)


_CONVERTERS: Dict[ArgType, Callable[[str], ArgValue]] = {
    ArgType.STRING: _to_string,
    ArgType.NUMBER: _to_number,
    ArgType.BOOLEAN: _to_boolean,
}


@dataclass(frozen=True)
class ArgSpec:
    name: str
    required: bool
    type: ArgType = ArgType.STRING

    def describe(self) -> str:
        label = f"<{self.name}:{self.type.value}>"
        return label if self.required else f"[{label}]"


@dataclass(frozen=True)
class CommandSpec:
    """Ordered, positional argument schema for one engine command."""

    name: str
    args: Tuple[ArgSpec, ...] = field(default_factory=tuple)

    @property
    def required_count(self) -> int:
        return sum(1 for arg in self.args if arg.required)

    def arg_at(self, index: int) -> ArgSpec | None:
        if 0 <= index < len(self.args):
            return self.args[index]
        return None

    def format_usage(self) -> str:
        parts = [self.name] + [arg.describe() for arg in self.args]
        return " ".join(parts)


def make_args(specs: Sequence[Tuple[str, bool, ArgType]]) -> Tuple[ArgSpec, ...]:
    """Build ArgSpec tuples from ``(name, required, type)`` triples."""
    return tuple(ArgSpec(name, bool(required), arg_type) for name, required, arg_type in specs)


__all__ = [
    "ArgConversionError",
    "ArgSpec",
    "ArgType",
    "ArgValue",
    "CommandSpec",
    "make_args",
]
