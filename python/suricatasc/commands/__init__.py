"""Command registry for suricatasc."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .base import ArgSpec, ArgType, CommandSpec, make_args

ArgDecl = Union[ArgSpec, Tuple[str, bool, ArgType]]


class RegistryFrozenError(RuntimeError):
    """Raised when the catalog is modified after start-up."""


class CommandRegistry:
    """Maps command names to their positional argument schema."""

    def __init__(self) -> None:
        self._commands: Dict[str, CommandSpec] = {}
        self._frozen = False

    def register(self, name: str, args: Sequence[ArgDecl] = ()) -> CommandSpec:
        if self._frozen:
            raise RegistryFrozenError(f"registry is frozen; cannot register {name!r}")
        specs: List[ArgSpec] = []
        for arg in args:
            if isinstance(arg, ArgSpec):
                specs.append(arg)
            else:
                specs.extend(make_args([arg]))
        spec = CommandSpec(name=name, args=tuple(specs))
        # Replacing keeps the original catalog position.
        self._commands[name] = spec
        return spec

    def lookup(self, name: str) -> Optional[CommandSpec]:
        return self._commands.get(name)

    def names(self) -> List[str]:
        return list(self._commands)

    def list_commands(self) -> Iterable[CommandSpec]:
        return list(self._commands.values())

    def freeze(self) -> "CommandRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self.list_commands())

    def __len__(self) -> int:
        return len(self._commands)


def _register_catalog(registry: CommandRegistry) -> None:
    String, Number, Boolean = ArgType.STRING, ArgType.NUMBER, ArgType.BOOLEAN

    registry.register("command-list")
    registry.register("help")
    registry.register("iface-list")
    registry.register("iface-stat", [("iface", True, String)])
    registry.register(
        "pcap-file",
        [
            ("filename", True, String),
            ("output-dir", True, String),
            ("tenant", False, Number),
            ("continuous", False, Boolean),
            ("delete-when-done", False, Boolean),
        ],
    )
    registry.register(
        "pcap-file-continuous",
        [
            ("filename", True, String),
            ("output-dir", True, String),
            ("continuous", True, Boolean),
        ],
    )
    registry.register("memcap-list")
    registry.register("memcap-show", [("config", True, String)])
    registry.register("memcap-set", [("config", True, String), ("memcap", True, String)])
    registry.register("uptime")
    registry.register("version")
    registry.register("running-mode")
    registry.register("capture-mode")
    registry.register("reload-rules")
    registry.register("ruleset-reload-nonblocking")
    registry.register("ruleset-stats")


def build_registry() -> CommandRegistry:
    """Return the complete, frozen engine command catalog."""
    registry = CommandRegistry()
    _register_catalog(registry)
    return registry.freeze()


__all__ = [
    "ArgSpec",
    "ArgType",
    "CommandRegistry",
    "CommandSpec",
    "RegistryFrozenError",
    "build_registry",
]
