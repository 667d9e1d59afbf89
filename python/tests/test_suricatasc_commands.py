"""Unit tests for the suricatasc command catalog."""

from __future__ import annotations

import pytest

from suricatasc.commands import CommandRegistry, RegistryFrozenError, build_registry
from suricatasc.commands.base import ArgConversionError, ArgSpec, ArgType

CATALOG_ARITY = {
    "command-list": (0, 0),
    "help": (0, 0),
    "iface-list": (0, 0),
    "iface-stat": (1, 1),
    "pcap-file": (2, 5),
    "pcap-file-continuous": (3, 3),
    "memcap-list": (0, 0),
    "memcap-show": (1, 1),
    "memcap-set": (2, 2),
    "uptime": (0, 0),
    "version": (0, 0),
    "running-mode": (0, 0),
    "capture-mode": (0, 0),
    "reload-rules": (0, 0),
    "ruleset-reload-nonblocking": (0, 0),
    "ruleset-stats": (0, 0),
}


def test_build_registry_registers_full_catalog_in_order():
    registry = build_registry()
    assert registry.names() == list(CATALOG_ARITY)
    assert len(registry) == 16
    assert registry.frozen


@pytest.mark.parametrize("name,arity", sorted(CATALOG_ARITY.items()))
def test_lookup_preserves_required_arity(name, arity):
    spec = build_registry().lookup(name)
    assert spec is not None
    required, total = arity
    assert spec.required_count == required
    assert len(spec.args) == total


def test_pcap_file_argument_schema():
    spec = build_registry().lookup("pcap-file")
    assert spec is not None
    assert [(a.name, a.required, a.type) for a in spec.args] == [
        ("filename", True, ArgType.STRING),
        ("output-dir", True, ArgType.STRING),
        ("tenant", False, ArgType.NUMBER),
        ("continuous", False, ArgType.BOOLEAN),
        ("delete-when-done", False, ArgType.BOOLEAN),
    ]


def test_lookup_unknown_command_returns_none():
    registry = build_registry()
    assert registry.lookup("shutdown-now") is None
    assert "shutdown-now" not in registry
    assert "uptime" in registry


def test_register_replaces_and_keeps_position():
    registry = CommandRegistry()
    registry.register("alpha")
    registry.register("beta", [("name", True, ArgType.STRING)])
    registry.register("alpha", [ArgSpec("count", False, ArgType.NUMBER)])
    assert registry.names() == ["alpha", "beta"]
    spec = registry.lookup("alpha")
    assert spec is not None
    assert spec.args == (ArgSpec("count", False, ArgType.NUMBER),)


def test_frozen_registry_rejects_registration():
    registry = build_registry()
    with pytest.raises(RegistryFrozenError):
        registry.register("shutdown")
    assert registry.lookup("shutdown") is None


def test_format_usage_marks_optional_arguments():
    spec = build_registry().lookup("pcap-file")
    assert spec is not None
    usage = spec.format_usage()
    assert usage.startswith("pcap-file <filename:string> <output-dir:string>")
    assert "[<tenant:number>]" in usage


@pytest.mark.parametrize(
    "token,expected",
    [("10", 10), ("-3", -3), ("1.5", 1.5), ("1e3", 1000.0), ("0", 0)],
)
def test_number_conversion_accepts_numeric_literals(token, expected):
    value = ArgType.NUMBER.convert(token)
    assert value == expected
    assert type(value) is type(expected)


@pytest.mark.parametrize("token", ["abc", "NaN", "Infinity", "1e400", "0x10", "true", "1_000", "\"1\"", "[1]"])
def test_number_conversion_rejects_non_numbers(token):
    with pytest.raises(ArgConversionError):
        ArgType.NUMBER.convert(token)


def test_boolean_conversion_is_strict():
    assert ArgType.BOOLEAN.convert("true") is True
    assert ArgType.BOOLEAN.convert("1") is True
    assert ArgType.BOOLEAN.convert("false") is False
    assert ArgType.BOOLEAN.convert("0") is False
    for token in ("yes", "True", "no", "2", ""):
        with pytest.raises(ArgConversionError):
            ArgType.BOOLEAN.convert(token)


def test_string_conversion_is_verbatim():
    assert ArgType.STRING.convert("\"quoted\"") == "\"quoted\""
