"""Data models for statically resolved values and scope bindings."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from tree_sitter import Node

REDUCIBLE_TYPES = {"number", "string", "boolean", "object", "array"}


@dataclass(frozen=True)
class ResolvedValue:
    """Statically determined value behind an expression."""

    type: str  # number/string/boolean/object/array/function/unknown
    value: Any
    raw: str
    member: bool = False
    raw_object: dict[str, ResolvedValue] | None = None
    items: list[ResolvedValue] | None = None
    node: Node | None = field(default=None, compare=False, repr=False)

    @property
    def reducible(self) -> bool:
        """Whether the value was fully reduced to a literal."""
        return self.type in REDUCIBLE_TYPES

    @property
    def is_undefined(self) -> bool:
        """Whether the value is the `undefined` literal."""
        return self.type == "unknown" and self.raw == "undefined"


@dataclass(frozen=True)
class Binding:
    """A name bound to a resolved value within a scope."""

    key: str
    value: ResolvedValue
    source: str | None = None  # original name when destructuring renames


class Unresolved:
    """Sentinel returned by scope lookups for unknown names."""

    _instance: Unresolved | None = None

    def __new__(cls) -> Unresolved:
        """Return the single sentinel instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        """Unresolved names are falsy."""
        return False

    def __repr__(self) -> str:
        """Represent the sentinel."""
        return "UNRESOLVED"


UNRESOLVED = Unresolved()


def to_json(value: Any) -> str:
    """Serialize a reduced value the way JSON.stringify does."""
    return json.dumps(
        _normalize_numbers(value), separators=(",", ":"), ensure_ascii=False
    )


def _normalize_numbers(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {k: _normalize_numbers(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize_numbers(v) for v in value]
    return value


def literal(kind: str, value: Any, node: Node | None = None) -> ResolvedValue:
    """Build a reduced literal value."""
    if kind == "number" and isinstance(value, float) and value.is_integer():
        value = int(value)
    return ResolvedValue(kind, value, to_json(value), node=node)


def unknown(
    raw: str, *, member: bool = False, node: Node | None = None
) -> ResolvedValue:
    """Build a value that could not be reduced statically."""
    return ResolvedValue("unknown", None, raw, member=member, node=node)


def function_value(raw: str, node: Node | None = None) -> ResolvedValue:
    """Build the value of a function literal."""
    return ResolvedValue("function", None, raw, node=node)


def make_object(
    properties: dict[str, ResolvedValue], node: Node | None = None
) -> ResolvedValue:
    """Build an object value from its resolved properties."""
    value = {k: v.value for k, v in properties.items() if v.reducible}
    return ResolvedValue(
        "object", value, to_json(value), raw_object=dict(properties), node=node
    )


def make_array(items: list[ResolvedValue], node: Node | None = None) -> ResolvedValue:
    """Build an array value from its resolved items."""
    value = [item.value if item.reducible else None for item in items]
    return ResolvedValue("array", value, to_json(value), items=list(items), node=node)


UNDEFINED = unknown("undefined")
