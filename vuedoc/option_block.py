"""Normalized shapes of component option values."""

import logging
from dataclasses import dataclass

from tree_sitter import Node

from vuedoc.param_tags import Warn
from vuedoc.scope_resolver import ScopeResolver
from vuedoc.syntax import (
    function_parts,
    is_function,
    node_text,
    preceding_comment,
    property_key,
    unwrap,
)

logger = logging.getLogger(__name__)

OBJECT = "object"
ARRAY = "array"
FUNCTION = "function"
VALUE = "value"


@dataclass(frozen=True)
class OptionMember:
    """One `key: value`, method or shorthand member of an object literal."""

    key: str
    node: Node
    raw_value: Node  # value as written, casts included
    value: Node  # value with grouping and casts stripped
    comment: str | None = None


@dataclass(frozen=True)
class OptionBlock:
    """An option value tagged with the shape it was written in."""

    kind: str
    member: OptionMember
    node: Node
    members: tuple[OptionMember, ...] = ()
    items: tuple[Node, ...] = ()

    @property
    def key(self) -> str:
        """The option name."""
        return self.member.key

    @property
    def body(self) -> Node | None:
        """The body of a function-shaped option."""
        return function_parts(self.node)[1] if self.kind == FUNCTION else None


def object_members(node: Node, warn: Warn | None = None) -> list[OptionMember]:
    """List the members of an object literal.

    A repeated key keeps the position of its first occurrence and the value
    of its last one.
    """
    members: dict[str, OptionMember] = {}
    for child in node.named_children:
        if child.type == "pair":
            key = property_key(child.child_by_field_name("key"))
            raw = child.child_by_field_name("value")
        elif child.type in ("method_definition", "shorthand_property_identifier"):
            name = child.child_by_field_name("name")
            key = property_key(name if name is not None else child)
            raw = child
        else:
            continue
        value = unwrap(raw)
        if key is None or raw is None or value is None:
            logger.debug("Skipping member %s", node_text(child)[:40])
            continue
        if key in members and warn is not None:
            warn(f"Duplicate '{key}' declaration")
        comment = preceding_comment(child)
        members[key] = OptionMember(
            key=key,
            node=child,
            raw_value=raw,
            value=value,
            comment=node_text(comment) if comment is not None else None,
        )
    return list(members.values())


def option_block(
    member: OptionMember, resolver: ScopeResolver, warn: Warn | None = None
) -> OptionBlock:
    """Tag an option member with the shape of its value.

    Identifiers are followed through the scope to the literal they alias.
    """
    node = member.value
    if node.type in ("identifier", "shorthand_property_identifier"):
        resolved = resolver.lookup(node_text(node))
        target = unwrap(resolved.node)
        if target is not None:
            node = target
    if is_function(node):
        return OptionBlock(FUNCTION, member, node)
    if node.type == "object":
        members = tuple(object_members(node, warn))
        return OptionBlock(OBJECT, member, node, members=members)
    if node.type == "array":
        items = tuple(c for c in node.named_children if c.type != "comment")
        return OptionBlock(ARRAY, member, node, items=items)
    return OptionBlock(VALUE, member, node)
