"""Resolution of declarations and expressions against a scope chain.

Values are resolved eagerly, in program order: a binding stores the value its
initializer had at the declaration point, so aliasing chains collapse as they
are declared and forward references stay unknown.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from tree_sitter import Node

from vuedoc.resolved_value import (
    UNDEFINED,
    Binding,
    ResolvedValue,
    function_value,
    literal,
    make_array,
    make_object,
    unknown,
)
from vuedoc.scope import Scope
from vuedoc.syntax import (
    FUNCTION_TYPES,
    TRANSPARENT_TYPES,
    first_expression,
    node_text,
    property_key,
    string_value,
    unwrap,
)

logger = logging.getLogger(__name__)

DECLARATION_TYPES = {"lexical_declaration", "variable_declaration"}
FUNCTION_DECLARATION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
}
PARAMETER_WRAPPERS = {"required_parameter", "optional_parameter"}
UPDATE_TYPES = {"augmented_assignment_expression", "update_expression"}


def parse_number(text: str) -> int | float | None:
    """Parse a JavaScript numeric literal."""
    text = text.replace("_", "").rstrip("n")
    lowered = text.lower()
    try:
        if lowered.startswith("0x"):
            return int(lowered, 16)
        if lowered.startswith("0o"):
            return int(lowered, 8)
        if lowered.startswith("0b"):
            return int(lowered, 2)
        if any(c in lowered for c in ".e") or lowered in ("infinity", "nan"):
            return float(text)
        return int(text)
    except ValueError:
        return None


def pattern_names(node: Node | None) -> list[str]:
    """List the identifiers a binding pattern declares, in source order."""
    if node is None:
        return []
    if node.type in ("identifier", "shorthand_property_identifier_pattern"):
        return [node_text(node)]
    if node.type in PARAMETER_WRAPPERS:
        return pattern_names(node.child_by_field_name("pattern"))
    if node.type in ("assignment_pattern", "object_assignment_pattern"):
        return pattern_names(node.child_by_field_name("left"))
    if node.type == "pair_pattern":
        return pattern_names(node.child_by_field_name("value"))
    if node.type in ("rest_pattern", "object_pattern", "array_pattern"):
        names: list[str] = []
        for child in node.named_children:
            names.extend(pattern_names(child))
        return names
    return []


def js_string(value: ResolvedValue) -> str:
    """Convert a reduced primitive to its string form."""
    if value.type == "string":
        return str(value.value)
    return value.raw


def js_truthy(value: ResolvedValue) -> bool:
    """Evaluate the truthiness of a reduced value."""
    if value.type in ("object", "array"):
        return value.value is not None
    if value.type == "number":
        return value.value != 0 and value.value == value.value
    return bool(value.value)


def combine(
    operator: str,
    left: ResolvedValue,
    right: ResolvedValue,
    node: Node | None = None,
) -> ResolvedValue | None:
    """Reduce `left <operator> right`; None when it is not reducible."""
    if operator == "+":
        primitives = ("string", "number", "boolean")
        if left.type == "number" and right.type == "number":
            return literal("number", left.value + right.value, node)
        if (
            "string" in (left.type, right.type)
            and left.type in primitives
            and right.type in primitives
        ):
            return literal("string", js_string(left) + js_string(right), node)
    elif operator == "-" and left.type == "number" and right.type == "number":
        return literal("number", left.value - right.value, node)
    return None


class ScopeResolver:
    """Builds bindings from declarations and resolves expressions."""

    def __init__(self, scope: Scope | None = None) -> None:
        """Initialize the resolver with an optional root scope."""
        self.scope = scope or Scope()

    @contextmanager
    def child_scope(self) -> Iterator[Scope]:
        """Enter a nested scope for the duration of the block."""
        parent = self.scope
        self.scope = Scope(parent)
        try:
            yield self.scope
        finally:
            self.scope = parent

    # -----------------------------
    # Declarations
    # -----------------------------

    def declare_program(self, root: Node) -> None:
        """Register the top-level declarations of a program."""
        for stmt in root.named_children:
            self.declare_statement(stmt)

    def declare_statement(self, stmt: Node) -> bool:
        """Register the bindings introduced by a statement.

        Returns True when the statement was a declaration or an assignment.
        """
        if stmt.type in DECLARATION_TYPES:
            for declarator in stmt.named_children:
                if declarator.type == "variable_declarator":
                    self.declare(
                        declarator.child_by_field_name("name"),
                        declarator.child_by_field_name("value"),
                    )
            return True
        if stmt.type in FUNCTION_DECLARATION_TYPES:
            name = stmt.child_by_field_name("name")
            if name is not None:
                key = node_text(name)
                self.scope.bind(Binding(key, function_value(node_text(stmt), stmt)))
            return True
        if stmt.type == "export_statement":
            declaration = stmt.child_by_field_name("declaration")
            return declaration is not None and self.declare_statement(declaration)
        if stmt.type == "expression_statement":
            expr = unwrap(first_expression(stmt))
            if expr is not None and expr.type == "assignment_expression":
                self.assign(
                    expr.child_by_field_name("left"), expr.child_by_field_name("right")
                )
                return True
            if expr is not None and expr.type in UPDATE_TYPES:
                self.update(expr)
                return True
        return False

    def declare(self, pattern: Node | None, initializer: Node | None) -> None:
        """Register the bindings of a declaration target."""
        if pattern is None:
            return
        value = self.resolve(initializer) if initializer is not None else UNDEFINED
        self.bind_pattern(pattern, value)

    def declare_params(self, params: Node | None) -> None:
        """Register function parameters as unknown values."""
        if params is None:
            return
        if params.type == "formal_parameters":
            names = [n for p in params.named_children for n in pattern_names(p)]
        else:
            names = pattern_names(params)
        for name in names:
            self.scope.bind(Binding(name, unknown(name)))

    def assign(self, left: Node | None, right: Node | None) -> None:
        """Record a reassignment; later lookups see the new value."""
        if left is None:
            return
        value = self.resolve(right)
        if left.type == "identifier":
            self._rebind(node_text(left), value)
        elif left.type in ("object_pattern", "array_pattern"):
            self.bind_pattern(left, value)

    def update(self, expr: Node) -> None:
        """Record a compound assignment (`+=`, `-=`) or an increment."""
        if expr.type == "update_expression":
            target = expr.child_by_field_name("argument")
            operator = node_text(expr.child_by_field_name("operator"))
            right = literal("number", 1)
        else:
            target = expr.child_by_field_name("left")
            operator = node_text(expr.child_by_field_name("operator"))
            right = self.resolve(expr.child_by_field_name("right"))
        if target is None or target.type != "identifier":
            return
        key = node_text(target)
        value = combine(operator.rstrip("=")[:1], self.lookup(key), right)
        self._rebind(key, value or unknown(key))

    def _rebind(self, key: str, value: ResolvedValue) -> None:
        owner = self.scope.owner(key) or self.scope
        owner.bind(Binding(key, value))

    def bind_pattern(
        self,
        pattern: Node,
        value: ResolvedValue | None,
        source: str | None = None,
    ) -> None:
        """Project a value through a binding pattern and bind its names.

        A `None` value means the property or element does not exist, which
        triggers defaults.
        """
        kind = pattern.type
        if kind in ("identifier", "shorthand_property_identifier_pattern"):
            key = node_text(pattern)
            self.scope.bind(Binding(key, value or UNDEFINED, source))
        elif kind in ("assignment_pattern", "object_assignment_pattern"):
            if value is None or value.is_undefined:
                value = self.resolve(pattern.child_by_field_name("right"))
            left = pattern.child_by_field_name("left")
            if left is not None:
                self.bind_pattern(left, value, source)
        elif kind == "object_pattern":
            self._bind_object_pattern(pattern, value or UNDEFINED)
        elif kind == "array_pattern":
            self._bind_array_pattern(pattern, value or UNDEFINED)
        elif kind == "rest_pattern":
            target = first_expression(pattern)
            if target is not None:
                self.bind_pattern(target, value)
        else:
            logger.debug("Skipping unsupported binding target %s", kind)

    def _bind_object_pattern(self, pattern: Node, value: ResolvedValue) -> None:
        used: list[str] = []
        for child in pattern.named_children:
            if child.type == "shorthand_property_identifier_pattern":
                key = node_text(child)
                used.append(key)
                self.bind_pattern(child, self._property(value, key))
            elif child.type == "object_assignment_pattern":
                key = node_text(child.child_by_field_name("left"))
                used.append(key)
                self.bind_pattern(child, self._property(value, key))
            elif child.type == "pair_pattern":
                key = self._key(child.child_by_field_name("key"))
                target = child.child_by_field_name("value")
                if key is None or target is None:
                    continue
                used.append(key)
                self.bind_pattern(target, self._property(value, key), source=key)
            elif child.type == "rest_pattern":
                target = first_expression(child)
                if target is None:
                    continue
                if value.type == "object" and value.raw_object is not None:
                    remaining = {
                        k: v for k, v in value.raw_object.items() if k not in used
                    }
                    self.bind_pattern(target, make_object(remaining, value.node))
                else:
                    self.bind_pattern(target, unknown(value.raw, member=value.member))

    def _bind_array_pattern(self, pattern: Node, value: ResolvedValue) -> None:
        index = 0
        for child in pattern.children:
            if child.type == ",":
                index += 1
            elif child.type == "rest_pattern":
                target = first_expression(child)
                if target is None:
                    continue
                if value.type == "array" and value.items is not None:
                    self.bind_pattern(target, make_array(value.items[index:]))
                else:
                    self.bind_pattern(target, unknown(value.raw, member=value.member))
            elif child.is_named and child.type != "comment":
                self.bind_pattern(child, self._element(value, index))

    # -----------------------------
    # Resolution
    # -----------------------------

    def lookup(self, name: str) -> ResolvedValue:
        """Resolve a bare identifier through the scope chain."""
        binding = self.scope.lookup(name)
        if isinstance(binding, Binding):
            return binding.value
        return unknown(name)

    def resolve(self, node: Node | None) -> ResolvedValue:
        """Statically resolve an expression node."""
        if node is None:
            return UNDEFINED
        kind = node.type
        if kind in TRANSPARENT_TYPES:
            inner = unwrap(node)
            if inner is None or inner.type in TRANSPARENT_TYPES:
                return unknown(node_text(node), node=node)
            return self.resolve(inner)
        if kind == "number":
            number = parse_number(node_text(node))
            if number is None:
                return unknown(node_text(node), node=node)
            return literal("number", number, node)
        if kind == "string":
            return literal("string", string_value(node), node)
        if kind == "template_string":
            if any(c.type == "template_substitution" for c in node.named_children):
                return unknown(node_text(node), node=node)
            return literal("string", string_value(node), node)
        if kind in ("true", "false"):
            return literal("boolean", kind == "true", node)
        if kind == "null":
            return literal("object", None, node)
        if kind == "undefined":
            return unknown("undefined", node=node)
        if kind in ("identifier", "shorthand_property_identifier"):
            name = node_text(node)
            if name == "undefined":
                return unknown(name, node=node)
            return self.lookup(name)
        if kind == "object":
            return self._resolve_object(node)
        if kind == "array":
            return self._resolve_array(node)
        if kind in ("member_expression", "subscript_expression"):
            return self._resolve_member(node)
        if kind in FUNCTION_TYPES:
            return function_value(node_text(node), node)
        if kind == "unary_expression":
            return self._resolve_unary(node)
        if kind == "binary_expression":
            return self._resolve_binary(node)
        return unknown(node_text(node), node=node)

    def _key(self, node: Node | None) -> str | None:
        if node is not None and node.type == "computed_property_name":
            value = self.resolve(first_expression(node))
            if value.type == "string":
                return str(value.value)
            if value.type == "number":
                return value.raw
            return None
        return property_key(node)

    def _resolve_object(self, node: Node) -> ResolvedValue:
        properties: dict[str, ResolvedValue] = {}
        for child in node.named_children:
            if child.type == "pair":
                key = self._key(child.child_by_field_name("key"))
                if key is not None:
                    properties[key] = self.resolve(child.child_by_field_name("value"))
            elif child.type == "shorthand_property_identifier":
                key = node_text(child)
                properties[key] = self.lookup(key)
            elif child.type == "method_definition":
                key = self._key(child.child_by_field_name("name"))
                if key is not None:
                    properties[key] = function_value(node_text(child), child)
            elif child.type == "spread_element":
                spread = self.resolve(first_expression(child))
                if spread.type == "object" and spread.raw_object is not None:
                    properties.update(spread.raw_object)
        return make_object(properties, node)

    def _resolve_array(self, node: Node) -> ResolvedValue:
        items: list[ResolvedValue] = []
        after_separator = True
        for child in node.children:
            if child.type == ",":
                if after_separator:
                    items.append(UNDEFINED)
                after_separator = True
            elif child.type == "spread_element":
                spread = self.resolve(first_expression(child))
                if spread.type == "array" and spread.items is not None:
                    items.extend(spread.items)
                else:
                    items.append(unknown(node_text(child), node=child))
                after_separator = False
            elif child.is_named and child.type != "comment":
                items.append(self.resolve(child))
                after_separator = False
        return make_array(items, node)

    def _resolve_member(self, node: Node) -> ResolvedValue:
        base = self.resolve(node.child_by_field_name("object"))
        if node.type == "member_expression":
            key: str | int | None = node_text(node.child_by_field_name("property"))
        else:
            index = self.resolve(node.child_by_field_name("index"))
            key = index.value if index.type in ("string", "number") else None
        child = self._project(base, key)
        if child is None:
            return unknown(node_text(node), member=True, node=node)
        return child

    def _resolve_unary(self, node: Node) -> ResolvedValue:
        operator = node_text(node.child_by_field_name("operator"))
        argument = self.resolve(node.child_by_field_name("argument"))
        if operator in ("-", "+") and argument.type == "number":
            sign = -1 if operator == "-" else 1
            return literal("number", sign * argument.value, node)
        if operator == "!" and argument.reducible:
            return literal("boolean", not js_truthy(argument), node)
        return unknown(node_text(node), node=node)

    def _resolve_binary(self, node: Node) -> ResolvedValue:
        operator = node_text(node.child_by_field_name("operator"))
        left = self.resolve(node.child_by_field_name("left"))
        right = self.resolve(node.child_by_field_name("right"))
        value = combine(operator, left, right, node)
        return value or unknown(node_text(node), node=node)

    # -----------------------------
    # Projection
    # -----------------------------

    @staticmethod
    def _project(
        base: ResolvedValue, key: str | int | float | None
    ) -> ResolvedValue | None:
        if key is None:
            return None
        if base.type == "object" and base.raw_object is not None:
            return base.raw_object.get(str(key))
        if base.type == "array" and base.items is not None:
            if key == "length":
                return literal("number", len(base.items))
            try:
                index = int(key)
            except (TypeError, ValueError):
                return None
            if 0 <= index < len(base.items):
                return base.items[index]
        return None

    @staticmethod
    def _property(value: ResolvedValue, key: str) -> ResolvedValue | None:
        if value.type == "object" and value.raw_object is not None:
            return value.raw_object.get(key)
        return unknown(f"{value.raw}.{key}", member=True)

    @staticmethod
    def _element(value: ResolvedValue, index: int) -> ResolvedValue | None:
        if value.type == "array" and value.items is not None:
            return value.items[index] if index < len(value.items) else None
        return unknown(f"{value.raw}[{index}]", member=True)
