"""Declared parameters of functions and their merge with `@param` tags."""

import re

from tree_sitter import Node

from vuedoc.entries import Parameter, ReturnValue
from vuedoc.scope_resolver import PARAMETER_WRAPPERS, ScopeResolver, pattern_names
from vuedoc.syntax import compact_text, first_expression, node_text

PATH_SEPARATOR_RE = re.compile(r"[.\[]")


def annotation_text(node: Node | None) -> str | None:
    """Return the text of a `: Type` annotation without its colon."""
    if node is None:
        return None
    text = compact_text(node)
    return text[1:].strip() if text.startswith(":") else text


def declared_param(node: Node, resolver: ScopeResolver) -> list[Parameter]:
    """Describe one declared parameter; destructuring expands to its leaves."""
    kind = node.type
    optional = False
    annotation: str | None = None
    default_node: Node | None = None

    if kind in PARAMETER_WRAPPERS:
        optional = kind == "optional_parameter"
        annotation = annotation_text(node.child_by_field_name("type"))
        default_node = node.child_by_field_name("value")
        pattern = node.child_by_field_name("pattern")
        if pattern is None:
            return []
        node, kind = pattern, pattern.type

    if kind == "assignment_pattern":
        default_node = node.child_by_field_name("right")
        left = node.child_by_field_name("left")
        if left is None:
            return []
        node, kind = left, left.type

    if kind == "identifier":
        type_name: str = annotation or "unknown"
        default_value = None
        if default_node is not None:
            default_value = node_text(default_node)
            if annotation is None:
                resolved = resolver.resolve(default_node)
                if resolved.reducible or resolved.type == "function":
                    type_name = resolved.type
        return [
            Parameter(
                name=node_text(node),
                type=type_name,
                default_value=default_value,
                optional=optional,
            )
        ]
    if kind == "rest_pattern":
        target = first_expression(node)
        return [
            Parameter(
                name=node_text(target),
                type=annotation or "unknown",
                rest=True,
            )
        ]
    if kind in ("object_pattern", "array_pattern"):
        return [Parameter(name=name) for name in pattern_names(node)]
    return []


def declared_params(params: Node | None, resolver: ScopeResolver) -> list[Parameter]:
    """Describe the declared parameters of a function literal."""
    if params is None:
        return []
    if params.type != "formal_parameters":
        # Single unparenthesized arrow parameter
        return declared_param(params, resolver)
    result: list[Parameter] = []
    for child in params.named_children:
        if child.type != "comment":
            result.extend(declared_param(child, resolver))
    return result


def param_owner(name: str) -> str | None:
    """Return the root name of a dotted or bracketed parameter path."""
    match = PATH_SEPARATOR_RE.search(name)
    return name[: match.start()] if match else None


def _merge_one(declared: Parameter, doc: Parameter) -> Parameter:
    return Parameter(
        name=doc.name,
        type=declared.type if doc.type == "unknown" else doc.type,
        description=doc.description,
        default_value=(
            doc.default_value
            if doc.default_value is not None
            else declared.default_value
        ),
        optional=doc.optional or declared.optional,
        rest=doc.rest or declared.rest,
    )


def merge_params(
    declared: list[Parameter], documented: list[Parameter]
) -> list[Parameter]:
    """Merge declared parameters with documented ones.

    Documentation is matched by name first, then by position. Documented
    sub-properties (`employee.name`) follow their owner, and documented
    parameters that match nothing are appended.
    """
    if not documented:
        return list(declared)

    roots = [p for p in documented if param_owner(p.name) is None]
    children: dict[str, list[Parameter]] = {}
    orphans: list[Parameter] = []
    root_names = {p.name for p in roots}
    for param in documented:
        owner = param_owner(param.name)
        if owner is None:
            continue
        if owner in root_names:
            children.setdefault(owner, []).append(param)
        else:
            orphans.append(param)

    declared_names = {p.name for p in declared}
    used: set[int] = set()
    result: list[Parameter] = []
    for position, param in enumerate(declared):
        match = next(
            (i for i, doc in enumerate(roots) if doc.name == param.name),
            None,
        )
        if (
            match is None
            and position < len(roots)
            and position not in used
            and roots[position].name not in declared_names
        ):
            match = position
        if match is None:
            result.append(param)
            continue
        used.add(match)
        doc = roots[match]
        result.append(_merge_one(param, doc))
        result.extend(children.get(doc.name, []))

    for i, doc in enumerate(roots):
        if i not in used:
            result.append(doc)
            result.extend(children.get(doc.name, []))
    result.extend(orphans)
    return result


def format_type(type_name: str | list[str]) -> str:
    """Render a type or a union of types."""
    if isinstance(type_name, list):
        return " | ".join(type_name)
    return type_name


def synthesize_syntax(
    name: str, params: list[Parameter], returns: ReturnValue, prefix: str = ""
) -> str:
    """Build a signature like `name(a: number, b?: string): void`."""
    parts = []
    for param in params:
        if param_owner(param.name) is not None:
            continue
        text = ("..." if param.rest else "") + param.name
        if param.optional and param.default_value is None:
            text += "?"
        text += f": {format_type(param.type)}"
        if param.default_value is not None:
            text += f" = {param.default_value}"
        parts.append(text)
    return f"{prefix}{name}({', '.join(parts)}): {format_type(returns.type)}"
