"""Extraction of prop entries from the `props` option."""

import logging

from tree_sitter import Node

from vuedoc.case import to_kebab_case
from vuedoc.doc_comment import DocComment, parse_comment
from vuedoc.entries import FunctionDescriptor, Parameter, PropEntry, ReturnValue
from vuedoc.function_signature import declared_params, merge_params, synthesize_syntax
from vuedoc.option_block import OptionMember, object_members
from vuedoc.param_tags import BUILTIN_TYPES, Warn, parse_type
from vuedoc.scope_resolver import ScopeResolver
from vuedoc.syntax import (
    cast_type,
    code_statements,
    compact_text,
    first_expression,
    function_parts,
    is_function,
    node_text,
    preceding_comment,
    string_value,
    unwrap,
)

logger = logging.getLogger(__name__)

# Type helpers whose single type argument is the documented prop type.
TYPE_WRAPPERS = {"PropType", "PropOptions"}
LITERAL_DEFAULTS = {"object", "array"}


def annotation_type(node: Node) -> str:
    """Render a TypeScript type, unwrapping `PropType<T>` and `PropOptions<T>`."""
    if node.type == "generic_type":
        name = node_text(node.child_by_field_name("name"))
        arguments = node.child_by_field_name("type_arguments")
        if name in TYPE_WRAPPERS and arguments is not None:
            inner = first_expression(arguments)
            if inner is not None:
                return compact_text(inner)
    return compact_text(node)


def constructor_type(node: Node | None) -> str | list[str]:
    """Map a `type` constructor expression to a type name."""
    cast = cast_type(node)
    if cast is not None:
        return annotation_type(cast)
    node = unwrap(node)
    if node is None:
        return "unknown"
    if node.type == "null":
        return "any"
    if node.type in ("identifier", "member_expression"):
        name = node_text(node)
        return BUILTIN_TYPES.get(name, name)
    if node.type == "array":
        types: list[str] = []
        for item in node.named_children:
            if item.type == "comment":
                continue
            item_type = constructor_type(item)
            types.extend(item_type if isinstance(item_type, list) else [item_type])
        return types
    return "unknown"


def single_return_literal(node: Node) -> Node | None:
    """Return the object or array literal a function only returns, if any."""
    _, body = function_parts(node)
    if body is None:
        return None
    if body.type != "statement_block":
        expr = unwrap(body)
    else:
        stmts = code_statements(body)
        if len(stmts) != 1 or stmts[0].type != "return_statement":
            return None
        expr = unwrap(first_expression(stmts[0]))
    if expr is not None and expr.type in LITERAL_DEFAULTS:
        return expr
    return None


def anonymous_source(node: Node) -> str:
    """Return the source of a function expression without its name."""
    name = node.child_by_field_name("name")
    if name is None or node.text is None:
        return node_text(node)
    text = node.text
    before = text[: name.start_byte - node.start_byte].rstrip()
    after = text[name.end_byte - node.start_byte :]
    return (before + after).decode("utf-8", errors="replace")


class PropParser:
    """Builds prop entries, resolving values through the program scope."""

    def __init__(
        self,
        resolver: ScopeResolver,
        model_prop: str = "value",
        warn: Warn | None = None,
    ) -> None:
        """Initialize the parser with the v-model prop of the component."""
        self.resolver = resolver
        self.model_prop = model_prop
        self.warn = warn

    def parse_item(self, node: Node) -> PropEntry | None:
        """Build the prop entry of an array-form item, e.g. `props: ['id']`."""
        if node.type != "string":
            logger.debug("Skipping prop item %s", node_text(node))
            return None
        comment = preceding_comment(node)
        doc = parse_comment(node_text(comment) if comment else None, self.warn)
        return self._entry(string_value(node), doc, "unknown", None, False, None)

    def parse_member(self, member: OptionMember) -> PropEntry:
        """Build the prop entry of an object-form member."""
        doc = parse_comment(member.comment, self.warn)
        value = member.value
        if value.type == "identifier":
            resolved = self.resolver.resolve(value)
            if resolved.type == "object" and resolved.node is not None:
                value = resolved.node

        type_name: str | list[str] = "unknown"
        default: str | None = None
        required = False
        function_node: Node | None = None
        if value.type == "object":
            for option in object_members(value, self.warn):
                if option.key == "type":
                    type_name = constructor_type(option.raw_value)
                elif option.key == "required":
                    resolved = self.resolver.resolve(option.raw_value)
                    required = resolved.type == "boolean" and bool(resolved.value)
                elif option.key == "default":
                    default = self._default(option)
                    if is_function(option.value):
                        function_node = option.value
        else:
            type_name = constructor_type(member.raw_value)

        cast = cast_type(member.raw_value)
        if cast is not None:
            type_name = annotation_type(cast)
        return self._entry(
            member.key, doc, type_name, default, required, function_node
        )

    def _entry(
        self,
        key: str,
        doc: DocComment,
        type_name: str | list[str],
        default: str | None,
        required: bool,
        function_node: Node | None,
    ) -> PropEntry:
        if doc.type:
            type_name = parse_type(doc.type, self.warn)
        if doc.default is not None:
            default = doc.default
        function = None
        if doc.kind == "function":
            function = self._function(key, doc, function_node)
        return PropEntry(
            name=to_kebab_case(key),
            description=doc.description,
            keywords=doc.keywords,
            visibility=doc.visibility,
            category=doc.category,
            version=doc.version,
            type=type_name,
            default=default,
            required=required,
            describe_model=key == self.model_prop or doc.model,
            function=function,
        )

    def _default(self, option: OptionMember) -> str | None:
        node = option.value
        if option.node.type == "method_definition":
            literal = single_return_literal(node)
            return self.resolver.resolve(literal).raw if literal is not None else None
        if is_function(node):
            literal = single_return_literal(node)
            if literal is not None:
                return self.resolver.resolve(literal).raw
            return anonymous_source(node)
        return self.resolver.resolve(option.raw_value).raw

    def _function(
        self, key: str, doc: DocComment, node: Node | None
    ) -> FunctionDescriptor:
        declared: list[Parameter] = []
        if node is not None:
            with self.resolver.child_scope():
                declared = declared_params(function_parts(node)[0], self.resolver)
        params = merge_params(declared, doc.params)
        returns = doc.returns or ReturnValue()
        syntax = doc.syntax or [
            synthesize_syntax(key, params, returns, prefix="function ")
        ]
        return FunctionDescriptor(
            name=key,
            description=doc.description,
            keywords=doc.keywords,
            syntax=syntax,
            params=params,
            returns=returns,
        )
