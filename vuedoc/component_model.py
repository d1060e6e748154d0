"""Extraction of the component definition exported by the logic section."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from tree_sitter import Node

from vuedoc.analysis_context import AnalysisContext
from vuedoc.doc_comment import DocComment, parse_comment
from vuedoc.entries import (
    ComputedEntry,
    DataEntry,
    DescriptionEntry,
    KeywordsEntry,
    MethodEntry,
    ModelEntry,
    NameEntry,
    ReturnValue,
)
from vuedoc.event_scanner import SCANNED_OPTIONS, EventScanner
from vuedoc.function_signature import (
    annotation_text,
    declared_params,
    merge_params,
    synthesize_syntax,
)
from vuedoc.option_block import (
    ARRAY,
    FUNCTION,
    OBJECT,
    OptionBlock,
    OptionMember,
    object_members,
    option_block,
)
from vuedoc.param_tags import parse_type
from vuedoc.prop_parser import PropParser
from vuedoc.resolved_value import ResolvedValue, function_value
from vuedoc.scope_resolver import ScopeResolver
from vuedoc.syntax import (
    call_arguments,
    code_statements,
    first_expression,
    function_parts,
    is_function,
    node_text,
    preceding_comment,
    unwrap,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL_PROP = "value"
DEFAULT_MODEL_EVENT = "input"


@dataclass(frozen=True)
class ComponentDefinition:
    """The exported component object and its documentation comment."""

    node: Node
    doc: DocComment
    members: tuple[OptionMember, ...]

    def option(self, key: str) -> OptionMember | None:
        """Return the member of an option, if declared."""
        return next((m for m in self.members if m.key == key), None)


def comment_text(node: Node | None) -> str | None:
    """Return the text of the block comment preceding a statement."""
    while node is not None and node.parent is not None:
        if node.parent.type == "program":
            break
        node = node.parent
    if node is None:
        return None
    comment = preceding_comment(node)
    return node_text(comment) if comment is not None else None


def default_export(root: Node) -> Node | None:
    """Return the `export default` statement of a program."""
    for stmt in root.named_children:
        if stmt.type != "export_statement":
            continue
        if any(child.type == "default" for child in stmt.children):
            return stmt
    return None


def this_dependencies(node: Node) -> list[str]:
    """List the `this.<name>` properties a computed getter reads, in order."""
    receivers = {"this"}
    params, _ = function_parts(node)
    if node.type == "arrow_function" and params is not None:
        # `(vm) => vm.a` receives the component as its first parameter
        first = params if params.type == "identifier" else first_expression(params)
        if first is not None and first.type in ("identifier", "required_parameter"):
            receivers.add(node_text(first).split(":")[0].strip())

    def is_receiver(expr: Node | None) -> bool:
        expr = unwrap(expr)
        return expr is not None and node_text(expr) in receivers and (
            expr.type in ("this", "identifier")
        )

    found: list[str] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "member_expression" and is_receiver(
            current.child_by_field_name("object")
        ):
            found.append(node_text(current.child_by_field_name("property")))
        elif current.type == "variable_declarator" and is_receiver(
            current.child_by_field_name("value")
        ):
            pattern = current.child_by_field_name("name")
            if pattern is not None and pattern.type == "object_pattern":
                found.extend(_pattern_keys(pattern))
        stack.extend(reversed(current.children))
    return list(dict.fromkeys(found))


def _pattern_keys(pattern: Node) -> list[str]:
    keys = []
    for child in pattern.named_children:
        if child.type == "shorthand_property_identifier_pattern":
            keys.append(node_text(child))
        elif child.type == "object_assignment_pattern":
            keys.append(node_text(child.child_by_field_name("left")))
        elif child.type == "pair_pattern":
            keys.append(node_text(child.child_by_field_name("key")))
    return keys


def member_function(member: OptionMember, resolver: ScopeResolver) -> Node | None:
    """Return the function literal a member declares or aliases."""
    node = member.value
    if node.type in ("identifier", "shorthand_property_identifier"):
        node = unwrap(resolver.lookup(node_text(node)).node) or node
    return node if is_function(node) else None


class ComponentExtractor:
    """Walks the exported component object and emits its entries."""

    def __init__(
        self,
        ctx: AnalysisContext,
        resolver: ScopeResolver | None = None,
        filename: str | Path | None = None,
    ) -> None:
        """Initialize the extractor for one run."""
        self.ctx = ctx
        self.resolver = resolver or ScopeResolver()
        self.filename = filename
        self.export_unresolved = False

    # -----------------------------
    # Component lookup
    # -----------------------------

    def find_component(self, root: Node) -> ComponentDefinition | None:
        """Declare the program bindings and locate the exported component."""
        self.resolver.declare_program(root)
        export = default_export(root)
        if export is None:
            logger.debug("No default export found")
            return None
        value = export.child_by_field_name("value")
        obj = self._component_object(value)
        if obj is None:
            return None
        comment = preceding_comment(export)
        text = node_text(comment) if comment is not None else comment_text(obj)
        doc = parse_comment(text, self.ctx.warn)
        members = tuple(object_members(obj, self.ctx.warn))
        return ComponentDefinition(obj, doc, members)

    def _component_object(self, node: Node | None, depth: int = 0) -> Node | None:
        node = unwrap(node)
        if node is None or depth > 2:
            return None
        if node.type == "object":
            return node
        if node.type == "call_expression":
            # Vue.extend({...}), defineComponent({...}), mixins(...).extend({...})
            args = call_arguments(node)
            return self._component_object(args[0], depth + 1) if args else None
        if node.type == "identifier":
            resolved = self.resolver.resolve(node)
            if resolved.node is None:
                self.export_unresolved = True
                self.ctx.warn(f"Unable to resolve the exported '{node_text(node)}'")
                return None
            return self._component_object(resolved.node, depth + 1)
        logger.debug("Unsupported default export %s", node.type)
        return None

    # -----------------------------
    # Entries
    # -----------------------------

    def emit_component(self, component: ComponentDefinition | None) -> None:
        """Emit every entry category in order."""
        if self.export_unresolved:
            return
        if self.ctx.enabled("name"):
            self.emit_name(component)
        if component is None:
            return
        doc = component.doc
        if self.ctx.enabled("description") and doc.description:
            self.ctx.emit(DescriptionEntry(doc.description))
        if self.ctx.enabled("keywords"):
            keywords = doc.component_keywords()
            if keywords:
                self.ctx.emit(KeywordsEntry(keywords))

        model_member = component.option("model")
        model_prop = DEFAULT_MODEL_PROP
        if model_member is not None:
            model = self._model(model_member)
            model_prop = model.prop
            if self.ctx.enabled("model"):
                self.ctx.emit(model)

        if self.ctx.enabled("prop"):
            self.emit_props(component.option("props"), model_prop)
        if self.ctx.enabled("data"):
            self.emit_data(component.option("data"))
        if self.ctx.enabled("computed"):
            self.emit_computed(component.option("computed"))
        if self.ctx.enabled("method"):
            self.emit_methods(component.option("methods"))
        if self.ctx.enabled("event"):
            self.scan_events(component)

    def emit_name(self, component: ComponentDefinition | None) -> None:
        """Emit the explicit, documented or file-derived component name."""
        name: str | None = None
        member = component.option("name") if component is not None else None
        if member is not None:
            resolved = self.resolver.resolve(member.raw_value)
            name = str(resolved.value) if resolved.type == "string" else resolved.raw
        elif component is not None and component.doc.tag_values("name"):
            name = component.doc.tag_values("name")[-1].strip() or None
        if name is None and self.filename:
            name = Path(self.filename).stem
        if name:
            self.ctx.emit(NameEntry(name))

    def _model(self, member: OptionMember) -> ModelEntry:
        doc = parse_comment(member.comment, self.ctx.warn)
        resolved = self.resolver.resolve(member.raw_value)
        fields = resolved.raw_object or {}
        prop = _string(fields.get("prop")) or DEFAULT_MODEL_PROP
        event = _string(fields.get("event")) or DEFAULT_MODEL_EVENT
        return ModelEntry(
            name=prop,
            description=doc.description,
            keywords=doc.keywords,
            visibility=doc.visibility,
            category=doc.category,
            version=doc.version,
            prop=prop,
            event=event,
        )

    def emit_props(self, member: OptionMember | None, model_prop: str) -> None:
        """Emit the props declared in array or object form."""
        if member is None:
            return
        block = option_block(member, self.resolver, self.ctx.warn)
        parser = PropParser(self.resolver, model_prop, self.ctx.warn)
        if block.kind == ARRAY:
            for item in block.items:
                entry = parser.parse_item(item)
                if entry is not None:
                    self.ctx.emit(entry)
        elif block.kind == OBJECT:
            for prop in block.members:
                self.ctx.emit(parser.parse_member(prop))
        else:
            logger.debug("Skipping props declared as %s", block.kind)

    def emit_data(self, member: OptionMember | None) -> None:
        """Emit the data properties of an object or a data function."""
        if member is None:
            return
        block = option_block(member, self.resolver, self.ctx.warn)
        if block.kind == OBJECT:
            self._emit_data_members(block.members)
        elif block.kind == FUNCTION:
            with self.resolver.child_scope():
                params, _ = function_parts(block.node)
                self.resolver.declare_params(params)
                obj = self._returned_object(block)
                if obj is not None:
                    self._emit_data_members(object_members(obj, self.ctx.warn))
        else:
            logger.debug("Skipping data declared as %s", block.kind)

    def _returned_object(self, block: OptionBlock) -> Node | None:
        """Declare the statements of a data function and return its object."""
        body = block.body
        if body is None:
            return None
        if body.type != "statement_block":
            expr = unwrap(body)
            return expr if expr is not None and expr.type == "object" else None
        for stmt in code_statements(body):
            if stmt.type == "return_statement":
                expr = unwrap(first_expression(stmt))
                return expr if expr is not None and expr.type == "object" else None
            self.resolver.declare_statement(stmt)
        return None

    def _emit_data_members(self, members: Iterable[OptionMember]) -> None:
        for member in members:
            doc = parse_comment(member.comment, self.ctx.warn)
            value = self._member_value(member)
            self.ctx.emit(
                DataEntry(
                    name=member.key,
                    description=doc.description,
                    keywords=doc.keywords,
                    visibility=doc.visibility,
                    category=doc.category,
                    version=doc.version,
                    type=doc.type or value.type,
                    initial_value=value.raw,
                )
            )

    def _member_value(self, member: OptionMember) -> ResolvedValue:
        if member.node.type == "method_definition":
            return function_value(node_text(member.node), member.node)
        if member.node.type == "shorthand_property_identifier":
            return self.resolver.lookup(member.key)
        return self.resolver.resolve(member.raw_value)

    def emit_computed(self, member: OptionMember | None) -> None:
        """Emit computed properties declared as getters or `{ get }` objects."""
        if member is None:
            return
        block = option_block(member, self.resolver, self.ctx.warn)
        if block.kind != OBJECT:
            logger.debug("Skipping computed declared as %s", block.kind)
            return
        for prop in block.members:
            getter = member_function(prop, self.resolver)
            if getter is None and prop.value.type == "object":
                descriptor = object_members(prop.value, self.ctx.warn)
                get = next((m for m in descriptor if m.key == "get"), None)
                getter = member_function(get, self.resolver) if get else None
            elif getter is None:
                logger.debug("Skipping computed %s", prop.key)
                continue

            doc = parse_comment(prop.comment, self.ctx.warn)
            type_name: str | list[str] = "unknown"
            if doc.type:
                type_name = parse_type(doc.type, self.ctx.warn)
            elif getter is not None:
                return_type = getter.child_by_field_name("return_type")
                type_name = annotation_text(return_type) or "unknown"
            self.ctx.emit(
                ComputedEntry(
                    name=prop.key,
                    description=doc.description,
                    keywords=doc.keywords,
                    visibility=doc.visibility,
                    category=doc.category,
                    version=doc.version,
                    type=type_name,
                    dependencies=this_dependencies(getter) if getter else [],
                )
            )

    def emit_methods(self, member: OptionMember | None) -> None:
        """Emit one method entry per function of the `methods` option."""
        if member is None:
            return
        block = option_block(member, self.resolver, self.ctx.warn)
        if block.kind != OBJECT:
            logger.debug("Skipping methods declared as %s", block.kind)
            return
        for method in block.members:
            function = member_function(method, self.resolver)
            if function is None:
                logger.debug("Skipping non-function method %s", method.key)
                continue
            self.ctx.emit(self._method(method, function))

    def _method(self, member: OptionMember, function: Node) -> MethodEntry:
        doc = parse_comment(member.comment, self.ctx.warn)
        params_node, _ = function_parts(function)
        with self.resolver.child_scope():
            declared = declared_params(params_node, self.resolver)
        params = merge_params(declared, doc.params)

        returns = doc.returns
        if returns is None:
            annotation = annotation_text(function.child_by_field_name("return_type"))
            returns = ReturnValue(annotation or "void")
        syntax = doc.syntax or [synthesize_syntax(member.key, params, returns)]
        return MethodEntry(
            name=member.key,
            description=doc.description,
            keywords=doc.keywords,
            visibility=doc.visibility,
            category=doc.category,
            version=doc.version,
            params=params,
            returns=returns,
            syntax=syntax,
        )

    def scan_events(self, component: ComponentDefinition) -> None:
        """Scan methods, lifecycle hooks and render for emission calls."""
        scanner = EventScanner(self.ctx, self.resolver)
        for member in component.members:
            if member.key == "methods":
                block = option_block(member, self.resolver)
                for method in block.members:
                    function = member_function(method, self.resolver)
                    if function is not None:
                        scanner.scan_function(function)
            elif member.key in SCANNED_OPTIONS:
                function = member_function(member, self.resolver)
                if function is not None:
                    scanner.scan_function(function)


def _string(value: ResolvedValue | None) -> str | None:
    if value is None:
        return None
    return str(value.value) if value.type == "string" else None
