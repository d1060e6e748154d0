"""Discovery of `$emit` call sites inside function bodies."""

import logging

from tree_sitter import Node

from vuedoc.analysis_context import AnalysisContext
from vuedoc.doc_comment import parse_comment
from vuedoc.entries import EventEntry, Parameter
from vuedoc.resolved_value import Binding, unknown
from vuedoc.scope_resolver import ScopeResolver, pattern_names
from vuedoc.syntax import (
    call_arguments,
    function_parts,
    is_emit_call,
    is_function,
    node_text,
    preceding_comment,
    unwrap,
)

logger = logging.getLogger(__name__)

LIFECYCLE_HOOKS = (
    "beforeCreate",
    "created",
    "beforeMount",
    "mounted",
    "beforeUpdate",
    "updated",
    "activated",
    "deactivated",
    "beforeDestroy",
    "destroyed",
    "beforeUnmount",
    "unmounted",
    "errorCaptured",
    "serverPrefetch",
)
NAVIGATION_GUARDS = ("beforeRouteEnter", "beforeRouteUpdate", "beforeRouteLeave")
SCANNED_OPTIONS = frozenset((*LIFECYCLE_HOOKS, *NAVIGATION_GUARDS, "render"))

LOOP_TYPES = {"for_statement", "for_in_statement", "while_statement", "do_statement"}
# Loop header fields, scanned before the body.
LOOP_HEADERS = ("initializer", "condition", "increment", "right")


class EventScanner:
    """Scans function bodies for emission calls and emits event entries."""

    def __init__(self, ctx: AnalysisContext, resolver: ScopeResolver) -> None:
        """Initialize the scanner with the run context and the program scope."""
        self.ctx = ctx
        self.resolver = resolver

    def scan_function(self, node: Node, comment: str | None = None) -> None:
        """Scan a function literal, its parameters bound in a nested scope."""
        params, body = function_parts(node)
        with self.resolver.child_scope():
            self.resolver.declare_params(params)
            if body is None:
                return
            if body.type == "statement_block":
                self.scan_statements(body.named_children)
            else:
                self.scan_expression(body, comment)

    def scan_statements(self, statements: list[Node]) -> None:
        """Scan a statement list in program order."""
        for stmt in statements:
            if stmt.type != "comment":
                self.scan_statement(stmt)

    def scan_statement(self, stmt: Node, comment: str | None = None) -> None:
        """Scan one statement, declaring its bindings along the way."""
        doc = preceding_comment(stmt)
        if doc is not None:
            comment = node_text(doc)
        kind = stmt.type

        if kind == "expression_statement":
            for child in stmt.named_children:
                if child.type != "comment":
                    self.scan_expression(child, comment)
            self.resolver.declare_statement(stmt)
        elif kind in ("lexical_declaration", "variable_declaration"):
            for declarator in stmt.named_children:
                if declarator.type == "variable_declarator":
                    value = declarator.child_by_field_name("value")
                    if value is not None:
                        self.scan_expression(value, comment)
            self.resolver.declare_statement(stmt)
        elif kind == "statement_block":
            with self.resolver.child_scope():
                self.scan_statements(stmt.named_children)
        elif kind == "if_statement":
            self._scan_field(stmt, "condition", comment)
            self._scan_body(stmt.child_by_field_name("consequence"), comment)
            alternative = stmt.child_by_field_name("alternative")
            if alternative is not None:
                for child in alternative.named_children:
                    if child.type != "comment":
                        self._scan_body(child, comment)
        elif kind in LOOP_TYPES:
            self._scan_loop(stmt, comment)
        elif kind == "switch_statement":
            self._scan_field(stmt, "value", comment)
            body = stmt.child_by_field_name("body")
            for case in body.named_children if body is not None else []:
                value = case.child_by_field_name("value")
                with self.resolver.child_scope():
                    self.scan_statements(
                        [c for c in case.named_children if c != value]
                    )
        elif kind == "try_statement":
            self._scan_body(stmt.child_by_field_name("body"), comment)
            handler = stmt.child_by_field_name("handler")
            if handler is not None:
                with self.resolver.child_scope():
                    self.resolver.declare_params(
                        handler.child_by_field_name("parameter")
                    )
                    self._scan_body(handler.child_by_field_name("body"), comment)
            finalizer = stmt.child_by_field_name("finalizer")
            if finalizer is not None:
                self._scan_body(finalizer.child_by_field_name("body"), comment)
        elif kind in ("return_statement", "throw_statement"):
            for child in stmt.named_children:
                if child.type != "comment":
                    self.scan_expression(child, comment)
        elif kind == "labeled_statement":
            self._scan_body(stmt.child_by_field_name("body"), comment)
        elif kind in ("function_declaration", "generator_function_declaration"):
            self.resolver.declare_statement(stmt)
            self.scan_function(stmt, comment)
        else:
            logger.debug("Skipping %s statement", kind)

    def _scan_body(self, node: Node | None, comment: str | None) -> None:
        if node is None:
            return
        if node.type == "statement_block":
            self.scan_statement(node)
        elif node.type.endswith("statement") or node.type.endswith("declaration"):
            with self.resolver.child_scope():
                self.scan_statement(node, comment)
        else:
            self.scan_expression(node, comment)

    def _scan_field(self, node: Node, name: str, comment: str | None) -> None:
        child = node.child_by_field_name(name)
        if child is not None:
            self.scan_expression(child, comment)

    def _scan_loop(self, stmt: Node, comment: str | None) -> None:
        with self.resolver.child_scope():
            if stmt.type == "for_in_statement":
                for name in pattern_names(stmt.child_by_field_name("left")):
                    self.resolver.scope.bind(Binding(name, unknown(name)))
            body = stmt.child_by_field_name("body")
            if stmt.type == "do_statement":
                self._scan_body(body, comment)
            for field_name in LOOP_HEADERS:
                header = stmt.child_by_field_name(field_name)
                if header is None:
                    continue
                if header.type.endswith(("statement", "declaration")):
                    self.scan_statement(header, comment)
                else:
                    self.scan_expression(header, comment)
            if stmt.type != "do_statement":
                self._scan_body(body, comment)

    def scan_expression(self, node: Node, comment: str | None = None) -> None:
        """Scan an expression tree for emission calls, callbacks included."""
        if is_emit_call(node):
            self.emit_event(node, comment)
        elif is_function(node):
            self.scan_function(node, comment)
        else:
            for child in node.named_children:
                if child.type != "comment":
                    self.scan_expression(child, comment)

    def emit_event(self, call: Node, comment: str | None) -> None:
        """Build and emit the event entry of an emission call."""
        args = call_arguments(call)
        doc = parse_comment(comment, self.ctx.warn)
        if doc.event:
            name = doc.event
        else:
            name = self._event_name(args[0])
        if doc.params:
            arguments = doc.params
        else:
            arguments = [
                Parameter(name=node_text(arg), type=self.resolver.resolve(arg).type)
                for arg in args[1:]
            ]

        self.ctx.emit(
            EventEntry(
                name=name,
                description=doc.description,
                keywords=doc.keywords,
                visibility=doc.visibility,
                category=doc.category,
                version=doc.version,
                arguments=arguments,
            )
        )

    def _event_name(self, node: Node) -> str:
        resolved = self.resolver.resolve(node)
        if resolved.type == "string":
            return str(resolved.value)
        if not resolved.reducible:
            self.ctx.warn(
                f"Unable to resolve event name '{node_text(unwrap(node))}', "
                f"using '{resolved.raw}'"
            )
        return resolved.raw
