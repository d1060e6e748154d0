"""Extraction of slots and directive-bound events from the template tree."""

import logging

from bs4 import Comment, NavigableString, Tag
from tree_sitter import Node

from vuedoc.analysis_context import AnalysisContext
from vuedoc.doc_comment import DocComment, parse_comment
from vuedoc.entries import EventEntry, Parameter, SlotEntry
from vuedoc.scope_resolver import ScopeResolver
from vuedoc.syntax import call_arguments, is_emit_call, node_text, parse_script

logger = logging.getLogger(__name__)

EVENT_PREFIXES = ("@", "v-on:")
BIND_PREFIXES = (":", "v-bind:")


def preceding_comment(tag: Tag) -> Comment | None:
    """Return the comment adjacent to a tag; whitespace text is skipped."""
    sibling = tag.previous_sibling
    while sibling is not None:
        if isinstance(sibling, Comment):
            return sibling
        if isinstance(sibling, NavigableString) and not sibling.strip():
            sibling = sibling.previous_sibling
            continue
        return None
    return None


def directive_name(attribute: str, prefixes: tuple[str, ...]) -> str | None:
    """Strip a directive prefix from an attribute name."""
    for prefix in prefixes:
        if attribute.startswith(prefix):
            return attribute[len(prefix) :]
    return None


def emit_calls(node: Node) -> list[Node]:
    """Collect the `$emit(...)` calls of a handler expression, in source order."""
    calls: list[Node] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if is_emit_call(current, allow_bare=True):
            calls.append(current)
        stack.extend(reversed(current.children))
    return calls


class TemplateScanner:
    """Walks a template tree and emits slot and event entries."""

    def __init__(self, ctx: AnalysisContext) -> None:
        """Initialize the scanner for one run."""
        self.ctx = ctx
        self.slot_names: list[str] = []
        self._resolver = ScopeResolver()

    def scan(self, template: Tag) -> list[str]:
        """Emit entries in document order and return the declared slot names."""
        scan_slots = self.ctx.enabled("slot")
        scan_events = self.ctx.enabled("event")
        for tag in template.descendants:
            if not isinstance(tag, Tag):
                continue
            if tag.name == "slot":
                self.slot_names.append(self._slot_name(tag))
                if scan_slots:
                    self._emit_slot(tag)
            if scan_events:
                self._emit_events(tag)
        return self.slot_names

    def _doc(self, tag: Tag) -> DocComment:
        comment = preceding_comment(tag)
        return parse_comment(str(comment) if comment else None, self.ctx.warn)

    @staticmethod
    def _slot_name(tag: Tag) -> str:
        name = tag.get("name")
        return name if isinstance(name, str) and name else "default"

    def _emit_slot(self, tag: Tag) -> None:
        doc = self._doc(tag)
        # html.parser lower-cases attribute names
        documented = {p.name.lower(): p for p in doc.params}
        props: list[Parameter] = []
        for attribute in tag.attrs:
            prop = directive_name(attribute, BIND_PREFIXES)
            if not prop or prop == "name":
                continue
            props.append(documented.pop(prop.lower(), Parameter(name=prop)))
        props.extend(documented.values())

        self.ctx.emit(
            SlotEntry(
                name=self._slot_name(tag),
                description=doc.description,
                keywords=doc.keywords,
                visibility=doc.visibility,
                category=doc.category,
                version=doc.version,
                props=props,
            )
        )

    def _emit_events(self, tag: Tag) -> None:
        doc: DocComment | None = None
        for attribute, value in tag.attrs.items():
            if directive_name(attribute, EVENT_PREFIXES) is None:
                continue
            if not isinstance(value, str) or not value.strip():
                continue
            tree = parse_script(value)
            for call in emit_calls(tree.root_node):
                if doc is None:
                    doc = self._doc(tag)
                self._emit_event(call, doc)

    def _emit_event(self, call: Node, doc: DocComment) -> None:
        name_node = call_arguments(call)[0]
        resolved = self._resolver.resolve(name_node)
        if resolved.type == "string":
            name = str(resolved.value)
        else:
            name = resolved.raw
            self.ctx.warn(
                f"Unable to resolve template event name '{node_text(name_node)}'"
            )
        if doc.event:
            name = doc.event

        self.ctx.emit(
            EventEntry(
                name=name,
                description=doc.description,
                keywords=doc.keywords,
                visibility=doc.visibility,
                category=doc.category,
                version=doc.version,
            )
        )
