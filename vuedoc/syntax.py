"""Helpers around tree-sitter parsers and syntax nodes of the logic section."""

import re
from functools import lru_cache

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

TYPESCRIPT_LANGS = {"ts", "typescript"}
TSX_LANGS = {"tsx"}

FUNCTION_TYPES = {
    "arrow_function",
    "function",
    "function_declaration",
    "function_expression",
    "generator_function",
    "generator_function_declaration",
    "method_definition",
}

# Nodes that only wrap an expression (grouping, TypeScript casts).
TRANSPARENT_TYPES = {
    "parenthesized_expression",
    "as_expression",
    "satisfies_expression",
    "non_null_expression",
}

WHITESPACE_RE = re.compile(r"\s+")


@lru_cache(maxsize=None)
def get_parser(lang: str = "js") -> Parser:
    """Return a cached tree-sitter parser for the given script language."""
    if lang in TYPESCRIPT_LANGS:
        language = Language(tree_sitter_typescript.language_typescript())
    elif lang in TSX_LANGS:
        language = Language(tree_sitter_typescript.language_tsx())
    else:
        language = Language(tree_sitter_javascript.language())
    return Parser(language)


def parse_script(source: str, lang: str = "js") -> Tree:
    """Parse a script section into a syntax tree."""
    return get_parser(lang).parse(source.encode("utf-8"))


def node_text(node: Node | None) -> str:
    """Get the source text of a node."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def compact_text(node: Node | None) -> str:
    """Get the source text of a node collapsed on a single line."""
    text = WHITESPACE_RE.sub(" ", node_text(node)).strip()
    text = re.sub(r"([(<\[])\s+", r"\1", text)
    return re.sub(r"\s+([)>\]])", r"\1", text)


def unwrap(node: Node | None) -> Node | None:
    """Strip grouping parentheses and TypeScript cast wrappers."""
    while node is not None and node.type in TRANSPARENT_TYPES:
        inner = next((c for c in node.named_children if c.type != "comment"), None)
        if inner is None:
            break
        node = inner
    return node


def cast_type(node: Node | None) -> Node | None:
    """Return the type node of a TypeScript cast expression, if any."""
    while node is not None and node.type == "parenthesized_expression":
        node = next((c for c in node.named_children if c.type != "comment"), None)
    if node is None or node.type not in ("as_expression", "satisfies_expression"):
        return None
    named = [c for c in node.named_children if c.type != "comment"]
    return named[-1] if len(named) > 1 else None


def is_function(node: Node | None) -> bool:
    """Check whether a node is a function literal."""
    return node is not None and node.type in FUNCTION_TYPES


def function_parts(node: Node) -> tuple[Node | None, Node | None]:
    """Return the (parameters, body) pair of a function literal."""
    params = node.child_by_field_name("parameters")
    if params is None:
        params = node.child_by_field_name("parameter")
    return params, node.child_by_field_name("body")


def statements(block: Node | None) -> list[Node]:
    """Return the statements of a block, comments included."""
    if block is None:
        return []
    return list(block.named_children)


def code_statements(block: Node | None) -> list[Node]:
    """Return the statements of a block, comments excluded."""
    return [s for s in statements(block) if s.type != "comment"]


def first_expression(node: Node) -> Node | None:
    """Return the first non-comment named child of a node."""
    return next((c for c in node.named_children if c.type != "comment"), None)


def preceding_comment(node: Node) -> Node | None:
    """Return the block comment immediately preceding a node, if any."""
    sibling = node.prev_sibling
    if sibling is None or sibling.type != "comment":
        return None
    if not node_text(sibling).startswith("/*"):
        return None
    return sibling


def property_key(node: Node | None) -> str | None:
    """Return the static name of an object key node."""
    if node is None:
        return None
    if node.type == "string":
        return string_value(node)
    if node.type in (
        "property_identifier",
        "identifier",
        "shorthand_property_identifier",
        "shorthand_property_identifier_pattern",
        "private_property_identifier",
        "number",
    ):
        return node_text(node)
    return None


def string_value(node: Node) -> str:
    """Decode the value of a string literal node."""
    text = node_text(node)
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        text = text[1:-1]
    return decode_escapes(text)


ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|.)", re.S
)


def decode_escapes(text: str) -> str:
    """Decode JavaScript escape sequences in a string literal body."""

    def replace(match: re.Match[str]) -> str:
        seq = match.group(1)
        if seq.startswith("u{"):
            return chr(int(seq[2:-1], 16))
        if seq[0] in "ux" and len(seq) > 1:
            return chr(int(seq[1:], 16))
        if seq == "\n":
            return ""
        return ESCAPES.get(seq, seq)

    return ESCAPE_RE.sub(replace, text)


def is_emit_call(node: Node, *, allow_bare: bool = False) -> bool:
    """Check whether a call has the `<receiver>.$emit(name, ...)` shape.

    Template handlers call `$emit` without a receiver; `allow_bare` accepts
    that form too.
    """
    if node.type != "call_expression":
        return False
    callee = node.child_by_field_name("function")
    if callee is None:
        return False
    if callee.type == "member_expression":
        name = node_text(callee.child_by_field_name("property"))
    elif allow_bare and callee.type == "identifier":
        name = node_text(callee)
    else:
        return False
    return name == "$emit" and bool(call_arguments(node))


def call_arguments(node: Node) -> list[Node]:
    """Return the argument nodes of a call expression."""
    args = node.child_by_field_name("arguments")
    if args is None:
        return []
    return [a for a in args.named_children if a.type != "comment"]
