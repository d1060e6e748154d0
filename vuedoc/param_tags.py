"""Parsing of `@param` and `@returns` tag values into structured shapes."""

import re
from collections.abc import Callable

from vuedoc.entries import Parameter, ReturnValue

# Constructor names written in JSDoc types that map to primitive type names.
BUILTIN_TYPES = {
    "Array": "array",
    "BigInt": "bigint",
    "Boolean": "boolean",
    "Function": "function",
    "Number": "number",
    "Object": "object",
    "String": "string",
    "Symbol": "symbol",
}

BUILTIN_RE = re.compile(r"^(%s)((?:\[\])*)$" % "|".join(BUILTIN_TYPES))

PAIRS = {"{": "}", "[": "]", "(": ")", "<": ">"}

Warn = Callable[[str], None]


def matching_close(text: str, start: int) -> int:
    """Return the index closing the bracket opened at `start`, or -1."""
    opener = text[start]
    closer = PAIRS[opener]
    depth = 0
    for i in range(start, len(text)):
        if text[i] == opener:
            depth += 1
        elif text[i] == closer:
            depth -= 1
            if depth == 0:
                return i
    return -1


def split_top_level(text: str, separator: str) -> list[str]:
    """Split on a separator that is not nested in brackets."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char in "{[(<":
            depth += 1
        elif char in "}])>":
            depth = max(depth - 1, 0)
        if char == separator and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def normalize_type_name(name: str) -> str:
    """Lower-case builtin constructor names, keeping array suffixes."""
    match = BUILTIN_RE.match(name)
    if match:
        return BUILTIN_TYPES[match.group(1)] + match.group(2)
    return name


def parse_type(text: str | None, warn: Warn | None = None) -> str | list[str]:
    """Parse a JSDoc type expression; unions become lists."""
    if text is None:
        return "unknown"
    stripped = text.strip()
    if stripped.startswith("(") and matching_close(stripped, 0) == len(stripped) - 1:
        stripped = stripped[1:-1].strip()
    if not stripped:
        return "unknown"
    members = [part.strip() for part in split_top_level(stripped, "|")]
    if len(members) > 1 and not all(members):
        if warn is not None:
            warn(f"Ambiguous type union '{text.strip()}'")
        members = [m for m in members if m]
    members = [normalize_type_name(m) for m in members]
    if not members:
        return "unknown"
    return members[0] if len(members) == 1 else members


def _take_braced_type(text: str) -> tuple[str | None, str]:
    text = text.strip()
    if not text.startswith("{"):
        return None, text
    end = matching_close(text, 0)
    if end == -1:
        return None, text
    return text[1:end].strip(), text[end + 1 :].strip()


def _strip_dash(text: str) -> str | None:
    text = text.strip()
    if text.startswith("-"):
        text = text[1:].strip()
    return text or None


def parse_param(text: str, warn: Warn | None = None) -> Parameter | None:
    """Parse `{type} [name=default] - description` into a Parameter."""
    type_text, rest = _take_braced_type(text)
    if not rest:
        return None

    optional = False
    default_value: str | None = None
    if rest.startswith("["):
        end = matching_close(rest, 0)
        if end == -1:
            return None
        inner = rest[1:end]
        rest = rest[end + 1 :]
        optional = True
        name, sep, default = inner.partition("=")
        if sep and default.strip():
            default_value = default.strip()
    else:
        parts = rest.split(None, 1)
        name = parts[0]
        rest = parts[1] if len(parts) > 1 else ""

    is_rest = False
    if type_text is not None:
        if type_text.startswith("..."):
            is_rest = True
            type_text = type_text[3:]
        if type_text.endswith("="):
            optional = True
            type_text = type_text[:-1]

    name = name.strip()
    if name.startswith("..."):
        is_rest = True
        name = name[3:]
    if not name:
        return None

    return Parameter(
        name=name,
        type=parse_type(type_text, warn),
        description=_strip_dash(rest),
        default_value=default_value,
        optional=optional,
        rest=is_rest,
    )


def parse_return(text: str, warn: Warn | None = None) -> ReturnValue:
    """Parse `{type} description` into a ReturnValue."""
    type_text, rest = _take_braced_type(text)
    return ReturnValue(type=parse_type(type_text, warn), description=_strip_dash(rest))
