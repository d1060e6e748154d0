"""Conversion of identifier-case names to hyphenated lower case."""

import re

UPPER_RE = re.compile(r"\B([A-Z])")


def to_kebab_case(name: str) -> str:
    """Hyphenate a camelCase or PascalCase name, e.g. `maxLength` -> `max-length`."""
    return UPPER_RE.sub(r"-\1", name).lower()
