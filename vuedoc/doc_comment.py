"""Parsing of documentation comments into a description and structured tags."""

import re
import textwrap
from dataclasses import dataclass, field

from vuedoc.entries import VISIBILITIES, Keyword, Parameter, ReturnValue
from vuedoc.param_tags import Warn, parse_param, parse_return

TAG_RE = re.compile(r"^@(\S+)(?:\s+(.*))?$")

PARAM_TAGS = {"param", "arg", "argument", "prop"}
RETURN_TAGS = {"return", "returns"}
# Tags stored in structured fields instead of the generic keyword list.
CONSUMED_TAGS = (
    PARAM_TAGS
    | RETURN_TAGS
    | set(VISIBILITIES)
    | {"type", "default", "event", "kind", "syntax", "category", "version"}
)
# Tags describing the component itself, hidden from its keyword list.
COMPONENT_TAGS = {"name", "slot", "mixin"}


@dataclass
class DocComment:
    """A parsed documentation comment."""

    description: str | None = None
    tags: list[Keyword] = field(default_factory=list)
    keywords: list[Keyword] = field(default_factory=list)
    visibility: str = "public"
    type: str | None = None
    default: str | None = None
    kind: str | None = None
    event: str | None = None
    model: bool = False
    category: str | None = None
    version: str | None = None
    syntax: list[str] = field(default_factory=list)
    params: list[Parameter] = field(default_factory=list)
    returns: ReturnValue | None = None

    def tag_values(self, name: str) -> list[str]:
        """Return the values of every tag with the given name."""
        return [tag.description for tag in self.tags if tag.name == name]

    def component_keywords(self) -> list[Keyword]:
        """Return the keywords shown at component scope."""
        return [k for k in self.keywords if k.name not in COMPONENT_TAGS]


def clean_comment(text: str) -> list[str]:
    """Strip comment delimiters and the leading `* ` decoration of each line.

    Indentation past the decoration is kept, relative to the least indented line.
    """
    text = text.strip()
    if text.startswith("/*"):
        text = text[2:]
        if text.startswith("*"):
            text = text[1:]
    if text.endswith("*/"):
        text = text[:-2]
    first, *rest = text.split("\n")
    lines = []
    for line in rest:
        stripped = line.lstrip()
        if stripped.startswith("*"):
            line = stripped[2:] if stripped.startswith("* ") else stripped[1:]
        lines.append(line.rstrip())
    body = textwrap.dedent("\n".join(lines)).split("\n") if lines else []
    return [first.strip(), *body]


def _trim_blank(lines: list[str]) -> list[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start]:
        start += 1
    while end > start and not lines[end - 1]:
        end -= 1
    return lines[start:end]


def split_tags(lines: list[str]) -> tuple[str | None, list[Keyword]]:
    """Split cleaned comment lines into the description and raw tags."""
    description: list[str] = []
    tags: list[tuple[str, list[str]]] = []
    for line in lines:
        match = TAG_RE.match(line.strip())
        if match:
            tags.append((match.group(1), [match.group(2) or ""]))
        elif tags:
            tags[-1][1].append(line)
        else:
            description.append(line)
    text = "\n".join(_trim_blank(description))
    keywords = [Keyword(name, _tag_value(value)) for name, value in tags]
    return text or None, keywords


def _tag_value(lines: list[str]) -> str:
    # continuation lines are dedented together, apart from the tag line
    head, *rest = lines
    rest = textwrap.dedent("\n".join(rest)).split("\n") if rest else []
    return "\n".join(_trim_blank([head.strip(), *rest]))


def parse_comment(text: str | None, warn: Warn | None = None) -> DocComment:
    """Parse a raw comment body into a DocComment."""
    doc = DocComment()
    if not text:
        return doc
    doc.description, doc.tags = split_tags(clean_comment(text))

    for tag in doc.tags:
        name, value = tag.name, tag.description
        if name in PARAM_TAGS:
            param = parse_param(value, warn)
            if param is not None:
                doc.params.append(param)
        elif name in RETURN_TAGS:
            doc.returns = parse_return(value, warn)
        elif name in VISIBILITIES:
            doc.visibility = name
        elif name == "type":
            doc.type = value or None
        elif name == "default":
            doc.default = value
        elif name == "kind":
            doc.kind = value or None
        elif name == "event":
            doc.event = value.split()[0] if value.strip() else None
        elif name == "syntax":
            if value:
                doc.syntax.append(value)
        elif name in ("category", "version"):
            setattr(doc, name, value or None)
        elif name == "model":
            doc.model = True

        if name not in CONSUMED_TAGS:
            doc.keywords.append(tag)
    return doc
