"""Data models for the documentation entries emitted by the parser."""

from dataclasses import dataclass, field

VISIBILITIES = ("public", "protected", "private")


@dataclass(frozen=True)
class Keyword:
    """A generic `@tag value` documentation keyword."""

    name: str
    description: str = ""


@dataclass(frozen=True)
class Parameter:
    """A function, event or slot parameter."""

    name: str  # dotted/bracketed path for nested shapes, e.g. employees[].name
    type: str | list[str] = "unknown"
    description: str | None = None
    default_value: str | None = None
    optional: bool = False
    rest: bool = False


@dataclass(frozen=True)
class ReturnValue:
    """The documented return value of a function."""

    type: str | list[str] = "unknown"
    description: str | None = None


@dataclass(frozen=True)
class FunctionDescriptor:
    """Structured description of a function-typed prop default."""

    name: str
    description: str | None = None
    keywords: list[Keyword] = field(default_factory=list)
    syntax: list[str] = field(default_factory=list)
    params: list[Parameter] = field(default_factory=list)
    returns: ReturnValue = field(default_factory=ReturnValue)


@dataclass(frozen=True)
class NameEntry:
    """The component name."""

    value: str
    kind: str = field(default="name", init=False)


@dataclass(frozen=True)
class DescriptionEntry:
    """The component description."""

    value: str
    kind: str = field(default="description", init=False)


@dataclass(frozen=True)
class KeywordsEntry:
    """The generic keywords of the component."""

    value: list[Keyword]
    kind: str = field(default="keywords", init=False)


@dataclass(frozen=True)
class MemberEntry:
    """Fields shared by every documented member of the component."""

    name: str
    description: str | None = None
    keywords: list[Keyword] = field(default_factory=list)
    visibility: str = "public"
    category: str | None = None
    version: str | None = None


@dataclass(frozen=True)
class ModelEntry(MemberEntry):
    """The v-model binding of the component."""

    prop: str = "value"
    event: str = "input"
    kind: str = field(default="model", init=False)


@dataclass(frozen=True)
class PropEntry(MemberEntry):
    """A component prop."""

    type: str | list[str] = "unknown"
    default: str | None = None
    required: bool = False
    describe_model: bool = False
    function: FunctionDescriptor | None = None
    kind: str = field(default="prop", init=False)


@dataclass(frozen=True)
class DataEntry(MemberEntry):
    """A reactive data property."""

    type: str = "unknown"
    initial_value: str | None = None
    kind: str = field(default="data", init=False)


@dataclass(frozen=True)
class ComputedEntry(MemberEntry):
    """A computed property."""

    type: str | list[str] = "unknown"
    dependencies: list[str] = field(default_factory=list)
    kind: str = field(default="computed", init=False)


@dataclass(frozen=True)
class MethodEntry(MemberEntry):
    """A component method."""

    params: list[Parameter] = field(default_factory=list)
    returns: ReturnValue = field(default_factory=lambda: ReturnValue("void"))
    syntax: list[str] = field(default_factory=list)
    kind: str = field(default="method", init=False)


@dataclass(frozen=True)
class EventEntry(MemberEntry):
    """An event emitted by the component."""

    arguments: list[Parameter] = field(default_factory=list)
    kind: str = field(default="event", init=False)


@dataclass(frozen=True)
class SlotEntry(MemberEntry):
    """A slot declared by the component."""

    props: list[Parameter] = field(default_factory=list)
    kind: str = field(default="slot", init=False)


Entry = (
    NameEntry
    | DescriptionEntry
    | KeywordsEntry
    | ModelEntry
    | PropEntry
    | DataEntry
    | ComputedEntry
    | MethodEntry
    | EventEntry
    | SlotEntry
)
