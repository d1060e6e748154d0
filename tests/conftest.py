"""Shared fixtures for tests that run full parsing walks."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from vuedoc.dispatcher import EntryEvent
from vuedoc.options import CHANNELS, ParserOptions
from vuedoc.parser import VuedocParser


@dataclass
class WalkResult:
    """Entries collected from one walk, in dispatch order."""

    dispatched: list[tuple[str, Any]] = field(default_factory=list)
    warnings: tuple[str, ...] = ()

    def of(self, channel: str) -> list[Any]:
        """Return the entries dispatched on one channel."""
        return [entry for name, entry in self.dispatched if name == channel]

    def first(self, channel: str) -> Any:
        """Return the single entry dispatched on one channel."""
        entries = self.of(channel)
        assert len(entries) == 1, entries
        return entries[0]

    @property
    def channels(self) -> list[str]:
        """Return the channel of every dispatch, in order."""
        return [name for name, _ in self.dispatched]


def walk_component(filecontent: str | None = None, **options: Any) -> WalkResult:
    """Parse a component and record every dispatched entry."""
    parser = VuedocParser(ParserOptions(filecontent=filecontent, **options))
    result = WalkResult()

    def record(event: EntryEvent) -> None:
        result.dispatched.append((event.channel, event.entry))

    for channel in CHANNELS:
        parser.add_event_listener(channel, record)
    parser.walk()
    result.warnings = parser.warnings
    return result


@pytest.fixture
def walk() -> Callable[..., WalkResult]:
    """Provide a helper running a full walk over inline component source."""
    return walk_component
