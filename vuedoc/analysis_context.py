"""Per-run state shared by the scanners of one parsing run."""

import logging
from dataclasses import dataclass, field

from vuedoc.dispatcher import EventDispatcher
from vuedoc.entries import Entry, EventEntry, MemberEntry

logger = logging.getLogger(__name__)


@dataclass
class AnalysisContext:
    """Emission gate, event name registry and diagnostics of one run."""

    dispatcher: EventDispatcher
    channels: frozenset[str]
    ignored_visibilities: frozenset[str] = frozenset()
    emitted_events: set[str] = field(default_factory=set)
    warnings: list[str] = field(default_factory=list)

    def enabled(self, channel: str) -> bool:
        """Whether entries of a channel are extracted in this run."""
        return channel in self.channels

    def warn(self, message: str) -> None:
        """Record a non-fatal diagnostic."""
        logger.warning(message)
        self.warnings.append(message)

    def emit(self, entry: Entry) -> bool:
        """Dispatch an entry unless it is disabled, hidden or already emitted."""
        channel = entry.kind
        if not self.enabled(channel):
            logger.debug("Skipping %s entry, channel disabled", channel)
            return False
        if isinstance(entry, EventEntry):
            if entry.name in self.emitted_events:
                logger.debug("Skipping already emitted event %s", entry.name)
                return False
            self.emitted_events.add(entry.name)
        if (
            isinstance(entry, MemberEntry)
            and entry.visibility in self.ignored_visibilities
        ):
            logger.debug("Skipping %s %s (%s)", channel, entry.name, entry.visibility)
            return False
        self.dispatcher.dispatch(channel, entry)
        return True
