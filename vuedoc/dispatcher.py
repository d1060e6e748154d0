"""Synchronous channel-based delivery of parsed entries to listeners."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from vuedoc.entries import Entry

logger = logging.getLogger(__name__)


@dataclass
class EntryEvent:
    """Handle passed to listeners for one dispatch."""

    channel: str
    entry: Entry | None = None
    _stopped: bool = field(default=False, repr=False)

    def stop_immediate_propagation(self) -> None:
        """Prevent the remaining listeners of this dispatch from firing."""
        self._stopped = True

    @property
    def propagation_stopped(self) -> bool:
        """Whether a listener stopped this dispatch."""
        return self._stopped


Listener = Callable[[EntryEvent], None]


class EventDispatcher:
    """Ordered per-channel listener registry."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._listeners: dict[str, list[Listener]] = {}

    def add_listener(self, channel: str, listener: Listener) -> None:
        """Register a listener; listeners fire in registration order."""
        self._listeners.setdefault(channel, []).append(listener)

    def remove_listener(self, channel: str, listener: Listener) -> None:
        """Unregister a listener; unknown listeners are ignored."""
        listeners = self._listeners.get(channel, [])
        if listener in listeners:
            listeners.remove(listener)

    def listeners(self, channel: str) -> list[Listener]:
        """Return a snapshot of the listeners of a channel."""
        return list(self._listeners.get(channel, []))

    def dispatch(self, channel: str, entry: Entry | None = None) -> EntryEvent:
        """Deliver an entry to the listeners of a channel."""
        event = EntryEvent(channel, entry)
        for listener in self.listeners(channel):
            listener(event)
            if event.propagation_stopped:
                logger.debug("Propagation stopped on channel %s", channel)
                break
        return event
