"""In-memory EventStore, used in tests and for throwaway setups."""

from agenda.domain import Event
from agenda.stores.interfaces import EventStore


class MemoryEventStore(EventStore):
    """Holds the collection in a list."""

    def __init__(self, events: list[Event] | None = None) -> None:
        self._events = list(events or [])
        self.save_count = 0

    def load(self) -> list[Event]:
        return list(self._events)

    def save(self, events: list[Event]) -> None:
        self._events = list(events)
        self.save_count += 1
