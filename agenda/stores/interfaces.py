"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Every write is a full
replacement of the collection; there are no row-level updates.
"""

from abc import ABC, abstractmethod

from agenda.domain import Event


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def load(self) -> list[Event]:
        """Return the stored collection in stored order.

        Unreadable or malformed content yields an empty list rather than an
        error.
        """
        ...

    @abstractmethod
    def save(self, events: list[Event]) -> None:
        """Replace the stored collection atomically.

        Raises:
            StorageError: If the collection could not be written.
        """
        ...
