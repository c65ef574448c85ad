"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every mutation validates the whole submission first, then the image, and
only then rewrites the collection, which is kept sorted by start.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from zoneinfo import ZoneInfo

from django.core.files.uploadedfile import UploadedFile
from django.utils import timezone

from agenda.domain import Event, EventId
from agenda.domain.errors import (
    EventNotFoundError,
    InvalidEventIdError,
    StorageError,
)
from agenda.domain.validation import validate_event_fields
from agenda.services.image_ingest import ImageIngest
from agenda.stores.interfaces import EventStore

logger = logging.getLogger(__name__)


def sort_events(events: list[Event]) -> list[Event]:
    """Order by start instant; stable, so equal starts keep insertion order."""
    return sorted(events, key=lambda event: event.start)


def _parse_event_id(event_id: str) -> EventId:
    try:
        return EventId.from_string(event_id)
    except (TypeError, ValueError) as err:
        raise InvalidEventIdError() from err


class EventService:
    """Service for creating, updating and deleting events."""

    def __init__(
        self,
        store: EventStore,
        images: ImageIngest,
        tz_name: str = "Europe/Zurich",
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._images = images
        self._tz_name = tz_name
        self._tz = ZoneInfo(tz_name)
        self._clock = clock

    def _now(self) -> datetime:
        return self._clock().astimezone(self._tz)

    def list_events(self) -> list[Event]:
        """Return all events ordered by start ascending."""
        return sort_events(self._store.load())

    def list_upcoming(self, now: datetime | None = None) -> list[Event]:
        """Return events starting at or after ``now``."""
        now = now or self._now()
        return [event for event in self.list_events() if event.start >= now]

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is malformed.
            EventNotFoundError: If the event does not exist.
        """
        parsed = _parse_event_id(event_id)
        for event in self._store.load():
            if event.id == parsed:
                return event
        raise EventNotFoundError(event_id)

    def create_event(
        self,
        raw: Mapping[str, str | None],
        image: UploadedFile | None = None,
    ) -> Event:
        """Validate a submission and append it to the collection.

        Raises:
            EventValidationError: If a field is missing or invalid.
            ImageTooLargeError, UnsupportedImageTypeError: If the image is rejected.
            StorageError: If the image or the collection cannot be written.
        """
        fields = validate_event_fields(raw, self._tz_name)
        events = self._store.load()
        image_path = self._images.accept(image, fields.title)

        event = Event.from_fields(
            EventId.generate(fields.start),
            fields,
            image=image_path,
            created_at=self._now(),
        )
        events.append(event)
        self._persist(sort_events(events), new_image=image_path)

        logger.info("Created event %s (%s)", event.id, event.title)
        return event

    def update_event(
        self,
        event_id: str,
        raw: Mapping[str, str | None],
        image: UploadedFile | None = None,
    ) -> Event:
        """Replace all editable fields of an event.

        ``id`` and ``created_at`` are preserved, as is the current image unless
        a new one is uploaded, in which case the old file is removed once the
        collection is saved. Nothing is written if any check fails.

        Raises:
            InvalidEventIdError: If the event_id is malformed.
            EventNotFoundError: If the event does not exist.
            EventValidationError: If a field is missing or invalid.
            StorageError: If the collection cannot be written.
        """
        parsed = _parse_event_id(event_id)
        events = self._store.load()
        index = next((i for i, event in enumerate(events) if event.id == parsed), None)
        if index is None:
            raise EventNotFoundError(event_id)

        fields = validate_event_fields(raw, self._tz_name)
        current = events[index]
        image_path = self._images.accept(image, fields.title)

        updated = Event.from_fields(
            current.id,
            fields,
            image=image_path or current.image,
            created_at=current.created_at,
            updated_at=self._now(),
        )
        events[index] = updated
        self._persist(sort_events(events), new_image=image_path)
        if image_path and current.image and current.image != image_path:
            self._images.discard(current.image)

        logger.info("Updated event %s", updated.id)
        return updated

    def delete_event(self, event_id: str) -> bool:
        """Remove an event; deleting an unknown id is a no-op.

        Returns:
            True if an event was removed.

        Raises:
            InvalidEventIdError: If the event_id is malformed.
            StorageError: If the collection cannot be written.
        """
        parsed = _parse_event_id(event_id)
        events = self._store.load()
        survivors = [event for event in events if event.id != parsed]
        if len(survivors) == len(events):
            logger.info("Delete of unknown event %s ignored", parsed)
            return False

        self._persist(survivors)
        logger.info("Deleted event %s", parsed)
        return True

    def _persist(self, events: list[Event], new_image: str | None = None) -> None:
        try:
            self._store.save(events)
        except StorageError:
            logger.exception("Could not save event collection")
            self._images.discard(new_image)
            raise
