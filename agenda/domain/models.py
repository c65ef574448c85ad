"""Domain models representing persisted state.

These are pure domain objects with no HTTP input rules. The JSON record
mapping lives in agenda/stores/json_store.py.
"""

from dataclasses import dataclass
from datetime import datetime

from agenda.domain.value_objects import EventId


@dataclass(frozen=True)
class EventFields:
    """Validated, client-editable fields of an event."""

    title: str
    start: datetime
    end: datetime | None = None
    location: str | None = None
    url: str | None = None
    description: str | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    title: str
    start: datetime
    end: datetime | None
    location: str | None
    url: str | None
    description: str | None
    tags: tuple[str, ...]
    image: str | None
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def from_fields(
        cls,
        event_id: EventId,
        fields: EventFields,
        *,
        image: str | None,
        created_at: datetime,
        updated_at: datetime | None = None,
    ) -> "Event":
        return cls(
            id=event_id,
            title=fields.title,
            start=fields.start,
            end=fields.end,
            location=fields.location,
            url=fields.url,
            description=fields.description,
            tags=fields.tags,
            image=image,
            created_at=created_at,
            updated_at=updated_at,
        )
