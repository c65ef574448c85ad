from agenda.domain.models import Event, EventFields
from agenda.domain.value_objects import EventId

__all__ = [
    "Event",
    "EventFields",
    "EventId",
]
