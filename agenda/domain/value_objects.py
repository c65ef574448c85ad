"""Domain primitives that enforce validity at creation time."""

import re
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Self

EVENT_ID_PATTERN = re.compile(r"^evt_[\w-]+$", re.ASCII)


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event.

    The value doubles as a lookup key in URLs and form posts, so only word
    characters and hyphens are accepted after the ``evt_`` prefix.
    """

    value: str

    def __post_init__(self) -> None:
        if not EVENT_ID_PATTERN.fullmatch(self.value):
            raise ValueError("Invalid event ID format")

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=value)

    @classmethod
    def generate(cls, start: datetime) -> Self:
        """Build ``evt_<YYYY-MM-DD>_<hex>`` from the event's local start date."""
        return cls(value=f"evt_{start.date().isoformat()}_{secrets.token_hex(6)}")

    def __str__(self) -> str:
        return self.value
