"""Sanitising and validation of submitted event fields.

Everything here runs before any mutation or file write, so a malformed
request is rejected as a whole.
"""

import re
from collections.abc import Mapping
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import URLValidator

from agenda.domain.errors import EventValidationError, InvalidDateError
from agenda.domain.models import EventFields
from agenda.domain.value_objects import EVENT_ID_PATTERN

TITLE_MAX = 140
LOCATION_MAX = 140
URL_MAX = 500
DESCRIPTION_MAX = 5000
TAGS_RAW_MAX = 500
TAG_MAX = 50

FIELD_NAMES = ("title", "start", "end", "location", "url", "tags", "description")

_LOCAL_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}$")
_url_validator = URLValidator()


def sanitize_text(value: str | None, max_len: int) -> str:
    """Trim whitespace and truncate to ``max_len`` code points."""
    text = (value or "").strip()
    if max_len > 0 and len(text) > max_len:
        text = text[:max_len]
    return text


def validate_url(value: str) -> bool:
    """Empty is valid (optional field); otherwise an absolute URL is required."""
    if not value or not value.strip():
        return True
    try:
        _url_validator(value)
    except DjangoValidationError:
        return False
    return True


def parse_tags(raw: str | None) -> list[str]:
    return [
        tag
        for tag in (piece.strip() for piece in (raw or "").split(","))
        if tag and len(tag) <= TAG_MAX
    ]


def local_to_timestamp(local: str, tz_name: str, field: str = "start") -> datetime:
    """Interpret ``YYYY-MM-DDTHH:MM`` as wall-clock time in ``tz_name``.

    Raises:
        InvalidDateError: If the string has the wrong shape, is not a real
            calendar date, or names a time skipped by a DST transition.
    """
    if not _LOCAL_DATETIME_RE.fullmatch(local or ""):
        raise InvalidDateError(field)
    try:
        naive = datetime.strptime(local, "%Y-%m-%dT%H:%M")
    except ValueError as err:
        raise InvalidDateError(field) from err

    tz = ZoneInfo(tz_name)
    aware = naive.replace(tzinfo=tz)
    # Nonexistent local times do not survive a round trip through UTC.
    if aware.astimezone(timezone.utc).astimezone(tz).replace(tzinfo=None) != naive:
        raise InvalidDateError(field)
    return aware


def validate_event_id(event_id: str) -> bool:
    return bool(EVENT_ID_PATTERN.fullmatch(event_id or ""))


def validate_event_fields(raw: Mapping[str, str | None], tz_name: str) -> EventFields:
    """Validate a raw form submission into ``EventFields``.

    Raises:
        EventValidationError: With a user-facing message naming the field.
    """
    for name in FIELD_NAMES:
        value = raw.get(name)
        if value is not None and not isinstance(value, str):
            raise EventValidationError(f"{name} must be text", field=name)

    title = sanitize_text(raw.get("title"), TITLE_MAX)
    if not title:
        raise EventValidationError("title is required", field="title")

    start_local = sanitize_text(raw.get("start"), 0)
    if not start_local:
        raise EventValidationError("start is required", field="start")
    start = local_to_timestamp(start_local, tz_name, field="start")

    end = None
    end_local = sanitize_text(raw.get("end"), 0)
    if end_local:
        end = local_to_timestamp(end_local, tz_name, field="end")
        if end <= start:
            raise EventValidationError("end must be after start", field="end")

    url = sanitize_text(raw.get("url"), URL_MAX)
    if not validate_url(url):
        raise EventValidationError("Invalid URL", field="url")

    location = sanitize_text(raw.get("location"), LOCATION_MAX)
    description = sanitize_text(raw.get("description"), DESCRIPTION_MAX)
    tags = parse_tags(sanitize_text(raw.get("tags"), TAGS_RAW_MAX))

    return EventFields(
        title=title,
        start=start,
        end=end,
        location=location or None,
        url=url or None,
        description=description or None,
        tags=tuple(tags),
    )
