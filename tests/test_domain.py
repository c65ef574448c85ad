"""Unit tests for domain primitives and field validation.

Run with: pytest tests/test_domain.py -v
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from agenda.domain import EventId
from agenda.domain.errors import ErrorCode, EventValidationError, InvalidDateError
from agenda.domain.validation import (
    local_to_timestamp,
    parse_tags,
    sanitize_text,
    validate_event_fields,
    validate_event_id,
    validate_url,
)

ZURICH = "Europe/Zurich"


class TestEventId:
    """Tests for EventId value object."""

    def test_from_string_valid_id(self):
        """EventId.from_string accepts evt_ followed by word characters and hyphens."""
        assert EventId.from_string("evt_2025-03-10_ab12cd").value == "evt_2025-03-10_ab12cd"

    @pytest.mark.parametrize(
        "value",
        ["", "evt_", "evt_../etc/passwd", "evt_a.b", "evt_a/b", "event_2025", "evt_a b"],
    )
    def test_from_string_invalid_id(self, value):
        """EventId.from_string raises ValueError for traversal or malformed ids."""
        with pytest.raises(ValueError):
            EventId.from_string(value)

    def test_generate_uses_local_start_date(self):
        """Generated ids carry the local start date."""
        start = datetime(2025, 3, 10, 0, 30, tzinfo=ZoneInfo(ZURICH))
        event_id = EventId.generate(start)
        assert event_id.value.startswith("evt_2025-03-10_")
        assert validate_event_id(event_id.value)

    def test_generate_is_random(self):
        """Two ids generated for the same start differ."""
        start = datetime(2025, 3, 10, 18, 0, tzinfo=ZoneInfo(ZURICH))
        assert EventId.generate(start) != EventId.generate(start)


class TestSanitizeText:
    """Tests for sanitize_text."""

    def test_trims_whitespace(self):
        """Surrounding whitespace is removed."""
        assert sanitize_text("  Apéro \n", 140) == "Apéro"

    def test_truncates_by_code_points(self):
        """Truncation counts characters, not bytes."""
        assert sanitize_text("ééééé", 3) == "ééé"

    def test_none_is_empty(self):
        """A missing value sanitizes to an empty string."""
        assert sanitize_text(None, 10) == ""


class TestValidateUrl:
    """Tests for validate_url."""

    def test_empty_is_valid(self):
        """Blank URLs are accepted since the field is optional."""
        assert validate_url("")
        assert validate_url("   ")

    def test_absolute_url_is_valid(self):
        """An absolute http(s) URL is accepted."""
        assert validate_url("https://example.org/signup?x=1")

    @pytest.mark.parametrize("value", ["example.org", "/relative/path", "https://", "not a url"])
    def test_rejects_non_absolute(self, value):
        """URLs without scheme or host are rejected."""
        assert not validate_url(value)


class TestParseTags:
    """Tests for parse_tags."""

    def test_drops_empty_and_long_pieces(self):
        """Empty pieces and pieces over 50 characters are dropped."""
        raw = "a, , b ," + "x" * 51
        assert parse_tags(raw) == ["a", "b"]

    def test_keeps_order_and_duplicates(self):
        """Tags keep submission order and are not deduplicated."""
        assert parse_tags("talk, networking,talk") == ["talk", "networking", "talk"]

    def test_fifty_chars_is_allowed(self):
        """A tag of exactly 50 characters is kept."""
        assert parse_tags("y" * 50) == ["y" * 50]


class TestLocalToTimestamp:
    """Tests for local_to_timestamp."""

    def test_winter_time_offset(self):
        """Zurich winter time resolves to +01:00."""
        result = local_to_timestamp("2025-03-10T18:00", ZURICH)
        assert result.isoformat() == "2025-03-10T18:00:00+01:00"

    def test_summer_time_offset(self):
        """Zurich summer time resolves to +02:00."""
        result = local_to_timestamp("2025-07-01T09:15", ZURICH)
        assert result.utcoffset() == timedelta(hours=2)

    @pytest.mark.parametrize(
        "value",
        ["2025-03-10", "2025-03-10 18:00", "2025-03-10T18:00:00", "2025-02-30T10:00", "2025-03-10T25:00", ""],
    )
    def test_rejects_bad_shape_or_calendar(self, value):
        """Wrong shapes and impossible dates raise InvalidDateError."""
        with pytest.raises(InvalidDateError) as exc_info:
            local_to_timestamp(value, ZURICH)
        assert exc_info.value.code == ErrorCode.INVALID_DATE

    def test_rejects_time_skipped_by_dst(self):
        """A wall-clock time skipped by the spring DST jump is rejected."""
        with pytest.raises(InvalidDateError):
            local_to_timestamp("2025-03-30T02:30", ZURICH)


class TestValidateEventFields:
    """Tests for validate_event_fields."""

    def test_valid_submission(self):
        """A complete submission yields typed, trimmed fields with empty optionals as None."""
        fields = validate_event_fields(
            {
                "title": " Apéro ",
                "start": "2025-03-10T18:00",
                "end": "2025-03-10T21:00",
                "location": "",
                "url": "https://example.org",
                "tags": "a, , b",
                "description": "",
            },
            ZURICH,
        )
        assert fields.title == "Apéro"
        assert fields.end > fields.start
        assert fields.location is None
        assert fields.description is None
        assert fields.tags == ("a", "b")

    def test_missing_title(self):
        """A blank title is reported against the title field."""
        with pytest.raises(EventValidationError) as exc_info:
            validate_event_fields({"title": "   ", "start": "2025-03-10T18:00"}, ZURICH)
        assert exc_info.value.field == "title"

    def test_missing_start(self):
        """A missing start is reported against the start field."""
        with pytest.raises(EventValidationError) as exc_info:
            validate_event_fields({"title": "Talk"}, ZURICH)
        assert exc_info.value.field == "start"

    def test_end_equal_to_start_is_rejected(self):
        """An end equal to the start is invalid."""
        with pytest.raises(EventValidationError) as exc_info:
            validate_event_fields(
                {"title": "Talk", "start": "2025-03-10T18:00", "end": "2025-03-10T18:00"},
                ZURICH,
            )
        assert exc_info.value.message == "end must be after start"

    def test_invalid_end_date(self):
        """An unparsable end is reported against the end field."""
        with pytest.raises(InvalidDateError) as exc_info:
            validate_event_fields(
                {"title": "Talk", "start": "2025-03-10T18:00", "end": "tomorrow"},
                ZURICH,
            )
        assert exc_info.value.field == "end"

    def test_invalid_url(self):
        """A non-absolute URL is reported against the url field."""
        with pytest.raises(EventValidationError) as exc_info:
            validate_event_fields(
                {"title": "Talk", "start": "2025-03-10T18:00", "url": "www.example"},
                ZURICH,
            )
        assert exc_info.value.field == "url"

    def test_long_title_is_truncated(self):
        """Titles over 140 characters are cut to 140."""
        fields = validate_event_fields({"title": "t" * 200, "start": "2025-03-10T18:00"}, ZURICH)
        assert len(fields.title) == 140

    @pytest.mark.parametrize(
        "raw, field",
        [
            ({"title": 5, "start": "2025-03-10T18:00"}, "title"),
            ({"title": ["a"], "start": "2025-03-10T18:00"}, "title"),
            ({"title": "Talk", "start": {"date": "2025-03-10"}}, "start"),
            ({"title": "Talk", "start": "2025-03-10T18:00", "tags": ["a", "b"]}, "tags"),
        ],
    )
    def test_non_text_values_are_rejected(self, raw, field):
        """Field values that are not strings raise EventValidationError naming the field."""
        with pytest.raises(EventValidationError) as exc_info:
            validate_event_fields(raw, ZURICH)
        assert exc_info.value.field == field
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
