"""JSON file implementation of the EventStore.

The collection is one pretty-printed JSON array. Readers take a shared lock
on a sidecar ``<file>.lock``; writers take an exclusive lock on it, write a
uniquely named temp file in the same directory and ``os.replace`` it over the
target, so a reader only ever sees the old or the new complete document.

Two writers can still lose an update (last rename wins); there is no
version check across the read-modify-write span.
"""

import errno
import fcntl
import json
import logging
import os
import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from agenda.domain import Event, EventId
from agenda.domain.errors import StorageError
from agenda.stores.interfaces import EventStore

logger = logging.getLogger(__name__)

_LOCK_POLL_INTERVAL = 0.05


def event_to_record(event: Event) -> dict[str, Any]:
    """Map a domain Event to its public JSON shape."""
    return {
        "id": event.id.value,
        "title": event.title,
        "start": event.start.isoformat(),
        "end": event.end.isoformat() if event.end else None,
        "location": event.location,
        "image": event.image,
        "url": event.url,
        "description": event.description,
        "tags": list(event.tags),
        "createdAt": event.created_at.isoformat(),
        "updatedAt": event.updated_at.isoformat() if event.updated_at else None,
    }


def _parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp without offset: {value}")
    return parsed


def event_from_record(record: dict[str, Any]) -> Event:
    """Map a stored record back to an Event.

    Raises:
        AttributeError, KeyError, TypeError, ValueError: If the record is not
            a usable event.
    """
    start = _parse_timestamp(record["start"])
    if start is None:
        raise ValueError("event without start")
    tags = record.get("tags") or []
    if not isinstance(tags, list):
        raise TypeError("tags must be a list")
    return Event(
        id=EventId.from_string(record["id"]),
        title=str(record["title"]),
        start=start,
        end=_parse_timestamp(record.get("end")),
        location=record.get("location") or None,
        url=record.get("url") or None,
        description=record.get("description") or None,
        tags=tuple(str(tag) for tag in tags),
        image=record.get("image") or None,
        # Records written before createdAt existed fall back to their start.
        created_at=_parse_timestamp(record.get("createdAt")) or start,
        updated_at=_parse_timestamp(record.get("updatedAt")),
    )


class JsonFileEventStore(EventStore):
    """File-backed event store with atomic replace."""

    def __init__(self, path: str | os.PathLike, lock_timeout: float = 5.0) -> None:
        self._path = Path(path)
        self._lock_path = self._path.with_name(self._path.name + ".lock")
        self._lock_timeout = lock_timeout

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Event]:
        if not self._path.exists():
            self._initialize()

        with self._locked(fcntl.LOCK_SH):
            try:
                with open(self._path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as err:
                logger.warning("Cannot read %s, treating as empty: %s", self._path, err)
                return []

        if not isinstance(data, list):
            logger.warning("%s does not hold a JSON array, treating as empty", self._path)
            return []

        events = []
        for index, record in enumerate(data):
            try:
                events.append(event_from_record(record))
            except (AttributeError, KeyError, TypeError, ValueError) as err:
                logger.warning("Skipping malformed event #%d in %s: %s", index, self._path, err)
        return events

    def save(self, events: list[Event]) -> None:
        with self._locked(fcntl.LOCK_EX):
            self._write([event_to_record(event) for event in events])

    def _initialize(self) -> None:
        with self._locked(fcntl.LOCK_EX):
            if not self._path.exists():
                logger.info("Initializing empty event file at %s", self._path)
                self._write([])

    def _write(self, records: list[dict[str, Any]]) -> None:
        """Write ``records`` to a temp file and rename it over the target.

        Caller must hold the exclusive lock.
        """
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f"{self._path.name}.tmp.",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates 0600; the document is served publicly.
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self._path)
        except OSError as err:
            logger.error("Failed to write %s: %s", self._path, err)
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except FileNotFoundError:
                    pass
            raise StorageError() from err

    @contextmanager
    def _locked(self, operation: int) -> Iterator[None]:
        """Hold ``operation`` on the sidecar lock file, waiting at most ``lock_timeout``."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            lock_file = open(self._lock_path, "a")
        except OSError as err:
            logger.error("Cannot open lock file %s: %s", self._lock_path, err)
            raise StorageError() from err

        with lock_file:
            deadline = time.monotonic() + self._lock_timeout
            while True:
                try:
                    fcntl.flock(lock_file.fileno(), operation | fcntl.LOCK_NB)
                    break
                except OSError as err:
                    if err.errno not in (errno.EAGAIN, errno.EACCES):
                        raise StorageError() from err
                    if time.monotonic() >= deadline:
                        logger.error("Timed out waiting for lock on %s", self._lock_path)
                        raise StorageError("Storage busy, try again") from err
                    time.sleep(_LOCK_POLL_INTERVAL)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
