from agenda.conf import agenda_setting
from agenda.services.event_service import EventService
from agenda.services.image_ingest import ImageIngest
from agenda.stores.json_store import JsonFileEventStore


def build_event_service() -> EventService:
    """Wire an EventService from the current AGENDA settings."""
    store = JsonFileEventStore(
        agenda_setting("EVENTS_FILE"),
        lock_timeout=agenda_setting("LOCK_TIMEOUT"),
    )
    images = ImageIngest(
        agenda_setting("UPLOAD_DIR"),
        public_prefix=agenda_setting("UPLOAD_URL"),
        max_bytes=agenda_setting("MAX_IMAGE_BYTES"),
    )
    return EventService(store, images, tz_name=agenda_setting("TIMEZONE"))


__all__ = ["EventService", "ImageIngest", "build_event_service"]
