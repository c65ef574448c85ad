"""Domain error codes for the agenda module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DATE = "INVALID_DATE"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    IMAGE_TOO_LARGE = "IMAGE_TOO_LARGE"
    UNSUPPORTED_IMAGE_TYPE = "UNSUPPORTED_IMAGE_TYPE"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    STORAGE_ERROR = "STORAGE_ERROR"
    CSRF_MISSING = "CSRF_MISSING"
    CSRF_INVALID = "CSRF_INVALID"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventValidationError(DomainError):
    """Raised when a submitted field is missing or invalid."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)
        self.field = field


class InvalidDateError(EventValidationError):
    """Raised when a local date-time string cannot be converted."""

    def __init__(self, field: str = "start") -> None:
        super().__init__(message="Invalid date format", field=field)
        self.code = ErrorCode.INVALID_DATE


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class ImageTooLargeError(DomainError):
    """Raised when an upload exceeds the configured size cap."""

    def __init__(self, max_bytes: int) -> None:
        super().__init__(
            code=ErrorCode.IMAGE_TOO_LARGE,
            message="Image too large",
        )
        self.max_bytes = max_bytes


class UnsupportedImageTypeError(DomainError):
    """Raised when the sniffed image type is not allowed."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED_IMAGE_TYPE,
            message="Unsupported image type",
        )


class ImageUploadError(DomainError):
    """Raised when the uploaded file cannot be read."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.UPLOAD_FAILED,
            message="Upload error",
        )


class StorageError(DomainError):
    """Raised when the event file or an upload cannot be written."""

    def __init__(self, message: str = "Storage failure") -> None:
        super().__init__(code=ErrorCode.STORAGE_ERROR, message=message)


class CsrfError(DomainError):
    """Raised when the anti-forgery token is missing or wrong."""

    def __init__(self, missing: bool = False) -> None:
        super().__init__(
            code=ErrorCode.CSRF_MISSING if missing else ErrorCode.CSRF_INVALID,
            message="Invalid CSRF token",
        )
