"""Typed failures surfaced by the edit and scrape pipelines."""


class RoomEditorError(Exception):
    """Base class for failures reported to API callers."""

    status_code = 500


class InvalidInputError(RoomEditorError):
    """Raised when a request is missing required fields."""

    status_code = 400


class UnauthorizedError(RoomEditorError):
    """Raised when the caller identity is missing or invalid."""

    status_code = 401


class ForbiddenError(RoomEditorError):
    """Raised when the caller does not own the room it addresses."""

    status_code = 403


class ProviderUnavailableError(RoomEditorError):
    """Raised when the image-edit provider rejects or cannot take a job."""

    status_code = 502


class ProviderFailedError(RoomEditorError):
    """Raised when a provider job reaches a failed terminal state."""

    status_code = 502


class EditTimedOutError(RoomEditorError):
    """Raised when polling exhausts its attempt ceiling."""

    status_code = 504


class EditCancelledError(RoomEditorError):
    """Raised when polling is cancelled by the caller."""

    status_code = 503


class DecodeError(RoomEditorError):
    """Raised when a provider payload is not valid base64."""

    status_code = 502


class StorageFailureError(RoomEditorError):
    """Raised when a blob or record write is rejected."""

    status_code = 500


class UnsupportedSourceError(RoomEditorError):
    """Raised when a listing URL is outside the allowed domains."""

    status_code = 400


class NoDataError(RoomEditorError):
    """Raised when a room or listing cannot be found."""

    status_code = 404
