"""Exception hierarchy for Heavytime Stories.

Every error carries a short ``summary`` suitable for the ``error`` field of
the API's JSON envelope, and a detail message (``str(exc)``) for the
``details`` field.

    HeavytimeError
    ├── ValidationError           400, missing or malformed input
    ├── UpstreamServiceError      500, a hosted service failed
    │   ├── PoemGenerationError
    │   │   └── ImageFetchError   400 on the poem endpoint
    │   ├── AudioGenerationError
    │   ├── ComicGenerationError
    │   └── ImageListingError
    └── PersistenceError          500, the story store rejected a read/write
"""


class HeavytimeError(Exception):
    """Base class for all application errors."""

    summary: str = "Unexpected error"
    status_code: int = 500

    def __init__(self, message: str = "", *, summary: str | None = None) -> None:
        super().__init__(message or self.summary)
        if summary is not None:
            self.summary = summary

    def to_dict(self) -> dict:
        return {"error": self.summary, "details": str(self)}


class ValidationError(HeavytimeError):
    """User-friendly validation error.

    The message is intended to be displayed directly to the user.
    """

    summary = "Invalid request"
    status_code = 400


class UpstreamServiceError(HeavytimeError):
    """A hosted generation or storage service failed or returned no usable result."""

    summary = "Upstream service failed"


class PoemGenerationError(UpstreamServiceError):
    summary = "Failed to generate poem"


class ImageFetchError(PoemGenerationError):
    """The source photo could not be downloaded."""

    summary = "Failed to fetch image"
    status_code = 400


class AudioGenerationError(UpstreamServiceError):
    summary = "Failed to generate audio"


class ComicGenerationError(UpstreamServiceError):
    summary = "Failed to generate comic"


class ImageListingError(UpstreamServiceError):
    summary = "Failed to fetch images"


class PersistenceError(HeavytimeError):
    """The story store rejected a read or write."""

    summary = "Failed to save story"
