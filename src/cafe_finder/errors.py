"""Error taxonomy for the cafe discovery engine.

- ValidationError: bad/missing/out-of-range input, reported as HTTP 400
- NotFoundError: a lookup resolved to nothing, reported as HTTP 404
- UpstreamError: the places provider failed, reported as a generic HTTP 500
- CacheError: a storage failure, always swallowed by the result cache
"""


class CafeFinderError(Exception):
    """Base class for all engine errors."""


class ValidationError(CafeFinderError):
    """Input failed validation. The message is safe to show to users."""


class InvalidCoordinates(ValidationError):
    pass


class RadiusTooSmall(ValidationError):
    pass


class RadiusTooLarge(ValidationError):
    pass


class InvalidPlaceId(ValidationError):
    pass


class InvalidFilter(ValidationError):
    pass


class InvalidText(ValidationError):
    pass


class NotFoundError(CafeFinderError):
    """A lookup succeeded but matched nothing."""


class UpstreamError(CafeFinderError):
    """The places provider returned an error status or could not be reached.

    Attributes:
        status: Provider status string (e.g. "REQUEST_DENIED"), if any
    """

    def __init__(self, message: str, status: str | None = None) -> None:
        super().__init__(message)
        self.status = status


class CacheError(CafeFinderError):
    """The cache store could not read or write an entry."""
