from __future__ import annotations


class GoogleMapsError(RuntimeError):
    """Base class for failures talking to the Google Maps web services."""


class GeoConfigurationError(GoogleMapsError):
    """Raised when a lookup needs the network but no API key is configured.

    Cached lookups never raise this; only the code path that would call
    Google does.
    """


class RemoteApiError(GoogleMapsError):
    """Raised when Google answers a required call with a non-success status.

    Args:
        message: High-level human-readable message for logs.
        status: The ``status`` string from the response (e.g. ``"REQUEST_DENIED"``)
            or the HTTP status code when the request failed at the transport level.
    """

    def __init__(self, message: str, *, status: str | int | None = None) -> None:
        super().__init__(message)
        self.status = status
