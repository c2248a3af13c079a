"""
Error kinds raised by the dashboard services.

Every error carries the HTTP status it maps to, so the API layer can turn
any of them into a ``{"error": message}`` JSON response without a lookup
table. Nothing in this layer retries: an error aborts the whole request.

CHANGELOG:
- 2026-10-19: Initial creation
"""


class DashboardError(Exception):
    """Base class for all dashboard errors.

    Attributes:
        status_code: HTTP status returned to the client.
        message: Human-readable description, sent as the ``error`` field.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(DashboardError):
    """Unknown source identifier, or no data for a source."""

    status_code = 404


class InvalidArgumentError(DashboardError):
    """Malformed request argument such as a time-range token."""

    status_code = 400


class UpstreamUnavailableError(DashboardError):
    """The telemetry database could not be reached or queried."""

    status_code = 503


class RequestTimeoutError(DashboardError):
    """A dashboard computation exceeded the configured request timeout."""

    status_code = 504


class DataFetchError(DashboardError):
    """Any other failure while building a response."""

    status_code = 500
