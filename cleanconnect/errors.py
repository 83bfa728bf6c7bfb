"""Error taxonomy for the booking and matching core.

Hard failures (validation, catalog, core persistence) are raised to the
caller. Channel failures are raised by collaborators and absorbed by the
side step or fan-out that made the call.
"""

from typing import Any, Optional


class MarketplaceError(Exception):
    """Base class for errors surfaced to the web layer."""

    code = "INTERNAL_ERROR"
    retryable = False

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Structured form suitable for a JSON error response."""
        payload: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.details is not None:
            payload["details"] = self.details
        if self.retryable:
            payload["retryable"] = True
        return payload


class ValidationError(MarketplaceError):
    """Malformed booking request. ``details`` holds ``{field, message}`` entries."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: Optional[list[dict[str, str]]] = None) -> None:
        super().__init__(message, details or [])


class ServiceNotFound(MarketplaceError):
    """A referenced catalog service id has no entry."""

    code = "SERVICE_NOT_FOUND"

    def __init__(self, service_id: str) -> None:
        super().__init__(f"Service not found: {service_id}", {"service_id": service_id})
        self.service_id = service_id


class PersistenceError(MarketplaceError):
    """The booking store failed or timed out on a core write."""

    code = "PERSISTENCE_ERROR"


class BookingNotFound(MarketplaceError):
    code = "BOOKING_NOT_FOUND"

    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking {booking_id} not found.", {"booking_id": booking_id})
        self.booking_id = booking_id


class ConflictError(MarketplaceError):
    """Compare-and-set on booking status failed; the caller may re-read and retry."""

    code = "CONFLICT"
    retryable = True

    def __init__(self, booking_id: str, expected: str, actual: str) -> None:
        super().__init__(
            f"Booking {booking_id} is '{actual}', expected '{expected}'.",
            {"booking_id": booking_id, "expected_status": expected, "actual_status": actual},
        )
        self.booking_id = booking_id
        self.expected = expected
        self.actual = actual


class ChannelError(MarketplaceError):
    """Delivery failure on an outbound channel (email, SMS, payment, in-app)."""

    code = "CHANNEL_ERROR"

    def __init__(self, channel: str, message: str) -> None:
        super().__init__(f"{channel}: {message}", {"channel": channel})
        self.channel = channel
