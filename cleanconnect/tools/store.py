"""
In-memory booking store.

In production, this would be the marketplace's relational database
(bookings, booking_items, and addresses tables). Status updates are a
compare-and-set on the prior status so that a cancellation and an
assignment racing on the same booking cannot overwrite each other.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from cleanconnect.errors import BookingNotFound, ConflictError, PersistenceError
from cleanconnect.schemas.booking_schema import Address, Booking, BookingItem, BookingStatus

logger = logging.getLogger(__name__)


class InMemoryBookingStore:
    """Dict-backed store for bookings, their items, and service addresses."""

    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._items: dict[str, list[BookingItem]] = {}
        self._addresses: dict[str, Address] = {}

    async def create_booking(self, fields: dict[str, Any]) -> Booking:
        booking_id = f"bk_{uuid.uuid4().hex[:12]}"
        booking = Booking(id=booking_id, **fields)
        self._bookings[booking_id] = booking
        logger.info("Booking row created: %s for customer %s", booking_id, booking.customer_id)
        return booking

    async def create_booking_items(self, booking_id: str, items: list[BookingItem]) -> None:
        if booking_id not in self._bookings:
            raise PersistenceError(f"Cannot add items to missing booking {booking_id}.")
        self._items[booking_id] = [
            item.model_copy(update={"booking_id": booking_id}) for item in items
        ]

    async def delete_booking(self, booking_id: str) -> None:
        self._bookings.pop(booking_id, None)
        self._items.pop(booking_id, None)
        logger.info("Booking row deleted: %s", booking_id)

    async def update_booking_status(
        self,
        booking_id: str,
        expected_status: BookingStatus,
        new_status: BookingStatus,
        extra_fields: Optional[dict[str, Any]] = None,
    ) -> Booking:
        current = self._bookings.get(booking_id)
        if current is None:
            raise BookingNotFound(booking_id)
        if current.status != expected_status:
            raise ConflictError(booking_id, expected_status.value, current.status.value)

        updated = current.model_copy(
            update={
                **(extra_fields or {}),
                "status": new_status,
                "updated_at": datetime.now(timezone.utc),
            }
        )
        self._bookings[booking_id] = updated
        return updated

    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    async def get_booking_items(self, booking_id: str) -> list[BookingItem]:
        return list(self._items.get(booking_id, []))

    async def get_address(self, address_id: str) -> Optional[Address]:
        return self._addresses.get(address_id)

    def add_address(self, address: Address) -> None:
        self._addresses[address.id] = address

    def reset(self) -> None:
        """Clear all rows. Used by test fixtures for isolation."""
        self._bookings.clear()
        self._items.clear()
        self._addresses.clear()
