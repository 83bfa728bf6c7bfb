"""
Collaborator contracts consumed by the core.

Storage, catalog, payments, and outbound channels live outside this
library. Each is described here as a Protocol; implementations signal
failure by raising. ``cleanconnect.tools`` ships in-memory versions for
local use and tests.
"""

from decimal import Decimal
from typing import Any, Optional, Protocol, Sequence

from cleanconnect.schemas.booking_schema import (
    Address,
    Booking,
    BookingItem,
    BookingStatus,
    Service,
)
from cleanconnect.schemas.customer_schema import Customer
from cleanconnect.schemas.notification_schema import Notification
from cleanconnect.schemas.provider_schema import ProviderCandidate


class ProviderPool(Protocol):
    async def get_verified_active_providers(self) -> Sequence[ProviderCandidate]: ...


class ServiceCatalog(Protocol):
    async def get_service(self, service_id: str) -> Optional[Service]: ...


class BookingStore(Protocol):
    async def create_booking(self, fields: dict[str, Any]) -> Booking: ...

    async def create_booking_items(self, booking_id: str, items: list[BookingItem]) -> None: ...

    async def delete_booking(self, booking_id: str) -> None: ...

    async def update_booking_status(
        self,
        booking_id: str,
        expected_status: BookingStatus,
        new_status: BookingStatus,
        extra_fields: Optional[dict[str, Any]] = None,
    ) -> Booking:
        """Compare-and-set; raises ConflictError when the stored status differs."""
        ...

    async def get_booking(self, booking_id: str) -> Optional[Booking]: ...

    async def get_booking_items(self, booking_id: str) -> list[BookingItem]: ...

    async def get_address(self, address_id: str) -> Optional[Address]: ...


class PaymentIntent(Protocol):
    id: str


class PaymentGateway(Protocol):
    async def create_payment_intent(
        self,
        amount: Decimal,
        customer_ref: str,
        provider_ref: Optional[str],
        booking_id: str,
        payment_method_id: Optional[str],
        application_fee: Optional[Decimal] = None,
    ) -> PaymentIntent: ...


class EmailSender(Protocol):
    async def send_booking_confirmation(self, customer_ref: str, booking_id: str) -> None: ...

    async def send_provider_opportunity(self, provider_ref: str, booking_id: str) -> None: ...


class SmsSender(Protocol):
    async def send_sms(self, phone: str, message: str) -> None: ...


class NotificationStore(Protocol):
    async def create_notification(self, notification: Notification) -> None: ...


class CustomerDirectory(Protocol):
    async def get_customer(self, customer_id: str) -> Optional[Customer]: ...
