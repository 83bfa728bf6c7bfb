"""
Booking lifecycle orchestrator.

Creation runs in a fixed causal order:

    validate -> resolve catalog + price -> persist booking + items -> side steps

Only persistence decides success. If the items write fails after the
booking row exists, the row is deleted before the error is returned, so a
caller never sees a booking without its line items. The side steps (payment
intent, customer confirmation, provider fan-out) start after persistence,
run concurrently, and are each fail-soft: their outcomes are collected into
a SideStepReport instead of failing the booking.

Status changes after creation go through the state machine and a
compare-and-set on the store, keyed on the status the caller last saw.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Optional, TypeVar, Union

from pydantic import ValidationError as PydanticValidationError

from cleanconnect.booking.pricing import price_line_items, summarize
from cleanconnect.booking.state_machine import (
    BookingStateMachine,
    BookingTrigger,
    InvalidTransitionError,
)
from cleanconnect.config import AppConfig, settings
from cleanconnect.errors import (
    BookingNotFound,
    MarketplaceError,
    PersistenceError,
    ServiceNotFound,
    ValidationError,
)
from cleanconnect.logging_context import get_request_logger, request_scope
from cleanconnect.notifications.dispatcher import NotificationDispatcher
from cleanconnect.schemas.booking_schema import (
    Booking,
    BookingItem,
    BookingRequest,
    BookingStatus,
    PriceBreakdown,
    Service,
)
from cleanconnect.schemas.notification_schema import FanoutResult
from cleanconnect.tools.interfaces import BookingStore, PaymentGateway, ServiceCatalog

logger = get_request_logger(__name__)

T = TypeVar("T")

PAYMENT_INTENT = "payment_intent"
CUSTOMER_CONFIRMATION = "customer_confirmation"
PROVIDER_ALERT = "provider_alert"

STATUS_MESSAGES: dict[BookingStatus, str] = {
    BookingStatus.CONFIRMED: "Your cleaning booking is confirmed.",
    BookingStatus.IN_PROGRESS: "Your cleaner has started the job.",
    BookingStatus.COMPLETED: "Your cleaning is complete. Thanks for booking with us!",
    BookingStatus.CANCELLED: "Your cleaning booking has been cancelled.",
}


@dataclass
class SideStepResult:
    """Outcome of one best-effort step run after a booking is persisted."""
    name: str
    ok: bool
    error: Optional[str] = None


@dataclass
class SideStepReport:
    results: list[SideStepResult] = field(default_factory=list)
    fanout: Optional[FanoutResult] = None

    def get(self, name: str) -> Optional[SideStepResult]:
        for result in self.results:
            if result.name == name:
                return result
        return None

    @property
    def all_ok(self) -> bool:
        return all(r.ok for r in self.results)

    @property
    def warnings(self) -> list[str]:
        return [f"{r.name}: {r.error}" for r in self.results if not r.ok]


@dataclass
class BookingCreationResult:
    booking: Booking
    items: list[BookingItem]
    pricing: PriceBreakdown
    side_steps: SideStepReport


def validate_booking_request(payload: Union[BookingRequest, dict[str, Any]]) -> BookingRequest:
    """Parse a raw request body, raising ValidationError with per-field detail."""
    if isinstance(payload, BookingRequest):
        return payload
    try:
        return BookingRequest.model_validate(payload)
    except PydanticValidationError as exc:
        details = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        raise ValidationError("Invalid request data", details) from None


class BookingOrchestrator:
    """Creates bookings and drives their status transitions."""

    def __init__(
        self,
        catalog: ServiceCatalog,
        store: BookingStore,
        payments: PaymentGateway,
        dispatcher: NotificationDispatcher,
        config: Optional[AppConfig] = None,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._payments = payments
        self._dispatcher = dispatcher
        self._config = config or settings

    # ------------------------------------------------------------------ #
    # Collaborator call helpers
    # ------------------------------------------------------------------ #

    async def _store_call(self, awaitable: Awaitable[T], action: str) -> T:
        """Core persistence call; any failure or timeout is a hard PersistenceError."""
        try:
            return await asyncio.wait_for(
                awaitable, timeout=self._config.persistence.write_timeout_sec
            )
        except MarketplaceError:
            raise
        except asyncio.TimeoutError as exc:
            raise PersistenceError(f"Timed out while {action}.") from exc
        except Exception as exc:
            raise PersistenceError(f"Failed while {action}.") from exc

    async def _side_call(self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(
            awaitable, timeout=self._config.notifications.channel_timeout_sec
        )

    # ------------------------------------------------------------------ #
    # Creation
    # ------------------------------------------------------------------ #

    async def _resolve_services(self, request: BookingRequest) -> dict[str, Service]:
        services: dict[str, Service] = {}
        for selection in request.services:
            if selection.service_id in services:
                continue
            service = await self._catalog.get_service(selection.service_id)
            if service is None:
                raise ServiceNotFound(selection.service_id)
            services[selection.service_id] = service
        return services

    async def _rollback(self, booking_id: str) -> None:
        """Compensating delete. Its own failure is logged, never raised."""
        try:
            await self._store_call(self._store.delete_booking(booking_id), "rolling back booking")
            logger.info("Rolled back booking %s after item failure", booking_id)
        except Exception:
            logger.exception("Rollback of booking %s failed; row may be orphaned", booking_id)

    async def _persist(
        self,
        customer_id: str,
        request: BookingRequest,
        items: list[BookingItem],
        pricing: PriceBreakdown,
    ) -> tuple[Booking, list[BookingItem]]:
        fields = {
            "customer_id": customer_id,
            "address_id": request.address_id,
            "service_date": request.service_date,
            "duration_minutes": (
                request.duration_minutes or self._config.scheduling.default_duration_minutes
            ),
            "status": BookingStatus.PENDING,
            "subtotal": pricing.subtotal,
            "commission": pricing.commission,
            "processing_fee": pricing.processing_fee,
            "discount_amount": pricing.discount_amount,
            "total_amount": pricing.total,
            "special_instructions": request.special_instructions,
            "home_details": request.home_details,
            "recurring_frequency": request.recurring_frequency,
            "payment_method_id": request.payment_method_id,
        }
        booking = await self._store_call(self._store.create_booking(fields), "creating booking")

        try:
            await self._store_call(
                self._store.create_booking_items(booking.id, items), "creating booking items"
            )
        except MarketplaceError:
            logger.error("Item insert failed for booking %s", booking.id)
            await self._rollback(booking.id)
            raise

        stored_items = [item.model_copy(update={"booking_id": booking.id}) for item in items]
        return booking, stored_items

    async def _create_payment_intent(self, booking: Booking) -> Booking:
        intent = await self._side_call(self._payments.create_payment_intent(
            amount=booking.total_amount,
            customer_ref=booking.customer_id,
            provider_ref=booking.provider_id,
            booking_id=booking.id,
            payment_method_id=booking.payment_method_id,
            application_fee=booking.commission,
        ))
        new_status = BookingStateMachine(booking.status).transition(
            BookingTrigger.PAYMENT_INITIATED
        )
        return await self._side_call(self._store.update_booking_status(
            booking.id, booking.status, new_status, {"payment_intent_id": intent.id},
        ))

    async def _alert_providers(self, booking: Booking) -> FanoutResult:
        address = await self._side_call(self._store.get_address(booking.address_id))
        if address is None:
            raise LookupError(f"Address {booking.address_id} not found")
        return await self._dispatcher.notify_available_providers(booking, address.location)

    async def _run_step(self, name: str, awaitable: Awaitable[Any]) -> tuple[SideStepResult, Any]:
        try:
            value = await awaitable
        except Exception as exc:
            logger.warning("Side step %s failed: %r", name, exc)
            return SideStepResult(name=name, ok=False, error=repr(exc)), None
        return SideStepResult(name=name, ok=True), value

    async def _run_side_steps(self, booking: Booking) -> tuple[Booking, SideStepReport]:
        (payment, updated), (confirmation, _), (alert, fanout) = await asyncio.gather(
            self._run_step(PAYMENT_INTENT, self._create_payment_intent(booking)),
            self._run_step(
                CUSTOMER_CONFIRMATION, self._dispatcher.send_booking_confirmation(booking)
            ),
            self._run_step(PROVIDER_ALERT, self._alert_providers(booking)),
        )
        report = SideStepReport(results=[payment, confirmation, alert], fanout=fanout)
        return (updated or booking), report

    async def create_booking(
        self, customer_id: str, request: Union[BookingRequest, dict[str, Any]]
    ) -> BookingCreationResult:
        """Validate, price, persist, then run best-effort side steps.

        Raises:
            ValidationError: Malformed request. Nothing is written.
            ServiceNotFound: Unknown service id. Nothing is written.
            PersistenceError: Booking or items write failed or timed out.
                A booking row written before an item failure is deleted.
        """
        if not customer_id or not customer_id.strip():
            raise ValidationError(
                "Invalid request data",
                [{"field": "customerId", "message": "Customer is required"}],
            )
        booking_request = validate_booking_request(request)

        services = await self._resolve_services(booking_request)
        items = price_line_items(services, booking_request.home_details, booking_request.services)
        pricing = summarize(items, self._config.pricing)

        booking, stored_items = await self._persist(customer_id, booking_request, items, pricing)
        with request_scope(booking.id):
            logger.info(
                "Booking %s created: %d item(s), total %s",
                booking.id, len(stored_items), booking.total_amount,
            )
            booking, report = await self._run_side_steps(booking)
            if not report.all_ok:
                logger.warning(
                    "Booking %s created with side-step warnings: %s",
                    booking.id, report.warnings,
                )

        return BookingCreationResult(
            booking=booking, items=stored_items, pricing=pricing, side_steps=report,
        )

    # ------------------------------------------------------------------ #
    # Status transitions
    # ------------------------------------------------------------------ #

    async def get_booking(self, booking_id: str) -> Booking:
        booking = await self._store_call(self._store.get_booking(booking_id), "loading booking")
        if booking is None:
            raise BookingNotFound(booking_id)
        return booking

    async def _notify_status(self, booking: Booking) -> bool:
        message = STATUS_MESSAGES.get(booking.status)
        if message is None:
            return False
        try:
            await self._dispatcher.send_status_update(booking, booking.status.value, message)
            return True
        except Exception as exc:
            logger.warning("Status update notice for booking %s failed: %r", booking.id, exc)
            return False

    async def transition(
        self,
        booking_id: str,
        expected_status: BookingStatus,
        trigger: BookingTrigger,
        extra_fields: Optional[dict[str, Any]] = None,
    ) -> Booking:
        """Move a booking along one edge of the lifecycle.

        Raises:
            InvalidTransitionError: ``trigger`` is not allowed from ``expected_status``.
            ConflictError: The stored status no longer equals ``expected_status``.
        """
        expected_status = BookingStatus(expected_status)
        machine = BookingStateMachine(expected_status)
        new_status = machine.transition(trigger)
        with request_scope(booking_id):
            booking = await self._store_call(
                self._store.update_booking_status(
                    booking_id, expected_status, new_status, extra_fields
                ),
                "updating booking status",
            )
            logger.info(
                "Booking %s: %s (%s)",
                booking_id, " -> ".join(machine.get_state_trace()), trigger.value,
            )
            if new_status != expected_status:
                await self._notify_status(booking)
        return booking

    async def confirm_payment(
        self, booking_id: str, expected_status: BookingStatus = BookingStatus.PAYMENT_PENDING
    ) -> Booking:
        return await self.transition(booking_id, expected_status, BookingTrigger.PAYMENT_CONFIRMED)

    async def assign_provider(
        self,
        booking_id: str,
        provider_id: str,
        expected_status: BookingStatus,
        business_name: Optional[str] = None,
    ) -> Booking:
        booking = await self.transition(
            booking_id,
            expected_status,
            BookingTrigger.PROVIDER_ASSIGNED,
            {"provider_id": provider_id},
        )
        try:
            await self._dispatcher.send_provider_assignment(booking, provider_id, business_name)
        except Exception as exc:
            logger.warning("Assignment notices for booking %s failed: %r", booking_id, exc)
        return booking

    async def start_job(
        self, booking_id: str, expected_status: BookingStatus = BookingStatus.CONFIRMED
    ) -> Booking:
        booking = await self.get_booking(booking_id)
        if booking.provider_id is None:
            raise InvalidTransitionError(f"Booking {booking_id} has no assigned provider.")
        return await self.transition(booking_id, expected_status, BookingTrigger.JOB_STARTED)

    async def complete_job(
        self, booking_id: str, expected_status: BookingStatus = BookingStatus.IN_PROGRESS
    ) -> Booking:
        return await self.transition(booking_id, expected_status, BookingTrigger.JOB_COMPLETED)

    async def cancel(
        self, booking_id: str, expected_status: BookingStatus, reason: Optional[str] = None
    ) -> Booking:
        return await self.transition(
            booking_id, expected_status, BookingTrigger.CANCELLED, {"cancellation_reason": reason},
        )
