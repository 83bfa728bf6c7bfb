"""
Notification fan-out to matched providers, plus customer-facing notices.

Every candidate is notified concurrently and independently:

1. Opportunity email. A failure is logged and processing continues.
2. In-app notification record. A failure here is unrecoverable for that
   candidate and marks it failed.
3. SMS, when the candidate opted in and has a phone. Best-effort only.

The join waits for every candidate to settle; one candidate's failure never
stops the others from being attempted or counted. Each collaborator call is
bounded by the configured channel timeout, and a timeout counts as that
channel failing.
"""

import asyncio
from typing import Awaitable, Optional, Sequence, TypeVar

from cleanconnect.config import NotificationConfig, settings
from cleanconnect.logging_context import get_request_logger
from cleanconnect.matching.engine import find_candidates
from cleanconnect.schemas.booking_schema import Booking
from cleanconnect.schemas.notification_schema import (
    FanoutResult,
    Notification,
    NotificationOutcome,
    NotificationType,
    ProviderNotificationResult,
)
from cleanconnect.schemas.provider_schema import JobRequest, Location, ProviderCandidate
from cleanconnect.tools.interfaces import (
    CustomerDirectory,
    EmailSender,
    NotificationStore,
    ProviderPool,
    SmsSender,
)

logger = get_request_logger(__name__)

T = TypeVar("T")


def _format_service_date(booking: Booking) -> str:
    return booking.service_date.strftime("%m/%d/%Y")


class NotificationDispatcher:
    """Delivers booking notifications across email, in-app, and SMS channels."""

    def __init__(
        self,
        email: EmailSender,
        notification_store: NotificationStore,
        sms: Optional[SmsSender] = None,
        provider_pool: Optional[ProviderPool] = None,
        customers: Optional[CustomerDirectory] = None,
        config: Optional[NotificationConfig] = None,
    ) -> None:
        self._email = email
        self._store = notification_store
        self._sms = sms
        self._provider_pool = provider_pool
        self._customers = customers
        self._config = config or settings.notifications

    async def _call(self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(awaitable, timeout=self._config.channel_timeout_sec)

    @property
    def _sms_available(self) -> bool:
        return self._sms is not None and self._config.sms_enabled

    async def _send_sms(self, phone: str, message: str) -> bool:
        """SMS is optional; failures are logged and never raised."""
        if not self._sms_available:
            return False
        try:
            await self._call(self._sms.send_sms(phone, message))
            return True
        except Exception as exc:
            logger.warning("SMS delivery to %s failed: %s", phone, exc)
            return False

    # ------------------------------------------------------------------ #
    # Provider fan-out
    # ------------------------------------------------------------------ #

    async def _notify_candidate(
        self, candidate: ProviderCandidate, booking: Booking
    ) -> ProviderNotificationResult:
        failed_channels: list[str] = []

        try:
            await self._call(
                self._email.send_provider_opportunity(candidate.provider_id, booking.id)
            )
        except Exception as exc:
            failed_channels.append("email")
            logger.warning(
                "Opportunity email failed (booking=%s, provider=%s): %s",
                booking.id, candidate.provider_id, exc,
            )

        await self._call(self._store.create_notification(Notification(
            user_id=candidate.provider_id,
            type=NotificationType.BOOKING_OPPORTUNITY,
            title="New Booking Opportunity",
            message=f"A new cleaning job is available on {_format_service_date(booking)}",
            data={"bookingId": booking.id},
        )))

        if candidate.wants_sms and self._sms_available:
            sent = await self._send_sms(
                candidate.phone,
                f"New cleaning job available! Check your {self._config.platform_name} app "
                f"for details. Job ID: {booking.id}",
            )
            if not sent:
                failed_channels.append("sms")

        return ProviderNotificationResult(
            provider_id=candidate.provider_id,
            outcome=NotificationOutcome.SUCCESS,
            failed_channels=failed_channels,
        )

    async def notify(
        self, candidates: Sequence[ProviderCandidate], booking: Booking
    ) -> FanoutResult:
        """Notify every candidate concurrently and tally the outcomes.

        Never raises for a per-candidate failure.
        """
        settled = await asyncio.gather(
            *(self._notify_candidate(c, booking) for c in candidates),
            return_exceptions=True,
        )

        results: list[ProviderNotificationResult] = []
        for candidate, outcome in zip(candidates, settled):
            if isinstance(outcome, BaseException):
                logger.error(
                    "Failed to notify provider %s for booking %s: %r",
                    candidate.provider_id, booking.id, outcome,
                )
                results.append(ProviderNotificationResult(
                    provider_id=candidate.provider_id,
                    outcome=NotificationOutcome.FAILURE,
                    error=repr(outcome),
                ))
            else:
                results.append(outcome)

        tally = FanoutResult.from_results(results)
        logger.info(
            "Notified %d providers successfully, %d failed for booking %s",
            tally.successful, tally.failed, booking.id,
        )
        return tally

    async def notify_available_providers(
        self, booking: Booking, location: Location
    ) -> FanoutResult:
        """Match the booking's job against the provider pool and notify the matches."""
        if self._provider_pool is None:
            raise RuntimeError("NotificationDispatcher has no provider pool configured.")

        pool = await self._call(self._provider_pool.get_verified_active_providers())
        job = JobRequest(
            location=location,
            start_time=booking.service_date,
            duration_minutes=booking.duration_minutes,
        )
        candidates = find_candidates(job, pool)
        logger.info(
            "%d of %d provider(s) eligible for booking %s",
            len(candidates), len(pool), booking.id,
        )
        return await self.notify(candidates, booking)

    # ------------------------------------------------------------------ #
    # Customer notices
    # ------------------------------------------------------------------ #

    async def send_booking_confirmation(self, booking: Booking) -> None:
        await self._call(self._email.send_booking_confirmation(booking.customer_id, booking.id))

    async def send_status_update(self, booking: Booking, status: str, message: str) -> None:
        """In-app record for the customer, plus SMS when they opted in."""
        await self._call(self._store.create_notification(Notification(
            user_id=booking.customer_id,
            type=NotificationType.BOOKING_UPDATE,
            title=f"Booking {status}",
            message=message,
            data={"bookingId": booking.id, "status": status},
        )))

        if self._customers is None:
            return
        customer = await self._call(self._customers.get_customer(booking.customer_id))
        if customer is not None and customer.wants_sms:
            await self._send_sms(customer.phone, message)

    async def send_provider_assignment(
        self, booking: Booking, provider_id: str, business_name: Optional[str] = None
    ) -> None:
        """Tell the customer who is coming and the provider that the job is theirs."""
        who = business_name or "A cleaner"
        await self._call(self._store.create_notification(Notification(
            user_id=booking.customer_id,
            type=NotificationType.PROVIDER_ASSIGNED,
            title="Cleaner Assigned",
            message=f"{who} has been assigned to your booking",
            data={"bookingId": booking.id, "providerId": provider_id},
        )))
        await self._call(self._store.create_notification(Notification(
            user_id=provider_id,
            type=NotificationType.BOOKING_ACCEPTED,
            title="Booking Confirmed",
            message=f"You've been assigned a cleaning job on {_format_service_date(booking)}",
            data={"bookingId": booking.id},
        )))
