"""
In-memory outbound channels: email, SMS, in-app notifications, payments.

In production, these would wrap the transactional email provider, the SMS
gateway, the notifications table, and the payment processor's split-payment
API. These versions record what they were asked to send so callers and
tests can inspect it.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from cleanconnect.config import settings
from cleanconnect.schemas.notification_schema import Notification
from cleanconnect.utils import normalize_phone

logger = logging.getLogger(__name__)


@dataclass
class SentEmail:
    kind: str
    recipient: str
    booking_id: str


class InMemoryEmailSender:
    def __init__(self) -> None:
        self.sent: list[SentEmail] = []

    async def send_booking_confirmation(self, customer_ref: str, booking_id: str) -> None:
        self.sent.append(SentEmail("booking_confirmation", customer_ref, booking_id))
        logger.info("Booking confirmation email queued for %s (%s)", customer_ref, booking_id)

    async def send_provider_opportunity(self, provider_ref: str, booking_id: str) -> None:
        self.sent.append(SentEmail("provider_opportunity", provider_ref, booking_id))
        logger.info("Opportunity email queued for provider %s (%s)", provider_ref, booking_id)


@dataclass
class SentSms:
    phone: str
    message: str


class InMemorySmsSender:
    def __init__(self) -> None:
        self.sent: list[SentSms] = []

    async def send_sms(self, phone: str, message: str) -> None:
        self.sent.append(SentSms(normalize_phone(phone), message))
        logger.info("SMS queued for %s", normalize_phone(phone))


class InMemoryNotificationStore:
    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    async def create_notification(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def for_user(self, user_id: str) -> list[Notification]:
        return [n for n in self.notifications if n.user_id == user_id]


@dataclass
class PaymentIntentRecord:
    """Payment intent placeholder; amounts are in the smallest currency unit."""

    id: str
    amount: int
    currency: str
    customer_ref: str
    booking_id: str
    provider_ref: Optional[str] = None
    payment_method_id: Optional[str] = None
    application_fee_amount: Optional[int] = None
    status: str = "requires_confirmation"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def _to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).to_integral_value())


class InMemoryPaymentGateway:
    """Creates split-payment intents: the platform keeps the commission as an application fee."""

    def __init__(self) -> None:
        self.intents: dict[str, PaymentIntentRecord] = {}

    async def create_payment_intent(
        self,
        amount: Decimal,
        customer_ref: str,
        provider_ref: Optional[str],
        booking_id: str,
        payment_method_id: Optional[str],
        application_fee: Optional[Decimal] = None,
    ) -> PaymentIntentRecord:
        intent = PaymentIntentRecord(
            id=f"pi_{uuid.uuid4().hex[:16]}",
            amount=_to_minor_units(amount),
            currency=settings.pricing.currency,
            customer_ref=customer_ref,
            booking_id=booking_id,
            provider_ref=provider_ref,
            payment_method_id=payment_method_id,
            application_fee_amount=(
                _to_minor_units(application_fee) if application_fee is not None else None
            ),
        )
        self.intents[intent.id] = intent
        logger.info("Payment intent %s created for booking %s", intent.id, booking_id)
        return intent
