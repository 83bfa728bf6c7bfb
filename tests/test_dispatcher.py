"""Tests for provider fan-out and customer notices."""

import asyncio
from decimal import Decimal

import pytest

from cleanconnect.config import NotificationConfig
from cleanconnect.errors import ChannelError
from cleanconnect.notifications.dispatcher import NotificationDispatcher
from cleanconnect.schemas.booking_schema import Booking, HomeDetails
from cleanconnect.schemas.customer_schema import Customer
from cleanconnect.schemas.notification_schema import NotificationOutcome, NotificationType
from cleanconnect.schemas.provider_schema import Location
from cleanconnect.tools.channels import (
    InMemoryEmailSender,
    InMemoryNotificationStore,
    InMemorySmsSender,
)
from cleanconnect.tools.directory import InMemoryCustomerDirectory, InMemoryProviderPool
from tests.conftest import JOB_LOCATION, MONDAY, at, make_provider


def make_booking(booking_id: str = "bk_1", **overrides) -> Booking:
    fields = dict(
        id=booking_id,
        customer_id="cust_1",
        address_id="a1",
        service_date=at(MONDAY, 10),
        duration_minutes=120,
        subtotal=Decimal("140.00"),
        commission=Decimal("25.20"),
        processing_fee=Decimal("4.36"),
        total_amount=Decimal("169.56"),
        home_details=HomeDetails(square_footage=1000),
    )
    fields.update(overrides)
    return Booking(**fields)


class FailingEmailSender(InMemoryEmailSender):
    """Fails opportunity emails for the listed providers."""

    def __init__(self, fail_for: set[str]) -> None:
        super().__init__()
        self.fail_for = fail_for

    async def send_provider_opportunity(self, provider_ref: str, booking_id: str) -> None:
        if provider_ref in self.fail_for:
            raise ChannelError("email", "mailbox unavailable")
        await super().send_provider_opportunity(provider_ref, booking_id)


class SlowEmailSender(InMemoryEmailSender):
    async def send_provider_opportunity(self, provider_ref: str, booking_id: str) -> None:
        await asyncio.sleep(1)


class FailingNotificationStore(InMemoryNotificationStore):
    def __init__(self, fail_for: set[str]) -> None:
        super().__init__()
        self.fail_for = fail_for

    async def create_notification(self, notification) -> None:
        if notification.user_id in self.fail_for:
            raise ChannelError("in_app", "insert rejected")
        await super().create_notification(notification)


class FailingSmsSender(InMemorySmsSender):
    async def send_sms(self, phone: str, message: str) -> None:
        raise ChannelError("sms", "carrier rejected")


def _dispatcher(email=None, store=None, sms=None, pool=None, customers=None, **config):
    return NotificationDispatcher(
        email=email or InMemoryEmailSender(),
        notification_store=store or InMemoryNotificationStore(),
        sms=sms,
        provider_pool=pool,
        customers=customers,
        config=NotificationConfig(**config),
    )


class TestNotify:
    @pytest.mark.asyncio
    async def test_all_candidates_notified(self):
        email = InMemoryEmailSender()
        store = InMemoryNotificationStore()
        dispatcher = _dispatcher(email=email, store=store)
        candidates = [make_provider("p1"), make_provider("p2"), make_provider("p3")]

        result = await dispatcher.notify(candidates, make_booking())

        assert (result.total, result.successful, result.failed) == (3, 3, 0)
        assert sorted(e.recipient for e in email.sent) == ["p1", "p2", "p3"]
        note = store.for_user("p2")[0]
        assert note.type == NotificationType.BOOKING_OPPORTUNITY
        assert note.title == "New Booking Opportunity"
        assert note.message == "A new cleaning job is available on 01/07/2030"
        assert note.data == {"bookingId": "bk_1"}
        assert note.is_read is False

    @pytest.mark.asyncio
    async def test_email_failures_are_absorbed(self):
        dispatcher = _dispatcher(email=FailingEmailSender({"p1", "p2"}))
        candidates = [make_provider("p1"), make_provider("p2"), make_provider("p3")]

        result = await dispatcher.notify(candidates, make_booking())

        assert result.successful == 3
        assert result.failed == 0
        by_id = {r.provider_id: r for r in result.per_provider}
        assert by_id["p1"].failed_channels == ["email"]
        assert by_id["p3"].failed_channels == []

    @pytest.mark.asyncio
    async def test_in_app_failure_marks_candidate_failed(self):
        store = FailingNotificationStore({"p2"})
        dispatcher = _dispatcher(store=store)
        candidates = [make_provider("p1"), make_provider("p2"), make_provider("p3")]

        result = await dispatcher.notify(candidates, make_booking())

        assert (result.total, result.successful, result.failed) == (3, 2, 1)
        failed = [r for r in result.per_provider if r.outcome == NotificationOutcome.FAILURE]
        assert [r.provider_id for r in failed] == ["p2"]
        assert "insert rejected" in failed[0].error
        assert len(store.for_user("p1")) == 1
        assert len(store.for_user("p3")) == 1

    @pytest.mark.asyncio
    async def test_sms_sent_to_opted_in_candidate(self):
        sms = InMemorySmsSender()
        dispatcher = _dispatcher(sms=sms, platform_name="CleanConnect")
        candidates = [
            make_provider("p1", phone="(555) 123-4567", sms=True),
            make_provider("p2", phone="555-000-1111", sms=False),
            make_provider("p3", sms=True),
        ]

        await dispatcher.notify(candidates, make_booking())

        assert len(sms.sent) == 1
        assert sms.sent[0].phone == "5551234567"
        assert sms.sent[0].message == (
            "New cleaning job available! Check your CleanConnect app for details. Job ID: bk_1"
        )

    @pytest.mark.asyncio
    async def test_sms_failure_is_swallowed(self):
        dispatcher = _dispatcher(sms=FailingSmsSender())
        candidate = make_provider("p1", phone="5551234567", sms=True)

        result = await dispatcher.notify([candidate], make_booking())

        assert result.successful == 1
        assert result.per_provider[0].failed_channels == ["sms"]

    @pytest.mark.asyncio
    async def test_sms_disabled_skips_channel(self):
        sms = InMemorySmsSender()
        dispatcher = _dispatcher(sms=sms, sms_enabled=False)
        candidate = make_provider("p1", phone="5551234567", sms=True)

        result = await dispatcher.notify([candidate], make_booking())

        assert sms.sent == []
        assert result.per_provider[0].failed_channels == []

    @pytest.mark.asyncio
    async def test_channel_timeout_counts_as_channel_failure(self):
        store = InMemoryNotificationStore()
        dispatcher = _dispatcher(email=SlowEmailSender(), store=store, channel_timeout_sec=0.01)

        result = await dispatcher.notify([make_provider("p1")], make_booking())

        assert result.successful == 1
        assert result.per_provider[0].failed_channels == ["email"]
        assert len(store.for_user("p1")) == 1

    @pytest.mark.asyncio
    async def test_no_candidates(self):
        result = await _dispatcher().notify([], make_booking())
        assert (result.total, result.successful, result.failed) == (0, 0, 0)


class TestNotifyAvailableProviders:
    @pytest.mark.asyncio
    async def test_only_matching_providers_notified(self):
        pool = InMemoryProviderPool([
            make_provider("near"),
            make_provider("far", location=Location(latitude=41.8781, longitude=-87.6298)),
            make_provider("unverified", verification_status="pending"),
        ])
        email = InMemoryEmailSender()
        dispatcher = _dispatcher(email=email, pool=pool)

        result = await dispatcher.notify_available_providers(make_booking(), JOB_LOCATION)

        assert result.total == 1
        assert [e.recipient for e in email.sent] == ["near"]

    @pytest.mark.asyncio
    async def test_booking_duration_is_used(self):
        pool = InMemoryProviderPool([make_provider("p1")])
        dispatcher = _dispatcher(pool=pool)
        booking = make_booking(service_date=at(MONDAY, 16), duration_minutes=120)

        result = await dispatcher.notify_available_providers(booking, JOB_LOCATION)

        assert result.total == 0

    @pytest.mark.asyncio
    async def test_requires_provider_pool(self):
        with pytest.raises(RuntimeError):
            await _dispatcher().notify_available_providers(make_booking(), JOB_LOCATION)


class TestCustomerNotices:
    @pytest.mark.asyncio
    async def test_booking_confirmation_email(self):
        email = InMemoryEmailSender()
        await _dispatcher(email=email).send_booking_confirmation(make_booking())
        assert email.sent[0].kind == "booking_confirmation"
        assert email.sent[0].recipient == "cust_1"

    @pytest.mark.asyncio
    async def test_status_update_with_sms(self):
        store = InMemoryNotificationStore()
        sms = InMemorySmsSender()
        customers = InMemoryCustomerDirectory([
            Customer(customer_id="cust_1", name="Pat", phone="+1 555 222 3333",
                     preferences={"sms": True}),
        ])
        dispatcher = _dispatcher(store=store, sms=sms, customers=customers)

        await dispatcher.send_status_update(make_booking(), "confirmed", "All set.")

        note = store.for_user("cust_1")[0]
        assert note.type == NotificationType.BOOKING_UPDATE
        assert note.data == {"bookingId": "bk_1", "status": "confirmed"}
        assert sms.sent[0].phone == "+15552223333"
        assert sms.sent[0].message == "All set."

    @pytest.mark.asyncio
    async def test_status_update_without_sms_opt_in(self):
        sms = InMemorySmsSender()
        customers = InMemoryCustomerDirectory([
            Customer(customer_id="cust_1", name="Pat", phone="5552223333"),
        ])
        dispatcher = _dispatcher(sms=sms, customers=customers)

        await dispatcher.send_status_update(make_booking(), "confirmed", "All set.")

        assert sms.sent == []

    @pytest.mark.asyncio
    async def test_provider_assignment_notifies_both_sides(self):
        store = InMemoryNotificationStore()
        dispatcher = _dispatcher(store=store)

        await dispatcher.send_provider_assignment(make_booking(), "prov_9", "Sparkle Home Co.")

        customer_note = store.for_user("cust_1")[0]
        assert customer_note.type == NotificationType.PROVIDER_ASSIGNED
        assert customer_note.message == "Sparkle Home Co. has been assigned to your booking"
        provider_note = store.for_user("prov_9")[0]
        assert provider_note.type == NotificationType.BOOKING_ACCEPTED
        assert provider_note.message == "You've been assigned a cleaning job on 01/07/2030"
