"""
Process-level wiring of collaborators into the core components.

Collaborators are built once at startup and passed into each component's
constructor; nothing in the core reaches for a module-level client.
``build_in_memory()`` wires the in-memory tools for local runs and tests.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from cleanconnect.booking.orchestrator import BookingOrchestrator
from cleanconnect.config import AppConfig, settings
from cleanconnect.notifications.dispatcher import NotificationDispatcher
from cleanconnect.tools.catalog import InMemoryServiceCatalog
from cleanconnect.tools.channels import (
    InMemoryEmailSender,
    InMemoryNotificationStore,
    InMemoryPaymentGateway,
    InMemorySmsSender,
)
from cleanconnect.tools.directory import InMemoryCustomerDirectory, InMemoryProviderPool
from cleanconnect.tools.store import InMemoryBookingStore

logger = logging.getLogger(__name__)


@dataclass
class InMemoryServices:
    """Every in-memory collaborator plus the components built on them."""

    catalog: InMemoryServiceCatalog
    store: InMemoryBookingStore
    providers: InMemoryProviderPool
    customers: InMemoryCustomerDirectory
    email: InMemoryEmailSender
    sms: InMemorySmsSender
    notifications: InMemoryNotificationStore
    payments: InMemoryPaymentGateway
    dispatcher: NotificationDispatcher
    orchestrator: BookingOrchestrator


def build_in_memory(config: Optional[AppConfig] = None) -> InMemoryServices:
    config = config or settings
    catalog = InMemoryServiceCatalog()
    store = InMemoryBookingStore()
    providers = InMemoryProviderPool()
    customers = InMemoryCustomerDirectory()
    email = InMemoryEmailSender()
    sms = InMemorySmsSender()
    notifications = InMemoryNotificationStore()
    payments = InMemoryPaymentGateway()

    dispatcher = NotificationDispatcher(
        email=email,
        notification_store=notifications,
        sms=sms,
        provider_pool=providers,
        customers=customers,
        config=config.notifications,
    )
    orchestrator = BookingOrchestrator(
        catalog=catalog,
        store=store,
        payments=payments,
        dispatcher=dispatcher,
        config=config,
    )
    logger.debug("In-memory services wired")
    return InMemoryServices(
        catalog=catalog,
        store=store,
        providers=providers,
        customers=customers,
        email=email,
        sms=sms,
        notifications=notifications,
        payments=payments,
        dispatcher=dispatcher,
        orchestrator=orchestrator,
    )
