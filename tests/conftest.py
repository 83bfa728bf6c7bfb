"""Shared test fixtures and helpers."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

import pytest

from cleanconnect.schemas.availability_schema import WeeklyAvailability
from cleanconnect.schemas.booking_schema import Address, Service
from cleanconnect.schemas.provider_schema import Location, ProviderCandidate
from cleanconnect.tools.catalog import InMemoryServiceCatalog
from cleanconnect.wiring import build_in_memory

# 2030-01-07 is a Monday.
MONDAY = datetime(2030, 1, 7)
TUESDAY = datetime(2030, 1, 8)
SATURDAY = datetime(2030, 1, 12)

JOB_LOCATION = Location(latitude=39.7817, longitude=-89.6501)

OFFICE_HOURS = [{"start": "09:00", "end": "17:00"}]
WORKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")


def at(day: datetime, hour: int, minute: int = 0) -> datetime:
    return day.replace(hour=hour, minute=minute)


def make_availability(
    days: Optional[dict[str, list[dict[str, Any]]]] = None,
    exceptions: Optional[list[dict[str, Any]]] = None,
    timezone: Optional[str] = None,
) -> WeeklyAvailability:
    """Weekday office hours unless ``days`` says otherwise."""
    if days is None:
        days = {day: OFFICE_HOURS for day in WORKDAYS}
    return WeeklyAvailability(**days, exceptions=exceptions or [], timezone=timezone)


def make_provider(
    provider_id: str = "prov_1",
    verification_status: str = "verified",
    is_active: bool = True,
    location: Optional[Location] = JOB_LOCATION,
    radius: Optional[float] = 25,
    availability: Optional[WeeklyAvailability] = None,
    phone: Optional[str] = None,
    sms: bool = False,
) -> ProviderCandidate:
    return ProviderCandidate(
        provider_id=provider_id,
        verification_status=verification_status,
        is_active=is_active,
        service_location=location,
        service_radius_miles=radius,
        availability=availability or make_availability(),
        phone=phone,
        preferences={"email": True, "sms": sms},
    )


def make_booking_request(**overrides: Any) -> dict[str, Any]:
    """Camel-case request body as the web layer would submit it."""
    body: dict[str, Any] = {
        "addressId": "a1",
        "serviceDate": at(MONDAY, 10).isoformat(),
        "services": [{"serviceId": "s1", "quantity": 1}],
        "homeDetails": {"squareFootage": 1000, "bedrooms": 3, "bathrooms": 2},
        "paymentMethodId": "pm1",
    }
    body.update(overrides)
    return body


@pytest.fixture
def catalog():
    return InMemoryServiceCatalog([
        Service(id="s1", name="Standard Cleaning",
                base_price=Decimal("60"), price_per_sqft=Decimal("0.08")),
        Service(id="flat100", name="Flat Rate Clean", base_price=Decimal("100")),
        Service(id="oven", name="Inside Oven", base_price=Decimal("35")),
    ])


@pytest.fixture
def services(catalog):
    """In-memory wiring with the test catalog, one address, and one nearby provider."""
    wired = build_in_memory()
    for service in catalog.get_all_services():
        wired.catalog.add_service(service)
    wired.store.add_address(Address(id="a1", customer_id="cust_1", location=JOB_LOCATION))
    wired.providers.upsert_provider(make_provider())
    return wired
