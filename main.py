"""
Local demo entry point.

Wires the in-memory collaborators, seeds two providers and a customer
address, creates one booking end-to-end, and prints the result.

Usage:
    python main.py
    python main.py --service deep --square-footage 1800
"""

import argparse
import asyncio
from datetime import datetime, timedelta

from cleanconnect.config import settings
from cleanconnect.errors import MarketplaceError
from cleanconnect.schemas.booking_schema import Address
from cleanconnect.schemas.provider_schema import Location, ProviderCandidate
from cleanconnect.wiring import build_in_memory

WEEKDAY_HOURS = [{"start": "08:00", "end": "17:00"}]


def _seed(services) -> None:
    services.store.add_address(Address(
        id="a1",
        customer_id="cust_demo",
        street_address="742 Evergreen Terrace",
        city="Springfield",
        state="IL",
        zip_code="62704",
        location=Location(latitude=39.7817, longitude=-89.6501),
    ))
    for provider_id, name, lat, lng in [
        ("prov_sparkle", "Sparkle Home Co.", 39.80, -89.64),
        ("prov_far", "Faraway Cleaners", 41.88, -87.63),
    ]:
        services.providers.upsert_provider(ProviderCandidate(
            provider_id=provider_id,
            business_name=name,
            verification_status="verified",
            service_location=Location(latitude=lat, longitude=lng),
            service_radius_miles=25,
            availability={day: WEEKDAY_HOURS for day in (
                "monday", "tuesday", "wednesday", "thursday", "friday",
            )},
        ))


async def _run_demo(service_id: str, square_footage: int) -> None:
    services = build_in_memory(settings)
    _seed(services)

    service_date = datetime.now().replace(hour=9, minute=0, second=0, microsecond=0)
    service_date += timedelta(days=1)
    while service_date.weekday() >= 5:
        service_date += timedelta(days=1)

    try:
        result = await services.orchestrator.create_booking("cust_demo", {
            "addressId": "a1",
            "serviceDate": service_date.isoformat(),
            "services": [{"serviceId": service_id, "quantity": 1}],
            "homeDetails": {"squareFootage": square_footage, "bedrooms": 3, "bathrooms": 2},
            "paymentMethodId": "pm_demo",
        })
    except MarketplaceError as exc:
        print(f"Booking failed: {exc.to_dict()}")
        return

    booking = result.booking
    print(f"Booking {booking.id} [{booking.status.value}]")
    print(f"  subtotal={booking.subtotal} commission={booking.commission} "
          f"fee={booking.processing_fee} total={booking.total_amount}")
    for step in result.side_steps.results:
        print(f"  {step.name}: {'ok' if step.ok else step.error}")
    if result.side_steps.fanout is not None:
        fanout = result.side_steps.fanout
        print(f"  providers notified: {fanout.successful}/{fanout.total}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create one booking against in-memory services")
    parser.add_argument(
        "--service",
        default="standard",
        help="Catalog service id to book (default: standard)",
    )
    parser.add_argument(
        "--square-footage",
        type=int,
        default=1000,
        help="Home size used for per-square-foot pricing (default: 1000)",
    )
    args = parser.parse_args()
    asyncio.run(_run_demo(args.service, args.square_footage))


if __name__ == "__main__":
    main()
