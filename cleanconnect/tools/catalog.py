"""
In-memory service catalog with per-square-foot pricing.

In production, this would read the ``services`` table of the marketplace
database.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from cleanconnect.schemas.booking_schema import Service

logger = logging.getLogger(__name__)

DEFAULT_SERVICES: list[Service] = [
    Service(
        id="standard",
        name="Standard Cleaning",
        base_price=Decimal("60.00"),
        price_per_sqft=Decimal("0.08"),
        description="Dusting, vacuuming, mopping, kitchen and bathroom surfaces.",
    ),
    Service(
        id="deep",
        name="Deep Cleaning",
        base_price=Decimal("120.00"),
        price_per_sqft=Decimal("0.12"),
        description="Standard clean plus baseboards, inside appliances, and detailed scrubbing.",
    ),
    Service(
        id="move_in",
        name="Move-In Cleaning",
        base_price=Decimal("150.00"),
        price_per_sqft=Decimal("0.15"),
        description="Empty-home clean including cabinets, closets, and fixtures.",
    ),
    Service(
        id="move_out",
        name="Move-Out Cleaning",
        base_price=Decimal("150.00"),
        price_per_sqft=Decimal("0.15"),
        description="End-of-tenancy clean to landlord inspection standard.",
    ),
    Service(
        id="inside_oven",
        name="Inside Oven",
        base_price=Decimal("35.00"),
        description="Add-on: degrease and clean the oven interior.",
    ),
    Service(
        id="inside_fridge",
        name="Inside Fridge",
        base_price=Decimal("30.00"),
        description="Add-on: empty, wipe, and sanitize the refrigerator.",
    ),
]


class InMemoryServiceCatalog:
    """Dict-backed catalog keyed by service id."""

    def __init__(self, services: Optional[Iterable[Service]] = None) -> None:
        source = DEFAULT_SERVICES if services is None else services
        self._services: dict[str, Service] = {s.id: s for s in source}

    async def get_service(self, service_id: str) -> Optional[Service]:
        """Look up a service by id. Returns None if not found."""
        service = self._services.get(service_id)
        if service is None:
            logger.debug("Catalog miss for service id %s", service_id)
        return service

    def get_all_services(self) -> list[Service]:
        return list(self._services.values())

    def add_service(self, service: Service) -> None:
        self._services[service.id] = service
