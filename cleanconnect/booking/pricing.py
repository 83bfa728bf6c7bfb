"""
Booking price calculation.

Each line item is priced as ``base_price + price_per_sqft * square_footage``
per unit. The platform commission and card-processing fee are charged on
top of the subtotal. All amounts are Decimal and each component is rounded
half-up to cents on its own, so totals reconcile with the payment
processor's figures.
"""

import logging
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from cleanconnect.config import PricingConfig, settings
from cleanconnect.errors import ServiceNotFound
from cleanconnect.schemas.booking_schema import (
    BookingItem,
    HomeDetails,
    PriceBreakdown,
    Service,
    ServiceSelection,
)
from cleanconnect.utils import to_cents

logger = logging.getLogger(__name__)


def calculate_commission(amount: Decimal, rate: Optional[Decimal] = None) -> Decimal:
    rate = settings.pricing.commission_rate if rate is None else rate
    return to_cents(amount * rate)


def calculate_processing_fee(amount: Decimal, config: Optional[PricingConfig] = None) -> Decimal:
    config = config or settings.pricing
    return to_cents(amount * config.processing_fee_rate + config.processing_fee_fixed)


def calculate_net_amount(amount: Decimal, commission: Decimal, processing_fee: Decimal) -> Decimal:
    """What the provider receives once platform commission and fees are taken."""
    return to_cents(amount - commission - processing_fee)


def price_line_items(
    services: Mapping[str, Service],
    home_details: HomeDetails,
    selections: Iterable[ServiceSelection],
) -> list[BookingItem]:
    """Price each selected service against the resolved catalog.

    Raises:
        ServiceNotFound: If any selection has no catalog entry. No items
            are returned in that case.
    """
    square_footage = Decimal(home_details.square_footage)
    items: list[BookingItem] = []
    for selection in selections:
        service = services.get(selection.service_id)
        if service is None:
            raise ServiceNotFound(selection.service_id)

        unit_price = to_cents(service.base_price + service.price_per_sqft * square_footage)
        items.append(
            BookingItem(
                service_id=service.id,
                name=service.name,
                quantity=selection.quantity,
                unit_price=unit_price,
                total_price=to_cents(unit_price * selection.quantity),
            )
        )
    return items


def summarize(
    items: Iterable[BookingItem],
    config: Optional[PricingConfig] = None,
    discount_amount: Decimal = Decimal("0.00"),
) -> PriceBreakdown:
    """Roll line items up into subtotal, commission, fee, and total."""
    config = config or settings.pricing
    subtotal = to_cents(sum((item.total_price for item in items), Decimal("0")))
    commission = calculate_commission(subtotal, config.commission_rate)
    processing_fee = calculate_processing_fee(subtotal, config)
    discount = to_cents(discount_amount)

    return PriceBreakdown(
        subtotal=subtotal,
        commission=commission,
        processing_fee=processing_fee,
        discount_amount=discount,
        total=subtotal + commission + processing_fee - discount,
        provider_payout=calculate_net_amount(subtotal, commission, processing_fee),
    )


def calculate_price(
    services: Mapping[str, Service],
    home_details: HomeDetails,
    selections: Iterable[ServiceSelection],
    config: Optional[PricingConfig] = None,
) -> PriceBreakdown:
    """Price a booking from catalog entries, home attributes, and quantities."""
    items = price_line_items(services, home_details, selections)
    breakdown = summarize(items, config)
    logger.debug(
        "Priced %d item(s): subtotal=%s commission=%s fee=%s total=%s",
        len(items), breakdown.subtotal, breakdown.commission,
        breakdown.processing_fee, breakdown.total,
    )
    return breakdown
