"""Booking, pricing, and catalog data models."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from cleanconnect.schemas.provider_schema import Location


class BookingStatus(str, Enum):
    PENDING = "pending"
    PAYMENT_PENDING = "payment_pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RecurringFrequency(str, Enum):
    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    MONTHLY = "monthly"


class _CamelModel(BaseModel):
    """Accepts both the web layer's camelCase keys and snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HomeDetails(_CamelModel):
    """Structured home attributes that drive per-square-foot pricing."""
    square_footage: int = Field(ge=100)
    bedrooms: int = Field(default=1, ge=1)
    bathrooms: int = Field(default=1, ge=1)
    floors: int = Field(default=1, ge=1)
    pets: bool = False
    pet_details: Optional[str] = None
    access_instructions: Optional[str] = None


class ServiceSelection(_CamelModel):
    service_id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)


class BookingRequest(_CamelModel):
    """Validated booking request as submitted by a customer."""
    address_id: str = Field(min_length=1)
    service_date: datetime
    services: list[ServiceSelection] = Field(min_length=1)
    home_details: HomeDetails
    payment_method_id: str = Field(min_length=1)
    special_instructions: Optional[str] = None
    recurring_frequency: Optional[RecurringFrequency] = None
    duration_minutes: Optional[int] = Field(default=None, gt=0)

    @field_validator("address_id", "payment_method_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class Service(BaseModel):
    """Catalog entry used for pricing."""
    id: str
    name: str
    base_price: Decimal
    price_per_sqft: Decimal = Decimal("0")
    description: str = ""


class BookingItem(BaseModel):
    """Line item; ``name`` is snapshotted so later catalog edits don't change it."""
    booking_id: Optional[str] = None
    service_id: str
    name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class PriceBreakdown(BaseModel):
    subtotal: Decimal
    commission: Decimal
    processing_fee: Decimal
    discount_amount: Decimal = Decimal("0.00")
    total: Decimal
    provider_payout: Decimal


class Address(BaseModel):
    """Service address as stored; only the coordinates matter to matching."""
    id: str
    customer_id: Optional[str] = None
    street_address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    location: Location


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Booking(BaseModel):
    """Central transactional record for one cleaning appointment."""
    id: str
    customer_id: str
    provider_id: Optional[str] = None
    address_id: str
    service_date: datetime
    duration_minutes: int
    status: BookingStatus = BookingStatus.PENDING
    subtotal: Decimal
    commission: Decimal
    processing_fee: Decimal
    discount_amount: Decimal = Decimal("0.00")
    total_amount: Decimal
    special_instructions: Optional[str] = None
    home_details: HomeDetails
    recurring_frequency: Optional[RecurringFrequency] = None
    payment_method_id: Optional[str] = None
    payment_intent_id: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
