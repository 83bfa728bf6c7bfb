"""Provider candidate and job request models used by the matching engine."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from cleanconnect.schemas.availability_schema import WeeklyAvailability


class VerificationStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class Location(BaseModel):
    """Geographic point in decimal degrees."""
    latitude: float
    longitude: float


class NotificationPreferences(BaseModel):
    email: bool = True
    sms: bool = False


class ProviderCandidate(BaseModel):
    """Read projection of a provider profile for matching purposes."""
    provider_id: str
    verification_status: VerificationStatus = VerificationStatus.PENDING
    is_active: bool = True
    business_name: Optional[str] = None
    service_location: Optional[Location] = None
    service_radius_miles: Optional[float] = Field(default=None, ge=0)
    availability: WeeklyAvailability = Field(default_factory=WeeklyAvailability)
    phone: Optional[str] = None
    email: Optional[str] = None
    preferences: NotificationPreferences = Field(default_factory=NotificationPreferences)

    @property
    def is_eligible(self) -> bool:
        return self.verification_status == VerificationStatus.VERIFIED and self.is_active

    @property
    def has_service_area(self) -> bool:
        return self.service_location is not None and self.service_radius_miles is not None

    @property
    def wants_sms(self) -> bool:
        return self.preferences.sms and bool(self.phone)


class JobRequest(BaseModel):
    """Location, start and length of a job to be matched against providers."""
    location: Location
    start_time: datetime
    duration_minutes: int = Field(gt=0)

    @model_validator(mode="before")
    @classmethod
    def _accept_flat_coordinates(cls, data):
        if isinstance(data, dict) and "location" not in data and "latitude" in data:
            data = dict(data)
            data["location"] = {
                "latitude": data.pop("latitude"),
                "longitude": data.pop("longitude"),
            }
        return data
