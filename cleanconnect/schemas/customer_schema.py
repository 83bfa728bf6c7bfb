"""Customer contact record used for status-update notifications."""

from typing import Optional

from pydantic import BaseModel, Field

from cleanconnect.schemas.provider_schema import NotificationPreferences


class Customer(BaseModel):
    """Customer record from the user directory."""
    customer_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    preferences: NotificationPreferences = Field(default_factory=NotificationPreferences)

    @property
    def wants_sms(self) -> bool:
        return self.preferences.sms and bool(self.phone)
