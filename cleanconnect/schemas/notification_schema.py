"""In-app notification records and fan-out result models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    BOOKING_OPPORTUNITY = "booking_opportunity"
    BOOKING_UPDATE = "booking_update"
    PROVIDER_ASSIGNED = "provider_assigned"
    BOOKING_ACCEPTED = "booking_accepted"


class Notification(BaseModel):
    """In-app notification row as persisted by the notification store."""

    user_id: str
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class ProviderNotificationResult(BaseModel):
    """Outcome for one candidate, with channel failures that were absorbed."""

    provider_id: str
    outcome: NotificationOutcome
    error: Optional[str] = None
    failed_channels: list[str] = Field(default_factory=list)


class FanoutResult(BaseModel):
    """Aggregate tally of one provider fan-out.

    ``successful + failed == total`` always holds.
    """

    total: int = 0
    successful: int = 0
    failed: int = 0
    per_provider: list[ProviderNotificationResult] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: list[ProviderNotificationResult]) -> "FanoutResult":
        successful = sum(1 for r in results if r.outcome == NotificationOutcome.SUCCESS)
        return cls(
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
            per_provider=results,
        )
