from cleanconnect.booking.orchestrator import (
    BookingCreationResult,
    BookingOrchestrator,
    SideStepReport,
    SideStepResult,
    validate_booking_request,
)
from cleanconnect.booking.pricing import calculate_price, price_line_items, summarize
from cleanconnect.booking.state_machine import (
    BookingStateMachine,
    BookingTrigger,
    InvalidTransitionError,
)

__all__ = [
    "BookingCreationResult",
    "BookingOrchestrator",
    "BookingStateMachine",
    "BookingTrigger",
    "InvalidTransitionError",
    "SideStepReport",
    "SideStepResult",
    "calculate_price",
    "price_line_items",
    "summarize",
    "validate_booking_request",
]
