"""
Finite state machine for the booking lifecycle.

    pending -> payment_pending -> confirmed -> in_progress -> completed

``cancelled`` is reachable from every state before ``completed``. Provider
assignment is a self-transition on ``payment_pending`` and ``confirmed``:
it records the provider without moving the status.

Usage:
    sm = BookingStateMachine(BookingStatus.PENDING)
    sm.transition(BookingTrigger.PAYMENT_INITIATED)
    assert sm.current_state == BookingStatus.PAYMENT_PENDING
"""

import logging
from dataclasses import dataclass
from enum import Enum

from cleanconnect.schemas.booking_schema import BookingStatus

logger = logging.getLogger(__name__)


class BookingTrigger(str, Enum):
    """Events that cause status transitions."""
    PAYMENT_INITIATED = "payment_initiated"
    PAYMENT_CONFIRMED = "payment_confirmed"
    PROVIDER_ASSIGNED = "provider_assigned"
    JOB_STARTED = "job_started"
    JOB_COMPLETED = "job_completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    from_state: BookingStatus
    to_state: BookingStatus
    trigger: BookingTrigger


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current status."""


TERMINAL_STATES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})


class BookingStateMachine:
    """Validates booking status changes against the allowed edges.

    The persisted status is the source of truth, so a machine is built at
    the booking's stored status for each change and discarded afterwards.
    """

    TRANSITIONS: list[Transition] = [
        # --- Payment ---
        Transition(BookingStatus.PENDING, BookingStatus.PAYMENT_PENDING,
                   BookingTrigger.PAYMENT_INITIATED),
        Transition(BookingStatus.PAYMENT_PENDING, BookingStatus.CONFIRMED,
                   BookingTrigger.PAYMENT_CONFIRMED),

        # --- Assignment ---
        Transition(BookingStatus.PAYMENT_PENDING, BookingStatus.PAYMENT_PENDING,
                   BookingTrigger.PROVIDER_ASSIGNED),
        Transition(BookingStatus.CONFIRMED, BookingStatus.CONFIRMED,
                   BookingTrigger.PROVIDER_ASSIGNED),

        # --- Service ---
        Transition(BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS,
                   BookingTrigger.JOB_STARTED),
        Transition(BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED,
                   BookingTrigger.JOB_COMPLETED),

        # --- Cancellation ---
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED,
                   BookingTrigger.CANCELLED),
        Transition(BookingStatus.PAYMENT_PENDING, BookingStatus.CANCELLED,
                   BookingTrigger.CANCELLED),
        Transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED,
                   BookingTrigger.CANCELLED),
        Transition(BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED,
                   BookingTrigger.CANCELLED),
    ]

    def __init__(self, initial: BookingStatus = BookingStatus.PENDING) -> None:
        self._current_state = BookingStatus(initial)
        self._trace: list[BookingStatus] = [self._current_state]

    @property
    def current_state(self) -> BookingStatus:
        return self._current_state

    def is_terminal(self) -> bool:
        return self._current_state in TERMINAL_STATES

    def get_valid_triggers(self) -> list[BookingTrigger]:
        """Return all triggers valid from the current status."""
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def transition(self, trigger: BookingTrigger) -> BookingStatus:
        """Move along the edge ``trigger`` names and return the new status.

        Raises:
            InvalidTransitionError: The booking is completed or cancelled, or
                ``trigger`` has no edge from the current status.
        """
        old_state = self._current_state
        if self.is_terminal():
            raise InvalidTransitionError(
                f"Booking is already '{old_state.value}' and accepts no further changes."
            )

        for t in self.TRANSITIONS:
            if t.from_state == old_state and t.trigger == trigger:
                break
        else:
            valid = [v.value for v in self.get_valid_triggers()]
            raise InvalidTransitionError(
                f"No valid transition from '{old_state.value}' "
                f"with trigger '{trigger.value}'. Valid triggers: {valid}"
            )

        self._current_state = t.to_state
        self._trace.append(t.to_state)
        logger.debug(
            "Booking transition: %s -> %s (trigger: %s)",
            old_state.value, t.to_state.value, trigger.value,
        )
        return t.to_state

    def get_state_trace(self) -> list[str]:
        """Return ordered list of status names visited."""
        return [state.value for state in self._trace]
