"""Booking state machine.

Transitions are keyed by (current status, action). Each entry names the
target status, the only actor role allowed to trigger it, and whether a
reason must accompany it. The planner is pure: it never touches storage and
never delivers events, it only decides.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import NamedTuple

from bookingdesk.core.exceptions import IllegalTransition, MissingReason, Unauthorized
from bookingdesk.domain.booking_status import BookingStatus


class ActorRole(str, Enum):
    """Party triggering a transition."""

    PROVIDER = "provider"
    USER = "user"


class BookingAction(str, Enum):
    """Actions that move a booking between statuses."""

    ACCEPT = "accept"
    CANCEL = "cancel"
    REQUEST_COMPLETION = "request_completion"
    USER_CONFIRM = "user_confirm"
    USER_REJECT = "user_reject"


class Transition(NamedTuple):
    target: BookingStatus
    actor: ActorRole
    requires_reason: bool = False


BOOKING_TRANSITIONS: dict[tuple[BookingStatus, BookingAction], Transition] = {
    (BookingStatus.PENDING, BookingAction.ACCEPT): Transition(
        BookingStatus.IN_PROGRESS, ActorRole.PROVIDER
    ),
    (BookingStatus.PENDING, BookingAction.CANCEL): Transition(
        BookingStatus.CANCELLED_BY_PROVIDER, ActorRole.PROVIDER, requires_reason=True
    ),
    (BookingStatus.IN_PROGRESS, BookingAction.REQUEST_COMPLETION): Transition(
        BookingStatus.COMPLETE_REQUESTED, ActorRole.PROVIDER
    ),
    (BookingStatus.IN_PROGRESS, BookingAction.CANCEL): Transition(
        BookingStatus.CANCELLED_BY_PROVIDER, ActorRole.PROVIDER, requires_reason=True
    ),
    (BookingStatus.COMPLETE_REQUESTED, BookingAction.USER_CONFIRM): Transition(
        BookingStatus.COMPLETED_ACCEPTED, ActorRole.USER
    ),
    (BookingStatus.COMPLETE_REQUESTED, BookingAction.USER_REJECT): Transition(
        BookingStatus.REJECTED_BY_USER, ActorRole.USER, requires_reason=True
    ),
}


@dataclass(frozen=True)
class BookingStatusChanged:
    """Emitted after a transition is applied; delivered by collaborators."""

    booking_id: int
    from_status: BookingStatus
    to_status: BookingStatus
    actor_role: ActorRole
    reason: str | None = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class TransitionPlan:
    """Outcome of a legal transition request, not yet applied."""

    from_status: BookingStatus
    to_status: BookingStatus
    action: BookingAction
    actor_role: ActorRole
    reason: str | None

    def event_for(self, booking_id: int) -> BookingStatusChanged:
        return BookingStatusChanged(
            booking_id=booking_id,
            from_status=self.from_status,
            to_status=self.to_status,
            actor_role=self.actor_role,
            reason=self.reason,
        )


def _coerce_action(action: str | BookingAction) -> BookingAction | None:
    if isinstance(action, BookingAction):
        return action
    try:
        return BookingAction(action)
    except ValueError:
        return None


def plan_transition(
    current: int | BookingStatus,
    action: str | BookingAction,
    actor_role: str | ActorRole,
    reason: str | None = None,
) -> TransitionPlan:
    """Decide the result of applying ``action`` to a booking in ``current``.

    Raises:
        UnknownStatus: ``current`` is not a registered status
        IllegalTransition: no transition for (current, action)
        Unauthorized: actor role does not own the transition
        MissingReason: the transition needs a reason and none was given
    """
    current_status = BookingStatus.from_code(current)
    booking_action = _coerce_action(action)
    action_name = booking_action.value if booking_action else str(action)

    transition = BOOKING_TRANSITIONS.get((current_status, booking_action))
    if transition is None:
        raise IllegalTransition(current_status, action_name)

    try:
        role = ActorRole(actor_role)
    except ValueError:
        raise Unauthorized(f"Unknown actor role: {actor_role!r}") from None
    if role is not transition.actor:
        raise Unauthorized(
            f"Only the {transition.actor.value} may {action_name} a booking "
            f"in status '{current_status.label}'"
        )

    cleaned_reason = reason.strip() if reason else ""
    if transition.requires_reason:
        if not cleaned_reason:
            raise MissingReason(action_name)
        stored_reason: str | None = cleaned_reason
    else:
        stored_reason = None

    return TransitionPlan(
        from_status=current_status,
        to_status=transition.target,
        action=booking_action,
        actor_role=role,
        reason=stored_reason,
    )


def available_actions(current: int | BookingStatus, actor_role: str | ActorRole | None) -> list[BookingAction]:
    """Actions ``actor_role`` may take on a booking in ``current``."""
    if actor_role is None:
        return []
    try:
        role = ActorRole(actor_role)
    except ValueError:
        return []
    current_status = BookingStatus.from_code(current)
    return [
        action
        for (from_status, action), transition in BOOKING_TRANSITIONS.items()
        if from_status is current_status and transition.actor is role
    ]


def reachable_statuses() -> set[BookingStatus]:
    """Statuses some transition can lead to, plus the initial status."""
    return {BookingStatus.PENDING} | {t.target for t in BOOKING_TRANSITIONS.values()}
