"""Tests for the booking state machine."""

import pytest

from bookingdesk.core.exceptions import IllegalTransition, MissingReason, Unauthorized, UnknownStatus
from bookingdesk.domain.booking_state import (
    BOOKING_TRANSITIONS,
    ActorRole,
    BookingAction,
    available_actions,
    plan_transition,
    reachable_statuses,
)
from bookingdesk.domain.booking_status import BookingStatus

S = BookingStatus
A = BookingAction


@pytest.mark.parametrize(
    "current, action, role, reason, target",
    [
        (S.PENDING, A.ACCEPT, ActorRole.PROVIDER, None, S.IN_PROGRESS),
        (S.PENDING, A.CANCEL, ActorRole.PROVIDER, "double booked", S.CANCELLED_BY_PROVIDER),
        (S.IN_PROGRESS, A.REQUEST_COMPLETION, ActorRole.PROVIDER, None, S.COMPLETE_REQUESTED),
        (S.IN_PROGRESS, A.CANCEL, ActorRole.PROVIDER, "parts unavailable", S.CANCELLED_BY_PROVIDER),
        (S.COMPLETE_REQUESTED, A.USER_CONFIRM, ActorRole.USER, None, S.COMPLETED_ACCEPTED),
        (S.COMPLETE_REQUESTED, A.USER_REJECT, ActorRole.USER, "still leaking", S.REJECTED_BY_USER),
    ],
)
def test_legal_transitions(current, action, role, reason, target):
    plan = plan_transition(current, action, role, reason)

    assert plan.from_status is current
    assert plan.to_status is target
    assert plan.actor_role is role
    assert plan.reason == reason


def test_accepts_raw_codes_and_strings():
    plan = plan_transition(1, "accept", "provider")
    assert plan.to_status is S.IN_PROGRESS
    assert plan.action is A.ACCEPT


@pytest.mark.parametrize(
    "current",
    [S.REJECTED_BY_USER, S.COMPLETED_ACCEPTED, S.CANCELLED_BY_PROVIDER, S.ACCEPTED],
)
@pytest.mark.parametrize("action", list(A))
@pytest.mark.parametrize("role", list(ActorRole))
def test_no_action_leaves_terminal_or_reserved_status(current, action, role):
    with pytest.raises(IllegalTransition) as exc_info:
        plan_transition(current, action, role, "some reason")
    assert exc_info.value.current_status == int(current)
    assert exc_info.value.action == action.value


def test_cancel_requires_reason():
    with pytest.raises(MissingReason):
        plan_transition(S.PENDING, A.CANCEL, ActorRole.PROVIDER)
    with pytest.raises(MissingReason):
        plan_transition(S.IN_PROGRESS, A.CANCEL, ActorRole.PROVIDER, "   ")

    plan = plan_transition(S.IN_PROGRESS, A.CANCEL, ActorRole.PROVIDER, "customer unavailable")
    assert plan.to_status is S.CANCELLED_BY_PROVIDER
    assert plan.reason == "customer unavailable"


def test_user_reject_requires_reason():
    with pytest.raises(MissingReason):
        plan_transition(S.COMPLETE_REQUESTED, A.USER_REJECT, ActorRole.USER, "")


def test_reason_is_stripped():
    plan = plan_transition(S.PENDING, A.CANCEL, ActorRole.PROVIDER, "  no show  ")
    assert plan.reason == "no show"


def test_reason_dropped_when_not_required():
    plan = plan_transition(S.PENDING, A.ACCEPT, ActorRole.PROVIDER, "ignored")
    assert plan.reason is None


@pytest.mark.parametrize(
    "current, action, role",
    [
        (S.IN_PROGRESS, A.CANCEL, ActorRole.USER),
        (S.PENDING, A.ACCEPT, ActorRole.USER),
        (S.COMPLETE_REQUESTED, A.USER_CONFIRM, ActorRole.PROVIDER),
        (S.COMPLETE_REQUESTED, A.USER_REJECT, ActorRole.PROVIDER),
    ],
)
def test_wrong_actor_is_unauthorized(current, action, role):
    with pytest.raises(Unauthorized):
        plan_transition(current, action, role, "reason")


def test_unknown_actor_role_is_unauthorized():
    with pytest.raises(Unauthorized):
        plan_transition(S.PENDING, A.ACCEPT, "admin")


def test_illegal_transition_checked_before_actor_and_reason():
    # Wrong actor and missing reason, but the action itself is undefined here
    with pytest.raises(IllegalTransition):
        plan_transition(S.COMPLETE_REQUESTED, A.CANCEL, ActorRole.USER)


def test_actor_checked_before_reason():
    with pytest.raises(Unauthorized):
        plan_transition(S.PENDING, A.CANCEL, ActorRole.USER)


def test_resubmitted_accept_is_illegal():
    with pytest.raises(IllegalTransition) as exc_info:
        plan_transition(S.IN_PROGRESS, A.ACCEPT, ActorRole.PROVIDER)
    assert exc_info.value.current_status == 2


def test_unknown_action_is_illegal():
    with pytest.raises(IllegalTransition) as exc_info:
        plan_transition(S.PENDING, "teleport", ActorRole.PROVIDER)
    assert exc_info.value.action == "teleport"


def test_unknown_current_status():
    with pytest.raises(UnknownStatus):
        plan_transition(9, A.ACCEPT, ActorRole.PROVIDER)


def test_event_carries_plan():
    plan = plan_transition(S.PENDING, A.CANCEL, ActorRole.PROVIDER, "customer unavailable")
    event = plan.event_for(42)

    assert event.booking_id == 42
    assert event.from_status is S.PENDING
    assert event.to_status is S.CANCELLED_BY_PROVIDER
    assert event.actor_role is ActorRole.PROVIDER
    assert event.reason == "customer unavailable"
    assert event.occurred_at.tzinfo is not None


def test_reason_statuses_match_reason_transitions():
    for transition in BOOKING_TRANSITIONS.values():
        assert transition.requires_reason == transition.target.requires_reason


def test_accepted_is_unreachable():
    assert S.ACCEPTED not in reachable_statuses()
    assert reachable_statuses() == set(S) - {S.ACCEPTED}


class TestAvailableActions:
    def test_provider_on_pending(self):
        assert available_actions(S.PENDING, ActorRole.PROVIDER) == [A.ACCEPT, A.CANCEL]

    def test_provider_on_in_progress(self):
        assert available_actions(S.IN_PROGRESS, "provider") == [A.REQUEST_COMPLETION, A.CANCEL]

    def test_user_on_complete_requested(self):
        assert available_actions(S.COMPLETE_REQUESTED, ActorRole.USER) == [
            A.USER_CONFIRM,
            A.USER_REJECT,
        ]

    def test_user_cannot_act_on_pending(self):
        assert available_actions(S.PENDING, ActorRole.USER) == []

    @pytest.mark.parametrize("current", [S.REJECTED_BY_USER, S.COMPLETED_ACCEPTED, S.CANCELLED_BY_PROVIDER])
    def test_terminal_offers_nothing(self, current):
        assert available_actions(current, ActorRole.PROVIDER) == []
        assert available_actions(current, ActorRole.USER) == []

    def test_no_role_offers_nothing(self):
        assert available_actions(S.PENDING, None) == []
