"""Tests for the approval state machine: edges, actor gates and the elapse rule."""

from __future__ import annotations

import uuid
from datetime import date

import pytest

from vacation_engine.exceptions import InvalidTransitionError, MissingActorError
from vacation_engine.models.enums import ApprovalAction, ApprovalLevel, RequestAction, RequestStatus, Role
from vacation_engine.services.workflow import (
    SYSTEM_ACTOR,
    TRANSITIONS,
    Actor,
    available_actions,
    initial_status,
    is_terminal,
    plan_transition,
)

REQUESTER = Actor(id=uuid.uuid4(), role=Role.COLLABORATOR)
MANAGER = Actor(id=uuid.uuid4(), role=Role.MANAGER)
DIRECTOR = Actor(id=uuid.uuid4(), role=Role.DIRECTOR)
STRANGER = Actor(id=uuid.uuid4(), role=Role.MANAGER)


def _plan(status: RequestStatus, action: RequestAction, actor: Actor | None, manager_id: uuid.UUID | None = MANAGER.id, **kwargs):
    return plan_transition(status, action, actor, requester_id=REQUESTER.id, manager_id=manager_id, **kwargs)


# ---------------------------------------------------------------------------
# Entry state and table shape
# ---------------------------------------------------------------------------


def test_initial_status() -> None:
    assert initial_status(MANAGER.id) == RequestStatus.AWAITING_MANAGER
    assert initial_status(None) == RequestStatus.PENDING
    assert initial_status(MANAGER.id, draft=True) == RequestStatus.DRAFT


def test_terminal_statuses_have_no_outgoing_edges() -> None:
    for status in (RequestStatus.REJECTED, RequestStatus.CANCELLED, RequestStatus.COMPLETED):
        assert is_terminal(status)
        assert available_actions(status) == []


def test_every_edge_targets_a_known_status() -> None:
    for (from_status, _action), edge in TRANSITIONS.items():
        assert not is_terminal(from_status)
        assert edge.to_status in RequestStatus


def test_available_actions_for_final_approval() -> None:
    assert set(available_actions(RequestStatus.APPROVED_FINAL)) == {RequestAction.CANCEL, RequestAction.ELAPSE}


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


def test_manager_then_director_approval_chain() -> None:
    first = _plan(RequestStatus.AWAITING_MANAGER, RequestAction.APPROVE, MANAGER)
    assert first.to_status == RequestStatus.AWAITING_DIRECTOR
    assert first.approval_action == ApprovalAction.APPROVED
    assert first.approval_level == ApprovalLevel.MANAGER

    second = _plan(first.to_status, RequestAction.APPROVE, DIRECTOR)
    assert second.to_status == RequestStatus.APPROVED_FINAL
    assert second.approval_level == ApprovalLevel.DIRECTOR


def test_draft_submit_and_resubmit_go_to_pending() -> None:
    assert _plan(RequestStatus.DRAFT, RequestAction.SUBMIT, REQUESTER).to_status == RequestStatus.PENDING
    plan = _plan(RequestStatus.INFO_REQUESTED, RequestAction.RESUBMIT, REQUESTER)
    assert plan.to_status == RequestStatus.PENDING
    assert plan.approval_action is None


@pytest.mark.parametrize("status", [RequestStatus.PENDING, RequestStatus.AWAITING_MANAGER, RequestStatus.AWAITING_DIRECTOR])
def test_reject_and_request_info_from_review_states(status: RequestStatus) -> None:
    actor = DIRECTOR if status == RequestStatus.AWAITING_DIRECTOR else MANAGER
    assert _plan(status, RequestAction.REJECT, actor).to_status == RequestStatus.REJECTED
    info = _plan(status, RequestAction.REQUEST_INFO, actor)
    assert info.to_status == RequestStatus.INFO_REQUESTED
    assert info.approval_action == ApprovalAction.INFO_REQUESTED


@pytest.mark.parametrize(
    "status",
    [
        RequestStatus.DRAFT,
        RequestStatus.PENDING,
        RequestStatus.AWAITING_MANAGER,
        RequestStatus.AWAITING_DIRECTOR,
        RequestStatus.INFO_REQUESTED,
        RequestStatus.APPROVED_FINAL,
    ],
)
def test_requester_can_cancel_non_terminal(status: RequestStatus) -> None:
    assert _plan(status, RequestAction.CANCEL, REQUESTER).to_status == RequestStatus.CANCELLED
    assert _plan(status, RequestAction.CANCEL, DIRECTOR).to_status == RequestStatus.CANCELLED


# ---------------------------------------------------------------------------
# Actor gates
# ---------------------------------------------------------------------------


def test_missing_actor_is_a_programming_error() -> None:
    with pytest.raises(MissingActorError):
        _plan(RequestStatus.AWAITING_MANAGER, RequestAction.APPROVE, None)


def test_only_the_requesters_manager_approves_first_stage() -> None:
    with pytest.raises(InvalidTransitionError) as exc_info:
        _plan(RequestStatus.AWAITING_MANAGER, RequestAction.APPROVE, STRANGER)
    assert exc_info.value.from_status == "AWAITING_MANAGER"
    assert exc_info.value.action == "approve"


def test_director_acts_at_manager_stage_when_requester_has_no_manager() -> None:
    plan = _plan(RequestStatus.PENDING, RequestAction.APPROVE, DIRECTOR, manager_id=None)
    assert plan.to_status == RequestStatus.AWAITING_DIRECTOR

    with pytest.raises(InvalidTransitionError):
        _plan(RequestStatus.PENDING, RequestAction.APPROVE, STRANGER, manager_id=None)


def test_only_directors_decide_final_stage() -> None:
    with pytest.raises(InvalidTransitionError):
        _plan(RequestStatus.AWAITING_DIRECTOR, RequestAction.APPROVE, MANAGER)


def test_nobody_approves_their_own_request() -> None:
    director_requester = Actor(id=uuid.uuid4(), role=Role.DIRECTOR)
    with pytest.raises(InvalidTransitionError, match="own requests"):
        plan_transition(
            RequestStatus.AWAITING_DIRECTOR,
            RequestAction.APPROVE,
            director_requester,
            requester_id=director_requester.id,
            manager_id=None,
        )


def test_stranger_cannot_cancel() -> None:
    with pytest.raises(InvalidTransitionError):
        _plan(RequestStatus.AWAITING_MANAGER, RequestAction.CANCEL, STRANGER)


def test_undefined_edges_are_rejected() -> None:
    with pytest.raises(InvalidTransitionError):
        _plan(RequestStatus.REJECTED, RequestAction.APPROVE, DIRECTOR)
    with pytest.raises(InvalidTransitionError):
        _plan(RequestStatus.COMPLETED, RequestAction.CANCEL, REQUESTER)
    with pytest.raises(InvalidTransitionError):
        _plan(RequestStatus.APPROVED_FINAL, RequestAction.APPROVE, DIRECTOR)


def test_only_requester_resubmits() -> None:
    with pytest.raises(InvalidTransitionError):
        _plan(RequestStatus.INFO_REQUESTED, RequestAction.RESUBMIT, MANAGER)


# ---------------------------------------------------------------------------
# Elapse
# ---------------------------------------------------------------------------


def test_elapse_after_end_date() -> None:
    plan = _plan(
        RequestStatus.APPROVED_FINAL,
        RequestAction.ELAPSE,
        SYSTEM_ACTOR,
        end_date=date(2025, 6, 1),
        today=date(2025, 6, 2),
    )
    assert plan.to_status == RequestStatus.COMPLETED
    assert plan.approval_action is None


def test_elapse_on_last_day_is_refused() -> None:
    with pytest.raises(InvalidTransitionError, match="not elapsed"):
        _plan(
            RequestStatus.APPROVED_FINAL,
            RequestAction.ELAPSE,
            SYSTEM_ACTOR,
            end_date=date(2025, 6, 2),
            today=date(2025, 6, 2),
        )


def test_people_cannot_elapse_requests() -> None:
    with pytest.raises(InvalidTransitionError):
        _plan(
            RequestStatus.APPROVED_FINAL,
            RequestAction.ELAPSE,
            DIRECTOR,
            end_date=date(2025, 5, 1),
            today=date(2025, 6, 2),
        )
