"""Approval state machine for leave requests.

Allowed transitions (action, who may perform it):

- DRAFT             --submit-->        PENDING            requester
- PENDING           --approve-->       AWAITING_DIRECTOR  requester's manager
- AWAITING_MANAGER  --approve-->       AWAITING_DIRECTOR  requester's manager
- AWAITING_DIRECTOR --approve-->       APPROVED_FINAL     director
- review states     --reject-->        REJECTED           approver of the current stage
- review states     --request_info-->  INFO_REQUESTED     approver of the current stage
- INFO_REQUESTED    --resubmit-->      PENDING            requester
- non-terminal      --cancel-->        CANCELLED          requester or director
- APPROVED_FINAL    --elapse-->        COMPLETED          system clock, once end_date < today

When the requester has no manager, directors act at the manager stage.
Nobody approves, rejects or requests information on their own request.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

from vacation_engine.exceptions import InvalidTransitionError, MissingActorError
from vacation_engine.models.enums import ApprovalAction, ApprovalLevel, RequestAction, RequestStatus, Role

if TYPE_CHECKING:
    from datetime import date

# Actor identity used for clock-driven transitions.
SYSTEM_ACTOR_ID = uuid.UUID(int=0)


@dataclass(frozen=True)
class Actor:
    """Resolved identity performing a mutation."""

    id: uuid.UUID
    role: Role
    is_admin: bool = False

    @property
    def is_director(self) -> bool:
        return self.role == Role.DIRECTOR

    @property
    def is_system(self) -> bool:
        return self.id == SYSTEM_ACTOR_ID


SYSTEM_ACTOR = Actor(id=SYSTEM_ACTOR_ID, role=Role.DIRECTOR)


class Gate(enum.StrEnum):
    """Who may perform a transition."""

    REQUESTER = "REQUESTER"
    MANAGER_STAGE = "MANAGER_STAGE"
    DIRECTOR_STAGE = "DIRECTOR_STAGE"
    REQUESTER_OR_DIRECTOR = "REQUESTER_OR_DIRECTOR"
    SYSTEM = "SYSTEM"


@dataclass(frozen=True)
class Edge:
    to_status: RequestStatus
    gate: Gate
    approval: ApprovalAction | None = None


@dataclass(frozen=True)
class TransitionPlan:
    """A validated transition, ready to be applied."""

    from_status: RequestStatus
    to_status: RequestStatus
    action: RequestAction
    approval_action: ApprovalAction | None
    approval_level: ApprovalLevel | None


MANAGER_STAGE_STATUSES = frozenset({RequestStatus.PENDING, RequestStatus.AWAITING_MANAGER})
REVIEW_STATUSES = MANAGER_STAGE_STATUSES | {RequestStatus.AWAITING_DIRECTOR}
TERMINAL_STATUSES = frozenset({RequestStatus.REJECTED, RequestStatus.CANCELLED, RequestStatus.COMPLETED})
CANCELLABLE_STATUSES = frozenset(
    {
        RequestStatus.DRAFT,
        RequestStatus.INFO_REQUESTED,
        RequestStatus.APPROVED_FINAL,
    }
    | REVIEW_STATUSES
)


def _build_transitions() -> dict[tuple[RequestStatus, RequestAction], Edge]:
    table: dict[tuple[RequestStatus, RequestAction], Edge] = {
        (RequestStatus.DRAFT, RequestAction.SUBMIT): Edge(RequestStatus.PENDING, Gate.REQUESTER),
        (RequestStatus.AWAITING_DIRECTOR, RequestAction.APPROVE): Edge(
            RequestStatus.APPROVED_FINAL, Gate.DIRECTOR_STAGE, ApprovalAction.APPROVED
        ),
        (RequestStatus.AWAITING_DIRECTOR, RequestAction.REJECT): Edge(
            RequestStatus.REJECTED, Gate.DIRECTOR_STAGE, ApprovalAction.REJECTED
        ),
        (RequestStatus.AWAITING_DIRECTOR, RequestAction.REQUEST_INFO): Edge(
            RequestStatus.INFO_REQUESTED, Gate.DIRECTOR_STAGE, ApprovalAction.INFO_REQUESTED
        ),
        (RequestStatus.INFO_REQUESTED, RequestAction.RESUBMIT): Edge(RequestStatus.PENDING, Gate.REQUESTER),
        (RequestStatus.APPROVED_FINAL, RequestAction.ELAPSE): Edge(RequestStatus.COMPLETED, Gate.SYSTEM),
    }
    for status in MANAGER_STAGE_STATUSES:
        table[(status, RequestAction.APPROVE)] = Edge(
            RequestStatus.AWAITING_DIRECTOR, Gate.MANAGER_STAGE, ApprovalAction.APPROVED
        )
        table[(status, RequestAction.REJECT)] = Edge(RequestStatus.REJECTED, Gate.MANAGER_STAGE, ApprovalAction.REJECTED)
        table[(status, RequestAction.REQUEST_INFO)] = Edge(
            RequestStatus.INFO_REQUESTED, Gate.MANAGER_STAGE, ApprovalAction.INFO_REQUESTED
        )
    for status in CANCELLABLE_STATUSES:
        table[(status, RequestAction.CANCEL)] = Edge(RequestStatus.CANCELLED, Gate.REQUESTER_OR_DIRECTOR)
    return table


TRANSITIONS: dict[tuple[RequestStatus, RequestAction], Edge] = _build_transitions()


def initial_status(manager_id: uuid.UUID | None, *, draft: bool = False) -> RequestStatus:
    """Entry state for a new request: DRAFT, routed to a known manager, or awaiting triage."""
    if draft:
        return RequestStatus.DRAFT
    if manager_id is not None:
        return RequestStatus.AWAITING_MANAGER
    return RequestStatus.PENDING


def available_actions(status: RequestStatus) -> list[RequestAction]:
    """Actions defined for a status, regardless of who performs them."""
    return [action for (from_status, action) in TRANSITIONS if from_status == status]


def is_terminal(status: RequestStatus) -> bool:
    return status in TERMINAL_STATUSES


def _gate_allows(
    gate: Gate,
    actor: Actor,
    requester_id: uuid.UUID,
    manager_id: uuid.UUID | None,
) -> str | None:
    """Return a refusal reason, or None when the actor passes the gate."""
    is_requester = actor.id == requester_id

    if gate == Gate.SYSTEM:
        return None if actor.is_system else "only the system clock completes requests"
    if gate == Gate.REQUESTER:
        return None if is_requester else "only the requester may do this"
    if gate == Gate.REQUESTER_OR_DIRECTOR:
        return None if is_requester or actor.is_director else "only the requester or a director may cancel"

    if is_requester:
        return "approvers cannot decide on their own requests"
    if gate == Gate.MANAGER_STAGE:
        if manager_id is not None:
            return None if actor.id == manager_id else "only the requester's manager may decide at this stage"
        return None if actor.is_director else "requester has no manager; a director must decide"
    # DIRECTOR_STAGE
    return None if actor.is_director else "only a director may decide at this stage"


def plan_transition(
    status: RequestStatus | str,
    action: RequestAction,
    actor: Actor | None,
    *,
    requester_id: uuid.UUID,
    manager_id: uuid.UUID | None,
    end_date: date | None = None,
    today: date | None = None,
) -> TransitionPlan:
    """Validate a transition and describe it. Raises InvalidTransitionError; never mutates."""
    if actor is None:
        msg = "Mutating operations require a resolved actor"
        raise MissingActorError(msg)

    current = RequestStatus(status)
    edge = TRANSITIONS.get((current, action))
    if edge is None:
        raise InvalidTransitionError(current.value, action.value.lower())

    refusal = _gate_allows(edge.gate, actor, requester_id, manager_id)
    if refusal is not None:
        raise InvalidTransitionError(current.value, action.value.lower(), refusal)

    if action == RequestAction.ELAPSE and (end_date is None or today is None or not end_date < today):
        raise InvalidTransitionError(current.value, action.value.lower(), "leave period has not elapsed")

    level: ApprovalLevel | None = None
    if edge.approval is not None:
        level = ApprovalLevel.DIRECTOR if current == RequestStatus.AWAITING_DIRECTOR else ApprovalLevel.MANAGER

    return TransitionPlan(
        from_status=current,
        to_status=edge.to_status,
        action=action,
        approval_action=edge.approval,
        approval_level=level,
    )
