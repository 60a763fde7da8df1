"""Capacity guard: overlapping leave and medical-leave blocks. Pure functions over snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from vacation_engine.models.enums import LeaveType, MedicalLeaveStatus, RequestStatus
from vacation_engine.services.dates import ranges_overlap

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable
    from datetime import date

    from vacation_engine.services.people import PersonInfo

# Statuses that no longer hold a date range.
INACTIVE_STATUSES = frozenset({RequestStatus.REJECTED, RequestStatus.CANCELLED})

# Statuses treated as booked leave for advisory team conflicts.
BOOKED_STATUSES = frozenset({RequestStatus.APPROVED_FINAL, RequestStatus.COMPLETED})


class RequestSnapshot(Protocol):
    id: uuid.UUID
    requester_id: uuid.UUID
    type: str
    status: str
    start_date: date
    end_date: date


class MedicalLeaveSnapshot(Protocol):
    id: uuid.UUID
    person_id: uuid.UUID
    status: str
    affects_team_capacity: bool
    start_date: date
    end_date: date


@dataclass(frozen=True)
class OverlapResult:
    conflicting_ids: list[uuid.UUID] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.conflicting_ids


@dataclass(frozen=True)
class CapacityStatus:
    blocking_leave_ids: list[uuid.UUID] = field(default_factory=list)

    @property
    def blocked(self) -> bool:
        return bool(self.blocking_leave_ids)


@dataclass(frozen=True)
class TeamConflict:
    """Advisory conflict with teammates' booked vacations."""

    kind: str  # "team" or "management"
    request_ids: list[uuid.UUID]
    message: str


def check_overlap(
    person_id: uuid.UUID,
    start: date,
    end: date,
    existing: Iterable[RequestSnapshot],
    *,
    exclude_id: uuid.UUID | None = None,
) -> OverlapResult:
    """Find the person's live requests whose inclusive range intersects [start, end]."""
    conflicting = [
        r.id
        for r in existing
        if r.requester_id == person_id
        and r.id != exclude_id
        and r.status not in INACTIVE_STATUSES
        and ranges_overlap(start, end, r.start_date, r.end_date)
    ]
    return OverlapResult(conflicting_ids=conflicting)


def _is_blocking(leave: MedicalLeaveSnapshot, on: date) -> bool:
    return (
        leave.status == MedicalLeaveStatus.ACTIVE
        and leave.affects_team_capacity
        and leave.start_date <= on <= leave.end_date
    )


def check_medical_block(
    person_ids: Iterable[uuid.UUID],
    medical_leaves: Iterable[MedicalLeaveSnapshot],
    on: date,
) -> CapacityStatus:
    """Blocked while any of the people has an active, capacity-affecting leave covering on.

    Pass a single id for the person check, or every team member for a
    manager-scoped view.
    """
    members = set(person_ids)
    blocking = [leave.id for leave in medical_leaves if leave.person_id in members and _is_blocking(leave, on)]
    return CapacityStatus(blocking_leave_ids=blocking)


def find_team_medical_overlaps(
    teammates: Iterable[PersonInfo],
    medical_leaves: Iterable[MedicalLeaveSnapshot],
    start: date,
    end: date,
) -> list[uuid.UUID]:
    """Active capacity-affecting medical leaves of teammates intersecting [start, end]."""
    members = {p.id for p in teammates}
    return [
        leave.id
        for leave in medical_leaves
        if leave.person_id in members
        and leave.status == MedicalLeaveStatus.ACTIVE
        and leave.affects_team_capacity
        and ranges_overlap(start, end, leave.start_date, leave.end_date)
    ]


def find_team_conflicts(
    requester: PersonInfo,
    start: date,
    end: date,
    people: Iterable[PersonInfo],
    requests: Iterable[RequestSnapshot],
) -> list[TeamConflict]:
    """Advisory conflicts with other people's booked vacations in the same range.

    Two checks: people in the requester's sub-team, and, for managers and
    directors, other people in management roles.
    """
    by_id = {p.id: p for p in people}
    overlapping = [
        r
        for r in requests
        if r.requester_id != requester.id
        and r.type == LeaveType.VACATION
        and r.status in BOOKED_STATUSES
        and ranges_overlap(start, end, r.start_date, r.end_date)
    ]

    conflicts: list[TeamConflict] = []
    if requester.team:
        same_team = [r.id for r in overlapping if (p := by_id.get(r.requester_id)) and p.team == requester.team]
        if same_team:
            conflicts.append(
                TeamConflict(
                    kind="team",
                    request_ids=same_team,
                    message=f"{len(same_team)} person(s) in the same team already have approved vacation in this period",
                )
            )

    if requester.is_management:
        management = [r.id for r in overlapping if (p := by_id.get(r.requester_id)) and p.is_management]
        if management:
            conflicts.append(
                TeamConflict(
                    kind="management",
                    request_ids=management,
                    message=f"{len(management)} person(s) in management roles already have approved vacation in this period",
                )
            )
    return conflicts
