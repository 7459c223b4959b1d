from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, time
from typing import Optional, Sequence

from ..assignments.repository import AssignmentRepository
from ..attendance.repository import AttendanceRepository
from ..core.constants import DEFAULT_SHIFT_CAPACITY
from ..core.enums import AttendanceStatus, ShiftType
from ..conflicts.detector import ConflictDetector
from ..core.exceptions import (
    CapacityBelowAssignmentsError,
    SchedulingConflictError,
    ShiftNotFoundError,
    ValidationError,
)
from ..database.transaction import TransactionManager
from ..users.model import Actor
from ..users.permissions import require_admin
from ..users.repository import UserRepository
from .model import Shift, ShiftSummary
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewShift:
    shift_date: date
    shift_type: ShiftType
    start_time: time
    end_time: time
    capacity: int = DEFAULT_SHIFT_CAPACITY


@dataclass(frozen=True)
class ShiftChanges:
    shift_date: Optional[date] = None
    shift_type: Optional[ShiftType] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    capacity: Optional[int] = None


@dataclass(frozen=True)
class DayOverview:
    work_date: date
    shifts: Sequence[ShiftSummary]
    attendance: dict[str, int] = field(default_factory=dict)

    @property
    def total_capacity(self) -> int:
        return sum(s.shift.capacity for s in self.shifts)

    @property
    def total_assignments(self) -> int:
        return sum(s.assigned_count for s in self.shifts)

    @property
    def available_slots(self) -> int:
        return self.total_capacity - self.total_assignments


class ShiftService:
    """Use case: maintain shifts (admin) and report on their occupancy."""

    def __init__(
        self,
        tx: TransactionManager,
        shifts: ShiftRepository,
        assignments: AssignmentRepository,
        attendance: AttendanceRepository,
        users: UserRepository,
        conflicts: ConflictDetector,
    ):
        self._tx = tx
        self._shifts = shifts
        self._assignments = assignments
        self._attendance = attendance
        self._users = users
        self._conflicts = conflicts

    def get_shift(self, shift_id: int) -> ShiftSummary:
        shift = self._shifts.get_by_id(int(shift_id))
        if not shift:
            raise ShiftNotFoundError("Shift not found")
        return ShiftSummary(shift=shift, assigned_count=self._assignments.count_for_shift(shift.shift_id))

    def list_shifts(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        shift_type: Optional[ShiftType] = None,
    ) -> Sequence[ShiftSummary]:
        if start and end and end < start:
            raise ValidationError("End date cannot be earlier than start date")
        return self._shifts.list_summaries(start=start, end=end, shift_type=shift_type)

    def create_shift(self, actor: Actor, new: NewShift) -> Shift:
        require_admin(actor)
        if int(new.capacity) < 1:
            raise ValidationError("Capacity must be at least 1")

        shift_id = self._shifts.create(
            shift_date=new.shift_date,
            shift_type=new.shift_type,
            start_time=new.start_time,
            end_time=new.end_time,
            capacity=int(new.capacity),
        )
        logger.info("shift %s created for %s by %s", shift_id, new.shift_date, actor.user_id)
        return Shift(
            shift_id=shift_id,
            shift_date=new.shift_date,
            shift_type=new.shift_type,
            start_time=new.start_time,
            end_time=new.end_time,
            capacity=int(new.capacity),
        )

    def update_shift(self, actor: Actor, shift_id: int, changes: ShiftChanges) -> ShiftSummary:
        require_admin(actor)

        with self._tx.transaction():
            existing = self._shifts.get_by_id(int(shift_id), for_update=True)
            if not existing:
                raise ShiftNotFoundError("Shift not found")

            assigned = self._assignments.count_for_shift(existing.shift_id)
            if changes.capacity is not None and int(changes.capacity) < assigned:
                raise CapacityBelowAssignmentsError(
                    f"Cannot reduce capacity below current assignments ({assigned})"
                )

            updated = replace(
                existing,
                shift_date=changes.shift_date if changes.shift_date is not None else existing.shift_date,
                shift_type=changes.shift_type if changes.shift_type is not None else existing.shift_type,
                start_time=changes.start_time if changes.start_time is not None else existing.start_time,
                end_time=changes.end_time if changes.end_time is not None else existing.end_time,
                capacity=int(changes.capacity) if changes.capacity is not None else existing.capacity,
            )
            if updated.capacity < 1:
                raise ValidationError("Capacity must be at least 1")
            if updated.window != existing.window:
                self._check_assigned_staff_still_fit(updated)
            self._shifts.update(updated)

        logger.info("shift %s updated by %s", existing.shift_id, actor.user_id)
        return ShiftSummary(shift=updated, assigned_count=assigned)

    def _check_assigned_staff_still_fit(self, updated: Shift) -> None:
        # Caller holds the shift row lock; user locks serialise with assign().
        for assignment in self._assignments.list_for_shift(updated.shift_id):
            self._users.get_by_id(assignment.user_id, for_update=True)
            if self._conflicts.overlaps_other_assignments(assignment.user_id, updated):
                raise SchedulingConflictError(
                    f"Shift change would create a conflict for staff member {assignment.user_id}"
                )

    def delete_shift(self, actor: Actor, shift_id: int) -> None:
        require_admin(actor)
        if not self._shifts.delete(int(shift_id)):
            raise ShiftNotFoundError("Shift not found")
        logger.info("shift %s deleted by %s", shift_id, actor.user_id)

    def day_overview(self, work_date: date) -> DayOverview:
        counts = {s.value: 0 for s in AttendanceStatus}
        for record in self._attendance.list_for_date(work_date):
            counts[record.status.value] += 1

        return DayOverview(
            work_date=work_date,
            shifts=self._shifts.list_summaries(start=work_date, end=work_date),
            attendance=counts,
        )
