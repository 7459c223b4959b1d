from __future__ import annotations

import logging
from typing import Sequence

from ..attendance.repository import AttendanceRepository
from ..conflicts.detector import ConflictDetector
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AssignmentNotFoundError,
    CapacityExceededError,
    DuplicateAssignmentError,
    SchedulingConflictError,
    ShiftNotFoundError,
    StaffNotFoundError,
)
from ..database.transaction import TransactionManager
from ..shifts.repository import ShiftRepository
from ..users.model import Actor
from ..users.permissions import require_admin
from ..users.repository import UserRepository
from .model import Assignment
from .repository import AssignmentRepository

logger = logging.getLogger(__name__)


class AssignmentManager:
    """Use case: bind staff to shifts and release them again.

    All checks and writes of one call run inside a single transaction. The
    shift row and the staff row are locked first, so two concurrent calls for
    the same shift (capacity) or the same person (overlaps) run one after the
    other against the same committed state.
    """

    def __init__(
        self,
        tx: TransactionManager,
        shifts: ShiftRepository,
        users: UserRepository,
        assignments: AssignmentRepository,
        attendance: AttendanceRepository,
        conflicts: ConflictDetector,
    ):
        self._tx = tx
        self._shifts = shifts
        self._users = users
        self._assignments = assignments
        self._attendance = attendance
        self._conflicts = conflicts

    def assign(self, actor: Actor, *, shift_id: int, user_id: int) -> Assignment:
        require_admin(actor)
        shift_id = int(shift_id)
        user_id = int(user_id)

        with self._tx.transaction():
            shift = self._shifts.get_by_id(shift_id, for_update=True)
            if not shift:
                raise ShiftNotFoundError("Shift not found")

            if self._assignments.count_for_shift(shift_id) >= shift.capacity:
                raise CapacityExceededError("Shift is at full capacity")

            user = self._users.get_by_id(user_id, for_update=True)
            if not user or not user.is_assignable:
                raise StaffNotFoundError("Staff member not found")

            if self._assignments.get(shift_id=shift_id, user_id=user_id):
                raise DuplicateAssignmentError("Staff member already assigned to this shift")

            if self._conflicts.would_create_conflict(user_id, shift_id):
                raise SchedulingConflictError(
                    "Assignment would create a conflict - staff member is already "
                    "assigned to an overlapping shift on this date"
                )

            assignment = self._assignments.create(shift_id=shift_id, user_id=user_id)
            self._attendance.create(shift_id=shift_id, user_id=user_id, status=AttendanceStatus.ABSENT)

        logger.info("assigned user %s to shift %s (by %s)", user_id, shift_id, actor.user_id)
        return assignment

    def unassign(self, actor: Actor, *, shift_id: int, user_id: int) -> None:
        require_admin(actor)
        shift_id = int(shift_id)
        user_id = int(user_id)

        with self._tx.transaction():
            if not self._assignments.get(shift_id=shift_id, user_id=user_id):
                raise AssignmentNotFoundError("Assignment not found")

            self._attendance.delete_for_pair(shift_id=shift_id, user_id=user_id)
            if not self._assignments.delete(shift_id=shift_id, user_id=user_id):
                raise AssignmentNotFoundError("Assignment not found")

        logger.info("unassigned user %s from shift %s (by %s)", user_id, shift_id, actor.user_id)

    def list_for_shift(self, shift_id: int) -> Sequence[Assignment]:
        if not self._shifts.get_by_id(int(shift_id)):
            raise ShiftNotFoundError("Shift not found")
        return self._assignments.list_for_shift(int(shift_id))
