from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date, timedelta
from typing import Optional, Sequence

from ..assignments.model import AssignedShift
from ..assignments.repository import AssignmentRepository
from ..core.constants import DEFAULT_CONFLICT_SCAN_DAYS
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from .model import Conflict

logger = logging.getLogger(__name__)


class ConflictDetector:
    """Finds staff members booked on overlapping shifts of the same date.

    Shifts are compared only against shifts with the same ``shift_date``; an
    overnight shift is never checked against the next date's shifts.
    """

    def __init__(
        self,
        shifts: ShiftRepository,
        assignments: AssignmentRepository,
        *,
        inclusive: bool = True,
    ):
        self._shifts = shifts
        self._assignments = assignments
        self._inclusive = bool(inclusive)

    def _overlap(self, a: Shift, b: Shift) -> bool:
        return a.window.overlaps(b.window, inclusive=self._inclusive)

    def find_conflicts_for_date(self, work_date: date) -> list[Conflict]:
        """Report at most one overlapping pair per staff member.

        The first pair found in assignment order wins; further overlaps for the
        same person on that date are not listed.
        """

        by_user: "OrderedDict[int, list[AssignedShift]]" = OrderedDict()
        for row in self._assignments.list_for_date(work_date):
            by_user.setdefault(row.user_id, []).append(row)

        conflicts: list[Conflict] = []
        for user_id, rows in by_user.items():
            pair = self._first_overlapping_pair(rows)
            if pair:
                first, second = pair
                conflicts.append(
                    Conflict(
                        user_id=user_id,
                        full_name=first.full_name,
                        work_date=work_date,
                        first=first,
                        second=second,
                    )
                )
        return conflicts

    def _first_overlapping_pair(self, rows: Sequence[AssignedShift]) -> Optional[tuple[AssignedShift, AssignedShift]]:
        for i in range(len(rows)):
            for j in range(i + 1, len(rows)):
                if self._overlap(rows[i].shift, rows[j].shift):
                    return rows[i], rows[j]
        return None

    def find_conflicts_for_range(self, start: date, days: int = DEFAULT_CONFLICT_SCAN_DAYS) -> list[Conflict]:
        out: list[Conflict] = []
        for offset in range(max(int(days), 0)):
            out.extend(self.find_conflicts_for_date(start + timedelta(days=offset)))
        return out

    def would_create_conflict(self, user_id: int, candidate_shift_id: int) -> bool:
        candidate = self._shifts.get_by_id(candidate_shift_id)
        if not candidate:
            return False
        return self.overlaps_other_assignments(user_id, candidate)

    def overlaps_other_assignments(self, user_id: int, candidate: Shift) -> bool:
        """True when ``candidate`` (possibly an unsaved edit) overlaps another of the user's shifts on its date."""

        existing = self._assignments.list_for_user_on_date(user_id=user_id, work_date=candidate.shift_date)
        for row in existing:
            if row.shift.shift_id == candidate.shift_id:
                continue
            if self._overlap(candidate, row.shift):
                logger.debug(
                    "user %s: shift %s overlaps assigned shift %s",
                    user_id,
                    candidate.shift_id,
                    row.shift.shift_id,
                )
                return True
        return False
