from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import ShiftType
from .model import Shift, ShiftSummary


class ShiftRepository(Protocol):
    def get_by_id(self, shift_id: int, *, for_update: bool = False) -> Optional[Shift]:
        """Fetch one shift.

        ``for_update`` takes a row lock for the rest of the current
        transaction; concurrent assignments to the same shift queue behind it.
        """

        raise NotImplementedError

    def list_summaries(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        shift_type: Optional[ShiftType] = None,
    ) -> Sequence[ShiftSummary]:
        raise NotImplementedError

    def create(
        self,
        *,
        shift_date: date,
        shift_type: ShiftType,
        start_time: time,
        end_time: time,
        capacity: int,
    ) -> int:
        raise NotImplementedError

    def update(self, shift: Shift) -> bool:
        raise NotImplementedError

    def delete(self, shift_id: int) -> bool:
        """Delete a shift; assignments and attendance rows go with it."""

        raise NotImplementedError
