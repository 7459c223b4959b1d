from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time

from ..core.enums import ShiftType
from ..scheduling.interval import TimeInterval


@dataclass(frozen=True)
class Shift:
    """Domain entity: a capacity-bounded work period on one calendar date."""

    shift_id: int
    shift_date: date
    shift_type: ShiftType
    start_time: time
    end_time: time
    capacity: int

    @property
    def window(self) -> TimeInterval:
        return TimeInterval.on(self.shift_date, self.start_time, self.end_time)


@dataclass(frozen=True)
class ShiftSummary:
    """Read-model for listings: the shift plus its current occupancy."""

    shift: Shift
    assigned_count: int

    @property
    def available_slots(self) -> int:
        return max(self.shift.capacity - self.assigned_count, 0)

    @property
    def is_full(self) -> bool:
        return self.assigned_count >= self.shift.capacity
