from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta


@dataclass(frozen=True)
class TimeInterval:
    """A shift's active window anchored to a calendar date.

    Both wall-clock times are combined with the same ``work_date``. When the
    end time is earlier than the start time the window crosses midnight and
    the end is placed on the following day (``16:00-00:00`` ends at 00:00 of
    the next date). Equal start and end times give a zero-length window.
    """

    start: datetime
    end: datetime

    @classmethod
    def on(cls, work_date: date, start_time: time, end_time: time) -> "TimeInterval":
        start = datetime.combine(work_date, start_time)
        end = datetime.combine(work_date, end_time)
        if end < start:
            end += timedelta(days=1)
        return cls(start=start, end=end)

    @property
    def crosses_midnight(self) -> bool:
        return self.end.date() > self.start.date()

    def overlaps(self, other: "TimeInterval", *, inclusive: bool = True) -> bool:
        # Closed intervals: touching at a boundary counts unless inclusive=False.
        if inclusive:
            return self.start <= other.end and other.start <= self.end
        return self.start < other.end and other.start < self.end


def overlaps(
    start_a: time,
    end_a: time,
    start_b: time,
    end_b: time,
    work_date: date,
    *,
    inclusive: bool = True,
) -> bool:
    """Return True when two shift windows on ``work_date`` share any instant."""

    a = TimeInterval.on(work_date, start_a, end_a)
    b = TimeInterval.on(work_date, start_b, end_b)
    return a.overlaps(b, inclusive=inclusive)
