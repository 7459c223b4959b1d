from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..core.enums import AttendanceStatus
from ..scheduling.interval import TimeInterval


def derive_status(
    check_in: Optional[datetime],
    check_out: Optional[datetime],
    shift_start: time,
    shift_end: time,
    shift_date: date,
    *,
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
) -> AttendanceStatus:
    """Classify attendance against the shift window.

    - no check-in: ABSENT
    - check-out strictly before the shift end: EARLY_EXIT, even when late
    - check-in more than ``grace_minutes`` after the start: LATE
    - otherwise PRESENT

    Lateness is counted in whole minutes, so 5m59s late is still "5 minutes".
    """

    if check_in is None:
        return AttendanceStatus.ABSENT

    window = TimeInterval.on(shift_date, shift_start, shift_end)
    minutes_late = (check_in - window.start) // timedelta(minutes=1)
    is_late = minutes_late > grace_minutes

    if check_out is not None and check_out < window.end:
        return AttendanceStatus.EARLY_EXIT
    if is_late:
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT
