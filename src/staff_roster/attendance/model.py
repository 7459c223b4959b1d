from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..shifts.model import Shift


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: check-in/check-out record of one staff member on one shift."""

    attendance_id: int
    shift_id: int
    user_id: int
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    status: AttendanceStatus
    remarks: Optional[str] = None


@dataclass(frozen=True)
class AttendanceHistoryRow:
    """Read-model for history listings (record joined with its shift)."""

    record: AttendanceRecord
    shift: Shift


@dataclass(frozen=True)
class AttendanceUpdate:
    """Admin edit. ``None`` means "leave unchanged"."""

    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None
    remarks: Optional[str] = None
