from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ..assignments.model import AssignedShift, Assignment
from ..attendance.model import AttendanceHistoryRow, AttendanceRecord
from ..conflicts.model import Conflict
from ..shifts.model import Shift, ShiftSummary
from ..users.model import User
from .datetime_utils import format_hhmm


def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def shift_to_dict(shift: Shift) -> dict[str, Any]:
    return {
        "id": shift.shift_id,
        "date": shift.shift_date.isoformat(),
        "type": shift.shift_type.value,
        "startTime": format_hhmm(shift.start_time),
        "endTime": format_hhmm(shift.end_time),
        "capacity": shift.capacity,
    }


def summary_to_dict(summary: ShiftSummary) -> dict[str, Any]:
    out = shift_to_dict(summary.shift)
    out.update(
        {
            "assignedCount": summary.assigned_count,
            "availableSlots": summary.available_slots,
            "isFull": summary.is_full,
        }
    )
    return out


def assignment_to_dict(assignment: Assignment) -> dict[str, Any]:
    return {
        "id": assignment.assignment_id,
        "shiftId": assignment.shift_id,
        "userId": assignment.user_id,
        "assignedAt": _iso(assignment.assigned_at),
    }


def _assigned_shift_to_dict(row: AssignedShift) -> dict[str, Any]:
    shift = row.shift
    return {
        "id": shift.shift_id,
        "type": shift.shift_type.value,
        "startTime": format_hhmm(shift.start_time),
        "endTime": format_hhmm(shift.end_time),
    }


def conflict_to_dict(conflict: Conflict) -> dict[str, Any]:
    return {
        "userId": conflict.user_id,
        "userName": conflict.full_name,
        "date": conflict.work_date.isoformat(),
        "shifts": [_assigned_shift_to_dict(conflict.first), _assigned_shift_to_dict(conflict.second)],
    }


def attendance_to_dict(record: AttendanceRecord) -> dict[str, Any]:
    return {
        "id": record.attendance_id,
        "shiftId": record.shift_id,
        "userId": record.user_id,
        "checkIn": _iso(record.check_in),
        "checkOut": _iso(record.check_out),
        "status": record.status.value,
        "remarks": record.remarks,
    }


def history_row_to_dict(row: AttendanceHistoryRow) -> dict[str, Any]:
    out = attendance_to_dict(row.record)
    out["shift"] = shift_to_dict(row.shift)
    return out


def _enum_value(member) -> Optional[str]:
    return member.value if member is not None else None


def staff_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.user_id,
        "name": user.full_name,
        "email": user.email,
        "staffRole": _enum_value(user.staff_role),
        "department": _enum_value(user.department),
        "shiftPreference": _enum_value(user.shift_preference),
        "contactNumber": user.contact_number,
        "isActive": user.is_active,
    }
