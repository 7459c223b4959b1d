from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Identity roles used for authorization."""

    ADMIN = "ADMIN"
    STAFF = "STAFF"


class ShiftType(str, Enum):
    """Descriptive label only. Timing always comes from start/end times."""

    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"
    NIGHT = "NIGHT"


class AttendanceStatus(str, Enum):
    """Attendance status stored with each (shift, user) record."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    EARLY_EXIT = "EARLY_EXIT"


class StaffRole(str, Enum):
    NURSE = "NURSE"
    DOCTOR = "DOCTOR"
    TECHNICIAN = "TECHNICIAN"


class Department(str, Enum):
    EMERGENCY = "EMERGENCY"
    ICU = "ICU"
    GENERAL_WARD = "GENERAL_WARD"
    SURGERY = "SURGERY"
    PEDIATRICS = "PEDIATRICS"
    CARDIOLOGY = "CARDIOLOGY"
    RADIOLOGY = "RADIOLOGY"
    LABORATORY = "LABORATORY"
