from __future__ import annotations

from dataclasses import dataclass

from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.repository import AssignmentRepository
from .assignments.service import AssignmentManager
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceEngine
from .conflicts.detector import ConflictDetector
from .core.constants import DEFAULT_CONFLICT_SCAN_DAYS, DEFAULT_LATE_GRACE_MINUTES
from .database.bootstrap import as_config
from .database.connection import DatabaseConnection
from .database.transaction import TransactionManager
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .shifts.service import ShiftService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import StaffService


@dataclass(frozen=True)
class Container:
    tx: TransactionManager

    shifts_repo: ShiftRepository
    users_repo: UserRepository
    assignments_repo: AssignmentRepository
    attendance_repo: AttendanceRepository

    conflict_detector: ConflictDetector
    assignment_manager: AssignmentManager
    attendance_engine: AttendanceEngine
    shift_service: ShiftService
    staff_service: StaffService

    conflict_scan_days: int = DEFAULT_CONFLICT_SCAN_DAYS


def assemble(
    *,
    tx: TransactionManager,
    shifts: ShiftRepository,
    users: UserRepository,
    assignments: AssignmentRepository,
    attendance: AttendanceRepository,
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    overlap_inclusive: bool = True,
    conflict_scan_days: int = DEFAULT_CONFLICT_SCAN_DAYS,
) -> Container:
    """Wire services on top of any repository implementation."""

    conflict_detector = ConflictDetector(shifts, assignments, inclusive=overlap_inclusive)
    assignment_manager = AssignmentManager(tx, shifts, users, assignments, attendance, conflict_detector)
    attendance_engine = AttendanceEngine(attendance, shifts, assignments, grace_minutes=grace_minutes)
    shift_service = ShiftService(tx, shifts, assignments, attendance, users, conflict_detector)
    staff_service = StaffService(tx, users)

    return Container(
        tx=tx,
        shifts_repo=shifts,
        users_repo=users,
        assignments_repo=assignments,
        attendance_repo=attendance,
        conflict_detector=conflict_detector,
        assignment_manager=assignment_manager,
        attendance_engine=attendance_engine,
        shift_service=shift_service,
        staff_service=staff_service,
        conflict_scan_days=int(conflict_scan_days),
    )


def build_container(
    *,
    db_config: dict,
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    overlap_inclusive: bool = True,
    conflict_scan_days: int = DEFAULT_CONFLICT_SCAN_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(as_config(db_config))

    return assemble(
        tx=conn,
        shifts=MySQLShiftRepository(conn),
        users=MySQLUserRepository(conn),
        assignments=MySQLAssignmentRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        grace_minutes=grace_minutes,
        overlap_inclusive=overlap_inclusive,
        conflict_scan_days=conflict_scan_days,
    )
