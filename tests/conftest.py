from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional

import pytest

from staff_roster.assignments.model import AssignedShift, Assignment
from staff_roster.attendance.model import AttendanceHistoryRow, AttendanceRecord
from staff_roster.container import Container, assemble
from staff_roster.core.enums import AttendanceStatus, Department, Role, ShiftType, StaffRole
from staff_roster.core.exceptions import DuplicateAssignmentError, DuplicateEmailError
from staff_roster.shifts.model import Shift, ShiftSummary
from staff_roster.users.model import Actor, User


class InMemoryStore:
    """Shared state behind the in-memory repositories.

    One re-entrant lock guards everything. A transaction holds it for its whole
    block and restores a snapshot on error.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.users: dict[int, User] = {}
        self.shifts: dict[int, Shift] = {}
        self.assignments: dict[tuple[int, int], Assignment] = {}
        self.attendance: dict[tuple[int, int], AttendanceRecord] = {}
        self._next_id = 0

    def next_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def snapshot(self):
        return dict(self.users), dict(self.shifts), dict(self.assignments), dict(self.attendance), self._next_id

    def restore(self, snap) -> None:
        self.users, self.shifts, self.assignments, self.attendance = (dict(s) for s in snap[:4])
        self._next_id = snap[4]


class InMemoryTx:
    def __init__(self, store: InMemoryStore):
        self._store = store
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def transaction(self):
        with self._store.lock:
            snap = self._store.snapshot()
            try:
                yield
            except BaseException:
                self._store.restore(snap)
                self.rollbacks += 1
                raise
            self.commits += 1


class InMemoryUsers:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, user_id: int, *, for_update: bool = False) -> Optional[User]:
        with self._store.lock:
            return self._store.users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        with self._store.lock:
            return next((u for u in self._store.users.values() if u.email == email), None)

    def list_staff(self, *, name=None, staff_role=None, department=None, shift_preference=None, is_active=None):
        with self._store.lock:
            rows = [
                u
                for u in self._store.users.values()
                if u.role == Role.STAFF
                and (name is None or name.lower() in u.full_name.lower())
                and (staff_role is None or u.staff_role == staff_role)
                and (department is None or u.department == department)
                and (shift_preference is None or u.shift_preference == shift_preference)
                and (is_active is None or u.is_active == is_active)
            ]
            return sorted(rows, key=lambda u: (u.full_name, u.user_id))

    def create_staff(self, *, full_name, email, staff_role, department, shift_preference=None, contact_number=None) -> int:
        with self._store.lock:
            if self.get_by_email(email):
                raise DuplicateEmailError("Email already in use")
            user_id = self._store.next_id()
            self._store.users[user_id] = User(
                user_id=user_id,
                full_name=full_name,
                email=email,
                role=Role.STAFF,
                staff_role=staff_role,
                department=department,
                shift_preference=shift_preference,
                contact_number=contact_number,
            )
            return user_id

    def update(self, user: User) -> bool:
        with self._store.lock:
            if user.user_id not in self._store.users:
                return False
            owner = self.get_by_email(user.email)
            if owner and owner.user_id != user.user_id:
                raise DuplicateEmailError("Email already in use")
            self._store.users[user.user_id] = user
            return True

    def delete_by_id(self, user_id: int) -> bool:
        with self._store.lock:
            if self._store.users.pop(int(user_id), None) is None:
                return False
            for table in (self._store.assignments, self._store.attendance):
                for key in [k for k in table if k[1] == int(user_id)]:
                    del table[key]
            return True


class InMemoryShifts:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, shift_id: int, *, for_update: bool = False) -> Optional[Shift]:
        with self._store.lock:
            return self._store.shifts.get(int(shift_id))

    def list_summaries(self, *, start=None, end=None, shift_type=None):
        with self._store.lock:
            out = []
            for s in sorted(self._store.shifts.values(), key=lambda s: (s.shift_date, s.start_time)):
                if start is not None and s.shift_date < start:
                    continue
                if end is not None and s.shift_date > end:
                    continue
                if shift_type is not None and s.shift_type != shift_type:
                    continue
                count = sum(1 for (sid, _) in self._store.assignments if sid == s.shift_id)
                out.append(ShiftSummary(shift=s, assigned_count=count))
            return out

    def create(self, *, shift_date, shift_type, start_time, end_time, capacity) -> int:
        with self._store.lock:
            shift_id = self._store.next_id()
            self._store.shifts[shift_id] = Shift(
                shift_id=shift_id,
                shift_date=shift_date,
                shift_type=shift_type,
                start_time=start_time,
                end_time=end_time,
                capacity=capacity,
            )
            return shift_id

    def update(self, shift: Shift) -> bool:
        with self._store.lock:
            if shift.shift_id not in self._store.shifts:
                return False
            self._store.shifts[shift.shift_id] = shift
            return True

    def delete(self, shift_id: int) -> bool:
        with self._store.lock:
            if self._store.shifts.pop(int(shift_id), None) is None:
                return False
            for key in [k for k in self._store.assignments if k[0] == int(shift_id)]:
                del self._store.assignments[key]
            for key in [k for k in self._store.attendance if k[0] == int(shift_id)]:
                del self._store.attendance[key]
            return True


class InMemoryAssignments:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def _joined(self, a: Assignment) -> AssignedShift:
        user = self._store.users[a.user_id]
        return AssignedShift(
            user_id=a.user_id,
            full_name=user.full_name,
            shift=self._store.shifts[a.shift_id],
            assignment_id=a.assignment_id,
        )

    def get(self, *, shift_id: int, user_id: int) -> Optional[Assignment]:
        with self._store.lock:
            return self._store.assignments.get((int(shift_id), int(user_id)))

    def count_for_shift(self, shift_id: int) -> int:
        with self._store.lock:
            return sum(1 for (sid, _) in self._store.assignments if sid == int(shift_id))

    def list_for_shift(self, shift_id: int):
        with self._store.lock:
            rows = [a for (sid, _), a in self._store.assignments.items() if sid == int(shift_id)]
            return sorted(rows, key=lambda a: a.assignment_id)

    def list_for_date(self, work_date: date):
        with self._store.lock:
            rows = [
                self._joined(a)
                for a in self._store.assignments.values()
                if self._store.shifts[a.shift_id].shift_date == work_date
            ]
            return sorted(rows, key=lambda r: r.assignment_id)

    def list_for_user_on_date(self, *, user_id: int, work_date: date):
        with self._store.lock:
            return [r for r in self.list_for_date(work_date) if r.user_id == int(user_id)]

    def create(self, *, shift_id: int, user_id: int) -> Assignment:
        with self._store.lock:
            key = (int(shift_id), int(user_id))
            if key in self._store.assignments:
                raise DuplicateAssignmentError("Staff member already assigned to this shift")
            assignment = Assignment(assignment_id=self._store.next_id(), shift_id=key[0], user_id=key[1])
            self._store.assignments[key] = assignment
            return assignment

    def delete(self, *, shift_id: int, user_id: int) -> bool:
        with self._store.lock:
            return self._store.assignments.pop((int(shift_id), int(user_id)), None) is not None


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def _find(self, attendance_id: int):
        for key, rec in self._store.attendance.items():
            if rec.attendance_id == int(attendance_id):
                return key, rec
        return None, None

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with self._store.lock:
            return self._find(attendance_id)[1]

    def get_for_pair(self, *, shift_id: int, user_id: int) -> Optional[AttendanceRecord]:
        with self._store.lock:
            return self._store.attendance.get((int(shift_id), int(user_id)))

    def create(self, *, shift_id: int, user_id: int, status: AttendanceStatus = AttendanceStatus.ABSENT):
        with self._store.lock:
            key = (int(shift_id), int(user_id))
            if key not in self._store.attendance:
                self._store.attendance[key] = AttendanceRecord(
                    attendance_id=self._store.next_id(),
                    shift_id=key[0],
                    user_id=key[1],
                    check_in=None,
                    check_out=None,
                    status=status,
                )
            return self._store.attendance[key]

    def set_check_in_if_unset(self, *, attendance_id: int, check_in: datetime, status: AttendanceStatus) -> bool:
        with self._store.lock:
            key, rec = self._find(attendance_id)
            if rec is None or rec.check_in is not None:
                return False
            self._store.attendance[key] = replace(rec, check_in=check_in, status=status)
            return True

    def set_check_out_if_unset(self, *, attendance_id: int, check_out: datetime, status: AttendanceStatus) -> bool:
        with self._store.lock:
            key, rec = self._find(attendance_id)
            if rec is None or rec.check_in is None or rec.check_out is not None:
                return False
            self._store.attendance[key] = replace(rec, check_out=check_out, status=status)
            return True

    def admin_update_record(self, *, attendance_id, check_in, check_out, status, remarks=None) -> bool:
        with self._store.lock:
            key, rec = self._find(attendance_id)
            if rec is None:
                return False
            self._store.attendance[key] = replace(
                rec, check_in=check_in, check_out=check_out, status=status, remarks=remarks
            )
            return True

    def delete_for_pair(self, *, shift_id: int, user_id: int) -> int:
        with self._store.lock:
            return 1 if self._store.attendance.pop((int(shift_id), int(user_id)), None) else 0

    def list_for_user(self, *, user_id, start=None, end=None, status=None, limit=100):
        with self._store.lock:
            rows = []
            for rec in self._store.attendance.values():
                shift = self._store.shifts[rec.shift_id]
                if rec.user_id != int(user_id):
                    continue
                if start is not None and shift.shift_date < start:
                    continue
                if end is not None and shift.shift_date > end:
                    continue
                if status is not None and rec.status != status:
                    continue
                rows.append(AttendanceHistoryRow(record=rec, shift=shift))
            rows.sort(key=lambda r: (r.shift.shift_date, r.shift.start_time), reverse=True)
            return rows[:limit]

    def list_for_date(self, work_date: date):
        with self._store.lock:
            return [r for r in self._store.attendance.values() if self._store.shifts[r.shift_id].shift_date == work_date]


ADMIN = Actor(user_id=1, role=Role.ADMIN)
WORK_DATE = date(2026, 3, 2)


@pytest.fixture
def store() -> InMemoryStore:
    store = InMemoryStore()
    store.users[1] = User(user_id=1, full_name="Admin Demo", email="admin@h.test", role=Role.ADMIN)
    store.users[2] = User(
        user_id=2,
        full_name="Alice Nurse",
        email="alice@h.test",
        role=Role.STAFF,
        staff_role=StaffRole.NURSE,
        department=Department.EMERGENCY,
        shift_preference=ShiftType.MORNING,
    )
    store.users[3] = User(
        user_id=3,
        full_name="Bob Doctor",
        email="bob@h.test",
        role=Role.STAFF,
        staff_role=StaffRole.DOCTOR,
        department=Department.CARDIOLOGY,
    )
    store.users[4] = User(
        user_id=4, full_name="Carl Former", email="carl@h.test", role=Role.STAFF, is_active=False
    )
    for uid in range(10, 20):
        store.users[uid] = User(user_id=uid, full_name=f"Staff {uid}", email=f"s{uid}@h.test", role=Role.STAFF)
    store._next_id = 100
    return store


@pytest.fixture
def tx(store) -> InMemoryTx:
    return InMemoryTx(store)


@pytest.fixture
def container(store, tx) -> Container:
    return assemble(
        tx=tx,
        shifts=InMemoryShifts(store),
        users=InMemoryUsers(store),
        assignments=InMemoryAssignments(store),
        attendance=InMemoryAttendance(store),
        grace_minutes=5,
    )


@pytest.fixture
def admin() -> Actor:
    return ADMIN


@pytest.fixture
def make_shift(container):
    def _make(start: str = "08:00", end: str = "16:00", *, capacity: int = 5, on: date = WORK_DATE, shift_type=ShiftType.MORNING) -> int:
        h1, m1 = (int(p) for p in start.split(":"))
        h2, m2 = (int(p) for p in end.split(":"))
        return container.shifts_repo.create(
            shift_date=on,
            shift_type=shift_type,
            start_time=time(h1, m1),
            end_time=time(h2, m2),
            capacity=capacity,
        )

    return _make


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 8, 3, 0)
