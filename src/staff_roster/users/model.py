from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Department, Role, ShiftType, StaffRole


@dataclass(frozen=True)
class User:
    """Domain entity: a staff or admin identity.

    Note: Plain data object. Staff records are maintained by admins through
    ``StaffService``; admin accounts only come from the seed data.
    """

    user_id: int
    full_name: str
    email: str
    role: Role
    staff_role: Optional[StaffRole] = None
    department: Optional[Department] = None
    shift_preference: Optional[ShiftType] = None
    contact_number: Optional[str] = None
    is_active: bool = True

    @property
    def is_staff(self) -> bool:
        return self.role == Role.STAFF

    @property
    def is_assignable(self) -> bool:
        return self.is_active and self.is_staff


@dataclass(frozen=True)
class Actor:
    """The already-resolved identity on whose behalf an operation runs."""

    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
