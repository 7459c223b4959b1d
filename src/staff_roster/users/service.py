from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from ..common.validators import require_email, require_non_empty
from ..core.enums import Department, ShiftType, StaffRole
from ..core.exceptions import DuplicateEmailError, StaffNotFoundError
from ..database.transaction import TransactionManager
from .model import Actor, User
from .permissions import require_admin, require_self_or_admin
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewStaff:
    full_name: str
    email: str
    staff_role: StaffRole
    department: Department
    shift_preference: Optional[ShiftType] = None
    contact_number: Optional[str] = None


@dataclass(frozen=True)
class StaffChanges:
    full_name: Optional[str] = None
    email: Optional[str] = None
    staff_role: Optional[StaffRole] = None
    department: Optional[Department] = None
    shift_preference: Optional[ShiftType] = None
    contact_number: Optional[str] = None
    is_active: Optional[bool] = None


@dataclass(frozen=True)
class StaffFilter:
    name: Optional[str] = None
    staff_role: Optional[StaffRole] = None
    department: Optional[Department] = None
    shift_preference: Optional[ShiftType] = None
    is_active: Optional[bool] = None


class StaffService:
    """Use case: maintain staff records (admin).

    Only STAFF users are reachable here; an admin account looks like a missing
    staff member. Deactivated staff keep their history but cannot be assigned.
    """

    def __init__(self, tx: TransactionManager, users: UserRepository):
        self._tx = tx
        self._users = users

    def _get_staff(self, user_id: int, *, for_update: bool = False) -> User:
        user = self._users.get_by_id(int(user_id), for_update=for_update)
        if not user or not user.is_staff:
            raise StaffNotFoundError("Staff member not found")
        return user

    def list_staff(self, actor: Actor, filters: StaffFilter = StaffFilter()) -> Sequence[User]:
        require_admin(actor)
        return self._users.list_staff(
            name=(filters.name or "").strip() or None,
            staff_role=filters.staff_role,
            department=filters.department,
            shift_preference=filters.shift_preference,
            is_active=filters.is_active,
        )

    def get_staff(self, actor: Actor, user_id: int) -> User:
        require_self_or_admin(actor, user_id)
        return self._get_staff(user_id)

    def create_staff(self, actor: Actor, new: NewStaff) -> User:
        require_admin(actor)
        full_name = require_non_empty(new.full_name, "name")
        email = require_email(new.email)

        if self._users.get_by_email(email):
            raise DuplicateEmailError("Email already in use")

        user_id = self._users.create_staff(
            full_name=full_name,
            email=email,
            staff_role=new.staff_role,
            department=new.department,
            shift_preference=new.shift_preference,
            contact_number=new.contact_number,
        )
        logger.info("staff %s (%s) created by %s", user_id, email, actor.user_id)
        return self._get_staff(user_id)

    def update_staff(self, actor: Actor, user_id: int, changes: StaffChanges) -> User:
        require_admin(actor)

        with self._tx.transaction():
            existing = self._get_staff(user_id, for_update=True)

            email = require_email(changes.email) if changes.email is not None else existing.email
            if email != existing.email:
                owner = self._users.get_by_email(email)
                if owner and owner.user_id != existing.user_id:
                    raise DuplicateEmailError("Email already in use")

            updated = replace(
                existing,
                full_name=require_non_empty(changes.full_name, "name") if changes.full_name is not None else existing.full_name,
                email=email,
                staff_role=changes.staff_role if changes.staff_role is not None else existing.staff_role,
                department=changes.department if changes.department is not None else existing.department,
                shift_preference=changes.shift_preference if changes.shift_preference is not None else existing.shift_preference,
                contact_number=changes.contact_number if changes.contact_number is not None else existing.contact_number,
                is_active=changes.is_active if changes.is_active is not None else existing.is_active,
            )
            self._users.update(updated)

        if updated.is_active != existing.is_active:
            logger.info("staff %s %s by %s", existing.user_id, "reactivated" if updated.is_active else "deactivated", actor.user_id)
        else:
            logger.info("staff %s updated by %s", existing.user_id, actor.user_id)
        return updated

    def delete_staff(self, actor: Actor, user_id: int) -> None:
        """Remove the staff member together with their assignments and attendance."""

        require_admin(actor)
        staff = self._get_staff(user_id)
        if not self._users.delete_by_id(staff.user_id):
            raise StaffNotFoundError("Staff member not found")
        logger.info("staff %s deleted by %s", staff.user_id, actor.user_id)
