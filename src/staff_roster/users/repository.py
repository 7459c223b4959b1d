from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Department, ShiftType, StaffRole
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, user_id: int, *, for_update: bool = False) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_staff(
        self,
        *,
        name: Optional[str] = None,
        staff_role: Optional[StaffRole] = None,
        department: Optional[Department] = None,
        shift_preference: Optional[ShiftType] = None,
        is_active: Optional[bool] = None,
    ) -> Sequence[User]:
        """STAFF users ordered by name; ``name`` is a case-insensitive substring."""

        raise NotImplementedError

    def create_staff(
        self,
        *,
        full_name: str,
        email: str,
        staff_role: StaffRole,
        department: Department,
        shift_preference: Optional[ShiftType] = None,
        contact_number: Optional[str] = None,
    ) -> int:
        """Insert a STAFF user. Raises DuplicateEmailError when the email is taken."""

        raise NotImplementedError

    def update(self, user: User) -> bool:
        """Persist profile fields. Raises DuplicateEmailError when the email is taken."""

        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
