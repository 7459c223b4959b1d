from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AssignedShift, Assignment


class AssignmentRepository(Protocol):
    def get(self, *, shift_id: int, user_id: int) -> Optional[Assignment]:
        raise NotImplementedError

    def count_for_shift(self, shift_id: int) -> int:
        raise NotImplementedError

    def list_for_shift(self, shift_id: int) -> Sequence[Assignment]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AssignedShift]:
        """All assignments on shifts dated ``work_date``, ordered by ``assignment_id``."""

        raise NotImplementedError

    def list_for_user_on_date(self, *, user_id: int, work_date: date) -> Sequence[AssignedShift]:
        raise NotImplementedError

    def create(self, *, shift_id: int, user_id: int) -> Assignment:
        """Insert the pair.

        Raises DuplicateAssignmentError when the (shift, user) key already exists.
        """

        raise NotImplementedError

    def delete(self, *, shift_id: int, user_id: int) -> bool:
        raise NotImplementedError
