from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..shifts.model import Shift


@dataclass(frozen=True)
class Assignment:
    """Binding of one staff member to one shift; unique per (shift, user)."""

    assignment_id: int
    shift_id: int
    user_id: int
    assigned_at: Optional[datetime] = None


@dataclass(frozen=True)
class AssignedShift:
    """Read-model: an assignment joined with its shift and staff name.

    Listings are ordered by ``assignment_id``, i.e. the order staff were booked.
    """

    user_id: int
    full_name: str
    shift: Shift
    assignment_id: int
