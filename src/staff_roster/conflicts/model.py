from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..assignments.model import AssignedShift


@dataclass(frozen=True)
class Conflict:
    """Two overlapping assignments for the same staff member on one date.

    Derived on demand; never persisted.
    """

    user_id: int
    full_name: str
    work_date: date
    first: AssignedShift
    second: AssignedShift
