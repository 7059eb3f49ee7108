from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Roster entry used by the accrual scheduler and the daily sweep."""

    employee_id: int
    org_id: int
    full_name: str
    joining_date: Optional[date]
    shift_id: Optional[int] = None
    is_active: bool = True
