from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import Shift


class ShiftRepository(Protocol):
    def get_assigned(self, *, org_id: int, employee_id: int, work_date: date) -> Optional[Shift]:
        """Active shift in force for the employee on work_date.

        A per-date schedule wins over the employee's default shift.
        """

        raise NotImplementedError
