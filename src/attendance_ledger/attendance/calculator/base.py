from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ...shifts.model import ShiftSnapshot


@dataclass(frozen=True)
class ShiftDeviation:
    late_minutes: int = 0
    early_exit_minutes: int = 0
    overtime_minutes: int = 0


class ShiftDeviationCalculator(ABC):
    """Calculator interface (Strategy Pattern for lateness/overtime rules)."""

    @abstractmethod
    def deviations(
        self,
        *,
        work_date: date,
        shift: Optional[ShiftSnapshot],
        first_check_in: Optional[datetime],
        last_check_out: Optional[datetime],
        total_work_minutes: int,
    ) -> ShiftDeviation:
        raise NotImplementedError
