from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStatusStrategy
from .strategies.on_leave_strategy import OnLeaveStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStatusFactory:
    """Factory Pattern: pick the status strategy by precedence ON_LEAVE > PRESENT > ABSENT."""

    def for_day(self, *, on_leave: bool, first_check_in: Optional[datetime]) -> AttendanceStatusStrategy:
        if on_leave:
            return OnLeaveStrategy()
        if first_check_in is not None:
            return PresentStrategy()
        return AbsentStrategy()
