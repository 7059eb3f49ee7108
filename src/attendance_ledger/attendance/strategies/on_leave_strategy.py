from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStatusStrategy, StatusDecision


class OnLeaveStrategy(AttendanceStatusStrategy):
    """Leave covers the day; punches do not change the outcome."""

    def decide(self, *, on_leave: bool, first_check_in: Optional[datetime]) -> StatusDecision:
        note = "punches recorded during leave" if first_check_in is not None else None
        return StatusDecision(status=AttendanceStatus.ON_LEAVE, note=note)
