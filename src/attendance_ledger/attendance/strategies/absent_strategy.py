from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStatusStrategy, StatusDecision


class AbsentStrategy(AttendanceStatusStrategy):
    def decide(self, *, on_leave: bool, first_check_in: Optional[datetime]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT)
