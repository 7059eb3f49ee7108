from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStatusStrategy, StatusDecision


class PresentStrategy(AttendanceStatusStrategy):
    """At least one check-in on the day."""

    def decide(self, *, on_leave: bool, first_check_in: Optional[datetime]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
