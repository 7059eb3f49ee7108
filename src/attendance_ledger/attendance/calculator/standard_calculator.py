from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...common.datetime_utils import at_time, minutes_between
from ...core.constants import MINUTES_PER_HOUR
from ...shifts.model import ShiftSnapshot
from .base import ShiftDeviation, ShiftDeviationCalculator


class StandardDeviationCalculator(ShiftDeviationCalculator):
    """Standard rule: lateness after grace, early exit before shift end, work beyond expected hours."""

    def deviations(
        self,
        *,
        work_date: date,
        shift: Optional[ShiftSnapshot],
        first_check_in: Optional[datetime],
        last_check_out: Optional[datetime],
        total_work_minutes: int,
    ) -> ShiftDeviation:
        if shift is None or not shift.has_bounds:
            return ShiftDeviation()

        shift_start = at_time(work_date, shift.start_time)
        shift_end = at_time(work_date, shift.end_time)

        late = 0
        if first_check_in is not None:
            late = max(0, minutes_between(shift_start, first_check_in) - int(shift.grace_minutes or 0))

        early_exit = 0
        if last_check_out is not None:
            early_exit = minutes_between(last_check_out, shift_end)

        overtime = 0
        if shift.working_hours:
            expected = int(round(shift.working_hours * MINUTES_PER_HOUR))
            overtime = max(0, total_work_minutes - expected)

        return ShiftDeviation(late_minutes=late, early_exit_minutes=early_exit, overtime_minutes=overtime)
