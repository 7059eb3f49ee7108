from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..punches.model import PunchEvent
from ..shifts.model import ShiftSnapshot


@dataclass(frozen=True)
class AttendanceRecord:
    """One computed record per (employee, calendar date).

    Written only by reconciliation, always as a full replacement.
    """

    org_id: int
    employee_id: int
    attendance_date: date
    status: AttendanceStatus
    shift_snapshot: Optional[ShiftSnapshot] = None
    first_check_in: Optional[datetime] = None
    last_check_out: Optional[datetime] = None
    total_work_minutes: int = 0
    total_break_minutes: int = 0
    late_minutes: int = 0
    early_exit_minutes: int = 0
    overtime_minutes: int = 0
    attendance_id: Optional[int] = None


@dataclass(frozen=True)
class DayHistory:
    work_date: date
    punches: Sequence[PunchEvent]
    first_check_in: Optional[datetime]
    last_check_out: Optional[datetime]
    record: Optional[AttendanceRecord]


@dataclass(frozen=True)
class MonthSummary:
    month_start: date
    month_end: date
    present: int
    absent: int
    late_arrivals: int
    early_exits: int
    overtime_minutes: int
    overtime_label: str
