from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import as_date, end_of_day, format_minutes_label, month_bounds, start_of_day
from ..core.enums import AttendanceStatus
from ..employees.repository import EmployeeRepository
from ..leave.repository import LeaveWindowRepository
from ..punches.repository import PunchRepository
from ..shifts.model import ShiftSnapshot
from ..shifts.repository import ShiftRepository
from .calculator.base import ShiftDeviationCalculator
from .calculator.standard_calculator import StandardDeviationCalculator
from .factory import AttendanceStatusFactory
from .intervals import first_check_in, last_check_out, pair_intervals
from .model import AttendanceRecord, DayHistory, MonthSummary
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceReconciler:
    """Recomputes a day's attendance record from its punches.

    Every call re-reads all punches and replaces the stored record, so the
    operation is idempotent and repeated or concurrent triggers converge.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        punches: PunchRepository,
        shifts: ShiftRepository,
        leave_windows: LeaveWindowRepository,
        employees: Optional[EmployeeRepository] = None,
        *,
        status_factory: AttendanceStatusFactory | None = None,
        calculator: ShiftDeviationCalculator | None = None,
    ):
        self._attendance = attendance
        self._punches = punches
        self._shifts = shifts
        self._leave_windows = leave_windows
        self._employees = employees
        self._factory = status_factory or AttendanceStatusFactory()
        self._calculator = calculator or StandardDeviationCalculator()

    def reconcile(self, org_id: int, employee_id: int, work_date: date | datetime) -> AttendanceRecord:
        day = as_date(work_date)

        punches = self._punches.list_between(
            org_id=org_id,
            employee_id=employee_id,
            start=start_of_day(day),
            end=end_of_day(day),
        )
        punches = sorted(punches, key=lambda p: p.punch_time)

        check_in = first_check_in(punches)
        check_out = last_check_out(punches)
        totals = pair_intervals(punches)

        on_leave = self._leave_windows.has_active_leave(org_id=org_id, employee_id=employee_id, work_date=day)
        snapshot = self._resolve_snapshot(org_id, employee_id, day)

        deviation = self._calculator.deviations(
            work_date=day,
            shift=snapshot,
            first_check_in=check_in,
            last_check_out=check_out,
            total_work_minutes=totals.work_minutes,
        )

        strategy = self._factory.for_day(on_leave=on_leave, first_check_in=check_in)
        decision = strategy.decide(on_leave=on_leave, first_check_in=check_in)
        if decision.note:
            logger.debug("employee_id=%s date=%s %s", employee_id, day, decision.note)

        record = AttendanceRecord(
            org_id=org_id,
            employee_id=employee_id,
            attendance_date=day,
            status=decision.status,
            shift_snapshot=snapshot,
            first_check_in=check_in,
            last_check_out=check_out,
            total_work_minutes=totals.work_minutes,
            total_break_minutes=totals.break_minutes,
            late_minutes=deviation.late_minutes,
            early_exit_minutes=deviation.early_exit_minutes,
            overtime_minutes=deviation.overtime_minutes,
        )
        attendance_id = self._attendance.upsert(record)

        logger.debug(
            "reconciled employee_id=%s date=%s status=%s punches=%d work=%d break=%d",
            employee_id,
            day,
            record.status.value,
            len(punches),
            record.total_work_minutes,
            record.total_break_minutes,
        )
        return replace(record, attendance_id=attendance_id)

    def reconcile_day(self, work_date: date | datetime, *, org_id: Optional[int] = None) -> int:
        """Give every active employee a record for work_date.

        Employees that already have a record are left alone. Returns the
        number of records created.
        """
        if self._employees is None:
            raise RuntimeError("reconcile_day needs an employee repository")

        day = as_date(work_date)
        created = 0
        for emp in self._employees.list_active(org_id=org_id):
            try:
                if self._attendance.get_for_employee_and_date(employee_id=emp.employee_id, attendance_date=day):
                    continue
                self.reconcile(emp.org_id, emp.employee_id, day)
                created += 1
            except Exception:
                logger.exception("daily sweep failed employee_id=%s date=%s", emp.employee_id, day)

        logger.info("daily sweep finished date=%s created=%d", day, created)
        return created

    def day_history(self, org_id: int, employee_id: int, work_date: date | datetime) -> DayHistory:
        day = as_date(work_date)
        punches = sorted(
            self._punches.list_between(
                org_id=org_id,
                employee_id=employee_id,
                start=start_of_day(day),
                end=end_of_day(day),
            ),
            key=lambda p: p.punch_time,
        )
        return DayHistory(
            work_date=day,
            punches=punches,
            first_check_in=first_check_in(punches),
            last_check_out=last_check_out(punches),
            record=self._attendance.get_for_employee_and_date(employee_id=employee_id, attendance_date=day),
        )

    def month_summary(self, org_id: int, employee_id: int, any_day: date | datetime) -> MonthSummary:
        month_start, month_end = month_bounds(any_day)
        records = self._attendance.list_range(
            org_id=org_id,
            start_date=month_start,
            end_date=month_end,
            employee_id=employee_id,
        )

        overtime = sum(r.overtime_minutes or 0 for r in records)
        return MonthSummary(
            month_start=month_start,
            month_end=month_end,
            present=sum(1 for r in records if r.status == AttendanceStatus.PRESENT),
            absent=sum(1 for r in records if r.status == AttendanceStatus.ABSENT),
            late_arrivals=sum(1 for r in records if (r.late_minutes or 0) > 0),
            early_exits=sum(1 for r in records if (r.early_exit_minutes or 0) > 0),
            overtime_minutes=overtime,
            overtime_label=format_minutes_label(overtime),
        )

    def _resolve_snapshot(self, org_id: int, employee_id: int, day: date) -> Optional[ShiftSnapshot]:
        shift = self._shifts.get_assigned(org_id=org_id, employee_id=employee_id, work_date=day)
        if shift is None:
            logger.warning("no shift resolved employee_id=%s date=%s; lateness and overtime left at zero", employee_id, day)
            return None
        return ShiftSnapshot.from_shift(shift)
