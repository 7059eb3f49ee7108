from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pytest

from attendance_ledger.attendance.service import AttendanceReconciler
from attendance_ledger.employees.model import Employee
from attendance_ledger.punches.service import PunchService
from fakes import (
    EMP,
    ORG,
    InMemoryAttendance,
    InMemoryEmployees,
    InMemoryLeaveWindows,
    InMemoryPunches,
    InMemoryShifts,
    office_shift,
)


@dataclass
class AttendanceWorld:
    punches: InMemoryPunches
    shifts: InMemoryShifts
    leave_windows: InMemoryLeaveWindows
    attendance: InMemoryAttendance
    employees: InMemoryEmployees
    reconciler: AttendanceReconciler
    punch_service: PunchService


@pytest.fixture
def world() -> AttendanceWorld:
    punches = InMemoryPunches()
    shifts = InMemoryShifts({EMP: office_shift()})
    leave_windows = InMemoryLeaveWindows()
    attendance = InMemoryAttendance()
    employees = InMemoryEmployees(
        [Employee(employee_id=EMP, org_id=ORG, full_name="A", joining_date=date(2025, 1, 1), shift_id=1)]
    )
    reconciler = AttendanceReconciler(attendance, punches, shifts, leave_windows, employees)
    return AttendanceWorld(
        punches=punches,
        shifts=shifts,
        leave_windows=leave_windows,
        attendance=attendance,
        employees=employees,
        reconciler=reconciler,
        punch_service=PunchService(punches, leave_windows, reconciler),
    )
