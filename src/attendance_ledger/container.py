from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceReconciler
from .core.constants import DEFAULT_ACCRUAL_WORKERS
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .leave.accrual import LeaveAccrualScheduler
from .leave.balance import LeaveBalanceCalculator
from .leave.mysql_leave_window_repository import MySQLLeaveWindowRepository
from .leave.mysql_ledger_repository import MySQLLeaveLedgerRepository
from .leave.mysql_policy_repository import MySQLLeavePolicyRepository
from .punches.mysql_punch_repository import MySQLPunchRepository
from .punches.service import PunchService
from .shifts.mysql_shift_repository import MySQLShiftRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    shifts_repo: MySQLShiftRepository
    punches_repo: MySQLPunchRepository
    attendance_repo: MySQLAttendanceRepository
    leave_windows_repo: MySQLLeaveWindowRepository
    policies_repo: MySQLLeavePolicyRepository
    ledger_repo: MySQLLeaveLedgerRepository

    reconciler: AttendanceReconciler
    punch_service: PunchService
    accrual_scheduler: LeaveAccrualScheduler
    balance_calculator: LeaveBalanceCalculator


def build_container(*, db_config: dict, accrual_workers: int = DEFAULT_ACCRUAL_WORKERS) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)
    punches_repo = MySQLPunchRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leave_windows_repo = MySQLLeaveWindowRepository(conn)
    policies_repo = MySQLLeavePolicyRepository(conn)
    ledger_repo = MySQLLeaveLedgerRepository(conn)

    reconciler = AttendanceReconciler(
        attendance_repo,
        punches_repo,
        shifts_repo,
        leave_windows_repo,
        employees_repo,
    )
    punch_service = PunchService(punches_repo, leave_windows_repo, reconciler)
    accrual_scheduler = LeaveAccrualScheduler(
        policies_repo,
        employees_repo,
        ledger_repo,
        max_workers=accrual_workers,
    )
    balance_calculator = LeaveBalanceCalculator(ledger_repo, policies_repo)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        shifts_repo=shifts_repo,
        punches_repo=punches_repo,
        attendance_repo=attendance_repo,
        leave_windows_repo=leave_windows_repo,
        policies_repo=policies_repo,
        ledger_repo=ledger_repo,
        reconciler=reconciler,
        punch_service=punch_service,
        accrual_scheduler=accrual_scheduler,
        balance_calculator=balance_calculator,
    )
