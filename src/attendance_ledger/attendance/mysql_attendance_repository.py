from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..shifts.model import ShiftSnapshot
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, org_id, employee_id, attendance_date,
    shift_id, shift_name, shift_start_time, shift_end_time, shift_grace_minutes, shift_working_hours,
    first_check_in, last_check_out,
    total_work_minutes, total_break_minutes, late_minutes, early_exit_minutes, overtime_minutes,
    status
"""


def _to_snapshot(r: dict) -> Optional[ShiftSnapshot]:
    if r.get("shift_start_time") is None and r.get("shift_end_time") is None and r.get("shift_id") is None:
        return None
    working_hours = r.get("shift_working_hours")
    return ShiftSnapshot(
        shift_id=int(r["shift_id"]) if r.get("shift_id") is not None else None,
        shift_name=r.get("shift_name"),
        start_time=r.get("shift_start_time"),
        end_time=r.get("shift_end_time"),
        grace_minutes=int(r.get("shift_grace_minutes") or 0),
        working_hours=float(working_hours) if working_hours is not None else None,
    )


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        org_id=int(r["org_id"]),
        employee_id=int(r["employee_id"]),
        attendance_date=r["attendance_date"],
        shift_snapshot=_to_snapshot(r),
        first_check_in=r.get("first_check_in"),
        last_check_out=r.get("last_check_out"),
        total_work_minutes=int(r.get("total_work_minutes") or 0),
        total_break_minutes=int(r.get("total_break_minutes") or 0),
        late_minutes=int(r.get("late_minutes") or 0),
        early_exit_minutes=int(r.get("early_exit_minutes") or 0),
        overtime_minutes=int(r.get("overtime_minutes") or 0),
        status=AttendanceStatus(r["status"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, *, employee_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND attendance_date=%s
                """,
                (int(employee_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def upsert(self, record: AttendanceRecord) -> int:
        snap = record.shift_snapshot
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    org_id, employee_id, attendance_date,
                    shift_id, shift_name, shift_start_time, shift_end_time, shift_grace_minutes, shift_working_hours,
                    first_check_in, last_check_out,
                    total_work_minutes, total_break_minutes, late_minutes, early_exit_minutes, overtime_minutes,
                    status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    org_id=VALUES(org_id),
                    shift_id=VALUES(shift_id),
                    shift_name=VALUES(shift_name),
                    shift_start_time=VALUES(shift_start_time),
                    shift_end_time=VALUES(shift_end_time),
                    shift_grace_minutes=VALUES(shift_grace_minutes),
                    shift_working_hours=VALUES(shift_working_hours),
                    first_check_in=VALUES(first_check_in),
                    last_check_out=VALUES(last_check_out),
                    total_work_minutes=VALUES(total_work_minutes),
                    total_break_minutes=VALUES(total_break_minutes),
                    late_minutes=VALUES(late_minutes),
                    early_exit_minutes=VALUES(early_exit_minutes),
                    overtime_minutes=VALUES(overtime_minutes),
                    status=VALUES(status)
                """,
                (
                    int(record.org_id),
                    int(record.employee_id),
                    record.attendance_date,
                    snap.shift_id if snap else None,
                    snap.shift_name if snap else None,
                    snap.start_time if snap else None,
                    snap.end_time if snap else None,
                    snap.grace_minutes if snap else None,
                    snap.working_hours if snap else None,
                    record.first_check_in,
                    record.last_check_out,
                    int(record.total_work_minutes),
                    int(record.total_break_minutes),
                    int(record.late_minutes),
                    int(record.early_exit_minutes),
                    int(record.overtime_minutes),
                    record.status.value,
                ),
            )
            # LAST_INSERT_ID(attendance_id) makes lastrowid the existing id on update.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT attendance_id FROM attendance_records WHERE employee_id=%s AND attendance_date=%s",
                (int(record.employee_id), record.attendance_date),
            )
            r = fetchone(cur)
            return int(r["attendance_id"]) if r else 0

    def list_range(
        self,
        *,
        org_id: int,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["org_id=%s", "attendance_date BETWEEN %s AND %s"]
        params: list[object] = [int(org_id), start_date, end_date]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY attendance_date ASC, employee_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
