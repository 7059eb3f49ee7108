from __future__ import annotations

from datetime import date
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import Shift
from .repository import ShiftRepository


def _to_shift(r: dict) -> Shift:
    working_hours = r.get("working_hours")
    return Shift(
        shift_id=int(r["shift_id"]),
        org_id=int(r["org_id"]),
        shift_name=r["shift_name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        grace_minutes=int(r.get("grace_minutes") or 0),
        working_hours=float(working_hours) if working_hours is not None else None,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_assigned(self, *, org_id: int, employee_id: int, work_date: date) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    s.shift_id, s.org_id, s.shift_name, s.start_time, s.end_time,
                    s.grace_minutes, s.working_hours, s.is_active
                FROM employees e
                LEFT JOIN shift_schedules sc ON sc.employee_id = e.employee_id AND sc.work_date = %s
                JOIN shifts s ON s.shift_id = COALESCE(sc.shift_id, e.shift_id)
                WHERE e.employee_id=%s AND e.org_id=%s AND s.org_id=%s AND s.is_active=1
                """,
                (work_date, int(employee_id), int(org_id), int(org_id)),
            )
            r = fetchone(cur)
            return _to_shift(r) if r else None
