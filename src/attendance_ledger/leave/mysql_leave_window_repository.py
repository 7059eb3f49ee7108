from __future__ import annotations

from datetime import date

from ..core.constants import ACTIVE_LEAVE_STATUSES
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import LeaveWindowRepository


class MySQLLeaveWindowRepository(LeaveWindowRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def has_active_leave(self, *, org_id: int, employee_id: int, work_date: date) -> bool:
        placeholders = ",".join(["%s"] * len(ACTIVE_LEAVE_STATUSES))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT request_id
                FROM leave_requests
                WHERE org_id=%s AND employee_id=%s
                  AND status IN ({placeholders})
                  AND from_date <= %s AND to_date >= %s
                LIMIT 1
                """,
                (int(org_id), int(employee_id), *[s.value for s in ACTIVE_LEAVE_STATUSES], work_date, work_date),
            )
            return fetchone(cur) is not None
