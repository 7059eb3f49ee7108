from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, org_id, full_name, joining_date, shift_id, is_active"


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        org_id=int(r["org_id"]),
        full_name=r["full_name"],
        joining_date=r.get("joining_date"),
        shift_id=int(r["shift_id"]) if r.get("shift_id") is not None else None,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, *, org_id: Optional[int] = None) -> Sequence[Employee]:
        clauses = ["is_active=1"]
        params: list[object] = []
        if org_id is not None:
            clauses.append("org_id=%s")
            params.append(int(org_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE {where} ORDER BY employee_id", tuple(params))
            return [_to_employee(r) for r in fetchall(cur)]

    def list_active_joined_by(self, *, org_id: int, joined_on_or_before: date) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE org_id=%s AND is_active=1 AND joining_date <= %s
                ORDER BY employee_id
                """,
                (int(org_id), joined_on_or_before),
            )
            return [_to_employee(r) for r in fetchall(cur)]
