from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Mapping, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import LedgerEntryType, LedgerReferenceType
from ..core.exceptions import DuplicateLedgerEntryError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import LeaveLedgerEntry
from .repository import LeaveLedgerRepository


class MySQLLeaveLedgerRepository(LeaveLedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, entry: LeaveLedgerEntry) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO leave_ledger(
                        org_id, employee_id, leave_type_id, entry_type, quantity,
                        effective_date, reference_type, reference_id
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(entry.org_id),
                        int(entry.employee_id),
                        int(entry.leave_type_id),
                        entry.entry_type.value,
                        entry.quantity,
                        entry.effective_date,
                        entry.reference_type.value,
                        entry.reference_id,
                    ),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise DuplicateLedgerEntryError(
                    f"ledger entry exists employee={entry.employee_id} leave_type={entry.leave_type_id} "
                    f"type={entry.entry_type.value} effective_date={entry.effective_date}"
                ) from exc
            raise

    def exists(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        entry_type: LedgerEntryType,
        effective_date: date,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT entry_id
                FROM leave_ledger
                WHERE employee_id=%s AND leave_type_id=%s AND entry_type=%s AND effective_date=%s
                LIMIT 1
                """,
                (int(employee_id), int(leave_type_id), entry_type.value, effective_date),
            )
            return fetchone(cur) is not None

    def totals_by_entry_type(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        as_of_date: date,
    ) -> Mapping[LedgerEntryType, Decimal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT entry_type, COALESCE(SUM(quantity), 0) AS total
                FROM leave_ledger
                WHERE employee_id=%s AND leave_type_id=%s AND effective_date <= %s
                GROUP BY entry_type
                """,
                (int(employee_id), int(leave_type_id), as_of_date),
            )
            return {LedgerEntryType(r["entry_type"]): as_decimal(r["total"]) for r in fetchall(cur)}

    def list_entries(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        as_of_date: date,
    ) -> Sequence[LeaveLedgerEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT entry_id, org_id, employee_id, leave_type_id, entry_type, quantity,
                       effective_date, reference_type, reference_id
                FROM leave_ledger
                WHERE employee_id=%s AND leave_type_id=%s AND effective_date <= %s
                ORDER BY effective_date ASC, entry_id ASC
                """,
                (int(employee_id), int(leave_type_id), as_of_date),
            )
            return [
                LeaveLedgerEntry(
                    entry_id=int(r["entry_id"]),
                    org_id=int(r["org_id"]),
                    employee_id=int(r["employee_id"]),
                    leave_type_id=int(r["leave_type_id"]),
                    entry_type=LedgerEntryType(r["entry_type"]),
                    quantity=as_decimal(r["quantity"]),
                    effective_date=r["effective_date"],
                    reference_type=LedgerReferenceType(r["reference_type"]),
                    reference_id=int(r["reference_id"]) if r.get("reference_id") is not None else None,
                )
                for r in fetchall(cur)
            ]
