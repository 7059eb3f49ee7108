from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, *, employee_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> int:
        """Insert or wholesale-replace the record keyed by (employee_id, attendance_date).

        Returns attendance_id.
        """

        raise NotImplementedError

    def list_range(
        self,
        *,
        org_id: int,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records with start_date <= attendance_date <= end_date for reporting consumers."""

        raise NotImplementedError
