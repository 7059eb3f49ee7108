from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import LedgerEntryType
from .model import LeaveLedgerEntry, LeavePolicy


class LeaveWindowRepository(Protocol):
    def has_active_leave(self, *, org_id: int, employee_id: int, work_date: date) -> bool:
        """True when a SUBMITTED or APPROVED leave request covers work_date."""

        raise NotImplementedError


class LeavePolicyRepository(Protocol):
    def list_effective(self, *, on_date: date, org_id: Optional[int] = None) -> Sequence[LeavePolicy]:
        """ACTIVE policies whose validity window covers on_date, newest first."""

        raise NotImplementedError


class LeaveLedgerRepository(Protocol):
    def append(self, entry: LeaveLedgerEntry) -> int:
        """Insert one entry; raises DuplicateLedgerEntryError on the idempotency key."""

        raise NotImplementedError

    def exists(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        entry_type: LedgerEntryType,
        effective_date: date,
    ) -> bool:
        raise NotImplementedError

    def totals_by_entry_type(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        as_of_date: date,
    ) -> Mapping[LedgerEntryType, Decimal]:
        """Sum of quantity per entry type over entries effective on or before as_of_date."""

        raise NotImplementedError

    def list_entries(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        as_of_date: date,
    ) -> Sequence[LeaveLedgerEntry]:
        raise NotImplementedError
