from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import AccrualFrequency, LedgerEntryType, LedgerReferenceType, PolicyStatus


@dataclass(frozen=True)
class LeaveLedgerEntry:
    """Append-only leave balance movement.

    Entries are never updated or deleted; corrections are new REVERSAL or
    ADJUSTMENT entries.
    """

    org_id: int
    employee_id: int
    leave_type_id: int
    entry_type: LedgerEntryType
    quantity: Decimal
    effective_date: date
    reference_type: LedgerReferenceType
    reference_id: Optional[int] = None
    entry_id: Optional[int] = None

    @property
    def signed_quantity(self) -> Decimal:
        return self.quantity * self.entry_type.sign


@dataclass(frozen=True)
class AccrualRule:
    frequency: Optional[AccrualFrequency]
    credit_amount: Optional[Decimal]
    max_balance: Optional[Decimal] = None


@dataclass(frozen=True)
class LeavePolicyRule:
    leave_type_id: int
    accrual: AccrualRule


@dataclass(frozen=True)
class LeavePolicy:
    policy_id: int
    org_id: int
    policy_name: str
    status: PolicyStatus
    effective_from: date
    effective_to: Optional[date] = None
    rules: tuple[LeavePolicyRule, ...] = ()

    def covers(self, on_date: date) -> bool:
        if self.status != PolicyStatus.ACTIVE:
            return False
        if self.effective_from > on_date:
            return False
        return self.effective_to is None or self.effective_to >= on_date


@dataclass(frozen=True)
class AccrualFailure:
    policy_id: int
    leave_type_id: int
    employee_id: Optional[int]
    error: str


@dataclass(frozen=True)
class AccrualRunResult:
    """Outcome of one monthly accrual run."""

    effective_date: date
    credited: int = 0
    skipped: int = 0
    failures: tuple[AccrualFailure, ...] = ()

    @property
    def failed(self) -> int:
        return len(self.failures)


@dataclass(frozen=True)
class LeaveTypeBalance:
    leave_type_id: int
    credited: Decimal
    deducted: Decimal
    balance: Decimal


@dataclass(frozen=True)
class LeaveBalanceSummary:
    employee_id: int
    as_of_date: date
    policy_id: Optional[int] = None
    balances: list[LeaveTypeBalance] = field(default_factory=list)

    @property
    def total_credited(self) -> Decimal:
        return sum((b.credited for b in self.balances), Decimal("0"))

    @property
    def total_deducted(self) -> Decimal:
        return sum((b.deducted for b in self.balances), Decimal("0"))

    @property
    def total_balance(self) -> Decimal:
        return sum((b.balance for b in self.balances), Decimal("0"))


@dataclass(frozen=True)
class StatementLine:
    entry: LeaveLedgerEntry
    running_balance: Decimal
