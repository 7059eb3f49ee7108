from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Mapping, Optional

from ..common.datetime_utils import as_date
from ..core.enums import LedgerEntryType
from .model import LeaveBalanceSummary, LeaveTypeBalance, StatementLine
from .repository import LeaveLedgerRepository, LeavePolicyRepository

ZERO = Decimal("0")


class LeaveBalanceCalculator:
    """Read-side aggregation over the leave ledger.

    The balance is never stored: CREDIT and ADJUSTMENT add, DEBIT and
    REVERSAL subtract, counting entries effective on or before the as-of date.
    Nothing here writes, so calls need no locking.
    """

    def __init__(self, ledger: LeaveLedgerRepository, policies: Optional[LeavePolicyRepository] = None):
        self._ledger = ledger
        self._policies = policies

    def balance_as_of(self, employee_id: int, leave_type_id: int, as_of_date: date | datetime) -> Decimal:
        totals = self._totals(employee_id, leave_type_id, as_date(as_of_date))
        return sum((qty * entry_type.sign for entry_type, qty in totals.items()), ZERO)

    def balance_summary(self, *, org_id: int, employee_id: int, as_of_date: date | datetime) -> LeaveBalanceSummary:
        """Per leave type balances for the organization's latest effective policy."""
        if self._policies is None:
            raise RuntimeError("balance_summary needs a policy repository")

        on_date = as_date(as_of_date)
        policies = self._policies.list_effective(on_date=on_date, org_id=org_id)
        if not policies:
            return LeaveBalanceSummary(employee_id=employee_id, as_of_date=on_date)

        policy = max(policies, key=lambda p: (p.effective_from, p.policy_id))
        balances = []
        for rule in policy.rules:
            totals = self._totals(employee_id, rule.leave_type_id, on_date)
            credited = totals.get(LedgerEntryType.CREDIT, ZERO) + totals.get(LedgerEntryType.ADJUSTMENT, ZERO)
            deducted = totals.get(LedgerEntryType.DEBIT, ZERO) + totals.get(LedgerEntryType.REVERSAL, ZERO)
            balances.append(
                LeaveTypeBalance(
                    leave_type_id=rule.leave_type_id,
                    credited=credited,
                    deducted=deducted,
                    balance=credited - deducted,
                )
            )

        return LeaveBalanceSummary(
            employee_id=employee_id,
            as_of_date=on_date,
            policy_id=policy.policy_id,
            balances=balances,
        )

    def statement(self, employee_id: int, leave_type_id: int, as_of_date: date | datetime) -> list[StatementLine]:
        entries = self._ledger.list_entries(
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            as_of_date=as_date(as_of_date),
        )
        running = ZERO
        lines = []
        for entry in sorted(entries, key=lambda e: (e.effective_date, e.entry_id or 0)):
            running += entry.signed_quantity
            lines.append(StatementLine(entry=entry, running_balance=running))
        return lines

    def _totals(self, employee_id: int, leave_type_id: int, on_date: date) -> Mapping[LedgerEntryType, Decimal]:
        return self._ledger.totals_by_entry_type(
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            as_of_date=on_date,
        )
