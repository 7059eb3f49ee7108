from __future__ import annotations

import threading
from datetime import date
from decimal import Decimal

from attendance_ledger.core.enums import AccrualFrequency, LedgerEntryType, LedgerReferenceType, PolicyStatus
from attendance_ledger.employees.model import Employee
from attendance_ledger.leave.accrual import LeaveAccrualScheduler
from attendance_ledger.leave.balance import LeaveBalanceCalculator
from attendance_ledger.leave.model import AccrualRule, LeaveLedgerEntry, LeavePolicy, LeavePolicyRule
from fakes import EMP, ORG, InMemoryEmployees, InMemoryLedger, InMemoryPolicies

CASUAL = 1
SICK = 2


def _policy(*rules, effective_from=date(2026, 1, 1), status=PolicyStatus.ACTIVE):
    return LeavePolicy(
        policy_id=7,
        org_id=ORG,
        policy_name="Standard",
        status=status,
        effective_from=effective_from,
        rules=tuple(rules),
    )


def _rule(leave_type_id=CASUAL, frequency=AccrualFrequency.MONTHLY, amount="1.5"):
    return LeavePolicyRule(
        leave_type_id=leave_type_id,
        accrual=AccrualRule(frequency=frequency, credit_amount=Decimal(amount) if amount is not None else None),
    )


def _employee(employee_id=EMP, joined=date(2025, 6, 1), active=True):
    return Employee(employee_id=employee_id, org_id=ORG, full_name="E", joining_date=joined, is_active=active)


def _scheduler(policies, employees, ledger=None, workers=4):
    ledger = ledger if ledger is not None else InMemoryLedger()
    return (
        LeaveAccrualScheduler(InMemoryPolicies(policies), InMemoryEmployees(employees), ledger, max_workers=workers),
        ledger,
    )


def test_credits_each_month_once():
    scheduler, ledger = _scheduler([_policy(_rule())], [_employee()])

    march = scheduler.run_monthly_accrual(date(2026, 3, 1))
    april = scheduler.run_monthly_accrual(date(2026, 4, 1))

    assert (march.credited, april.credited) == (1, 1)
    assert [e.effective_date for e in ledger.entries] == [date(2026, 3, 1), date(2026, 4, 1)]
    entry = ledger.entries[0]
    assert entry.entry_type == LedgerEntryType.CREDIT
    assert entry.reference_type == LedgerReferenceType.POLICY_ACCRUAL
    assert entry.reference_id == 7
    assert entry.quantity == Decimal("1.5")
    assert LeaveBalanceCalculator(ledger).balance_as_of(EMP, CASUAL, date(2026, 5, 1)) == Decimal("3.0")


def test_rerun_in_same_month_is_skipped():
    scheduler, ledger = _scheduler([_policy(_rule())], [_employee()])

    first = scheduler.run_monthly_accrual(date(2026, 3, 1))
    second = scheduler.run_monthly_accrual(date(2026, 3, 19))

    assert first.effective_date == second.effective_date == date(2026, 3, 1)
    assert (second.credited, second.skipped, second.failed) == (0, 1, 0)
    assert len(ledger.entries) == 1


def test_only_monthly_rules_with_amount_accrue():
    policy = _policy(
        _rule(CASUAL),
        _rule(SICK, frequency=AccrualFrequency.YEARLY),
        _rule(3, amount=None),
        _rule(4, frequency=None),
    )
    scheduler, ledger = _scheduler([policy], [_employee()])

    result = scheduler.run_monthly_accrual(date(2026, 3, 1))

    assert result.credited == 1
    assert [e.leave_type_id for e in ledger.entries] == [CASUAL]


def test_roster_excludes_inactive_and_future_joiners():
    employees = [
        _employee(EMP),
        _employee(11, joined=date(2026, 3, 1)),
        _employee(12, joined=date(2026, 3, 2)),
        _employee(13, active=False),
    ]
    scheduler, ledger = _scheduler([_policy(_rule())], employees)

    result = scheduler.run_monthly_accrual(date(2026, 3, 15))

    assert result.credited == 2
    assert sorted(e.employee_id for e in ledger.entries) == [EMP, 11]


def test_inactive_or_future_policy_is_ignored():
    policies = [
        _policy(_rule(), status=PolicyStatus.DRAFT),
        _policy(_rule(), effective_from=date(2026, 4, 1)),
    ]
    scheduler, ledger = _scheduler(policies, [_employee()])

    result = scheduler.run_monthly_accrual(date(2026, 3, 1))

    assert (result.credited, result.skipped, result.failed) == (0, 0, 0)
    assert ledger.entries == []


class FailingLedger(InMemoryLedger):
    def __init__(self, failing_employee_id):
        super().__init__()
        self.failing_employee_id = failing_employee_id

    def append(self, entry):
        if entry.employee_id == self.failing_employee_id:
            raise RuntimeError("disk full")
        return super().append(entry)


def test_failure_for_one_employee_does_not_stop_others():
    employees = [_employee(EMP), _employee(11), _employee(12)]
    scheduler, ledger = _scheduler([_policy(_rule())], employees, ledger=FailingLedger(11))

    result = scheduler.run_monthly_accrual(date(2026, 3, 1))

    assert result.credited == 2
    assert result.failed == 1
    failure = result.failures[0]
    assert (failure.policy_id, failure.leave_type_id, failure.employee_id) == (7, CASUAL, 11)
    assert "disk full" in failure.error
    assert sorted(e.employee_id for e in ledger.entries) == [EMP, 12]


def test_roster_failure_is_reported():
    class BrokenEmployees(InMemoryEmployees):
        def list_active_joined_by(self, *, org_id, joined_on_or_before):
            raise RuntimeError("store down")

    scheduler = LeaveAccrualScheduler(
        InMemoryPolicies([_policy(_rule())]), BrokenEmployees([_employee()]), InMemoryLedger()
    )

    result = scheduler.run_monthly_accrual(date(2026, 3, 1))

    assert result.credited == 0
    assert result.failed == 1
    assert result.failures[0].employee_id is None


class RacingLedger(InMemoryLedger):
    """exists() always says no, so the store key is the only guard."""

    def exists(self, **kwargs):
        return False


def test_concurrent_duplicate_append_counts_as_skipped():
    ledger = RacingLedger()
    scheduler, _ = _scheduler([_policy(_rule())], [_employee()], ledger=ledger)

    first = scheduler.run_monthly_accrual(date(2026, 3, 1))
    second = scheduler.run_monthly_accrual(date(2026, 3, 1))

    assert first.credited == 1
    assert (second.credited, second.skipped, second.failed) == (0, 1, 0)
    assert len(ledger.entries) == 1


class LockedLedger(RacingLedger):
    def __init__(self):
        super().__init__()
        self._lock = threading.Lock()

    def append(self, entry):
        with self._lock:
            return super().append(entry)


def test_overlapping_runs_converge():
    ledger = LockedLedger()
    employees = [_employee(i) for i in range(100, 140)]
    policies = [_policy(_rule(CASUAL), _rule(SICK, amount="1"))]
    a, _ = _scheduler(policies, employees, ledger=ledger, workers=8)
    b, _ = _scheduler(policies, employees, ledger=ledger, workers=8)

    results = []
    threads = [threading.Thread(target=lambda s=s: results.append(s.run_monthly_accrual(date(2026, 3, 1)))) for s in (a, b)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(ledger.entries) == 80
    assert sum(r.credited for r in results) == 80
    assert sum(r.skipped for r in results) == 80


def test_manual_credit_on_the_first_suppresses_that_months_accrual():
    ledger = InMemoryLedger(
        [
            LeaveLedgerEntry(
                org_id=ORG,
                employee_id=EMP,
                leave_type_id=CASUAL,
                entry_type=LedgerEntryType.CREDIT,
                quantity=Decimal("2"),
                effective_date=date(2026, 3, 1),
                reference_type=LedgerReferenceType.ADMIN,
            )
        ]
    )
    scheduler, _ = _scheduler([_policy(_rule())], [_employee()], ledger=ledger)

    result = scheduler.run_monthly_accrual(date(2026, 3, 1))

    assert (result.credited, result.skipped) == (0, 1)
    assert [e.reference_type for e in ledger.entries] == [LedgerReferenceType.ADMIN]
