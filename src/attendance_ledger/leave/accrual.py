"""Monthly leave accrual.

The wall-clock trigger lives outside this module (``flask accrue-monthly``
or any fixed-interval scheduler). ``run_monthly_accrual`` is a pure function
of the date it is given, so repeated or overlapping runs for the same month
converge on one CREDIT per (employee, leave type).
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from ..common.datetime_utils import first_of_month
from ..core.constants import DEFAULT_ACCRUAL_WORKERS
from ..core.enums import AccrualFrequency, LedgerEntryType, LedgerReferenceType
from ..core.exceptions import DuplicateLedgerEntryError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import AccrualFailure, AccrualRunResult, LeaveLedgerEntry, LeavePolicy, LeavePolicyRule
from .repository import LeaveLedgerRepository, LeavePolicyRepository

logger = logging.getLogger(__name__)


class UnitOutcome(str, Enum):
    CREDITED = "CREDITED"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class AccrualUnit:
    """One (policy, rule, employee) piece of work."""

    policy: LeavePolicy
    rule: LeavePolicyRule
    employee: Employee


class LeaveAccrualScheduler:
    def __init__(
        self,
        policies: LeavePolicyRepository,
        employees: EmployeeRepository,
        ledger: LeaveLedgerRepository,
        *,
        max_workers: int = DEFAULT_ACCRUAL_WORKERS,
    ):
        self._policies = policies
        self._employees = employees
        self._ledger = ledger
        self._max_workers = max(1, int(max_workers))

    def run_monthly_accrual(self, as_of_date: date | datetime) -> AccrualRunResult:
        effective_date = first_of_month(as_of_date)
        logger.info("monthly accrual started effective_date=%s", effective_date)

        failures: list[AccrualFailure] = []
        units = self._collect_units(effective_date, failures)

        credited = 0
        skipped = 0
        with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="accrual") as pool:
            futures = {pool.submit(self._credit, unit, effective_date): unit for unit in units}
            for future in as_completed(futures):
                unit = futures[future]
                try:
                    outcome = future.result()
                except Exception as exc:
                    logger.exception(
                        "accrual failed policy_id=%s leave_type_id=%s employee_id=%s",
                        unit.policy.policy_id,
                        unit.rule.leave_type_id,
                        unit.employee.employee_id,
                    )
                    failures.append(
                        AccrualFailure(
                            policy_id=unit.policy.policy_id,
                            leave_type_id=unit.rule.leave_type_id,
                            employee_id=unit.employee.employee_id,
                            error=str(exc),
                        )
                    )
                    continue

                if outcome is UnitOutcome.CREDITED:
                    credited += 1
                else:
                    skipped += 1

        result = AccrualRunResult(
            effective_date=effective_date,
            credited=credited,
            skipped=skipped,
            failures=tuple(failures),
        )
        logger.info(
            "monthly accrual finished effective_date=%s credited=%d skipped=%d failed=%d",
            effective_date,
            result.credited,
            result.skipped,
            result.failed,
        )
        return result

    def _collect_units(self, effective_date: date, failures: list[AccrualFailure]) -> list[AccrualUnit]:
        units: list[AccrualUnit] = []
        for policy in self._policies.list_effective(on_date=effective_date):
            for rule in policy.rules:
                if rule.accrual.frequency != AccrualFrequency.MONTHLY:
                    continue
                if rule.accrual.credit_amount is None:
                    logger.debug(
                        "monthly rule without credit amount policy_id=%s leave_type_id=%s",
                        policy.policy_id,
                        rule.leave_type_id,
                    )
                    continue

                try:
                    roster = self._employees.list_active_joined_by(
                        org_id=policy.org_id,
                        joined_on_or_before=effective_date,
                    )
                except Exception as exc:
                    logger.exception(
                        "roster load failed policy_id=%s org_id=%s", policy.policy_id, policy.org_id
                    )
                    failures.append(
                        AccrualFailure(
                            policy_id=policy.policy_id,
                            leave_type_id=rule.leave_type_id,
                            employee_id=None,
                            error=str(exc),
                        )
                    )
                    continue

                units.extend(AccrualUnit(policy=policy, rule=rule, employee=emp) for emp in roster)
        return units

    def _credit(self, unit: AccrualUnit, effective_date: date) -> UnitOutcome:
        employee_id = unit.employee.employee_id
        leave_type_id = unit.rule.leave_type_id

        # Fast path only; the ledger's unique key is what actually prevents a double credit.
        if self._ledger.exists(
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            entry_type=LedgerEntryType.CREDIT,
            effective_date=effective_date,
        ):
            logger.debug("accrual already credited employee_id=%s leave_type_id=%s", employee_id, leave_type_id)
            return UnitOutcome.SKIPPED

        entry = LeaveLedgerEntry(
            org_id=unit.policy.org_id,
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            entry_type=LedgerEntryType.CREDIT,
            quantity=unit.rule.accrual.credit_amount,
            effective_date=effective_date,
            reference_type=LedgerReferenceType.POLICY_ACCRUAL,
            reference_id=unit.policy.policy_id,
        )
        try:
            self._ledger.append(entry)
        except DuplicateLedgerEntryError:
            logger.debug("accrual raced with another run employee_id=%s leave_type_id=%s", employee_id, leave_type_id)
            return UnitOutcome.SKIPPED
        return UnitOutcome.CREDITED
