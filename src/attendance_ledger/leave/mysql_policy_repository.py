from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Optional, Sequence

from ..core.enums import AccrualFrequency, PolicyStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall
from .model import AccrualRule, LeavePolicy, LeavePolicyRule
from .repository import LeavePolicyRepository


class MySQLLeavePolicyRepository(LeavePolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_effective(self, *, on_date: date, org_id: Optional[int] = None) -> Sequence[LeavePolicy]:
        clauses = [
            "status='ACTIVE'",
            "effective_from <= %s",
            "(effective_to IS NULL OR effective_to >= %s)",
        ]
        params: list[object] = [on_date, on_date]
        if org_id is not None:
            clauses.append("org_id=%s")
            params.append(int(org_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT policy_id, org_id, policy_name, status, effective_from, effective_to
                FROM leave_policies
                WHERE {where}
                ORDER BY effective_from DESC, policy_id DESC
                """,
                tuple(params),
            )
            policy_rows = fetchall(cur)
            if not policy_rows:
                return []

            ids = [int(r["policy_id"]) for r in policy_rows]
            placeholders = ",".join(["%s"] * len(ids))
            cur.execute(
                f"""
                SELECT policy_id, leave_type_id, accrual_frequency, credit_amount, max_balance
                FROM leave_policy_rules
                WHERE policy_id IN ({placeholders})
                ORDER BY rule_id
                """,
                tuple(ids),
            )
            rules_by_policy: dict[int, list[LeavePolicyRule]] = defaultdict(list)
            for r in fetchall(cur):
                frequency = r.get("accrual_frequency")
                rules_by_policy[int(r["policy_id"])].append(
                    LeavePolicyRule(
                        leave_type_id=int(r["leave_type_id"]),
                        accrual=AccrualRule(
                            frequency=AccrualFrequency(frequency) if frequency else None,
                            credit_amount=as_decimal(r.get("credit_amount")),
                            max_balance=as_decimal(r.get("max_balance")),
                        ),
                    )
                )

            return [
                LeavePolicy(
                    policy_id=int(r["policy_id"]),
                    org_id=int(r["org_id"]),
                    policy_name=r["policy_name"],
                    status=PolicyStatus(r["status"]),
                    effective_from=r["effective_from"],
                    effective_to=r.get("effective_to"),
                    rules=tuple(rules_by_policy.get(int(r["policy_id"]), [])),
                )
                for r in policy_rows
            ]
