"""In-memory repositories shared by the test modules."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from decimal import Decimal

from attendance_ledger.attendance.model import AttendanceRecord
from attendance_ledger.core.enums import LedgerEntryType, PunchSource, PunchType
from attendance_ledger.core.exceptions import DuplicateLedgerEntryError
from attendance_ledger.employees.model import Employee
from attendance_ledger.leave.model import LeaveLedgerEntry, LeavePolicy
from attendance_ledger.punches.model import PunchEvent
from attendance_ledger.shifts.model import Shift

ORG = 1
EMP = 10


class InMemoryPunches:
    def __init__(self, punches=None):
        self.punches: list[PunchEvent] = list(punches or [])
        self._id = 0

    def add(self, hhmm: str, punch_type: PunchType, *, day: date = date(2026, 3, 2), employee_id: int = EMP):
        h, m = (int(x) for x in hhmm.split(":"))
        self.append(
            PunchEvent(
                employee_id=employee_id,
                org_id=ORG,
                punch_time=datetime.combine(day, time(h, m)),
                punch_type=punch_type,
                source=PunchSource.WEB,
            )
        )

    def append(self, punch: PunchEvent) -> int:
        self._id += 1
        self.punches.append(replace(punch, punch_id=self._id))
        return self._id

    def list_between(self, *, org_id, employee_id, start, end):
        items = [
            p
            for p in self.punches
            if p.org_id == org_id and p.employee_id == employee_id and start <= p.punch_time <= end
        ]
        return sorted(items, key=lambda p: p.punch_time)

    def get_latest_between(self, *, org_id, employee_id, start, end):
        items = self.list_between(org_id=org_id, employee_id=employee_id, start=start, end=end)
        return items[-1] if items else None


@dataclass
class InMemoryShifts:
    by_employee: dict[int, Shift] = field(default_factory=dict)

    def get_assigned(self, *, org_id, employee_id, work_date):
        return self.by_employee.get(employee_id)


@dataclass
class InMemoryLeaveWindows:
    days: set[tuple[int, date]] = field(default_factory=set)

    def has_active_leave(self, *, org_id, employee_id, work_date):
        return (employee_id, work_date) in self.days


class InMemoryAttendance:
    def __init__(self):
        self.by_key: dict[tuple[int, date], AttendanceRecord] = {}
        self.upserts = 0
        self._id = 0

    def get_for_employee_and_date(self, *, employee_id, attendance_date):
        return self.by_key.get((employee_id, attendance_date))

    def upsert(self, record: AttendanceRecord) -> int:
        self.upserts += 1
        key = (record.employee_id, record.attendance_date)
        existing = self.by_key.get(key)
        if existing:
            attendance_id = existing.attendance_id
        else:
            self._id += 1
            attendance_id = self._id
        self.by_key[key] = replace(record, attendance_id=attendance_id)
        return attendance_id

    def list_range(self, *, org_id, start_date, end_date, employee_id=None):
        return [
            r
            for r in sorted(self.by_key.values(), key=lambda r: r.attendance_date)
            if r.org_id == org_id
            and start_date <= r.attendance_date <= end_date
            and (employee_id is None or r.employee_id == employee_id)
        ]


@dataclass
class InMemoryEmployees:
    employees: list[Employee] = field(default_factory=list)

    def list_active(self, *, org_id=None):
        return [e for e in self.employees if e.is_active and (org_id is None or e.org_id == org_id)]

    def list_active_joined_by(self, *, org_id, joined_on_or_before):
        return [
            e
            for e in self.employees
            if e.is_active
            and e.org_id == org_id
            and e.joining_date is not None
            and e.joining_date <= joined_on_or_before
        ]


@dataclass
class InMemoryPolicies:
    policies: list[LeavePolicy] = field(default_factory=list)

    def list_effective(self, *, on_date, org_id=None):
        found = [p for p in self.policies if p.covers(on_date) and (org_id is None or p.org_id == org_id)]
        return sorted(found, key=lambda p: p.effective_from, reverse=True)


class InMemoryLedger:
    """Enforces the same uniqueness key as the leave_ledger table."""

    def __init__(self, entries=None):
        self.entries: list[LeaveLedgerEntry] = []
        self._id = 0
        for e in entries or []:
            self.append(e)

    @staticmethod
    def _key(e: LeaveLedgerEntry):
        return (e.employee_id, e.leave_type_id, e.entry_type, e.effective_date, e.reference_type)

    def append(self, entry: LeaveLedgerEntry) -> int:
        if any(self._key(e) == self._key(entry) for e in self.entries):
            raise DuplicateLedgerEntryError("duplicate")
        self._id += 1
        self.entries.append(replace(entry, entry_id=self._id))
        return self._id

    def exists(self, *, employee_id, leave_type_id, entry_type, effective_date):
        return any(
            e.employee_id == employee_id
            and e.leave_type_id == leave_type_id
            and e.entry_type == entry_type
            and e.effective_date == effective_date
            for e in self.entries
        )

    def list_entries(self, *, employee_id, leave_type_id, as_of_date):
        return [
            e
            for e in self.entries
            if e.employee_id == employee_id and e.leave_type_id == leave_type_id and e.effective_date <= as_of_date
        ]

    def totals_by_entry_type(self, *, employee_id, leave_type_id, as_of_date):
        totals: dict[LedgerEntryType, Decimal] = defaultdict(lambda: Decimal("0"))
        for e in self.list_entries(employee_id=employee_id, leave_type_id=leave_type_id, as_of_date=as_of_date):
            totals[e.entry_type] += e.quantity
        return dict(totals)


def office_shift(**overrides) -> Shift:
    values = dict(
        shift_id=1,
        org_id=ORG,
        shift_name="General",
        start_time=time(9, 0),
        end_time=time(18, 0),
        grace_minutes=10,
        working_hours=8,
    )
    values.update(overrides)
    return Shift(**values)
