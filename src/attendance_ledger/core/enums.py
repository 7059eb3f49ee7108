from __future__ import annotations

from enum import Enum


class PunchType(str, Enum):
    IN = "IN"
    OUT = "OUT"


class PunchSource(str, Enum):
    """Where a punch was captured."""

    WEB = "WEB"
    MOBILE = "MOBILE"
    BIOMETRIC = "BIOMETRIC"
    API = "API"


class AttendanceStatus(str, Enum):
    """Day status stored on the attendance record.

    HALF_DAY, HOLIDAY, WEEKLY_OFF and WFH are assigned by the calendar overlay,
    never by reconciliation.
    """

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    HALF_DAY = "HALF_DAY"
    HOLIDAY = "HOLIDAY"
    WEEKLY_OFF = "WEEKLY_OFF"
    ON_LEAVE = "ON_LEAVE"
    WFH = "WFH"


class LeaveRequestStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class PolicyStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"


class AccrualFrequency(str, Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"


class LedgerEntryType(str, Enum):
    """Kind of leave ledger movement."""

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    ADJUSTMENT = "ADJUSTMENT"
    REVERSAL = "REVERSAL"

    @property
    def sign(self) -> int:
        if self in (LedgerEntryType.CREDIT, LedgerEntryType.ADJUSTMENT):
            return 1
        return -1


class LedgerReferenceType(str, Enum):
    """What produced a ledger entry."""

    POLICY_ACCRUAL = "POLICY_ACCRUAL"
    LEAVE_REQUEST = "LEAVE_REQUEST"
    ADMIN = "ADMIN"
