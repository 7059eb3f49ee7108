"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import LeaveRequestStatus

# Leave requests in these states block punches and mark the day ON_LEAVE.
ACTIVE_LEAVE_STATUSES = (LeaveRequestStatus.APPROVED, LeaveRequestStatus.SUBMITTED)

DEFAULT_ACCRUAL_WORKERS = 4
MINUTES_PER_HOUR = 60

# MySQL error raised on a UNIQUE key violation.
MYSQL_DUPLICATE_ENTRY = 1062
