from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceReconciler
from ..common.datetime_utils import end_of_day, now_local, start_of_day
from ..common.validators import require_enum, require_id
from ..core.enums import PunchSource, PunchType
from ..core.exceptions import PunchRejectedError
from ..leave.repository import LeaveWindowRepository
from .model import GeoLocation, PunchEvent
from .repository import PunchRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PunchResult:
    punch: PunchEvent
    record: AttendanceRecord


class PunchService:
    """Records clock events and reconciles the affected day."""

    def __init__(
        self,
        punches: PunchRepository,
        leave_windows: LeaveWindowRepository,
        reconciler: AttendanceReconciler,
    ):
        self._punches = punches
        self._leave_windows = leave_windows
        self._reconciler = reconciler

    def check_in(self, org_id: int, employee_id: int, **kwargs) -> PunchResult:
        return self.record_punch(org_id, employee_id, PunchType.IN, **kwargs)

    def check_out(self, org_id: int, employee_id: int, **kwargs) -> PunchResult:
        return self.record_punch(org_id, employee_id, PunchType.OUT, **kwargs)

    def record_punch(
        self,
        org_id: int,
        employee_id: int,
        punch_type: PunchType,
        *,
        punch_time: Optional[datetime] = None,
        source: PunchSource | str = PunchSource.WEB,
        device_info: Optional[str] = None,
        geo_location: Optional[GeoLocation] = None,
        is_manual_entry: bool = False,
    ) -> PunchResult:
        org_id = require_id(org_id, "org_id")
        employee_id = require_id(employee_id, "employee_id")
        punch_type = require_enum(punch_type, PunchType, "punch_type")
        source = require_enum(source, PunchSource, "source")
        when = punch_time or now_local()

        if self._leave_windows.has_active_leave(org_id=org_id, employee_id=employee_id, work_date=when.date()):
            raise PunchRejectedError(
                f"Clock-{punch_type.value.lower()} blocked: employee is on leave on {when.date()}",
                reason="ON_LEAVE",
            )

        if punch_type == PunchType.IN:
            last = self._punches.get_latest_between(
                org_id=org_id,
                employee_id=employee_id,
                start=start_of_day(when),
                end=end_of_day(when),
            )
            if last is not None and last.punch_type == PunchType.IN:
                raise PunchRejectedError(
                    "Clock-in blocked: already checked-in. Please clock-out first.",
                    reason="ALREADY_CHECKED_IN",
                )

        punch = PunchEvent(
            employee_id=employee_id,
            org_id=org_id,
            punch_time=when,
            punch_type=punch_type,
            source=source,
            is_manual_entry=bool(is_manual_entry),
            device_info=device_info,
            geo_location=geo_location,
        )
        punch = replace(punch, punch_id=self._punches.append(punch))
        logger.info(
            "punch recorded employee_id=%s type=%s time=%s source=%s manual=%s",
            employee_id,
            punch_type.value,
            when.isoformat(),
            source.value,
            punch.is_manual_entry,
        )

        record = self._reconciler.reconcile(org_id, employee_id, when)
        return PunchResult(punch=punch, record=record)
