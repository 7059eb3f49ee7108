from __future__ import annotations

from datetime import date, datetime

import pytest

from attendance_ledger.core.enums import AttendanceStatus, PunchSource, PunchType
from attendance_ledger.core.exceptions import PunchRejectedError, ValidationError
from fakes import EMP, ORG

DAY = date(2026, 3, 2)


def at(hour, minute=0):
    return datetime(2026, 3, 2, hour, minute)


def test_check_in_records_punch_and_reconciles(world):
    result = world.punch_service.check_in(ORG, EMP, punch_time=at(9, 20), source="mobile")

    assert result.punch.punch_id == 1
    assert result.punch.source == PunchSource.MOBILE
    assert result.record.status == AttendanceStatus.PRESENT
    assert result.record.late_minutes == 10
    assert world.attendance.get_for_employee_and_date(employee_id=EMP, attendance_date=DAY) == result.record


def test_check_out_updates_same_record(world):
    first = world.punch_service.check_in(ORG, EMP, punch_time=at(9))
    second = world.punch_service.check_out(ORG, EMP, punch_time=at(17, 30))

    assert second.record.attendance_id == first.record.attendance_id
    assert second.record.total_work_minutes == 510
    assert second.record.early_exit_minutes == 30


def test_break_cycle(world):
    svc = world.punch_service
    svc.check_in(ORG, EMP, punch_time=at(9))
    svc.check_out(ORG, EMP, punch_time=at(12, 30))
    svc.check_in(ORG, EMP, punch_time=at(13, 15))
    result = svc.check_out(ORG, EMP, punch_time=at(18))

    assert result.record.total_work_minutes == 495
    assert result.record.total_break_minutes == 45
    assert result.record.overtime_minutes == 15


def test_punch_rejected_while_on_leave(world):
    world.leave_windows.days.add((EMP, DAY))

    with pytest.raises(PunchRejectedError) as excinfo:
        world.punch_service.check_in(ORG, EMP, punch_time=at(9))

    assert excinfo.value.reason == "ON_LEAVE"
    assert world.punches.punches == []
    assert world.attendance.upserts == 0


def test_check_out_also_rejected_while_on_leave(world):
    world.leave_windows.days.add((EMP, DAY))

    with pytest.raises(PunchRejectedError) as excinfo:
        world.punch_service.check_out(ORG, EMP, punch_time=at(18))

    assert excinfo.value.reason == "ON_LEAVE"


def test_consecutive_check_in_rejected(world):
    world.punch_service.check_in(ORG, EMP, punch_time=at(9))

    with pytest.raises(PunchRejectedError) as excinfo:
        world.punch_service.check_in(ORG, EMP, punch_time=at(9, 5))

    assert excinfo.value.reason == "ALREADY_CHECKED_IN"
    assert len(world.punches.punches) == 1


def test_check_in_allowed_again_next_day(world):
    world.punch_service.check_in(ORG, EMP, punch_time=at(9))

    result = world.punch_service.check_in(ORG, EMP, punch_time=datetime(2026, 3, 3, 9, 0))

    assert result.record.attendance_date == date(2026, 3, 3)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"org_id": 0, "employee_id": EMP},
        {"org_id": ORG, "employee_id": "abc"},
    ],
)
def test_invalid_ids_rejected(world, kwargs):
    with pytest.raises(ValidationError):
        world.punch_service.record_punch(punch_type=PunchType.IN, punch_time=at(9), **kwargs)


def test_unknown_source_rejected(world):
    with pytest.raises(ValidationError):
        world.punch_service.check_in(ORG, EMP, punch_time=at(9), source="fax")
    assert world.punches.punches == []
