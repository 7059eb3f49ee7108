from datetime import date, datetime

import pytest

from attendance_ledger.attendance.calculator.standard_calculator import StandardDeviationCalculator
from attendance_ledger.shifts.model import ShiftSnapshot

DAY = date(2026, 3, 2)
SHIFT = ShiftSnapshot(start_time="09:00", end_time="18:00", grace_minutes=10, working_hours=8)


def _at(h, m):
    return datetime(2026, 3, 2, h, m)


def _calc(shift=SHIFT, *, check_in=None, check_out=None, work=0):
    return StandardDeviationCalculator().deviations(
        work_date=DAY,
        shift=shift,
        first_check_in=check_in,
        last_check_out=check_out,
        total_work_minutes=work,
    )


def test_late_after_grace():
    assert _calc(check_in=_at(9, 25)).late_minutes == 15


def test_within_grace_is_not_late():
    assert _calc(check_in=_at(9, 8)).late_minutes == 0


def test_early_check_in_is_not_late():
    assert _calc(check_in=_at(8, 30)).late_minutes == 0


def test_late_minutes_never_decrease_with_later_check_in():
    values = [_calc(check_in=_at(9, m)).late_minutes for m in range(0, 60, 3)]

    assert values == sorted(values)


def test_early_exit_before_shift_end():
    assert _calc(check_out=_at(17, 20)).early_exit_minutes == 40
    assert _calc(check_out=_at(18, 30)).early_exit_minutes == 0


def test_overtime_beyond_expected_hours():
    assert _calc(work=480).overtime_minutes == 0
    assert _calc(work=545).overtime_minutes == 65


def test_fractional_working_hours():
    shift = ShiftSnapshot(start_time="09:00", end_time="17:00", grace_minutes=0, working_hours=7.5)

    assert _calc(shift, work=460).overtime_minutes == 10


@pytest.mark.parametrize(
    "shift",
    [
        None,
        ShiftSnapshot(start_time=None, end_time="18:00"),
        ShiftSnapshot(start_time="09:00", end_time=None),
    ],
)
def test_missing_shift_bounds_leave_everything_zero(shift):
    result = _calc(shift, check_in=_at(11, 0), check_out=_at(12, 0), work=900)

    assert (result.late_minutes, result.early_exit_minutes, result.overtime_minutes) == (0, 0, 0)


def test_no_expected_hours_means_no_overtime():
    shift = ShiftSnapshot(start_time="09:00", end_time="18:00", grace_minutes=0, working_hours=None)

    assert _calc(shift, work=900).overtime_minutes == 0
