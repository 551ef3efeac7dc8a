from __future__ import annotations

from datetime import datetime

import pytest

from src.hrms_attendance.hrms_attendance.attendance.calculator import (
    calculate_attendance_status,
    calculate_check_in_status,
    calculate_check_out_status,
    calculate_work_hours,
    format_duration,
    time_to_minutes,
)
from src.hrms_attendance.hrms_attendance.core.enums import AttendanceStatus, CheckInStatus, CheckOutStatus
from src.hrms_attendance.hrms_attendance.core.exceptions import ConfigurationError
from src.hrms_attendance.hrms_attendance.settings.model import DEFAULT_ATTENDANCE_SETTINGS

SETTINGS = DEFAULT_ATTENDANCE_SETTINGS


def at(hh: int, mm: int, ss: int = 0) -> datetime:
    return datetime(2025, 1, 6, hh, mm, ss)


def test_time_to_minutes():
    assert time_to_minutes("00:00") == 0
    assert time_to_minutes("08:30") == 510
    assert time_to_minutes("23:59") == 1439
    assert time_to_minutes("17:00:00") == 1020


@pytest.mark.parametrize("value", ["", "8am", "24:00", "12:60", "12-30", None])
def test_time_to_minutes_rejects_malformed(value):
    with pytest.raises(ConfigurationError):
        time_to_minutes(value)


def test_check_in_on_time():
    calc = calculate_check_in_status(at(9, 0), "08:00", "10:00")

    assert calc.status == CheckInStatus.ON_TIME
    assert calc.duration == 0
    assert calc.description == "On time"


def test_check_in_early():
    calc = calculate_check_in_status(at(7, 30), "08:00", "10:00")

    assert calc.status == CheckInStatus.EARLY
    assert calc.duration == -30
    assert calc.minutes == 30
    assert calc.description == "Early by 30 minutes"


def test_check_in_late():
    calc = calculate_check_in_status(at(10, 45), "08:00", "10:00")

    assert calc.status == CheckInStatus.LATE
    assert calc.duration == 45
    assert calc.minutes == 45


def test_check_in_window_bounds_are_inclusive_and_ignore_seconds():
    assert calculate_check_in_status(at(8, 0), "08:00", "10:00").status == CheckInStatus.ON_TIME
    assert calculate_check_in_status(at(10, 0, 59), "08:00", "10:00").status == CheckInStatus.ON_TIME
    assert calculate_check_in_status(at(10, 1), "08:00", "10:00").status == CheckInStatus.LATE


def test_check_out_statuses():
    early = calculate_check_out_status(at(16, 0), "17:00", "19:00")
    on_time = calculate_check_out_status(at(18, 0), "17:00", "19:00")
    overtime = calculate_check_out_status(at(20, 15), "17:00", "19:00")

    assert (early.status, early.duration) == (CheckOutStatus.EARLY, -60)
    assert early.description == "Early checkout by 60 minutes"
    assert (on_time.status, on_time.duration) == (CheckOutStatus.ON_TIME, 0)
    assert (overtime.status, overtime.duration) == (CheckOutStatus.OVER_TIME, 75)
    assert overtime.description == "Over time by 75 minutes"


def test_work_hours_rounded_to_two_decimals():
    assert calculate_work_hours(at(9, 0), at(17, 30)) == 8.5
    assert calculate_work_hours(at(9, 0), at(9, 20)) == 0.33
    assert calculate_work_hours(at(9, 0), at(9, 0)) == 0.0


def test_no_check_in_before_cutoff_is_undecided():
    calc = calculate_attendance_status(None, None, SETTINGS, at(12, 0))

    assert calc.attendance_status == AttendanceStatus.HALF_DAY
    assert calc.is_present is False
    assert calc.check_in_status is None
    assert calc.work_hours == 0


def test_no_check_in_after_cutoff_is_absent():
    calc = calculate_attendance_status(None, None, SETTINGS, at(17, 0))

    assert calc.attendance_status == AttendanceStatus.ABSENT
    assert calc.description.startswith("Absent")


def test_open_check_in_depends_on_now():
    before = calculate_attendance_status(at(9, 0), None, SETTINGS, at(16, 59))
    after = calculate_attendance_status(at(9, 0), None, SETTINGS, at(17, 0))

    assert before.attendance_status == AttendanceStatus.HALF_DAY
    assert after.attendance_status == AttendanceStatus.ABSENT
    assert after.check_in_status.status == CheckInStatus.ON_TIME
    assert after.check_out_status is None


@pytest.mark.parametrize(
    "check_in, check_out, expected",
    [
        (at(9, 0), at(18, 0), AttendanceStatus.PRESENT),
        (at(7, 30), at(19, 30), AttendanceStatus.PRESENT),
        (at(10, 30), at(18, 0), AttendanceStatus.HALF_DAY),
        (at(9, 0), at(16, 0), AttendanceStatus.HALF_DAY),
        (at(10, 30), at(16, 0), AttendanceStatus.ABSENT),
    ],
)
def test_final_status_matrix(check_in, check_out, expected):
    calc = calculate_attendance_status(check_in, check_out, SETTINGS, check_out)

    assert calc.attendance_status == expected
    assert calc.is_present is (expected == AttendanceStatus.PRESENT)


def test_full_day_description_and_hours():
    calc = calculate_attendance_status(at(9, 0), at(18, 0), SETTINGS, at(18, 0))

    assert calc.work_hours == 9.0
    assert calc.description == "present - Check-in: On time, Check-out: On time"


def test_calculation_is_idempotent(fixed_now):
    first = calculate_attendance_status(at(10, 30), at(16, 0), SETTINGS, fixed_now)
    second = calculate_attendance_status(at(10, 30), at(16, 0), SETTINGS, fixed_now)

    assert first == second


@pytest.mark.parametrize(
    "minutes, include_sign, expected",
    [(15, True, "+ 15m"), (-90, True, "- 1h 30m"), (120, False, "2h"), (0, True, "+ 0m"), (-60, True, "- 1h")],
)
def test_format_duration(minutes, include_sign, expected):
    assert format_duration(minutes, include_sign) == expected
