from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from ..core.enums import AttendanceStatus, CheckInStatus, CheckOutStatus
from ..restrictions.model import RestrictionResult


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one work date."""

    attendance_id: int
    employee_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    check_in_status: Optional[CheckInStatus] = None
    # Signed minutes: negative = early, positive = late.
    check_in_duration: int = 0
    check_out_status: Optional[CheckOutStatus] = None
    # Signed minutes: negative = early, positive = overtime.
    check_out_duration: int = 0
    work_hours: float = 0.0
    late_minutes: int = 0
    overtime_minutes: int = 0
    early_checkout: bool = False
    check_in_ip: Optional[str] = None
    check_in_latitude: Optional[float] = None
    check_in_longitude: Optional[float] = None
    restriction_passed: bool = True
    restriction_failure_code: Optional[str] = None
    notes: Optional[str] = None
    is_manual_entry: bool = False


@dataclass(frozen=True)
class WindowCalculation:
    """Where a time fell relative to a [start, end] window."""

    status: Union[CheckInStatus, CheckOutStatus]
    duration: int
    description: str

    @property
    def minutes(self) -> int:
        return abs(self.duration)


@dataclass(frozen=True)
class AttendanceStatusCalculation:
    attendance_status: AttendanceStatus
    is_present: bool
    check_in_status: Optional[WindowCalculation]
    check_out_status: Optional[WindowCalculation]
    work_hours: float
    description: str


@dataclass(frozen=True)
class CheckInOutcome:
    """Result of a check-in attempt.

    ``record`` is None when the restriction check refused the attempt.
    """

    restriction: RestrictionResult
    record: Optional[AttendanceRecord] = None
    check_in: Optional[WindowCalculation] = None

    @property
    def accepted(self) -> bool:
        return self.record is not None
