from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, CheckInStatus, CheckOutStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_records(self, *, work_date: Optional[date], limit: int, offset: int) -> Sequence[AttendanceRecord]:
        """All employees, newest work date first; optionally one day only."""

        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        check_in_status: CheckInStatus,
        check_in_duration: int,
        late_minutes: int,
        check_in_ip: Optional[str],
        check_in_latitude: Optional[float],
        check_in_longitude: Optional[float],
        restriction_passed: bool,
        restriction_failure_code: Optional[str],
        notes: Optional[str] = None,
    ) -> int:
        """Insert the day's record. A second insert for the same day is a ValidationError."""

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        check_out_status: CheckOutStatus,
        check_out_duration: int,
        work_hours: float,
        overtime_minutes: int,
        early_checkout: bool,
    ) -> bool:
        """Close an open record. Returns False if it was already checked out."""

        raise NotImplementedError

    def upsert_manual(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        check_out_time: datetime,
        status: AttendanceStatus,
        check_in_status: CheckInStatus,
        check_in_duration: int,
        check_out_status: CheckOutStatus,
        check_out_duration: int,
        work_hours: float,
        late_minutes: int,
        overtime_minutes: int,
        early_checkout: bool,
        notes: Optional[str] = None,
    ) -> int:
        """Admin entry: create or overwrite the day's record."""

        raise NotImplementedError
