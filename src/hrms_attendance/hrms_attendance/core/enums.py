from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for the admin gate."""

    ADMIN = "admin"
    STAFF = "staff"


class RestrictionType(str, Enum):
    IP = "IP"
    GEO = "GEO"


class RestrictionFailure(str, Enum):
    """Machine-readable reasons a check-in was refused."""

    IP_NOT_ALLOWED = "IP_NOT_ALLOWED"
    IP_UNKNOWN = "IP_UNKNOWN"
    GEO_OUTSIDE = "GEO_OUTSIDE"
    GEO_MISSING = "GEO_MISSING"


class CheckInStatus(str, Enum):
    EARLY = "early"
    ON_TIME = "on_time"
    LATE = "late"


class CheckOutStatus(str, Enum):
    EARLY = "early"
    ON_TIME = "on_time"
    OVER_TIME = "over_time"


class AttendanceStatus(str, Enum):
    """Overall status of an employee's working day."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half_day"
