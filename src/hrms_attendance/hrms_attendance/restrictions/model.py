from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import RestrictionFailure, RestrictionType
from .geo_matcher import Coordinate


@dataclass(frozen=True)
class IPRestriction:
    """Named list of allowed IPv4 addresses and CIDR blocks."""

    restriction_id: int
    title: str
    allowed_entries: tuple[str, ...]


@dataclass(frozen=True)
class GeoRestriction:
    """Circular geofence: center coordinate plus radius in meters."""

    restriction_id: int
    title: str
    latitude: float
    longitude: float
    radius_meters: int

    @property
    def center(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


@dataclass(frozen=True)
class RestrictionAssignment:
    assignment_id: int
    employee_id: int
    restriction_type: RestrictionType
    restriction_id: int


@dataclass(frozen=True)
class IPBypassPolicy:
    """Non-production switch that lets IP_NOT_ALLOWED through (still recorded)."""

    enabled: bool = False


@dataclass(frozen=True)
class RestrictionContext:
    """What a check-in request tells us about where it came from."""

    client_ip: Optional[str]
    latitude: object = None
    longitude: object = None


@dataclass(frozen=True)
class RestrictionResult:
    passed: bool
    failure_code: Optional[RestrictionFailure] = None
    client_ip: Optional[str] = None
    coordinate: Optional[Coordinate] = None
    matched_geo_restriction_id: Optional[int] = None
    # Set when IPBypassPolicy turned an IP_NOT_ALLOWED into a pass.
    bypassed_code: Optional[RestrictionFailure] = None
    has_ip_restriction: bool = False
    has_geo_restriction: bool = False


@dataclass(frozen=True)
class RestrictionRequirements:
    has_ip_restriction: bool
    has_geo_restriction: bool

    @property
    def requires_location(self) -> bool:
        return self.has_geo_restriction


@dataclass(frozen=True)
class FailureResponse:
    message: str
    http_status: int


RESTRICTION_FAILURE_RESPONSES: dict[RestrictionFailure, FailureResponse] = {
    RestrictionFailure.IP_NOT_ALLOWED: FailureResponse("Your IP is not in the allowed range for check-in.", 403),
    RestrictionFailure.GEO_OUTSIDE: FailureResponse(
        "You are outside the allowed location radius. Check-in not permitted.", 403
    ),
    RestrictionFailure.GEO_MISSING: FailureResponse("Please enable GPS to check-in from allowed location.", 400),
    RestrictionFailure.IP_UNKNOWN: FailureResponse(
        "Unable to determine your IP address. Please check your connection.", 400
    ),
}
