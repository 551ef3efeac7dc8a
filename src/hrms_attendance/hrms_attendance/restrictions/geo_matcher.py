"""Geofence checks using the Haversine great-circle distance."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from numbers import Real
from typing import Optional

from ..core.constants import EARTH_RADIUS_METERS


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


def _is_finite_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def is_valid_latitude(value) -> bool:
    return _is_finite_number(value) and -90 <= value <= 90


def is_valid_longitude(value) -> bool:
    return _is_finite_number(value) and -180 <= value <= 180


def is_valid_coordinate(coord: Coordinate) -> bool:
    return is_valid_latitude(coord.latitude) and is_valid_longitude(coord.longitude)


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Distance between two coordinates in meters."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push antipodal points slightly past 1.
    h = min(h, 1.0)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def is_within_geo_zone(client: Coordinate, center: Coordinate, radius_meters) -> bool:
    """True iff client lies within radius_meters of center.

    Total over its inputs: invalid coordinates, a non-numeric radius or a
    radius <= 0 all yield False.
    """

    if not is_valid_coordinate(client) or not is_valid_coordinate(center):
        return False
    if not _is_finite_number(radius_meters) or radius_meters <= 0:
        return False
    return haversine_distance(client, center) <= radius_meters


def _to_float(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    if not isinstance(value, (str, Real, Decimal)):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def parse_coordinate(latitude, longitude) -> Optional[Coordinate]:
    """Coerce request/database values into a validated Coordinate, or None."""
    lat = _to_float(latitude)
    lon = _to_float(longitude)
    if lat is None or lon is None:
        return None
    if not is_valid_latitude(lat) or not is_valid_longitude(lon):
        return None
    return Coordinate(latitude=lat, longitude=lon)
