from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import RestrictionFailure, RestrictionType
from .geo_matcher import is_within_geo_zone, parse_coordinate
from .ip_matcher import matches_allowed_ip, normalize_ip
from .model import IPBypassPolicy, RestrictionContext, RestrictionRequirements, RestrictionResult
from .repository import RestrictionRepository

logger = logging.getLogger(__name__)


class RestrictionEvaluator:
    """Decide whether an employee may check in from a given IP/location.

    Restrictions are opt-in: an employee without assignments always passes.
    Within a type the assigned restrictions are OR-ed; IP is checked before
    GEO and a failed IP check skips GEO. Failures come back as a
    RestrictionResult, never as exceptions.
    """

    def __init__(self, restrictions: RestrictionRepository, *, ip_bypass: Optional[IPBypassPolicy] = None):
        self._restrictions = restrictions
        self._ip_bypass = ip_bypass or IPBypassPolicy()

    def _partition(self, employee_id: int) -> tuple[list[int], list[int]]:
        ip_ids: list[int] = []
        geo_ids: list[int] = []
        for a in self._restrictions.get_assignments(employee_id):
            if a.restriction_type == RestrictionType.IP:
                ip_ids.append(a.restriction_id)
            elif a.restriction_type == RestrictionType.GEO:
                geo_ids.append(a.restriction_id)
        return ip_ids, geo_ids

    def requirements(self, employee_id: int) -> RestrictionRequirements:
        ip_ids, geo_ids = self._partition(employee_id)
        return RestrictionRequirements(has_ip_restriction=bool(ip_ids), has_geo_restriction=bool(geo_ids))

    def evaluate(self, employee_id: int, context: RestrictionContext) -> RestrictionResult:
        ip_ids, geo_ids = self._partition(employee_id)
        flags = {"has_ip_restriction": bool(ip_ids), "has_geo_restriction": bool(geo_ids)}
        client_ip = normalize_ip(context.client_ip)

        if not ip_ids and not geo_ids:
            return RestrictionResult(passed=True, client_ip=client_ip, **flags)

        bypassed_code = None

        if ip_ids:
            if client_ip is None:
                return RestrictionResult(passed=False, failure_code=RestrictionFailure.IP_UNKNOWN, **flags)

            allowed: list[str] = []
            for r in self._restrictions.get_ip_restrictions(ip_ids):
                allowed.extend(r.allowed_entries)

            if not matches_allowed_ip(client_ip, allowed):
                if not self._ip_bypass.enabled:
                    return RestrictionResult(
                        passed=False,
                        failure_code=RestrictionFailure.IP_NOT_ALLOWED,
                        client_ip=client_ip,
                        **flags,
                    )
                logger.warning(
                    "IP bypass active: employee %s checked in from %s outside allowed list",
                    employee_id,
                    client_ip,
                )
                bypassed_code = RestrictionFailure.IP_NOT_ALLOWED

        if not geo_ids:
            return RestrictionResult(passed=True, client_ip=client_ip, bypassed_code=bypassed_code, **flags)

        coordinate = parse_coordinate(context.latitude, context.longitude)
        if coordinate is None:
            return RestrictionResult(
                passed=False,
                failure_code=RestrictionFailure.GEO_MISSING,
                client_ip=client_ip,
                bypassed_code=bypassed_code,
                **flags,
            )

        for zone in self._restrictions.get_geo_restrictions(geo_ids):
            if is_within_geo_zone(coordinate, zone.center, zone.radius_meters):
                return RestrictionResult(
                    passed=True,
                    client_ip=client_ip,
                    coordinate=coordinate,
                    matched_geo_restriction_id=zone.restriction_id,
                    bypassed_code=bypassed_code,
                    **flags,
                )

        return RestrictionResult(
            passed=False,
            failure_code=RestrictionFailure.GEO_OUTSIDE,
            client_ip=client_ip,
            coordinate=coordinate,
            bypassed_code=bypassed_code,
            **flags,
        )
