from __future__ import annotations

import logging
from dataclasses import dataclass, field

from src.hrms_attendance.hrms_attendance.core.enums import RestrictionFailure, RestrictionType
from src.hrms_attendance.hrms_attendance.restrictions.evaluator import RestrictionEvaluator
from src.hrms_attendance.hrms_attendance.restrictions.model import (
    GeoRestriction,
    IPBypassPolicy,
    IPRestriction,
    RestrictionAssignment,
    RestrictionContext,
)

OFFICE_LAT, OFFICE_LON = 10.7769, 106.7009
BRANCH_LAT, BRANCH_LON = 21.0285, 105.8542


@dataclass
class InMemoryRestrictions:
    ip: dict[int, IPRestriction] = field(default_factory=dict)
    geo: dict[int, GeoRestriction] = field(default_factory=dict)
    assignments: list[RestrictionAssignment] = field(default_factory=list)
    geo_lookups: int = 0

    def assign(self, employee_id: int, rtype: RestrictionType, restriction_id: int) -> None:
        self.assignments.append(
            RestrictionAssignment(
                assignment_id=len(self.assignments) + 1,
                employee_id=employee_id,
                restriction_type=rtype,
                restriction_id=restriction_id,
            )
        )

    def get_assignments(self, employee_id: int):
        return [a for a in self.assignments if a.employee_id == employee_id]

    def get_ip_restrictions(self, restriction_ids):
        return [self.ip[i] for i in restriction_ids if i in self.ip]

    def get_geo_restrictions(self, restriction_ids):
        self.geo_lookups += 1
        return [self.geo[i] for i in restriction_ids if i in self.geo]


def _repo_with_ip(*entries: str) -> InMemoryRestrictions:
    repo = InMemoryRestrictions()
    repo.ip[1] = IPRestriction(restriction_id=1, title="Office LAN", allowed_entries=tuple(entries))
    repo.assign(7, RestrictionType.IP, 1)
    return repo


def _add_geo(repo: InMemoryRestrictions, restriction_id: int, lat: float, lon: float, radius: int = 200) -> None:
    repo.geo[restriction_id] = GeoRestriction(
        restriction_id=restriction_id,
        title=f"Zone {restriction_id}",
        latitude=lat,
        longitude=lon,
        radius_meters=radius,
    )
    repo.assign(7, RestrictionType.GEO, restriction_id)


def test_employee_without_assignments_always_passes():
    evaluator = RestrictionEvaluator(InMemoryRestrictions())

    result = evaluator.evaluate(7, RestrictionContext(client_ip=None))

    assert result.passed is True
    assert result.failure_code is None
    assert not result.has_ip_restriction and not result.has_geo_restriction


def test_unknown_ip_fails_when_ip_restricted():
    evaluator = RestrictionEvaluator(_repo_with_ip("192.168.1.0/24"))

    result = evaluator.evaluate(7, RestrictionContext(client_ip="not-an-ip"))

    assert result.passed is False
    assert result.failure_code == RestrictionFailure.IP_UNKNOWN


def test_ip_inside_allowed_range_passes():
    evaluator = RestrictionEvaluator(_repo_with_ip("192.168.1.0/24"))

    result = evaluator.evaluate(7, RestrictionContext(client_ip="192.168.1.42"))

    assert result.passed is True
    assert result.client_ip == "192.168.1.42"


def test_ipv6_mapped_client_ip_is_normalized():
    evaluator = RestrictionEvaluator(_repo_with_ip("192.168.1.42"))

    result = evaluator.evaluate(7, RestrictionContext(client_ip="::ffff:192.168.1.42"))

    assert result.passed is True


def test_any_assigned_ip_restriction_may_match():
    repo = _repo_with_ip("10.0.0.0/8")
    repo.ip[2] = IPRestriction(restriction_id=2, title="VPN", allowed_entries=("203.0.113.5",))
    repo.assign(7, RestrictionType.IP, 2)

    result = RestrictionEvaluator(repo).evaluate(7, RestrictionContext(client_ip="203.0.113.5"))

    assert result.passed is True


def test_ip_mismatch_fails_and_skips_geo():
    repo = _repo_with_ip("192.168.1.0/24")
    _add_geo(repo, 10, OFFICE_LAT, OFFICE_LON)

    result = RestrictionEvaluator(repo).evaluate(
        7, RestrictionContext(client_ip="8.8.8.8", latitude=OFFICE_LAT, longitude=OFFICE_LON)
    )

    assert result.passed is False
    assert result.failure_code == RestrictionFailure.IP_NOT_ALLOWED
    assert repo.geo_lookups == 0


def test_ip_bypass_turns_mismatch_into_pass_and_logs(caplog):
    evaluator = RestrictionEvaluator(_repo_with_ip("192.168.1.0/24"), ip_bypass=IPBypassPolicy(enabled=True))

    with caplog.at_level(logging.WARNING):
        result = evaluator.evaluate(7, RestrictionContext(client_ip="8.8.8.8"))

    assert result.passed is True
    assert result.failure_code is None
    assert result.bypassed_code == RestrictionFailure.IP_NOT_ALLOWED
    assert "IP bypass" in caplog.text


def test_ip_bypass_never_covers_unknown_ip():
    evaluator = RestrictionEvaluator(_repo_with_ip("192.168.1.0/24"), ip_bypass=IPBypassPolicy(enabled=True))

    result = evaluator.evaluate(7, RestrictionContext(client_ip=None))

    assert result.passed is False
    assert result.failure_code == RestrictionFailure.IP_UNKNOWN


def test_ip_bypass_never_covers_geo_failures():
    repo = _repo_with_ip("192.168.1.0/24")
    _add_geo(repo, 10, OFFICE_LAT, OFFICE_LON)
    evaluator = RestrictionEvaluator(repo, ip_bypass=IPBypassPolicy(enabled=True))

    result = evaluator.evaluate(7, RestrictionContext(client_ip="8.8.8.8", latitude=0, longitude=0))

    assert result.passed is False
    assert result.failure_code == RestrictionFailure.GEO_OUTSIDE
    assert result.bypassed_code == RestrictionFailure.IP_NOT_ALLOWED


def test_geo_missing_coordinates():
    repo = InMemoryRestrictions()
    _add_geo(repo, 10, OFFICE_LAT, OFFICE_LON)

    result = RestrictionEvaluator(repo).evaluate(7, RestrictionContext(client_ip="8.8.8.8", latitude="", longitude=None))

    assert result.passed is False
    assert result.failure_code == RestrictionFailure.GEO_MISSING


def test_geo_outside_every_zone():
    repo = InMemoryRestrictions()
    _add_geo(repo, 10, OFFICE_LAT, OFFICE_LON, radius=100)

    result = RestrictionEvaluator(repo).evaluate(
        7, RestrictionContext(client_ip=None, latitude=OFFICE_LAT + 0.01, longitude=OFFICE_LON)
    )

    assert result.passed is False
    assert result.failure_code == RestrictionFailure.GEO_OUTSIDE


def test_geo_zones_are_ored_and_match_is_recorded():
    repo = InMemoryRestrictions()
    _add_geo(repo, 10, OFFICE_LAT, OFFICE_LON)
    _add_geo(repo, 11, BRANCH_LAT, BRANCH_LON)

    result = RestrictionEvaluator(repo).evaluate(
        7, RestrictionContext(client_ip=None, latitude=str(BRANCH_LAT), longitude=str(BRANCH_LON))
    )

    assert result.passed is True
    assert result.matched_geo_restriction_id == 11
    assert result.coordinate.latitude == BRANCH_LAT


def test_ip_and_geo_both_required():
    repo = _repo_with_ip("192.168.1.0/24")
    _add_geo(repo, 10, OFFICE_LAT, OFFICE_LON)
    evaluator = RestrictionEvaluator(repo)

    ok = evaluator.evaluate(7, RestrictionContext(client_ip="192.168.1.9", latitude=OFFICE_LAT, longitude=OFFICE_LON))
    no_gps = evaluator.evaluate(7, RestrictionContext(client_ip="192.168.1.9"))

    assert ok.passed is True
    assert no_gps.failure_code == RestrictionFailure.GEO_MISSING


def test_requirements_report_assigned_types():
    repo = InMemoryRestrictions()
    _add_geo(repo, 10, OFFICE_LAT, OFFICE_LON)
    evaluator = RestrictionEvaluator(repo)

    req = evaluator.requirements(7)
    none = evaluator.requirements(99)

    assert req.has_geo_restriction and req.requires_location
    assert not req.has_ip_restriction
    assert not none.has_geo_restriction and not none.requires_location


def test_ip_passes_but_geo_fails_scenario():
    repo = _repo_with_ip("192.168.1.0/24")
    _add_geo(repo, 10, 11.0679, 77.5432, radius=500)

    result = RestrictionEvaluator(repo).evaluate(
        7, RestrictionContext(client_ip="192.168.1.50", latitude=11.0779, longitude=77.5532)
    )

    assert result.passed is False
    assert result.failure_code == RestrictionFailure.GEO_OUTSIDE
    assert result.client_ip == "192.168.1.50"
