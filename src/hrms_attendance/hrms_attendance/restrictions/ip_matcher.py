"""IPv4 validation and CIDR matching for IP-restricted check-ins."""

from __future__ import annotations

import ipaddress
import re
from typing import Iterable, Optional

from ..core.constants import CLIENT_IP_HEADERS

_OCTET_RE = re.compile(r"[0-9]{1,3}")
_PREFIX_RE = re.compile(r"[0-9]{1,2}")


def is_valid_ipv4(value) -> bool:
    if not isinstance(value, str):
        return False

    parts = value.split(".")
    if len(parts) != 4:
        return False

    for part in parts:
        if not _OCTET_RE.fullmatch(part):
            return False
        number = int(part)
        # "01" re-stringifies as "1": reject ambiguous leading zeros.
        if number > 255 or str(number) != part:
            return False
    return True


def is_valid_cidr(value) -> bool:
    if not isinstance(value, str) or value.count("/") != 1:
        return False

    ip, prefix = value.split("/")
    if not is_valid_ipv4(ip) or not _PREFIX_RE.fullmatch(prefix):
        return False
    return 0 <= int(prefix) <= 32


def ip_to_uint32(ip: str) -> int:
    """Big-endian packing of the four octets."""
    return int(ipaddress.IPv4Address(ip))


def _prefix_mask(prefix: int) -> int:
    if prefix == 0:
        return 0
    return (0xFFFFFFFF << (32 - prefix)) & 0xFFFFFFFF


def is_ip_in_cidr(ip: str, cidr: str) -> bool:
    if not is_valid_ipv4(ip) or not is_valid_cidr(cidr):
        return False

    network, prefix = cidr.split("/")
    mask = _prefix_mask(int(prefix))
    return (ip_to_uint32(ip) & mask) == (ip_to_uint32(network) & mask)


def matches_allowed_ip(client_ip: str, allowed: Iterable[str]) -> bool:
    """True if client_ip equals an allowed entry or falls in an allowed CIDR block.

    Malformed entries are skipped; an empty list or malformed client IP
    never matches.
    """

    if not is_valid_ipv4(client_ip):
        return False

    for entry in allowed or ():
        if not isinstance(entry, str):
            continue
        entry = entry.strip()
        if entry == client_ip:
            return True
        if "/" in entry and is_valid_cidr(entry) and is_ip_in_cidr(client_ip, entry):
            return True
    return False


def normalize_ip(value) -> Optional[str]:
    """Return a dotted-quad IPv4 string, or None when value is not one.

    IPv6-mapped IPv4 (``::ffff:10.0.0.1``) is unwrapped and the IPv6 loopback
    ``::1`` becomes ``127.0.0.1``.
    """

    if not value:
        return None

    candidate = str(value).strip()
    if candidate.startswith("[") and candidate.endswith("]"):
        candidate = candidate[1:-1]

    lowered = candidate.lower()
    if lowered.startswith("::ffff:"):
        candidate = candidate[len("::ffff:"):]
    elif lowered == "::1":
        candidate = "127.0.0.1"

    return candidate if is_valid_ipv4(candidate) else None


def extract_client_ip(request) -> Optional[str]:
    """Resolve the caller's IPv4 address from proxy/CDN headers or the socket.

    Works with a Flask/Werkzeug request or anything exposing ``headers`` and
    ``remote_addr``.
    """

    headers = getattr(request, "headers", None) or {}
    for name in CLIENT_IP_HEADERS:
        raw = headers.get(name)
        if not raw:
            continue
        if name == "X-Forwarded-For":
            # client, proxy1, proxy2
            raw = raw.split(",")[0]
        ip = normalize_ip(raw)
        if ip:
            return ip

    return normalize_ip(getattr(request, "remote_addr", None))
