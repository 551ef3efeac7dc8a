from __future__ import annotations

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_positive_int(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive integer")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field_name} must be a positive integer")
    if not number.is_integer() or number <= 0:
        raise ValidationError(f"{field_name} must be a positive integer")
    return int(number)


def require_admin(current_role: Role) -> None:
    if current_role != Role.ADMIN:
        raise AuthorizationError("Admin access required")
