from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConfigurationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def json_body() -> dict:
    """Request JSON as a dict; a missing body is an empty one."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        return Role.STAFF


def json_errors(view):
    """Map domain errors raised by a view onto JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"error": str(e)}), 403
        except NotFoundError as e:
            return jsonify({"error": str(e)}), 404
        except ConfigurationError as e:
            logger.error("Attendance settings unusable: %s", e)
            return jsonify({"error": "Attendance settings are misconfigured"}), 500
        except Exception:
            logger.exception("Unhandled error in %s", request.path)
            return jsonify({"error": "Internal server error"}), 500

    return wrapper
