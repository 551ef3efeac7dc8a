"""Example: use the service layer directly (no Flask).

Controllers are thin; the restriction checks and status rules live in services.
"""

import importlib
from datetime import datetime

from config import get_settings_module

from src.hrms_attendance.hrms_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        ip_bypass_enabled=getattr(settings, "IP_BYPASS_ENABLED", False),
    )

    now = datetime.now()
    print(container.restriction_evaluator.requirements(1))
    print(container.attendance_service.day_status(1, now.date(), now))
    print(container.attendance_service.get_history_ui(1, limit=5))


if __name__ == "__main__":
    main()
