from __future__ import annotations

from datetime import datetime

import pytest


@pytest.fixture
def fixed_now() -> datetime:
    # Monday 09:00 local: inside the default 08:00-10:00 check-in window.
    return datetime(2025, 1, 6, 9, 0, 0)
