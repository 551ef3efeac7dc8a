from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hrms_attendance.hrms_attendance.database.bootstrap import apply_schema, list_tables
from src.hrms_attendance.hrms_attendance.database.connection import DBConfig, DatabaseConnection
from src.hrms_attendance.hrms_attendance.main import SCHEMA_PATH


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_mapping(settings.DB_CONFIG))

    apply_schema(conn, schema_path=SCHEMA_PATH)
    tables = list_tables(conn)
    cfg = conn.config
    print(f"OK: Applied schema.sql -> {cfg.user}@{cfg.host}:{cfg.port}/{cfg.database} (tables={len(tables)})")


if __name__ == "__main__":
    main()
