"""Create the database (if needed) and apply database/schema.sql.

Prints which optional columns the resulting schema exposes, i.e. what the
app will detect at startup.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.mice_attendance.mice_attendance.database.bootstrap import apply_schema, list_tables
from src.mice_attendance.mice_attendance.database.capabilities import detect_capabilities
from src.mice_attendance.mice_attendance.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(db_config)
    caps = detect_capabilities(DatabaseConnection(DBConfig.from_dict(db_config)))

    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)}, notification_flags={caps.notification_flags}, audio_url={caps.log_audio_url})"
    )


if __name__ == "__main__":
    main()
