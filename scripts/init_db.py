from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.smart_attendance.smart_attendance.database.bootstrap import apply_schema, list_tables

SCHEMA_PATH = REPO_ROOT / "database" / "schema.sql"


def main() -> int:
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    if getattr(settings, "STORAGE_BACKEND", "mysql") != "mysql":
        print(f"SKIP: {settings_module} uses the {settings.STORAGE_BACKEND} backend, nothing to initialize")
        return 0

    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    tables = list_tables(db_config)
    print(f"OK: Applied {SCHEMA_PATH.name} -> {target}")
    for name in sorted(tables):
        print(f"  - {name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
