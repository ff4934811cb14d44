"""Create the AttendX tables in the database named by DB_CONFIG.

Usage: APP_ENV=production python scripts/init_db.py
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendx.attendx.database.bootstrap import REQUIRED_TABLES, apply_schema, list_tables, missing_tables


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")

    missing = missing_tables(list_tables(db_config))
    for table in REQUIRED_TABLES:
        print(f"  {table:<22} {'MISSING' if table in missing else 'ok'}")
    if missing:
        print(f"AttendX schema incomplete on {target}: missing {', '.join(missing)}")
        return 1

    print(f"AttendX schema ready on {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
