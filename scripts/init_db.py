from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.session_roster.session_roster.database.bootstrap import apply_schema, list_tables
from src.session_roster.session_roster.database.connection import DBConfig

logger = logging.getLogger("init_db")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = importlib.import_module(get_settings_module())
    db = DBConfig.from_dict(dict(settings.DB_CONFIG))

    apply_schema(db, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(db)
    logger.info("applied schema.sql -> %s@%s:%s/%s (tables=%d)", db.user, db.host, db.port, db.database, len(tables))


if __name__ == "__main__":
    main()
