"""SQLite connection + schema initialisation."""
from __future__ import annotations
import logging
import os
import sqlite3

from precalc.core import config

logger = logging.getLogger(__name__)


def get_connection() -> sqlite3.Connection:
    conn = sqlite3.connect(config.DATABASE_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db() -> None:
    """Run the migration SQL against the database."""
    db_dir = os.path.dirname(config.DATABASE_PATH)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
    migration_file = os.path.join(config.MIGRATIONS_DIR, "001_init.sql")
    with open(migration_file, "r", encoding="utf-8") as f:
        sql = f.read()
    conn = get_connection()
    conn.executescript(sql)
    conn.commit()
    conn.close()
    logger.info("Database ready at %s", config.DATABASE_PATH)
