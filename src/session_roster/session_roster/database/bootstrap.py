from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

# Quoted literals are matched whole so a ';' inside them never ends a statement.
_SQL_TOKEN = re.compile(r"'(?:\\.|[^'\\])*'|\"(?:\\.|[^\"\\])*\"|;|[^'\";]+|['\"]", re.S)
_CREATE_DB = re.compile(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$")
_USE_DB = re.compile(r"(?im)^\s*USE\b.*?;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")


def prepare_schema_sql(sql: str) -> str:
    """Drop CREATE DATABASE / USE lines and full-line comments.

    The target database comes from DBConfig, not from the file.
    """
    for pattern in (_CREATE_DB, _USE_DB, _LINE_COMMENT):
        sql = pattern.sub("", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    current: list[str] = []
    for token in _SQL_TOKEN.findall(sql):
        if token == ";":
            stmt = "".join(current).strip()
            current = []
            if stmt:
                yield stmt
        else:
            current.append(token)

    tail = "".join(current).strip()
    if tail:
        yield tail


@contextmanager
def _admin_connection(config: DBConfig, *, select_database: bool = True) -> Iterator:
    params = dict(host=config.host, port=config.port, user=config.user, password=config.password, use_pure=True)
    if select_database:
        params["database"] = config.database
    conn = mysql.connector.connect(**params)
    try:
        yield conn
    finally:
        conn.close()


def ensure_database_exists(config: DBConfig) -> None:
    with _admin_connection(config, select_database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(config: DBConfig, *, schema_path: str | Path) -> int:
    """Create the database if needed and run every statement in schema_path.

    Returns the number of statements executed.
    """
    ensure_database_exists(config)
    statements = list(iter_sql_statements(prepare_schema_sql(Path(schema_path).read_text(encoding="utf-8"))))

    with _admin_connection(config) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()

    logger.info("applied %d schema statements to %s", len(statements), config.database)
    return len(statements)


def list_tables(config: DBConfig) -> list[str]:
    with _admin_connection(config) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
