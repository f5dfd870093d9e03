from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import StorageErrorCode
from ..core.exceptions import StorageError
from .connection import DatabaseConnection

_UNIQUE_ERRNOS = {errorcode.ER_DUP_ENTRY, errorcode.ER_DUP_KEY}
_FOREIGN_KEY_ERRNOS = {
    errorcode.ER_ROW_IS_REFERENCED_2,
    errorcode.ER_NO_REFERENCED_ROW_2,
    errorcode.ER_ROW_IS_REFERENCED,
    errorcode.ER_NO_REFERENCED_ROW,
}


def classify_mysql_error(exc: mysql.connector.Error) -> StorageError:
    errno = getattr(exc, "errno", None)
    if errno in _UNIQUE_ERRNOS:
        code = StorageErrorCode.UNIQUE_VIOLATION
    elif errno in _FOREIGN_KEY_ERRNOS:
        code = StorageErrorCode.FOREIGN_KEY_VIOLATION
    else:
        code = StorageErrorCode.UNKNOWN
    return StorageError(code, str(exc), errno=errno)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) inside one transaction.

    Commits on success, rolls back on any exception. Driver errors leave this
    block as StorageError so nothing above the repositories sees mysql types.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise classify_mysql_error(e) from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise classify_mysql_error(e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for a parameterized IN (...) clause."""
    if not values:
        raise ValueError("in_clause needs at least one value")
    return ", ".join(["%s"] * len(values))
