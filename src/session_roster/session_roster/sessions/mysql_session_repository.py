from __future__ import annotations

from collections import defaultdict
from typing import Any, Optional, Sequence

from ..core.enums import StorageErrorCode
from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Session, SessionListFilters, SessionWrite
from .repository import SessionRepository

_SESSION_COLUMNS = "s.id, s.tenant_id, s.title, s.starts_at, s.ends_at, s.created_at, s.updated_at"


def build_list_query(filters: SessionListFilters) -> tuple[str, tuple[Any, ...]]:
    """SQL for the overlap-filtered list.

    With both bounds: ``starts_at <= to AND ends_at >= from`` (inclusive, so a
    session touching the window edge matches). With one bound only that half
    of the test applies.
    """
    clauses: list[str] = []
    params: list[Any] = []

    if filters.tenant_id is not None:
        clauses.append("s.tenant_id=%s")
        params.append(filters.tenant_id)
    if filters.group_id is not None:
        clauses.append("EXISTS (SELECT 1 FROM session_groups sg WHERE sg.session_id = s.id AND sg.group_id=%s)")
        params.append(filters.group_id)
    if filters.window_to is not None:
        clauses.append("s.starts_at <= %s")
        params.append(filters.window_to)
    if filters.window_from is not None:
        clauses.append("s.ends_at >= %s")
        params.append(filters.window_from)

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    sql = f"SELECT {_SESSION_COLUMNS} FROM sessions s {where} ORDER BY s.starts_at ASC, s.id ASC"
    return sql, tuple(params)


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _load_group_ids(cur, session_ids: Sequence[str]) -> dict[str, tuple[str, ...]]:
        if not session_ids:
            return {}
        cur.execute(
            f"""
            SELECT session_id, group_id
            FROM session_groups
            WHERE session_id IN ({in_clause(session_ids)})
            ORDER BY group_id ASC
            """,
            tuple(session_ids),
        )
        out: dict[str, list[str]] = defaultdict(list)
        for r in fetchall(cur):
            out[r["session_id"]].append(r["group_id"])
        return {k: tuple(v) for k, v in out.items()}

    @staticmethod
    def _to_session(r: dict, group_ids: tuple[str, ...]) -> Session:
        return Session(
            session_id=r["id"],
            tenant_id=r["tenant_id"],
            starts_at=r["starts_at"],
            ends_at=r["ends_at"],
            title=r.get("title"),
            group_ids=group_ids,
            created_at=r.get("created_at"),
            updated_at=r.get("updated_at"),
        )

    def _select_one(self, cur, *, session_id: str, tenant_id: str) -> Optional[Session]:
        cur.execute(
            f"SELECT {_SESSION_COLUMNS} FROM sessions s WHERE s.id=%s AND s.tenant_id=%s",
            (session_id, tenant_id),
        )
        r = fetchone(cur)
        if not r:
            return None
        groups = self._load_group_ids(cur, [session_id])
        return self._to_session(r, groups.get(session_id, ()))

    @staticmethod
    def _insert(cur, record: SessionWrite) -> None:
        cur.execute(
            """
            INSERT INTO sessions(id, tenant_id, title, starts_at, ends_at)
            VALUES(%s,%s,%s,%s,%s)
            """,
            (record.session_id, record.tenant_id, record.title, record.starts_at, record.ends_at),
        )
        if record.group_ids:
            cur.executemany(
                "INSERT INTO session_groups(session_id, group_id) VALUES(%s,%s)",
                [(record.session_id, gid) for gid in record.group_ids],
            )

    def list(self, filters: SessionListFilters) -> Sequence[Session]:
        sql, params = build_list_query(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            rows = fetchall(cur)
            groups = self._load_group_ids(cur, [r["id"] for r in rows])
            return [self._to_session(r, groups.get(r["id"], ())) for r in rows]

    def get(self, *, session_id: str, tenant_id: str) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select_one(cur, session_id=session_id, tenant_id=tenant_id)

    def create(self, record: SessionWrite) -> Session:
        with db_cursor(self._conn_factory) as (_, cur):
            self._insert(cur, record)
            created = self._select_one(cur, session_id=record.session_id, tenant_id=record.tenant_id)
            if created is None:
                raise StorageError(StorageErrorCode.UNKNOWN, "session missing after insert")
            return created

    def create_many(self, records: Sequence[SessionWrite]) -> Sequence[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            out: list[Session] = []
            for record in records:
                self._insert(cur, record)
            for record in records:
                created = self._select_one(cur, session_id=record.session_id, tenant_id=record.tenant_id)
                if created is None:
                    raise StorageError(StorageErrorCode.UNKNOWN, "session missing after insert")
                out.append(created)
            return out

    def update(self, record: SessionWrite, *, replace_groups: bool) -> Session:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM sessions WHERE id=%s AND tenant_id=%s FOR UPDATE",
                (record.session_id, record.tenant_id),
            )
            if not fetchone(cur):
                raise StorageError(StorageErrorCode.NOT_FOUND, "session not found")

            cur.execute(
                """
                UPDATE sessions
                SET title=%s, starts_at=%s, ends_at=%s
                WHERE id=%s AND tenant_id=%s
                """,
                (record.title, record.starts_at, record.ends_at, record.session_id, record.tenant_id),
            )

            if replace_groups:
                cur.execute("DELETE FROM session_groups WHERE session_id=%s", (record.session_id,))
                if record.group_ids:
                    cur.executemany(
                        "INSERT INTO session_groups(session_id, group_id) VALUES(%s,%s)",
                        [(record.session_id, gid) for gid in record.group_ids],
                    )

            updated = self._select_one(cur, session_id=record.session_id, tenant_id=record.tenant_id)
            if updated is None:
                raise StorageError(StorageErrorCode.NOT_FOUND, "session not found")
            return updated

    def delete(self, *, session_id: str, tenant_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sessions WHERE id=%s AND tenant_id=%s", (session_id, tenant_id))
            return cur.rowcount > 0
