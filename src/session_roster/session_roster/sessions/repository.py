from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Session, SessionListFilters, SessionWrite


class SessionRepository(Protocol):
    """Store interface for sessions and their group links.

    Implementations raise ``StorageError`` (never driver exceptions) so the
    service can map failures in one place.
    """

    def list(self, filters: SessionListFilters) -> Sequence[Session]:
        """Sessions matching ``filters``, ordered by starts_at ascending."""

        raise NotImplementedError

    def get(self, *, session_id: str, tenant_id: str) -> Optional[Session]:
        """Tenant-scoped point lookup; None when absent or owned by another tenant."""

        raise NotImplementedError

    def create(self, record: SessionWrite) -> Session:
        raise NotImplementedError

    def create_many(self, records: Sequence[SessionWrite]) -> Sequence[Session]:
        """Insert all records in one transaction; all or nothing."""

        raise NotImplementedError

    def update(self, record: SessionWrite, *, replace_groups: bool) -> Session:
        """Overwrite the row with ``record``.

        Group links are only rewritten when ``replace_groups`` is true.
        Raises StorageError(NOT_FOUND) if the row vanished under us.
        """

        raise NotImplementedError

    def delete(self, *, session_id: str, tenant_id: str) -> bool:
        raise NotImplementedError
