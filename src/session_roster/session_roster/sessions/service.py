from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Optional, Sequence

from ..billing.service import EntitlementGate
from ..core.exceptions import NotFoundError, StorageError, ValidationError, translate_storage_error
from ..tenants.model import Tenant
from ..tenants.repository import GroupRepository, TenantRepository
from .model import UNSET, Session, SessionListFilters, SessionWrite
from .repository import SessionRepository
from .validators import validate_bulk_create, validate_session_create, validate_session_patch

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class SessionService:
    """Session create/update/delete/list with tenant and group consistency.

    Every check that can fail runs before the first write. Store failures that
    still surface (races on unique/foreign keys) are mapped through
    ``translate_storage_error`` so callers only ever see domain errors.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        tenants: TenantRepository,
        groups: GroupRepository,
        *,
        entitlements: EntitlementGate | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self._sessions = sessions
        self._tenants = tenants
        self._groups = groups
        self._entitlements = entitlements
        self._new_id = id_factory or _new_id

    def list(self, filters: SessionListFilters) -> Sequence[Session]:
        try:
            return self._sessions.list(filters)
        except StorageError as e:
            raise translate_storage_error(e, entity="session", action="list") from e

    def get_by_id(self, session_id: str, tenant_id: str) -> Session:
        try:
            session = self._sessions.get(session_id=session_id, tenant_id=tenant_id)
        except StorageError as e:
            raise translate_storage_error(e, entity="session", action="load") from e
        if session is None:
            raise NotFoundError("Session not found")
        return session

    def create(self, payload: Any, tenant_id: str) -> Session:
        try:
            # An org over its hard cap is refused before the body is looked at.
            self._check_entitlements(self._require_tenant(tenant_id))

            data = validate_session_create(payload).unwrap()
            self._require_same_tenant(data.tenant_id, tenant_id)
            self._require_ordered(data.starts_at, data.ends_at)
            self._require_groups_owned(tenant_id, data.group_ids)

            record = SessionWrite(
                session_id=self._new_id(),
                tenant_id=tenant_id,
                starts_at=data.starts_at,
                ends_at=data.ends_at,
                title=data.title,
                group_ids=data.group_ids,
            )
            created = self._sessions.create(record)
        except StorageError as e:
            raise translate_storage_error(e, entity="session", action="create") from e

        logger.info("session %s created for tenant %s", created.session_id, tenant_id)
        return created

    def bulk_create(self, payload: Any, tenant_id: str) -> Sequence[Session]:
        try:
            self._check_entitlements(self._require_tenant(tenant_id))

            items = validate_bulk_create(payload).unwrap()
            for index, data in enumerate(items):
                try:
                    self._require_same_tenant(data.tenant_id, tenant_id)
                    self._require_ordered(data.starts_at, data.ends_at)
                except ValidationError as e:
                    raise ValidationError(f"sessions[{index}]: {e}") from e

            all_group_ids = tuple(dict.fromkeys(gid for data in items for gid in data.group_ids))
            self._require_groups_owned(tenant_id, all_group_ids)

            records = [
                SessionWrite(
                    session_id=self._new_id(),
                    tenant_id=tenant_id,
                    starts_at=data.starts_at,
                    ends_at=data.ends_at,
                    title=data.title,
                    group_ids=data.group_ids,
                )
                for data in items
            ]
            created = list(self._sessions.create_many(records))
        except StorageError as e:
            raise translate_storage_error(e, entity="session", action="create") from e

        logger.info("%d sessions bulk-created for tenant %s", len(created), tenant_id)
        return created

    def update(self, session_id: str, payload: Any, tenant_id: str) -> Session:
        changes = validate_session_patch(payload).unwrap()

        try:
            current = self._sessions.get(session_id=session_id, tenant_id=tenant_id)
            if current is None:
                raise NotFoundError("Session not found")

            if changes.tenant_id is not UNSET:
                self._require_same_tenant(changes.tenant_id, tenant_id)

            # Invariants are checked against the merged row, not the patch alone.
            starts_at = current.starts_at if changes.starts_at is UNSET else changes.starts_at
            ends_at = current.ends_at if changes.ends_at is UNSET else changes.ends_at
            self._require_ordered(starts_at, ends_at)

            replace_groups = changes.group_ids is not UNSET
            group_ids = changes.group_ids if replace_groups else current.group_ids
            if replace_groups:
                self._require_groups_owned(tenant_id, group_ids)

            record = SessionWrite(
                session_id=current.session_id,
                tenant_id=current.tenant_id,
                starts_at=starts_at,
                ends_at=ends_at,
                title=current.title if changes.title is UNSET else changes.title,
                group_ids=tuple(group_ids),
            )
            updated = self._sessions.update(record, replace_groups=replace_groups)
        except StorageError as e:
            raise translate_storage_error(e, entity="session", action="update") from e

        logger.info("session %s updated for tenant %s", session_id, tenant_id)
        return updated

    def delete(self, session_id: str, tenant_id: str) -> str:
        try:
            existing = self._sessions.get(session_id=session_id, tenant_id=tenant_id)
            if existing is None:
                raise NotFoundError("Session not found")
            if not self._sessions.delete(session_id=session_id, tenant_id=tenant_id):
                raise NotFoundError("Session not found")
        except StorageError as e:
            raise translate_storage_error(e, entity="session", action="delete") from e

        logger.info("session %s deleted for tenant %s", session_id, tenant_id)
        return session_id

    @staticmethod
    def _require_same_tenant(requested: Optional[str], tenant_id: str) -> None:
        if requested is not None and requested != tenant_id:
            raise ValidationError("tenantId must match current tenant")

    @staticmethod
    def _require_ordered(starts_at, ends_at) -> None:
        if ends_at <= starts_at:
            raise ValidationError("endsAt must be after startsAt")

    def _require_tenant(self, tenant_id: str) -> Tenant:
        tenant = self._tenants.get_by_id(tenant_id)
        if tenant is None:
            raise ValidationError("tenant not found")
        return tenant

    def _check_entitlements(self, tenant: Tenant) -> None:
        if self._entitlements is None:
            return
        result = self._entitlements.check_for_org(tenant.org_id)
        self._entitlements.assert_within_hard_cap(result)

    def _require_groups_owned(self, tenant_id: str, group_ids: Sequence[str]) -> None:
        """Every id must resolve to a group of this tenant; a partial match is a failure."""
        wanted = set(group_ids)
        if not wanted:
            return
        owned = {g.group_id for g in self._groups.list_owned(tenant_id=tenant_id, group_ids=list(wanted))}
        if owned != wanted:
            raise ValidationError("group/tenant mismatch")
