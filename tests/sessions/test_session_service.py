from __future__ import annotations

from datetime import datetime

import pytest

from src.session_roster.session_roster.billing.model import OrgEntitlements
from src.session_roster.session_roster.billing.service import Av30EnforcementService
from src.session_roster.session_roster.core.enums import StorageErrorCode
from src.session_roster.session_roster.core.exceptions import (
    ConflictError,
    HardCapExceededError,
    NotFoundError,
    OperationFailedError,
    StorageError,
    ValidationError,
)
from src.session_roster.session_roster.sessions.model import SessionListFilters
from src.session_roster.session_roster.sessions.service import SessionService
from tests.fakes import (
    InMemoryEntitlements,
    InMemoryGroups,
    InMemorySessions,
    InMemoryStore,
    InMemoryTenants,
    SequentialIds,
)

TENANT = "tenant-1"
OTHER_TENANT = "tenant-2"
ORG = "org-1"


@pytest.fixture
def store() -> InMemoryStore:
    s = InMemoryStore()
    s.add_tenant(TENANT, ORG)
    s.add_tenant(OTHER_TENANT, "org-2")
    s.add_group("g-1", TENANT, "Tigers")
    s.add_group("g-2", TENANT, "Lions")
    s.add_group("g-other", OTHER_TENANT, "Bears")
    return s


@pytest.fixture
def sessions_repo(store) -> InMemorySessions:
    return InMemorySessions(store)


@pytest.fixture
def svc(store, sessions_repo) -> SessionService:
    return SessionService(
        sessions_repo,
        InMemoryTenants(store),
        InMemoryGroups(store),
        entitlements=Av30EnforcementService(InMemoryEntitlements(store)),
        id_factory=SequentialIds(),
    )


def _body(**overrides):
    body = {
        "startsAt": "2025-01-01T09:00:00Z",
        "endsAt": "2025-01-01T10:00:00Z",
        "title": "  Sunday kids  ",
    }
    body.update(overrides)
    return body


def test_create_with_groups_persists_session(svc, store):
    created = svc.create(_body(groupIds=["g-1", "g-2"]), TENANT)

    assert created.session_id == "sess-1"
    assert created.tenant_id == TENANT
    assert created.title == "Sunday kids"
    assert created.starts_at == datetime(2025, 1, 1, 9, 0)
    assert created.group_ids == ("g-1", "g-2")
    assert store.writes == 1


def test_create_rejects_end_before_start_without_writing(svc, store):
    with pytest.raises(ValidationError, match="endsAt must be after startsAt"):
        svc.create(_body(endsAt="2025-01-01T08:00:00Z"), TENANT)
    assert store.writes == 0
    assert store.sessions == {}


def test_create_rejects_equal_start_and_end(svc, store):
    with pytest.raises(ValidationError):
        svc.create(_body(endsAt="2025-01-01T09:00:00Z"), TENANT)
    assert store.writes == 0


def test_create_rejects_tenant_mismatch(svc, store):
    with pytest.raises(ValidationError, match="tenantId must match"):
        svc.create(_body(tenantId=OTHER_TENANT), TENANT)
    assert store.writes == 0


def test_create_accepts_matching_tenant_id_in_body(svc):
    created = svc.create(_body(tenantId=TENANT), TENANT)
    assert created.tenant_id == TENANT


def test_create_rejects_unknown_tenant(svc, store):
    with pytest.raises(ValidationError, match="tenant not found"):
        svc.create(_body(), "no-such-tenant")
    assert store.writes == 0


def test_create_rejects_group_of_another_tenant(svc, store):
    with pytest.raises(ValidationError, match="group/tenant mismatch"):
        svc.create(_body(groupIds=["g-other"]), TENANT)
    assert store.writes == 0


def test_create_rejects_partial_group_match(svc, store):
    # One valid id does not rescue an invalid one.
    with pytest.raises(ValidationError):
        svc.create(_body(groupIds=["g-1", "missing"]), TENANT)
    assert store.writes == 0


def test_create_rejects_malformed_body(svc):
    with pytest.raises(ValidationError, match="startsAt must be a valid ISO date"):
        svc.create(_body(startsAt="yesterday"), TENANT)
    with pytest.raises(ValidationError, match="invalid body"):
        svc.create(["not", "a", "dict"], TENANT)


def test_create_blocked_by_hard_cap_before_write(svc, store):
    store.entitlements[ORG] = OrgEntitlements(org_id=ORG, av30_cap=10, current_av30=12)
    with pytest.raises(HardCapExceededError):
        svc.create(_body(), TENANT)
    assert store.writes == 0


def test_hard_cap_is_reported_even_for_a_malformed_body(svc, store):
    store.entitlements[ORG] = OrgEntitlements(org_id=ORG, av30_cap=10, current_av30=12)
    with pytest.raises(HardCapExceededError):
        svc.create(_body(startsAt="yesterday"), TENANT)
    with pytest.raises(HardCapExceededError):
        svc.bulk_create({"sessions": []}, TENANT)
    assert store.writes == 0


def test_create_rejects_window_shorter_than_a_second(svc, store):
    with pytest.raises(ValidationError, match="endsAt must be after startsAt"):
        svc.create(_body(startsAt="2025-01-01T09:00:00.200Z", endsAt="2025-01-01T09:00:00.400Z"), TENANT)
    assert store.writes == 0


def test_create_allowed_in_grace_window(svc, store):
    store.entitlements[ORG] = OrgEntitlements(org_id=ORG, av30_cap=10, current_av30=11)
    assert svc.create(_body(), TENANT).session_id == "sess-1"


@pytest.mark.parametrize(
    "code, expected",
    [
        (StorageErrorCode.UNIQUE_VIOLATION, ConflictError),
        (StorageErrorCode.FOREIGN_KEY_VIOLATION, ValidationError),
        (StorageErrorCode.UNKNOWN, OperationFailedError),
    ],
)
def test_create_maps_storage_failures(svc, sessions_repo, code, expected):
    sessions_repo.fail_next_write = StorageError(code)
    with pytest.raises(expected):
        svc.create(_body(), TENANT)


def test_get_by_id_is_tenant_scoped(svc):
    created = svc.create(_body(), TENANT)

    assert svc.get_by_id(created.session_id, TENANT) == created
    with pytest.raises(NotFoundError):
        svc.get_by_id(created.session_id, OTHER_TENANT)


def test_patch_title_only_keeps_dates(svc):
    created = svc.create(_body(groupIds=["g-1"]), TENANT)

    updated = svc.update(created.session_id, {"title": "Renamed"}, TENANT)

    assert updated.title == "Renamed"
    assert updated.starts_at == created.starts_at
    assert updated.ends_at == created.ends_at
    assert updated.group_ids == ("g-1",)


def test_patch_single_date_is_checked_against_current_value(svc, store):
    created = svc.create(_body(), TENANT)
    writes = store.writes

    with pytest.raises(ValidationError, match="endsAt must be after startsAt"):
        svc.update(created.session_id, {"endsAt": "2025-01-01T08:59:00Z"}, TENANT)
    with pytest.raises(ValidationError):
        svc.update(created.session_id, {"startsAt": "2025-01-01T10:00:00Z"}, TENANT)
    assert store.writes == writes

    moved = svc.update(created.session_id, {"endsAt": "2025-01-01T11:30:00Z"}, TENANT)
    assert moved.starts_at == datetime(2025, 1, 1, 9, 0)
    assert moved.ends_at == datetime(2025, 1, 1, 11, 30)


def test_patch_group_semantics(svc):
    created = svc.create(_body(groupIds=["g-1"]), TENANT)

    kept = svc.update(created.session_id, {"title": "x"}, TENANT)
    assert kept.group_ids == ("g-1",)

    replaced = svc.update(created.session_id, {"groupIds": ["g-2"]}, TENANT)
    assert replaced.group_ids == ("g-2",)

    cleared_by_empty = svc.update(created.session_id, {"groupIds": []}, TENANT)
    assert cleared_by_empty.group_ids == ()

    svc.update(created.session_id, {"groupIds": ["g-1", "g-2"]}, TENANT)
    cleared_by_null = svc.update(created.session_id, {"groupIds": None}, TENANT)
    assert cleared_by_null.group_ids == ()


def test_patch_rejects_foreign_group(svc):
    created = svc.create(_body(groupIds=["g-1"]), TENANT)

    with pytest.raises(ValidationError, match="group/tenant mismatch"):
        svc.update(created.session_id, {"groupIds": ["g-1", "g-other"]}, TENANT)
    assert svc.get_by_id(created.session_id, TENANT).group_ids == ("g-1",)


def test_patch_rejects_tenant_change(svc):
    created = svc.create(_body(), TENANT)
    with pytest.raises(ValidationError, match="tenantId must match"):
        svc.update(created.session_id, {"tenantId": OTHER_TENANT}, TENANT)


def test_patch_clears_title_with_blank(svc):
    created = svc.create(_body(), TENANT)
    assert svc.update(created.session_id, {"title": "   "}, TENANT).title is None


def test_update_missing_or_foreign_session_is_not_found(svc):
    created = svc.create(_body(), TENANT)
    with pytest.raises(NotFoundError):
        svc.update("nope", {"title": "x"}, TENANT)
    with pytest.raises(NotFoundError):
        svc.update(created.session_id, {"title": "x"}, OTHER_TENANT)


def test_update_row_vanishing_mid_write_is_not_found(svc, sessions_repo):
    created = svc.create(_body(), TENANT)
    sessions_repo.fail_next_write = StorageError(StorageErrorCode.NOT_FOUND)
    with pytest.raises(NotFoundError):
        svc.update(created.session_id, {"title": "x"}, TENANT)


def test_delete_is_tenant_scoped(svc, store):
    created = svc.create(_body(), TENANT)

    with pytest.raises(NotFoundError):
        svc.delete(created.session_id, OTHER_TENANT)
    assert created.session_id in store.sessions

    assert svc.delete(created.session_id, TENANT) == created.session_id
    assert created.session_id not in store.sessions

    with pytest.raises(NotFoundError):
        svc.delete(created.session_id, TENANT)


def _at(hh: int, mm: int = 0) -> datetime:
    return datetime(2025, 1, 1, hh, mm)


@pytest.fixture
def window_sessions(svc):
    a = svc.create(_body(startsAt="2025-01-01T10:00:00Z", endsAt="2025-01-01T11:00:00Z", groupIds=["g-1"]), TENANT)
    b = svc.create(_body(startsAt="2025-01-01T10:30:00Z", endsAt="2025-01-01T10:45:00Z"), TENANT)
    svc.create(_body(startsAt="2025-01-01T10:00:00Z", endsAt="2025-01-01T11:00:00Z"), OTHER_TENANT)
    return a, b


def _ids(sessions):
    return [s.session_id for s in sessions]


def test_list_overlap_returns_partially_overlapping_sessions(svc, window_sessions):
    a, b = window_sessions
    found = svc.list(SessionListFilters(tenant_id=TENANT, window_from=_at(10, 15), window_to=_at(10, 20)))
    # A spans the window; B starts after it ends.
    assert _ids(found) == [a.session_id]

    found = svc.list(SessionListFilters(tenant_id=TENANT, window_from=_at(10, 40), window_to=_at(12)))
    assert _ids(found) == [a.session_id, b.session_id]


def test_list_window_touching_end_boundary_matches(svc, window_sessions):
    a, _ = window_sessions
    found = svc.list(SessionListFilters(tenant_id=TENANT, window_from=_at(11), window_to=_at(12)))
    assert _ids(found) == [a.session_id]


def test_list_window_touching_start_boundary_matches(svc, window_sessions):
    a, _ = window_sessions
    found = svc.list(SessionListFilters(tenant_id=TENANT, window_from=_at(9), window_to=_at(10)))
    assert _ids(found) == [a.session_id]


def test_list_single_bounds(svc, window_sessions):
    a, b = window_sessions
    assert _ids(svc.list(SessionListFilters(tenant_id=TENANT, window_from=_at(10, 50)))) == [a.session_id]
    assert _ids(svc.list(SessionListFilters(tenant_id=TENANT, window_to=_at(10, 10)))) == [a.session_id]
    assert _ids(svc.list(SessionListFilters(tenant_id=TENANT))) == [a.session_id, b.session_id]


def test_list_by_group(svc, window_sessions):
    a, _ = window_sessions
    assert _ids(svc.list(SessionListFilters(tenant_id=TENANT, group_id="g-1"))) == [a.session_id]


def test_bulk_create_writes_all(svc, store):
    created = svc.bulk_create(
        {
            "sessions": [
                _body(groupIds=["g-1"]),
                _body(startsAt="2025-01-08T09:00:00Z", endsAt="2025-01-08T10:00:00Z", groupIds=["g-2"]),
            ]
        },
        TENANT,
    )
    assert [s.group_ids for s in created] == [("g-1",), ("g-2",)]
    assert len(store.sessions) == 2


def test_bulk_create_rejects_whole_batch_on_one_bad_item(svc, store):
    with pytest.raises(ValidationError, match=r"sessions\[1\]"):
        svc.bulk_create(
            {"sessions": [_body(), _body(endsAt="2025-01-01T08:00:00Z")]},
            TENANT,
        )
    with pytest.raises(ValidationError):
        svc.bulk_create({"sessions": [_body(), _body(groupIds=["g-other"])]}, TENANT)
    assert store.writes == 0


def test_bulk_create_rejects_empty_batch(svc):
    with pytest.raises(ValidationError, match="must not be empty"):
        svc.bulk_create({"sessions": []}, TENANT)
