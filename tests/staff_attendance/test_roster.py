from __future__ import annotations

import pytest

from src.session_roster.session_roster.core.enums import StaffAttendanceStatus
from src.session_roster.session_roster.core.exceptions import NotFoundError
from src.session_roster.session_roster.sessions.model import Session
from src.session_roster.session_roster.staff_attendance.model import SessionStaffAttendance, StaffMember
from src.session_roster.session_roster.staff_attendance.roster import RosterBuilder, display_name, role_label
from tests.fakes import FIXED_NOW, InMemoryStaffAttendance, InMemoryStore

TENANT = "tenant-1"


@pytest.mark.parametrize(
    "raw, label",
    [
        ("LEAD", "Lead"),
        ("lead", "Lead"),
        ("Support", "Support"),
        ("TEACHER", "Lead"),
        ("admin", "Lead"),
        ("Coordinator", "Coordinator"),
        ("VOLUNTEER", "Support"),
        ("", "Support"),
        (None, "Support"),
    ],
)
def test_role_label(raw, label):
    assert role_label(raw) == label


def test_display_name_prefers_display_name():
    assert display_name(StaffMember("u1", display_name="Jane Doe", name="J")) == "Jane Doe"


def test_display_name_skips_email_like_values():
    staff = StaffMember("u1", display_name="jane@example.org", name="Jane D")
    assert display_name(staff) == "Jane D"


def test_display_name_falls_back_to_name_parts():
    staff = StaffMember("u1", display_name="jane@example.org", first_name="Jane", last_name="Doe")
    assert display_name(staff) == "Jane Doe"
    assert display_name(StaffMember("u1", last_name="Doe")) == "Doe"


def test_display_name_placeholder_uses_id_prefix():
    staff = StaffMember("0123456789abcdef", display_name="", name="  ")
    assert display_name(staff) == "Staff 01234567"


def test_display_name_with_at_sign_but_no_domain_is_kept():
    assert display_name(StaffMember("u1", display_name="@jane")) == "@jane"


@pytest.fixture
def store() -> InMemoryStore:
    s = InMemoryStore()
    s.add_tenant(TENANT, "org-1")
    s.sessions["s-1"] = Session(
        session_id="s-1",
        tenant_id=TENANT,
        starts_at=FIXED_NOW,
        ends_at=FIXED_NOW.replace(hour=9),
    )
    s.add_user("u-lead", display_name="Jane Doe")
    s.add_user("u-help", display_name="sam@example.org", first_name="Sam", last_name="Lee")
    s.assign("s-1", "u-lead", "TEACHER")
    s.assign("s-1", "u-help", "support")
    return s


def test_roster_defaults_unmarked_staff_to_unknown(store):
    store.attendance[(TENANT, "s-1", "u-help")] = SessionStaffAttendance(
        tenant_id=TENANT,
        session_id="s-1",
        staff_user_id="u-help",
        status=StaffAttendanceStatus.ABSENT,
        marked_by_user_id="actor",
        marked_at=FIXED_NOW,
    )

    roster = RosterBuilder(InMemoryStaffAttendance(store)).get_roster("s-1", TENANT)

    assert [r.to_dict() for r in roster] == [
        {
            "staffUserId": "u-lead",
            "displayName": "Jane Doe",
            "roleLabel": "Lead",
            "assigned": True,
            "attendanceStatus": "UNKNOWN",
        },
        {
            "staffUserId": "u-help",
            "displayName": "Sam Lee",
            "roleLabel": "Support",
            "assigned": True,
            "attendanceStatus": "ABSENT",
        },
    ]


def test_roster_for_foreign_or_missing_session_is_not_found(store):
    builder = RosterBuilder(InMemoryStaffAttendance(store))
    with pytest.raises(NotFoundError):
        builder.get_roster("s-1", "tenant-2")
    with pytest.raises(NotFoundError):
        builder.get_roster("nope", TENANT)


def test_display_name_with_spaces_around_an_email_is_still_hidden():
    assert display_name(StaffMember("abcdef123456", display_name="Jane Doe@example.com")) == "Staff abcdef12"
    staff = StaffMember("abcdef123456", display_name="Contact: jane@example.com", name="Jane")
    assert display_name(staff) == "Jane"
