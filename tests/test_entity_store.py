import httpx
import pytest
from postgrest.exceptions import APIError

from showcase.services.errors import NotFound, TransientIOError, Unauthorized, ValidationError


def api_error(code, message="failed"):
    return APIError({"message": message, "code": code, "hint": None, "details": None})


def test_create_rejects_missing_fields_before_calling_backend(db, store):
    with pytest.raises(ValidationError) as exc:
        store.complaints.create({"student_id": "student-1", "title": "", "description": None})

    assert "title" in exc.value.detail and "description" in exc.value.detail
    assert db.calls == []


def test_milestone_requires_date(db, store):
    with pytest.raises(ValidationError):
        store.milestones.create({"student_id": "student-1", "title": "Demo day"})


def test_get_missing_row_raises_not_found(store):
    with pytest.raises(NotFound):
        store.complaints.get("nope")
    assert store.complaints.find("nope") is None


def test_update_missing_row_raises_not_found(store):
    with pytest.raises(NotFound):
        store.milestones.update("nope", {"verified_by_admin": True})


def test_list_by_orders_newest_first_and_limits(db, store):
    for day in ("01", "03", "02"):
        db.seed("notifications", user_id="u1", message=day, created_at=f"2026-01-{day}T00:00:00+00:00")
    db.seed("notifications", user_id="u2", message="other", created_at="2026-01-09T00:00:00+00:00")

    rows = store.notifications.list_by("user_id", "u1", limit=2)

    assert [n.message for n in rows] == ["03", "02"]


def test_list_in_skips_query_for_empty_keys(db, store):
    assert store.profiles.list_in("id", []) == []
    assert db.calls == []


def test_count_where(db, store):
    db.seed("complaints", student_id="s", title="a", description="b", status="pending")
    db.seed("complaints", student_id="s", title="c", description="d", status="resolved")

    assert store.complaints.count_where({"status": "pending"}) == 1
    assert store.complaints.count_where() == 2


def test_minimal_create_returns_nothing(db, store):
    assert store.notifications.create({"user_id": "u1", "message": "hi"}, minimal=True) is None
    assert len(db.rows("notifications")) == 1


@pytest.mark.parametrize("code,error", [
    ("42501", Unauthorized),
    ("PGRST116", NotFound),
    ("23502", ValidationError),
    ("XX000", TransientIOError),
])
def test_backend_errors_are_translated(db, store, code, error):
    db.fail("complaints", "update", api_error(code))

    with pytest.raises(error):
        store.complaints.update("c1", {"status": "resolved"})


def test_network_failure_is_transient(db, store):
    db.fail("students", "select", httpx.ConnectError("connection refused"))

    with pytest.raises(TransientIOError):
        store.students.get("student-1")


def test_roles_for(db, store):
    db.seed("user_roles", user_id="admin-1", role="admin")
    db.seed("user_roles", user_id="admin-1", role="student")

    assert store.roles_for("admin-1") == frozenset({"admin", "student"})
    assert store.roles_for("someone") == frozenset()


@pytest.mark.parametrize("failure,error", [
    (api_error("42501"), Unauthorized),
    (httpx.ConnectError("connection refused"), TransientIOError),
])
def test_role_lookup_failures_are_translated_and_logged(db, store, caplog, failure, error):
    db.fail("user_roles", "select", failure)

    with caplog.at_level("ERROR", logger="showcase.services.entity_store"):
        with pytest.raises(error):
            store.roles_for("admin-1")

    assert "user_roles" in caplog.text


@pytest.mark.parametrize("stored,expected", [("false", False), ("true", True), (None, False), (0, False)])
def test_flags_read_back_as_booleans(db, store, stored, expected):
    db.seed("milestones", id="m1", student_id="s", title="Demo", date_completed="2026-05-01", verified_by_admin=stored)
    db.seed("students", id="s", verified=stored)
    db.seed("notifications", id="n1", user_id="s", message="hi", is_read=stored)
    db.seed("recruiter_messages", id="r1", student_id="s", sender_name="Jane", sender_email="jane@acme.io",
            message="Hi", is_read=stored)

    assert store.milestones.get("m1").verified_by_admin is expected
    assert store.students.get("s").verified is expected
    assert store.notifications.get("n1").is_read is expected
    assert store.messages.get("r1").is_read is expected
