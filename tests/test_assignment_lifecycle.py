from datetime import date, datetime

import pytest
from sqlalchemy.exc import OperationalError

from portal_api.common.errors import ConflictError, NotFound, StorageError, ValidationError
from portal_api.models.daily_test import Assignment
from portal_api.services import test_assignments as svc

ON = date(2024, 5, 1)


@pytest.fixture
def pair(make_employee, make_daily_test):
    a, b, c = make_employee(), make_employee(), make_employee()
    t = make_daily_test(title="Export check")
    x = svc.create_assignment(t.id, a.id, assigned_date=ON)
    y = svc.create_assignment(t.id, b.id, assigned_date=ON)
    return t, (a, b, c), (x, y)


def test_create_defaults(pair):
    t, (a, _, _), (x, _) = pair
    assert x.status == "pending"
    assert x.due_date == date(2024, 5, 2)
    assert x.completed_at is None

    row = svc.assignment_row(x)
    assert row["test_title"] == "Export check"
    assert row["employee_name"] == a.full_name
    assert row["assigned_date"] == "2024-05-01"


def test_create_requires_ids(session):
    with pytest.raises(ValidationError):
        svc.create_assignment(None, 1, assigned_date=ON)
    with pytest.raises(ValidationError):
        svc.create_assignment(1, "", assigned_date=ON)


def test_create_unknown_test_or_employee(make_employee, make_daily_test):
    e = make_employee()
    t = make_daily_test()
    with pytest.raises(NotFound):
        svc.create_assignment(9999, e.id, assigned_date=ON)
    with pytest.raises(NotFound):
        svc.create_assignment(t.id, 9999, assigned_date=ON)


def test_create_duplicate_is_conflict(pair):
    t, (a, _, _), _ = pair
    with pytest.raises(ConflictError):
        svc.create_assignment(t.id, a.id, assigned_date=ON)


def test_complete_sets_timestamp_and_other_status_clears_it(pair):
    _, _, (x, _) = pair

    done = svc.update_assignment(x.id, {"status": "completed"})
    assert done.status == "completed"
    assert done.completed_at is not None
    stamp = done.completed_at

    again = svc.update_assignment(x.id, {"status": "completed", "notes": "re-saved"})
    assert again.completed_at == stamp
    assert again.notes == "re-saved"

    skipped = svc.update_assignment(x.id, {"status": "skipped"})
    assert skipped.status == "skipped"
    assert skipped.completed_at is None

    back = svc.update_assignment(x.id, {"status": "pending"})
    assert back.status == "pending"
    assert back.completed_at is None


def test_explicit_completed_at_is_kept(pair):
    _, _, (x, _) = pair
    a = svc.update_assignment(x.id, {"status": "completed", "completed_at": "2024-05-01T10:30:00Z"})
    assert a.completed_at == datetime(2024, 5, 1, 10, 30)


def test_invalid_status_leaves_row_untouched(pair):
    _, _, (x, _) = pair
    with pytest.raises(ValidationError):
        svc.update_assignment(x.id, {"status": "done", "notes": "nope"})
    fresh = svc.get_assignment(x.id)
    assert fresh.status == "pending"
    assert fresh.notes is None


def test_update_unknown_assignment(session):
    with pytest.raises(NotFound):
        svc.update_assignment(424242, {"status": "completed"})


def test_reassign_keeps_test_and_date(pair):
    t, (_, _, c), (x, _) = pair
    moved = svc.update_assignment(x.id, {"employee_id": c.id})
    assert moved.employee_id == c.id
    assert moved.test_id == t.id
    assert moved.assigned_date == ON


def test_reassign_onto_existing_holder_is_conflict(pair):
    _, (_, b, _), (x, _) = pair
    with pytest.raises(ConflictError):
        svc.update_assignment(x.id, {"employee_id": b.id})


def test_reassign_to_unknown_employee(pair):
    _, _, (x, _) = pair
    with pytest.raises(NotFound):
        svc.update_assignment(x.id, {"employee_id": 9999})


def test_reassign_to_null_employee_is_rejected(pair):
    _, (a, _, _), (x, _) = pair
    with pytest.raises(ValidationError):
        svc.update_assignment(x.id, {"employee_id": "null", "notes": "moved"})
    fresh = svc.get_assignment(x.id)
    assert fresh.employee_id == a.id
    assert fresh.notes is None


def test_delete(pair):
    _, _, (x, _) = pair
    xid = x.id
    assert svc.delete_assignment(xid) == xid
    assert Assignment.query.filter_by(id=xid).first() is None
    with pytest.raises(NotFound):
        svc.delete_assignment(xid)


def test_batch_partial_failure(pair):
    t, (_, _, c), (x, y) = pair
    z = svc.create_assignment(t.id, c.id, assigned_date=ON)

    out = svc.batch_update_assignments([
        {"id": x.id, "status": "completed", "notes": "fine"},
        {"id": 9999, "status": "completed"},
        {"id": y.id, "status": "finished"},
        {"id": z.id, "status": "skipped"},
        {"status": "completed"},
    ])

    assert out["success"] is False
    assert out["successCount"] == 2
    assert out["errorCount"] == 3
    assert [r["id"] for r in out["results"]] == [x.id, z.id]
    codes = {e["id"]: e["code"] for e in out["errors"]}
    assert codes[9999] == "NOT_FOUND"
    assert codes[y.id] == "VALIDATION_ERROR"
    assert codes[None] == "VALIDATION_ERROR"

    assert svc.get_assignment(x.id).status == "completed"
    assert svc.get_assignment(y.id).status == "pending"
    assert svc.get_assignment(z.id).status == "skipped"


def test_batch_all_ok(pair):
    _, _, (x, y) = pair
    out = svc.batch_update_assignments([
        {"id": x.id, "status": "completed"},
        {"id": y.id, "status": "completed"},
    ])
    assert out["success"] is True
    assert out["successCount"] == 2
    assert out["errors"] == []


def test_batch_storage_failure_raises(monkeypatch, pair):
    _, _, (x, y) = pair

    def down(*args, **kwargs):
        raise OperationalError("UPDATE test_assignments", {}, Exception("connection lost"))

    monkeypatch.setattr(svc, "update_assignment", down)
    with pytest.raises(StorageError):
        svc.batch_update_assignments([{"id": x.id, "status": "completed"}])


def test_assignments_by_date_and_stats(pair):
    t, _, (x, _) = pair
    svc.update_assignment(x.id, {"status": "completed"})

    data = svc.get_assignments_by_date(ON, today=ON)
    assert data["totalAssignments"] == 2
    assert data["totalTests"] == 1
    assert data["isToday"] is True
    assert data["selectedDate"] == "2024-05-01"

    stats = svc.get_assignment_stats(ON, today=date(2024, 5, 2))
    assert stats["completedAssignments"] == 1
    assert stats["pendingAssignments"] == 1
    assert stats["isToday"] is False

    assert svc.get_assignments_by_date(date(2024, 4, 30))["totalAssignments"] == 0


def test_employee_view_counts_overdue(pair):
    t, (a, _, _), (x, _) = pair
    later = svc.create_assignment(t.id, a.id, assigned_date=date(2024, 5, 3))
    svc.update_assignment(later.id, {"status": "completed"})

    view = svc.get_employee_assignments(a.id, today=date(2024, 5, 3))

    assert view["stats"]["totalAssigned"] == 2
    assert view["stats"]["completed"] == 1
    assert view["stats"]["pending"] == 1
    assert view["stats"]["overdue"] == 1
    assert view["stats"]["completionRate"] == 50
    assert [r["id"] for r in view["todaysAssignments"]] == [later.id]


def test_employee_view_unknown_employee(session):
    with pytest.raises(NotFound):
        svc.get_employee_assignments(9999)
