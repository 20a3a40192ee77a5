import itertools
import os

import pytest
from flask_jwt_extended import create_access_token

from portal_api import create_app
from portal_api.extensions import db
from portal_api.models.master import Department
from portal_api.models.employee import Employee
from portal_api.models.leave import LeaveRequest
from portal_api.models.daily_test import DailyTest


@pytest.fixture(scope="function")
def app():
    os.environ["DATABASE_URL"] = "sqlite:///:memory:"
    os.environ.pop("TEST_ASSIGNMENT_SEED", None)
    app = create_app()
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def session(app):
    with app.app_context():
        yield db.session


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers(app):
    token = create_access_token(identity="1", additional_claims={"roles": ["admin"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def employee_headers(app):
    token = create_access_token(identity="2", additional_claims={"roles": ["employee"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_employee(session):
    seq = itertools.count(1)

    def _make(first_name=None, department=None, is_active=True, test_eligible=True):
        n = next(seq)
        dept_id = None
        if department:
            d = Department.query.filter_by(name=department).first()
            if not d:
                d = Department(name=department)
                session.add(d)
                session.flush()
            dept_id = d.id
        e = Employee(
            code=f"E{n:03d}",
            email=f"e{n}@test.local",
            first_name=first_name or f"Emp{n}",
            last_name="Test",
            department_id=dept_id,
            is_active=is_active,
            test_eligible=test_eligible,
        )
        session.add(e)
        session.commit()
        return e

    return _make


@pytest.fixture
def make_daily_test(session):
    seq = itertools.count(1)

    def _make(title=None, assignment_type="automatic", assigned_employees=None,
              assigned_departments=None, status="active", display_order=None):
        n = next(seq)
        t = DailyTest(
            title=title or f"Check {n}",
            description=f"Description {n}",
            status=status,
            assignment_type=assignment_type,
            assigned_employees=assigned_employees,
            assigned_departments=assigned_departments,
            display_order=display_order if display_order is not None else n,
        )
        session.add(t)
        session.commit()
        return t

    return _make


@pytest.fixture
def add_leave(session):
    def _add(employee, start, end, status="approved"):
        lr = LeaveRequest(employee_id=employee.id, start_date=start, end_date=end, status=status)
        session.add(lr)
        session.commit()
        return lr

    return _add
