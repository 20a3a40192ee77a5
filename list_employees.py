import sys

from portal_api import create_app
from portal_api.common.dates import local_today, parse_date_any
from portal_api.services.test_eligibility import resolve_eligible

app = create_app()

with app.app_context():
    on_date = parse_date_any(sys.argv[1]) if len(sys.argv) > 1 else local_today()
    if not on_date:
        sys.exit("usage: python list_employees.py [YYYY-MM-DD]")
    employees = resolve_eligible(on_date)
    print(f"Found {len(employees)} employees eligible for tests on {on_date.isoformat()}:")
    for emp in employees:
        print(f"ID: {emp.id}, Name: {emp.full_name}, Dept: {emp.department_name or '-'}, Email: {emp.email}, Code: {emp.code}")
