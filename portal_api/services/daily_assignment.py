from __future__ import annotations

import logging
import random
from datetime import date
from typing import Any, Dict, List

from flask import current_app, has_app_context

from portal_api.common.dates import local_today
from portal_api.common.errors import is_systemic_error
from portal_api.extensions import db
from portal_api.models.daily_test import DailyTest
from portal_api.services.test_allocation import plan_allocation, write_allocation
from portal_api.services.test_eligibility import resolve_eligible

log = logging.getLogger(__name__)


def make_rng(seed: int | None = None) -> random.Random:
    """
    Random source for allocation. An explicit seed (or TEST_ASSIGNMENT_SEED)
    gives a reproducible random.Random; otherwise the OS entropy source.
    """
    if seed is None and has_app_context():
        seed = current_app.config.get("TEST_ASSIGNMENT_SEED")
    if seed is None or seed == "":
        return random.SystemRandom()
    return random.Random(int(seed))


def active_tests() -> List[DailyTest]:
    return (
        DailyTest.query
        .filter(DailyTest.status == "active")
        .order_by(DailyTest.display_order.asc(), DailyTest.id.asc())
        .all()
    )


def _process_test(test_id: int, on_date: date, rng, entry: Dict[str, Any]) -> int:
    test = db.session.get(DailyTest, test_id)
    if test is None or test.status != "active":
        # archived or removed since the run started
        entry["status"] = "skipped"
        entry["created"] = 0
        return 0

    eligible = resolve_eligible(on_date)
    plan = plan_allocation(on_date, test, eligible, rng)

    entry["eligible"] = len(eligible)
    entry["candidates"] = plan.candidates
    entry["already_assigned"] = plan.already_assigned

    if plan.skipped:
        entry["status"] = "skipped"
        entry["created"] = 0
        return 0

    created = write_allocation(test, on_date, plan.selected, total_eligible=plan.candidates)
    entry["status"] = "assigned"
    entry["selected"] = [e.id for e in plan.selected]
    entry["created"] = created
    return created


def run_daily_assignment(on_date: date | None = None, rng=None) -> Dict[str, Any]:
    """
    Run eligibility -> allocation -> write for every active test on `on_date`
    (default: today in APP_TIMEZONE), in display order.

    Each test is committed on its own. A failure inside one test is rolled
    back, recorded in that test's debug entry, and the run moves on. A
    systemic failure (database unreachable) stops the run; counts gathered so
    far are still returned with success=False.

    Report shape:
    {
      "success": true,
      "assignment_date": "2024-05-01",
      "total_tests": 3,
      "total_assignments": 4,
      "skipped_tests": 1,
      "failed_tests": 0,
      "message": "...",
      "debug": [{"test_id": 1, "title": "...", "status": "assigned", ...}, ...]
    }
    """
    target = on_date or local_today()
    rng = rng or make_rng()

    report: Dict[str, Any] = {
        "success": True,
        "assignment_date": target.isoformat(),
        "total_tests": 0,
        "total_assignments": 0,
        "skipped_tests": 0,
        "failed_tests": 0,
        "message": "",
        "debug": [],
    }
    log.info("daily test assignment started for %s", target.isoformat())

    try:
        tests = active_tests()
    except Exception as e:
        db.session.rollback()
        log.error("daily test assignment aborted for %s: %s", target.isoformat(), e)
        report.update(success=False, error=str(e), message="Assignment failed: could not load active tests.")
        return report

    # plain values only: commit/rollback expire the ORM rows
    snapshot = [(t.id, t.title, t.assignment_type) for t in tests]

    for test_id, title, assignment_type in snapshot:
        entry: Dict[str, Any] = {
            "test_id": test_id,
            "title": title,
            "assignment_type": assignment_type,
        }
        report["debug"].append(entry)
        report["total_tests"] += 1

        try:
            created = _process_test(test_id, target, rng, entry)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            entry["status"] = "error"
            entry["error"] = str(e)

            if is_systemic_error(e):
                log.error("daily test assignment aborted at test %s: %s", test_id, e)
                report.update(
                    success=False,
                    error=str(e),
                    message=(
                        f"Assignment aborted after {report['total_tests']} tests; "
                        f"{report['total_assignments']} assignments were created before the failure."
                    ),
                )
                return report

            report["failed_tests"] += 1
            log.warning("test %s failed during daily assignment", test_id, exc_info=True)
            continue

        report["total_assignments"] += created
        if entry["status"] == "skipped":
            report["skipped_tests"] += 1
            log.info(
                "test %s skipped for %s: %d candidates",
                test_id, target.isoformat(), entry.get("candidates", 0),
            )

    report["message"] = (
        f"Successfully created {report['total_assignments']} test assignments "
        f"for {report['total_tests']} tests."
    )
    if report["failed_tests"]:
        report["message"] += f" {report['failed_tests']} tests failed."

    log.info(
        "daily test assignment finished for %s: tests=%d created=%d skipped=%d failed=%d",
        target.isoformat(), report["total_tests"], report["total_assignments"],
        report["skipped_tests"], report["failed_tests"],
    )
    return report
