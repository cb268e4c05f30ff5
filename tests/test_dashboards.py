"""
Dashboard read models: role scope, per-student stats and grade bands.
"""
import pytest

from config import SESSION_COOKIE_NAME
from services.dashboards import admin_overview, grade_bands, student_stats, visible_scope

pytestmark = pytest.mark.anyio


def _a(assignment_id, status, score=None, max_score=10, assigned_to="stu-1", submitted_at=None):
    a = {"id": assignment_id, "status": status, "maxScore": max_score, "assignedTo": assigned_to}
    if score is not None:
        a["score"] = score
    if submitted_at:
        a["submittedAt"] = submitted_at
    return a


def test_visible_scope_by_role():
    assert visible_scope({"id": "admin-001", "role": "ADMIN"}) == {}
    assert visible_scope({"id": "stu-1", "role": "STUDENT"}) == {"assignedTo": "stu-1"}


def test_student_stats():
    stats = student_stats([
        _a("1", "PENDING"),
        _a("2", "SUBMITTED"),
        _a("3", "GRADED", 8),
        _a("4", "GRADED", 10),
    ])
    assert stats == {"total": 4, "submitted": 3, "graded": 2, "pending": 1, "avgScore": 90}


def test_grade_bands():
    bands = grade_bands([
        _a("1", "GRADED", 9.5),
        _a("2", "GRADED", 8),
        _a("3", "GRADED", 5),
        _a("4", "GRADED", 2),
        _a("5", "SUBMITTED"),
    ])
    assert bands == {"excellent": 1, "good": 1, "average": 1, "needsImprovement": 1}


def test_admin_overview_groups_by_student():
    students = [{"id": "stu-1", "name": "A"}, {"id": "stu-2", "name": "B"}]
    assignments = [_a(str(i), "GRADED", 10) for i in range(1, 7)] + [_a("7", "SUBMITTED", assigned_to="stu-2")]
    overview = admin_overview(students, assignments)
    assert overview["totalStudents"] == 2
    assert overview["awaitingReview"] == 1
    assert overview["avgScore"] == 100
    assert [a["id"] for a in overview["recentActivity"]] == ["7", "6", "5", "4", "3"]
    assert overview["students"][1]["stats"]["pending"] == 1
    assert overview["students"][0]["stats"]["graded"] == 6


async def _login(client, email, password):
    r = await client.post("/api/auth/login", json={"email": email, "password": password})
    client.cookies.set(SESSION_COOKIE_NAME, r.cookies[SESSION_COOKIE_NAME])


async def test_dashboard_requires_session(client):
    assert (await client.get("/api/dashboard")).status_code == 401


async def test_student_dashboard_sees_only_own_work(client, student, assignments):
    await assignments.insert({**_a("100", "GRADED", 8), "title": "Mine"})
    await assignments.insert({**_a("101", "PENDING", assigned_to="stu-2"), "title": "Theirs"})

    await _login(client, "asha@example.com", "asha-pass")
    body = (await client.get("/api/dashboard")).json()
    assert [a["id"] for a in body["assignments"]] == ["100"]
    assert body["stats"]["avgScore"] == 80
    assert [a["id"] for a in body["gradedHistory"]] == ["100"]


async def test_admin_dashboard_sees_everything(client, student, assignments):
    await assignments.insert(_a("100", "GRADED", 8))
    await assignments.insert(_a("101", "SUBMITTED", assigned_to="stu-2"))

    await _login(client, "admin@tuition.com", "admin-secure-access")
    body = (await client.get("/api/dashboard")).json()
    assert body["totalAssignments"] == 2
    assert body["totalStudents"] == 1
    assert body["awaitingReview"] == 1


async def test_student_dashboard_by_id(client, student):
    r = await client.get("/api/dashboard/students/stu-1")
    assert r.json()["stats"]["total"] == 0
    assert (await client.get("/api/dashboard/students/admin-001")).status_code == 404


def test_average_half_percent_rounds_up():
    assert student_stats([_a("1", "GRADED", 33, max_score=40)])["avgScore"] == 83
    overview = admin_overview([], [_a("1", "GRADED", 33, max_score=40)])
    assert overview["avgScore"] == 83
