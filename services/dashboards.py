# services/dashboards.py
import math
from typing import Iterable, List

from models.assignment import AssignmentStatus
from models.user import Role
from .lifecycle import average_score

GRADED = AssignmentStatus.GRADED.value
SUBMITTED = AssignmentStatus.SUBMITTED.value
PENDING = AssignmentStatus.PENDING.value


def rounded_percent(value: float) -> int:
    # halves round up, not to the even neighbour
    return math.floor(value + 0.5)


def visible_scope(user: dict) -> dict:
    """Assignment filter for what ``user`` may see on their dashboard."""
    if user.get("role") == Role.ADMIN.value:
        return {}
    return {"assignedTo": user["id"]}


def student_stats(assignments: Iterable[dict]) -> dict:
    assignments = list(assignments)
    return {
        "total": len(assignments),
        "submitted": sum(1 for a in assignments if a.get("status") != PENDING),
        "graded": sum(1 for a in assignments if a.get("status") == GRADED),
        # submitted but not yet reviewed
        "pending": sum(1 for a in assignments if a.get("status") == SUBMITTED),
        "avgScore": rounded_percent(average_score(assignments)),
    }


def grade_bands(assignments: Iterable[dict]) -> dict:
    bands = {"excellent": 0, "good": 0, "average": 0, "needsImprovement": 0}
    for a in assignments:
        if a.get("status") != GRADED or not a.get("maxScore"):
            continue
        percent = (a.get("score") or 0) / a["maxScore"] * 100
        if percent >= 90:
            bands["excellent"] += 1
        elif percent >= 75:
            bands["good"] += 1
        elif percent >= 50:
            bands["average"] += 1
        else:
            bands["needsImprovement"] += 1
    return bands


def admin_overview(students: List[dict], assignments: List[dict]) -> dict:
    by_student = {}
    for a in assignments:
        by_student.setdefault(a.get("assignedTo"), []).append(a)

    return {
        "totalStudents": len(students),
        "totalAssignments": len(assignments),
        "awaitingReview": sum(1 for a in assignments if a.get("status") == SUBMITTED),
        "avgScore": rounded_percent(average_score(assignments)),
        "gradeBands": grade_bands(assignments),
        "recentActivity": sorted(assignments, key=lambda a: a["id"], reverse=True)[:5],
        "students": [
            {**student, "stats": student_stats(by_student.get(student["id"], []))}
            for student in students
        ],
    }


def student_overview(user: dict, assignments: List[dict]) -> dict:
    graded = [a for a in assignments if a.get("status") == GRADED]
    graded.sort(key=lambda a: a.get("submittedAt") or "", reverse=True)
    return {
        "user": user,
        "stats": student_stats(assignments),
        "assignments": assignments,
        "gradedHistory": graded,
    }
