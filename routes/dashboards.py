# routes/dashboards.py
from fastapi import APIRouter, Depends, HTTPException

from database import get_assignment_gateway, get_user_gateway
from models.user import Role
from services.dashboards import admin_overview, student_overview, visible_scope
from services.gateway import AssignmentGateway, UserGateway
from .auth import get_current_user

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("")
async def get_dashboard(
    current_user: dict = Depends(get_current_user),
    users: UserGateway = Depends(get_user_gateway),
    assignments: AssignmentGateway = Depends(get_assignment_gateway),
):
    visible = await assignments.find_many(visible_scope(current_user))
    if current_user["role"] == Role.ADMIN.value:
        students = await users.find_many({"role": Role.STUDENT})
        return admin_overview(students, visible)
    return student_overview(current_user, visible)


@router.get("/students/{student_id}")
async def get_student_dashboard(
    student_id: str,
    users: UserGateway = Depends(get_user_gateway),
    assignments: AssignmentGateway = Depends(get_assignment_gateway),
):
    student = await users.find_one({"id": student_id, "role": Role.STUDENT})
    if not student:
        raise HTTPException(404, "Student not found")
    return student_overview(student, await assignments.find_many({"assignedTo": student_id}))
