# routes/assignments.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import RedirectResponse, Response
import logging

from config import MAX_UPLOAD_BYTES
from database import get_assignment_gateway, get_user_gateway
from models.assignment import AssignmentCreate, AssignmentUpdate, GradeRequest
from services import attachments
from services.gateway import AssignmentGateway, UserGateway
from services.lifecycle import AssignmentLifecycle

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/assignments", tags=["assignments"])


def get_lifecycle(
    assignments: AssignmentGateway = Depends(get_assignment_gateway),
    users: UserGateway = Depends(get_user_gateway),
) -> AssignmentLifecycle:
    return AssignmentLifecycle(assignments, users)


@router.get("")
async def get_assignments(assignedTo: Optional[str] = None, lifecycle: AssignmentLifecycle = Depends(get_lifecycle)):
    return await lifecycle.find(assignedTo)


@router.get("/{assignment_id}")
async def get_assignment(assignment_id: str, lifecycle: AssignmentLifecycle = Depends(get_lifecycle)):
    return await lifecycle.get(assignment_id)


@router.post("")
async def create_assignment(assignment: AssignmentCreate, lifecycle: AssignmentLifecycle = Depends(get_lifecycle)):
    return await lifecycle.create(assignment.model_dump(mode="json"))


@router.patch("/{assignment_id}")
async def update_assignment(
    assignment_id: str,
    update_data: AssignmentUpdate,
    lifecycle: AssignmentLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.edit(assignment_id, update_data.model_dump(mode="json", exclude_unset=True))


@router.delete("/{assignment_id}")
async def delete_assignment(assignment_id: str, lifecycle: AssignmentLifecycle = Depends(get_lifecycle)):
    await lifecycle.delete(assignment_id)
    return {"success": True}


@router.post("/{assignment_id}/files")
async def upload_files(
    assignment_id: str,
    files: List[UploadFile] = File(...),
    lifecycle: AssignmentLifecycle = Depends(get_lifecycle),
):
    new_files = []
    for upload in files:
        payload = await attachments.encode(upload, max_bytes=MAX_UPLOAD_BYTES)
        new_files.append(attachments.make_attachment(upload.filename or "file", payload, upload.content_type))
    return await lifecycle.add_files(assignment_id, new_files)


@router.delete("/{assignment_id}/files/{file_id}")
async def delete_file(assignment_id: str, file_id: str, lifecycle: AssignmentLifecycle = Depends(get_lifecycle)):
    return await lifecycle.remove_file(assignment_id, file_id)


@router.post("/{assignment_id}/grade")
async def grade_assignment(
    assignment_id: str,
    grade: GradeRequest,
    lifecycle: AssignmentLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.grade(assignment_id, grade.score, grade.remarks)


def _open_attachment(attachment: dict):
    payload = attachments.decode(attachment.get("url", ""))
    if payload.is_remote:
        return RedirectResponse(payload.url)
    return Response(
        content=payload.data,
        media_type=payload.mime_type,
        headers={"Content-Disposition": attachments.content_disposition(attachment.get("name"))},
    )


@router.get("/{assignment_id}/files/{file_id}")
async def download_file(assignment_id: str, file_id: str, lifecycle: AssignmentLifecycle = Depends(get_lifecycle)):
    return _open_attachment(await lifecycle.find_attachment(assignment_id, file_id))


@router.get("/{assignment_id}/papers/{file_id}")
async def download_paper(assignment_id: str, file_id: str, lifecycle: AssignmentLifecycle = Depends(get_lifecycle)):
    return _open_attachment(await lifecycle.find_attachment(assignment_id, file_id, field="questionPapers"))
