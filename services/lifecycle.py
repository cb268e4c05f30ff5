# services/lifecycle.py
"""Assignment lifecycle: PENDING -> SUBMITTED -> GRADED.

Status is never written from caller input. It is recomputed from the
submitted file list and the grading state on every mutation, see
``derive_status``. GRADED is terminal; only deleting the assignment leaves it.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from models.assignment import AssignmentStatus
from models.user import Role
from .errors import LifecycleError, NotFoundError, ValidationError
from .gateway import AssignmentGateway, UserGateway

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_MAX_SCORE = 100
EDITABLE_FIELDS = ("title", "subject", "description", "dueDate", "questionPapers", "maxScore")


def derive_status(submitted_files: Optional[list], graded: bool = False) -> AssignmentStatus:
    if graded:
        return AssignmentStatus.GRADED
    if submitted_files:
        return AssignmentStatus.SUBMITTED
    return AssignmentStatus.PENDING


def average_score(assignments: Iterable[dict]) -> float:
    """100 * sum(score) / sum(maxScore) over graded assignments, 0 if none.

    A ratio of sums, so a 10-point quiz weighs less than a 100-point exam.
    """
    total_score = 0
    total_max = 0
    for a in assignments:
        if a.get("status") != AssignmentStatus.GRADED.value:
            continue
        total_score += a.get("score") or 0
        total_max += a.get("maxScore") or 0
    if total_max == 0:
        return 0
    return 100 * total_score / total_max


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AssignmentLifecycle:
    def __init__(self, assignments: AssignmentGateway, users: UserGateway):
        self.assignments = assignments
        self.users = users

    async def get(self, assignment_id: str) -> dict:
        assignment = await self.assignments.find_one({"id": assignment_id})
        if assignment is None:
            raise NotFoundError(f"Assignment not found: {assignment_id}")
        return assignment

    async def find(self, assigned_to: Optional[str] = None) -> List[dict]:
        return await self.assignments.find_many({"assignedTo": assigned_to})

    async def _new_id(self) -> str:
        # millisecond timestamps keep "id descending" equal to "newest first"
        candidate = int(time.time() * 1000)
        while await self.assignments.exists(str(candidate)):
            candidate += 1
        return str(candidate)

    async def create(self, fields: dict) -> dict:
        if not fields.get("assignedTo"):
            raise ValidationError("assignedTo is required")
        student = await self.users.find_one({"id": fields["assignedTo"], "role": Role.STUDENT})
        if student is None:
            raise NotFoundError(f"Student not found: {fields.get('assignedTo')}")

        assignment = {
            "id": await self._new_id(),
            "title": fields["title"],
            "subject": fields["subject"],
            "description": fields.get("description", ""),
            "dueDate": fields["dueDate"],
            "assignedTo": fields["assignedTo"],
            "questionPapers": list(fields.get("questionPapers") or []),
            "maxScore": fields.get("maxScore") or DEFAULT_MAX_SCORE,
            "status": AssignmentStatus.PENDING.value,
            "submittedFiles": [],
        }
        logger.info(f"Creating assignment {assignment['id']} for student {assignment['assignedTo']}")
        return await self.assignments.insert(assignment)

    async def edit(self, assignment_id: str, fields: dict) -> dict:
        changes = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS and v is not None}
        ignored = set(fields) - set(changes)
        if ignored:
            logger.info(f"Ignoring non-editable fields on assignment {assignment_id}: {sorted(ignored)}")
        if "maxScore" in changes:
            assignment = await self.get(assignment_id)
            score = assignment.get("score")
            if score is not None and score > changes["maxScore"]:
                raise ValidationError("maxScore cannot drop below the awarded score")
        return await self.assignments.update(assignment_id, changes)

    async def add_files(self, assignment_id: str, attachments: List[dict]) -> dict:
        if not attachments:
            raise ValidationError("At least one file is required")
        assignment = await self.get(assignment_id)
        if assignment.get("status") == AssignmentStatus.GRADED.value:
            raise LifecycleError("Assignment is already graded")

        files = list(assignment.get("submittedFiles") or []) + list(attachments)
        logger.info(f"Adding {len(attachments)} file(s) to assignment {assignment_id}")
        return await self.assignments.update(assignment_id, {
            "submittedFiles": files,
            "status": derive_status(files).value,
            "submittedAt": _now(),
        })

    async def remove_file(self, assignment_id: str, file_id: str) -> dict:
        assignment = await self.get(assignment_id)
        if assignment.get("status") == AssignmentStatus.GRADED.value:
            raise LifecycleError("Assignment is already graded")

        current = assignment.get("submittedFiles") or []
        files = [f for f in current if f.get("id") != file_id]
        if len(files) == len(current):
            raise NotFoundError(f"File not found: {file_id}")

        status = derive_status(files)
        update = {"submittedFiles": files, "status": status.value}
        if status == AssignmentStatus.PENDING:
            update["submittedAt"] = None
        logger.info(f"Removed file {file_id} from assignment {assignment_id}, now {status.value}")
        return await self.assignments.update(assignment_id, update)

    async def grade(self, assignment_id: str, score, remarks: str = "") -> dict:
        assignment = await self.get(assignment_id)
        status = assignment.get("status")
        if status == AssignmentStatus.GRADED.value:
            raise LifecycleError("Assignment is already graded")
        if status != AssignmentStatus.SUBMITTED.value:
            raise LifecycleError("Only submitted assignments can be graded")

        max_score = assignment.get("maxScore") or DEFAULT_MAX_SCORE
        if isinstance(score, bool) or not isinstance(score, (int, float)) or not 0 <= score <= max_score:
            raise ValidationError(f"Score must be between 0 and {max_score}")

        logger.info(f"Grading assignment {assignment_id}: {score}/{max_score}")
        return await self.assignments.update(assignment_id, {
            "score": score,
            "remarks": remarks,
            "status": derive_status(assignment.get("submittedFiles"), graded=True).value,
        })

    async def delete(self, assignment_id: str) -> None:
        logger.info(f"Deleting assignment {assignment_id}")
        await self.assignments.delete(assignment_id)

    async def find_attachment(self, assignment_id: str, file_id: str, field: str = "submittedFiles") -> dict:
        assignment = await self.get(assignment_id)
        for attachment in assignment.get(field) or []:
            if attachment.get("id") == file_id:
                return attachment
        raise NotFoundError(f"File not found: {file_id}")
