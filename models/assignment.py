# models/assignment.py
from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, field_validator


class AssignmentStatus(str, Enum):
    PENDING = "PENDING"
    SUBMITTED = "SUBMITTED"
    GRADED = "GRADED"


class Attachment(BaseModel):
    id: str
    name: str
    url: str  # data URL or http(s) link
    type: str = "application/octet-stream"
    createdAt: str


class AssignmentCreate(BaseModel):
    # status, submittedFiles, score etc. are not accepted from callers
    title: str
    subject: str
    description: str = ""
    dueDate: str
    assignedTo: str
    questionPapers: List[Attachment] = []
    maxScore: Union[int, float] = 100

    @field_validator("maxScore")
    @classmethod
    def max_score_positive(cls, value):
        if value <= 0:
            raise ValueError("maxScore must be greater than 0")
        return value


class AssignmentUpdate(BaseModel):
    title: Optional[str] = None
    subject: Optional[str] = None
    description: Optional[str] = None
    dueDate: Optional[str] = None
    questionPapers: Optional[List[Attachment]] = None
    maxScore: Optional[Union[int, float]] = None

    @field_validator("maxScore")
    @classmethod
    def max_score_positive(cls, value):
        if value is not None and value <= 0:
            raise ValueError("maxScore must be greater than 0")
        return value


class GradeRequest(BaseModel):
    score: Union[int, float]
    remarks: str = ""
