# models/user.py
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    ADMIN = "ADMIN"
    STUDENT = "STUDENT"


class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None  # generated when missing
    name: str
    email: str
    password: str
    role: Role
    class_: Optional[str] = Field(None, alias="class")
    phone: Optional[str] = None
    address: Optional[str] = None
    joinDate: Optional[str] = None
    avatarUrl: Optional[str] = None


class UserUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[Role] = None
    class_: Optional[str] = Field(None, alias="class")
    phone: Optional[str] = None
    address: Optional[str] = None
    joinDate: Optional[str] = None
    avatarUrl: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str
