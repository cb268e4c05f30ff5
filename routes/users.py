# routes/users.py
import time
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
import logging

from database import get_user_gateway
from models.user import Role, UserCreate, UserUpdate
from services.gateway import UserGateway
from services.passwords import hash_password

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])

REQUIRED_FIELDS = ("name", "email", "password", "role")


@router.get("")
async def get_users(
    role: Optional[Role] = None,
    email: Optional[str] = None,
    id: Optional[str] = None,
    users: UserGateway = Depends(get_user_gateway),
):
    logger.info(f"Fetching users with role={role}, email={email}, id={id}")
    return await users.find_many({"role": role, "email": email, "id": id})


@router.get("/{user_id}")
async def get_user(user_id: str, users: UserGateway = Depends(get_user_gateway)):
    return await users.find_one({"id": user_id})


@router.post("")
async def add_user(user: UserCreate, users: UserGateway = Depends(get_user_gateway)):
    user_dict = user.model_dump(mode="json", by_alias=True, exclude_none=True)
    user_dict.setdefault("id", str(int(time.time() * 1000)))
    user_dict.setdefault("joinDate", date.today().isoformat())
    user_dict["password"] = hash_password(user.password)
    logger.info(f"Adding user: {user_dict['id']}, role: {user_dict['role']}")
    return await users.insert(user_dict)


@router.patch("/{user_id}")
async def update_user(user_id: str, update_data: UserUpdate, users: UserGateway = Depends(get_user_gateway)):
    update_dict = update_data.model_dump(mode="json", by_alias=True, exclude_unset=True)
    # required fields cannot be cleared; null means "leave unchanged"
    for field in REQUIRED_FIELDS:
        if update_dict.get(field) is None:
            update_dict.pop(field, None)
    if update_dict.get("password"):
        update_dict["password"] = hash_password(update_dict["password"])
    else:
        update_dict.pop("password", None)
    logger.info(f"Updating user {user_id} fields: {sorted(update_dict)}")
    return await users.update(user_id, update_dict)


@router.delete("/{user_id}")
async def delete_user(user_id: str, users: UserGateway = Depends(get_user_gateway)):
    logger.info(f"Deleting user {user_id}")
    deleted = await users.delete(user_id)
    return {"success": True, "deletedAssignments": deleted}
