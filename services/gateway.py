# services/gateway.py
"""Typed CRUD over the ``users`` and ``assignments`` collections.

Filters are equality-only on a small whitelist of fields. User reads never
return the stored password, except ``UserGateway.find_credentials`` which the
login flow needs.
"""
import logging
from enum import Enum
from typing import Iterable, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo import errors as mongo_errors

from .errors import DuplicateKeyError, NotFoundError, ValidationError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

USER_PROJECTION = {"_id": 0, "password": 0}
ASSIGNMENT_PROJECTION = {"_id": 0}


def equality_filter(filter: Optional[dict], allowed: Iterable[str]) -> dict:
    query = {}
    for key, value in (filter or {}).items():
        if key not in allowed:
            raise ValidationError(f"Cannot filter on '{key}'")
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        if not isinstance(value, str):
            raise ValidationError(f"Filter value for '{key}' must be a string")
        query[key] = value
    return query


class UserGateway:
    FILTER_FIELDS = ("role", "email", "id")

    def __init__(self, db):
        self.collection = db.users
        self.assignments = db.assignments

    async def find_one(self, filter: dict) -> Optional[dict]:
        query = equality_filter(filter, self.FILTER_FIELDS)
        return await self.collection.find_one(query, USER_PROJECTION)

    async def find_many(self, filter: Optional[dict] = None) -> list:
        query = equality_filter(filter, self.FILTER_FIELDS)
        return await self.collection.find(query, USER_PROJECTION).to_list(None)

    async def find_credentials(self, email: str) -> Optional[dict]:
        """The only read that keeps the password field."""
        return await self.collection.find_one({"email": email}, {"_id": 0})

    async def insert(self, user: dict) -> dict:
        logger.info(f"Inserting user {user.get('id')} with role {user.get('role')}")
        try:
            await self.collection.insert_one(dict(user))
        except mongo_errors.DuplicateKeyError as e:
            raise DuplicateKeyError("A user with this id or email already exists") from e
        return await self.find_one({"id": user["id"]})

    async def update(self, user_id: str, fields: dict) -> dict:
        if not fields:
            existing = await self.find_one({"id": user_id})
            if existing is None:
                raise NotFoundError(f"User not found: {user_id}")
            return existing
        try:
            updated = await self.collection.find_one_and_update(
                {"id": user_id},
                {"$set": fields},
                projection=USER_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        except mongo_errors.DuplicateKeyError as e:
            raise DuplicateKeyError("A user with this email already exists") from e
        if updated is None:
            raise NotFoundError(f"User not found: {user_id}")
        return updated

    async def delete(self, user_id: str) -> int:
        """Delete a user and every assignment assigned to them.

        The two deletes are separate operations. Running the delete again for
        an id whose user is already gone still sweeps leftover assignments.
        Returns the number of assignments removed.
        """
        result = await self.collection.delete_one({"id": user_id})
        try:
            cascade = await self.assignments.delete_many({"assignedTo": user_id})
        except mongo_errors.PyMongoError as e:
            logger.error(f"User {user_id} deleted but assignment cleanup failed, orphans remain: {str(e)}")
            raise
        if result.deleted_count == 0 and cascade.deleted_count == 0:
            raise NotFoundError(f"User not found: {user_id}")
        logger.info(f"Deleted user {user_id} and {cascade.deleted_count} assignment(s)")
        return cascade.deleted_count


class AssignmentGateway:
    FILTER_FIELDS = ("assignedTo", "id")

    def __init__(self, db):
        self.collection = db.assignments

    async def find_one(self, filter: dict) -> Optional[dict]:
        query = equality_filter(filter, self.FILTER_FIELDS)
        return await self.collection.find_one(query, ASSIGNMENT_PROJECTION)

    async def find_many(self, filter: Optional[dict] = None) -> list:
        query = equality_filter(filter, self.FILTER_FIELDS)
        cursor = self.collection.find(query, ASSIGNMENT_PROJECTION, sort=[("id", DESCENDING)])
        return await cursor.to_list(None)

    async def exists(self, assignment_id: str) -> bool:
        return await self.collection.find_one({"id": assignment_id}, {"_id": 1}) is not None

    async def insert(self, assignment: dict) -> dict:
        try:
            await self.collection.insert_one(dict(assignment))
        except mongo_errors.DuplicateKeyError as e:
            raise DuplicateKeyError(f"Assignment ID already exists: {assignment.get('id')}") from e
        return await self.find_one({"id": assignment["id"]})

    async def update(self, assignment_id: str, fields: dict) -> dict:
        if not fields:
            existing = await self.find_one({"id": assignment_id})
            if existing is None:
                raise NotFoundError(f"Assignment not found: {assignment_id}")
            return existing
        updated = await self.collection.find_one_and_update(
            {"id": assignment_id},
            {"$set": fields},
            projection=ASSIGNMENT_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFoundError(f"Assignment not found: {assignment_id}")
        return updated

    async def delete(self, assignment_id: str) -> None:
        result = await self.collection.delete_one({"id": assignment_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Assignment not found: {assignment_id}")


async def ensure_indexes(db) -> None:
    await db.users.create_index("id", unique=True)
    await db.users.create_index("email", unique=True)
    await db.assignments.create_index("id", unique=True)
    await db.assignments.create_index("assignedTo")
