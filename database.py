# database.py
import logging
from datetime import date

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorClient

from config import ADMIN_EMAIL, ADMIN_ID, ADMIN_NAME, ADMIN_PASSWORD, MONGODB_DB, MONGODB_URI
from models.user import Role
from services.errors import DuplicateKeyError
from services.gateway import AssignmentGateway, UserGateway, ensure_indexes
from services.passwords import hash_password

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(MONGODB_URI)
db = client[MONGODB_DB]


def get_db():
    return db


def get_user_gateway(database=Depends(get_db)) -> UserGateway:
    return UserGateway(database)


def get_assignment_gateway(database=Depends(get_db)) -> AssignmentGateway:
    return AssignmentGateway(database)


async def seed_admin(database) -> bool:
    users = UserGateway(database)
    if await users.find_one({"email": ADMIN_EMAIL}):
        return False
    try:
        await users.insert({
            "id": ADMIN_ID,
            "name": ADMIN_NAME,
            "email": ADMIN_EMAIL,
            "password": hash_password(ADMIN_PASSWORD),
            "role": Role.ADMIN.value,
            "joinDate": date.today().isoformat(),
            "avatarUrl": "",
        })
    except DuplicateKeyError as e:
        logger.error(f"Error seeding admin {ADMIN_ID}: {e.message}")
        return False
    logger.info(f"Default admin ({ADMIN_EMAIL}) created")
    return True


async def init_db(database=None):
    database = database if database is not None else db
    await ensure_indexes(database)
    await seed_admin(database)
