# routes/auth.py
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response
import logging

from config import SESSION_COOKIE_NAME
from database import get_user_gateway
from models.user import LoginRequest
from services.gateway import UserGateway
from services.sessions import SessionManager

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_sessions(users: UserGateway = Depends(get_user_gateway)) -> SessionManager:
    return SessionManager(users)


async def get_session_user(
    token: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME),
    sessions: SessionManager = Depends(get_sessions),
) -> Optional[dict]:
    return await sessions.current(token)


async def get_current_user(user: Optional[dict] = Depends(get_session_user)) -> dict:
    if user is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    return user


@router.post("/login")
async def login(request: LoginRequest, response: Response, sessions: SessionManager = Depends(get_sessions)):
    user = await sessions.login(request.email, request.password)
    sessions.establish(response, user["id"])
    logger.info(f"User {user['id']} logged in, role: {user['role']}")
    return user


@router.post("/logout")
async def logout(response: Response, sessions: SessionManager = Depends(get_sessions)):
    sessions.clear(response)
    return {"success": True}


@router.get("/current-user")
async def get_current_user_endpoint(user: Optional[dict] = Depends(get_session_user)):
    return user
