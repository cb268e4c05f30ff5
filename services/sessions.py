# services/sessions.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from config import (
    JWT_ALGORITHM,
    JWT_SECRET,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
    SESSION_TTL_DAYS,
)
from .errors import InvalidCredentials
from .gateway import UserGateway
from .passwords import hash_password, is_hashed, verify_password

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class SessionManager:
    """Maps the client-held session cookie to a user record.

    The cookie carries a signed token whose subject is the user id. The token
    is only a pointer: every lookup goes back through the user gateway.
    """

    def __init__(
        self,
        users: UserGateway,
        secret: str = JWT_SECRET,
        algorithm: str = JWT_ALGORITHM,
        ttl: timedelta = timedelta(days=SESSION_TTL_DAYS),
        cookie_name: str = SESSION_COOKIE_NAME,
    ):
        self.users = users
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl
        self.cookie_name = cookie_name

    async def login(self, email: str, password: str) -> dict:
        logger.info(f"Login attempt for email: {email}")
        record = await self.users.find_credentials(email)
        # unknown email and wrong password fail identically
        if not record or not verify_password(password, record.get("password", "")):
            raise InvalidCredentials()
        if not is_hashed(record["password"]):
            logger.info(f"Upgrading plaintext password for user {record['id']}")
            await self.users.update(record["id"], {"password": hash_password(password)})
        record.pop("password", None)
        return record

    def issue_token(self, user_id: str, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        return jwt.encode({"sub": user_id, "exp": now + self.ttl}, self.secret, algorithm=self.algorithm)

    def read_token(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"Rejected session token: {str(e)}")
            return None
        return payload.get("sub")

    def establish(self, response, user_id: str) -> str:
        """Set the session cookie, replacing any earlier one."""
        token = self.issue_token(user_id)
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            max_age=int(self.ttl.total_seconds()),
            path="/",
            samesite="strict",
            httponly=True,
            secure=SESSION_COOKIE_SECURE,
        )
        return token

    async def current(self, token: Optional[str]) -> Optional[dict]:
        user_id = self.read_token(token)
        if not user_id:
            return None
        user = await self.users.find_one({"id": user_id})
        if user is None:
            # the cookie stays; the client keeps sending it until logout or expiry
            logger.warning(f"Session refers to missing user {user_id}")
        return user

    def clear(self, response) -> None:
        response.delete_cookie(key=self.cookie_name, path="/", samesite="strict", httponly=True)
