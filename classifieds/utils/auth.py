from datetime import datetime, timedelta, timezone
from typing import Union
from uuid import UUID

import jwt
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


class InvalidToken(Exception):
    """Token is malformed, expired, wrongly signed or has no subject."""


class TokenService:
    """Issues and verifies signed, time-bound identity tokens.

    The secret is handed in once by the app factory; nothing here reads the
    environment.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24 * 30):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_delta = timedelta(minutes=expire_minutes)

    def issue(self, user_id: Union[UUID, str]) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + self.expire_delta,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Return the user id carried by ``token`` or raise InvalidToken."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            raise InvalidToken(str(e)) from e

        user_id = payload.get("sub")
        if not user_id:
            raise InvalidToken("Token has no subject")
        return user_id
