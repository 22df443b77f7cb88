import logging
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from classifieds.core.database import get_db
from classifieds.core.errors import Unauthorized
from classifieds.models.user import User
from classifieds.utils.auth import InvalidToken, TokenService
from classifieds.utils.image_hosting import CloudinaryImageCleaner
from typing import Optional
from uuid import UUID

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_image_cleaner(request: Request) -> CloudinaryImageCleaner:
    return request.app.state.image_cleaner


def get_current_user(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[User]:
    """Optional gate: resolve the caller if possible, otherwise None."""
    if not token:
        return None

    try:
        user_id = UUID(tokens.verify(token))
    except (InvalidToken, ValueError) as e:
        logger.debug("Rejected bearer token: %s", e)
        return None

    return db.get(User, user_id)


def get_current_active_user(
    current_user: Optional[User] = Depends(get_current_user)
) -> User:
    """Mandatory gate: same resolution, but no identity means 401."""
    if not current_user:
        raise Unauthorized("Not authorized")
    return current_user
