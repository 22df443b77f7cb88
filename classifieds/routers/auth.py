import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from classifieds.core.database import get_db
from classifieds.core.errors import Unauthorized, ValidationError
from classifieds.models.user import User
from classifieds.schemas.user import UserCreate, UserLogin, TokenResponse, UserResponse
from classifieds.utils.auth import TokenService, get_password_hash, verify_password
from classifieds.api.deps import get_current_active_user, get_token_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    email = user_data.email.lower()

    if db.query(User).filter(User.email == email).first():
        raise ValidationError("User already exists")

    user = User(
        name=user_data.name,
        email=email,
        phone=user_data.phone or None,
        password_hash=get_password_hash(user_data.password),
    )

    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)

    return TokenResponse(
        access_token=tokens.issue(user.id),
        user=UserResponse.model_validate(user)
    )

@router.post("/login", response_model=TokenResponse)
def login(
    user_data: UserLogin,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    user = db.query(User).filter(User.email == user_data.email.lower()).first()

    if not user or not verify_password(user_data.password, user.password_hash):
        raise Unauthorized("Invalid email or password")

    return TokenResponse(
        access_token=tokens.issue(user.id),
        user=UserResponse.model_validate(user)
    )

@router.get("/me", response_model=UserResponse)
def get_current_user_info(
    current_user: User = Depends(get_current_active_user)
):
    return current_user
