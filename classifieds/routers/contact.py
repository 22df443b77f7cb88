import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from classifieds.core.database import get_db
from classifieds.core.errors import ValidationError
from classifieds.models.contact import ContactMessage
from classifieds.models.user import User
from classifieds.schemas.contact import ContactCreate, ContactResponse
from classifieds.api.deps import get_current_user, get_current_active_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["Contact"])


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
def submit_contact(
    payload: ContactCreate,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user),
):
    """Public contact form. Signed-in senders are recorded, anonymous ones are fine."""
    name = (payload.name or "").strip()
    email = (payload.email or "").strip()
    message = (payload.message or "").strip()

    if not all([name, email, message]):
        raise ValidationError("Please provide name, email, and message")

    contact = ContactMessage(
        name=name,
        email=email,
        message=message,
        user_id=current_user.id if current_user else None,
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)

    logger.info("Stored contact message %s", contact.id)
    return contact


@router.get("", response_model=List[ContactResponse])
def list_contacts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """All contact messages, newest first. Any signed-in user may read them."""
    return db.query(ContactMessage).order_by(ContactMessage.created_at.desc()).all()
