from sqlalchemy import Column, String, Text, Uuid, ForeignKey
from classifieds.models.base import BaseModel

class ContactMessage(BaseModel):
    __tablename__ = "contact_messages"

    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)

    # Set when the sender was signed in; messages carry no ownership rules
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=True)
