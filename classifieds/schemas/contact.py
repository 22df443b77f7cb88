from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional
from uuid import UUID
from datetime import datetime

class ContactCreate(BaseModel):
    # Presence is checked by the route so a missing field gets the form-level message
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None

class ContactResponse(BaseModel):
    id: UUID
    name: str
    email: str
    message: str
    created_at: datetime

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }
