import re
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from classifieds.models.listing import (
    Location, HousingType, Gender, AutoListingType, Condition, Transmission, FuelType, Direction
)

EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


def _required_text(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("must not be empty")
    return v.strip()


def _blank_to_none(v):
    # Forms post "" for an untouched date input
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _optional_email(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip().lower()
    if not v:
        return None
    if not EMAIL_RE.match(v):
        raise ValueError("Please provide a valid email address")
    return v


# ─── Shared ───────────────────────────────────────────────────────────────────
# JSON is camelCase on the wire; attributes stay snake_case so the same
# schemas validate request bodies and read ORM rows.

class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class ListingMeta(CamelModel):
    id: UUID
    owner_id: UUID
    is_active: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None


class ContactFields(CamelModel):
    contact_phone: str
    contact_email: Optional[str] = None

    @field_validator("contact_phone")
    @classmethod
    def phone_must_not_be_empty(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("contact_email")
    @classmethod
    def email_format(cls, v: Optional[str]) -> Optional[str]:
        return _optional_email(v)


# ─── Housing ──────────────────────────────────────────────────────────────────

class HousingBase(ContactFields):
    listing_type: HousingType
    title: str
    description: str
    location: Location
    address: Optional[str] = None
    price: float = Field(..., ge=0)
    gender: Optional[Gender] = None
    amenities: List[str] = []
    thumbnail: Optional[str] = None
    images: List[str] = []
    available_from: date
    available_until: Optional[date] = None

    @field_validator("available_until", mode="before")
    @classmethod
    def blank_date_is_unset(cls, v):
        return _blank_to_none(v)

    @field_validator("title", "description")
    @classmethod
    def text_must_not_be_empty(cls, v: str) -> str:
        return _required_text(v)

    @model_validator(mode="after")
    def gender_required_for_spot(self):
        if self.listing_type == HousingType.SPOT_IN_ROOM and self.gender is None:
            raise ValueError("gender is required when listingType is spot_in_room")
        return self


class HousingCreate(HousingBase):
    pass


class HousingResponse(HousingBase, ListingMeta):
    pass


# ─── Auto ─────────────────────────────────────────────────────────────────────

class AutoBase(ContactFields):
    listing_type: AutoListingType
    make: str
    model: str
    year: int
    location: Location
    address: Optional[str] = None
    price: float = Field(..., ge=0)
    mileage: float = Field(..., ge=0)
    condition: Condition
    transmission: Transmission
    fuel_type: FuelType
    description: str
    thumbnail: Optional[str] = None
    images: List[str] = []
    available_from: Optional[date] = None
    available_until: Optional[date] = None

    @field_validator("available_from", "available_until", mode="before")
    @classmethod
    def blank_date_is_unset(cls, v):
        return _blank_to_none(v)

    @field_validator("make", "model", "description")
    @classmethod
    def text_must_not_be_empty(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("year")
    @classmethod
    def year_in_range(cls, v: int) -> int:
        # Upper bound moves with the calendar
        max_year = datetime.now().year + 1
        if v < 1900 or v > max_year:
            raise ValueError(f"year must be between 1900 and {max_year}")
        return v

    @model_validator(mode="after")
    def available_from_required_for_rent(self):
        if self.listing_type == AutoListingType.RENT and self.available_from is None:
            raise ValueError("availableFrom is required when listingType is rent")
        return self


class AutoCreate(AutoBase):
    pass


class AutoResponse(AutoBase, ListingMeta):
    pass


# ─── Parcels ──────────────────────────────────────────────────────────────────

class ParcelBase(ContactFields):
    direction: Direction
    travel_date: date
    location_from: str
    location_to: str
    description: str

    @field_validator("location_from", "location_to", "description")
    @classmethod
    def text_must_not_be_empty(cls, v: str) -> str:
        return _required_text(v)


class ParcelCreate(ParcelBase):
    pass


class ParcelResponse(ParcelBase, ListingMeta):
    pass
