from sqlalchemy import Column, String, Integer, Float, Boolean, Text, Enum, ForeignKey, JSON, Date, Uuid
from sqlalchemy.orm import declared_attr
from classifieds.models.base import BaseModel
import enum

class Location(str, enum.Enum):
    ORANGE_COUNTY = "Orange County"
    LOS_ANGELES = "Los Angeles"

class HousingType(str, enum.Enum):
    ROOM = "room"
    APARTMENT = "apartment"
    SPOT_IN_ROOM = "spot_in_room"

class Gender(str, enum.Enum):
    MEN = "men"
    WOMEN = "women"
    ANY = "any"

class AutoListingType(str, enum.Enum):
    RENT = "rent"
    SALE = "sale"

class Condition(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

class Transmission(str, enum.Enum):
    AUTOMATIC = "automatic"
    MANUAL = "manual"

class FuelType(str, enum.Enum):
    GASOLINE = "gasoline"
    ELECTRIC = "electric"
    HYBRID = "hybrid"
    DIESEL = "diesel"

class Direction(str, enum.Enum):
    US_TO_KAZAKHSTAN = "US_to_Kazakhstan"
    KAZAKHSTAN_TO_US = "Kazakhstan_to_US"


class ListingMixin:
    """Fields shared by every listing collection."""

    @declared_attr
    def owner_id(cls):
        return Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # Never flipped to False: listings are hard-deleted
    is_active = Column(Boolean, default=True, nullable=False)


class Housing(ListingMixin, BaseModel):
    __tablename__ = "housing"

    listing_type = Column(Enum(HousingType), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)

    # Location
    location = Column(Enum(Location), nullable=False)
    address = Column(String(255), nullable=True)

    price = Column(Float, nullable=False)
    gender = Column(Enum(Gender), nullable=True)
    amenities = Column(JSON, default=list)

    # Media (hosted remotely)
    thumbnail = Column(String(500), nullable=True)
    images = Column(JSON, default=list)

    contact_phone = Column(String(30), nullable=False)
    contact_email = Column(String(255), nullable=True)
    available_from = Column(Date, nullable=False)
    available_until = Column(Date, nullable=True)

class Auto(ListingMixin, BaseModel):
    __tablename__ = "auto"

    listing_type = Column(Enum(AutoListingType), nullable=False)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)

    location = Column(Enum(Location), nullable=False)
    address = Column(String(255), nullable=True)

    price = Column(Float, nullable=False)
    mileage = Column(Float, nullable=False)
    condition = Column(Enum(Condition), nullable=False)
    transmission = Column(Enum(Transmission), nullable=False)
    fuel_type = Column(Enum(FuelType), nullable=False)
    description = Column(Text, nullable=False)

    thumbnail = Column(String(500), nullable=True)
    images = Column(JSON, default=list)

    contact_phone = Column(String(30), nullable=False)
    contact_email = Column(String(255), nullable=True)
    available_from = Column(Date, nullable=True)
    available_until = Column(Date, nullable=True)

class Parcel(ListingMixin, BaseModel):
    __tablename__ = "parcels"

    direction = Column(Enum(Direction), nullable=False)
    travel_date = Column(Date, nullable=False)
    location_from = Column(String(200), nullable=False)
    location_to = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)

    contact_phone = Column(String(30), nullable=False)
    contact_email = Column(String(255), nullable=True)
