from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Type

from pydantic import BaseModel
from sqlalchemy import or_

from classifieds.models.listing import (
    Housing, Auto, Parcel,
    Location, HousingType, Gender, AutoListingType, Condition, Transmission, FuelType, Direction,
)
from classifieds.schemas.listing import (
    HousingCreate, HousingResponse, AutoCreate, AutoResponse, ParcelCreate, ParcelResponse,
)

# A filter turns a raw query-string value into a WHERE clause for a model.
# Builders raise ValueError for values they cannot interpret.
FilterBuilder = Callable[[Any, str], Any]


def equals(column: str, parse: Callable[[str], Any]) -> FilterBuilder:
    def build(model, raw: str):
        return getattr(model, column) == parse(raw)
    return build


def at_most(column: str) -> FilterBuilder:
    def build(model, raw: str):
        return getattr(model, column) <= float(raw)
    return build


def gender_or_any(model, raw: str):
    gender = Gender(raw)
    return or_(model.gender == gender, model.gender == Gender.ANY)


@dataclass(frozen=True)
class ListingCategory:
    """Everything that differs between the listing collections."""

    name: str                       # URL segment, e.g. "housing"
    label: str                      # used in messages, e.g. "Housing listing"
    model: Any                      # ORM class
    create_schema: Type[BaseModel]
    response_schema: Type[BaseModel]
    filters: Dict[str, FilterBuilder] = field(default_factory=dict)

    @property
    def has_images(self) -> bool:
        return hasattr(self.model, "images")


HOUSING = ListingCategory(
    name="housing",
    label="Housing listing",
    model=Housing,
    create_schema=HousingCreate,
    response_schema=HousingResponse,
    filters={
        "location": equals("location", Location),
        "listingType": equals("listing_type", HousingType),
        "maxPrice": at_most("price"),
        "gender": gender_or_any,
    },
)

AUTO = ListingCategory(
    name="auto",
    label="Auto listing",
    model=Auto,
    create_schema=AutoCreate,
    response_schema=AutoResponse,
    filters={
        "location": equals("location", Location),
        "listingType": equals("listing_type", AutoListingType),
        "maxPrice": at_most("price"),
        "condition": equals("condition", Condition),
        "transmission": equals("transmission", Transmission),
        "fuelType": equals("fuel_type", FuelType),
    },
)

PARCELS = ListingCategory(
    name="parcels",
    label="Parcel listing",
    model=Parcel,
    create_schema=ParcelCreate,
    response_schema=ParcelResponse,
    filters={
        "direction": equals("direction", Direction),
    },
)

CATEGORIES = (HOUSING, AUTO, PARCELS)
