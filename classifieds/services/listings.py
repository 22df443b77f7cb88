"""
services/listings.py

One CRUD service shared by every listing category. The category descriptor
supplies the model, the schemas and the public filters; everything else,
ownership checks included, is identical across categories.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

import pydantic
from pydantic import BaseModel
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from classifieds.core.errors import ValidationError, InvalidIdentifier, NotFound, Forbidden, format_validation_errors
from classifieds.models.base import utcnow
from classifieds.models.user import User
from classifieds.services.categories import ListingCategory
from classifieds.utils.image_hosting import CloudinaryImageCleaner

logger = logging.getLogger(__name__)


def parse_listing_id(raw: str, label: str = "listing") -> UUID:
    try:
        return UUID(str(raw))
    except ValueError:
        raise InvalidIdentifier(f"Invalid {label} ID format")


def _normalize_listing(listing):
    """Ensure JSON list fields are not None so response validation passes."""
    for attr in ("images", "amenities"):
        if hasattr(listing, attr) and getattr(listing, attr) is None:
            setattr(listing, attr, [])
    return listing


def _field_aliases(schema) -> Dict[str, str]:
    """Map both attribute names and wire aliases of ``schema`` to the alias."""
    aliases = {}
    for name, info in schema.model_fields.items():
        alias = info.alias or name
        aliases[name] = alias
        aliases[alias] = alias
    return aliases


class ListingService:
    def __init__(self, category: ListingCategory, db: Session):
        self.category = category
        self.model = category.model
        self.db = db

    # ─── Reads ────────────────────────────────────────────────────────────────

    def list_public(self, filters: Optional[Mapping[str, str]] = None) -> List[Any]:
        """Active listings, newest first, narrowed by any known query filters."""
        query = self.db.query(self.model).filter(self.model.is_active.is_(True))

        for param, build in self.category.filters.items():
            raw = (filters or {}).get(param)
            if raw is None or raw == "":
                continue
            try:
                query = query.filter(build(self.model, raw))
            except ValueError:
                raise ValidationError(f"Invalid value for {param}: {raw}")

        return [_normalize_listing(l) for l in query.order_by(self.model.created_at.desc()).all()]

    def list_mine(self, owner: User) -> List[Any]:
        listings = (
            self.db.query(self.model)
            .filter(self.model.owner_id == owner.id, self.model.is_active.is_(True))
            .order_by(self.model.created_at.desc())
            .all()
        )
        return [_normalize_listing(l) for l in listings]

    def get(self, raw_id: str):
        """Any caller may read any listing by id."""
        listing_id = parse_listing_id(raw_id, self.category.name)
        listing = self.db.get(self.model, listing_id)
        if not listing:
            raise NotFound(f"{self.category.label} not found")
        return _normalize_listing(listing)

    def _get_owned(self, raw_id: str, owner: User, action: str):
        listing = self.get(raw_id)
        if listing.owner_id != owner.id:
            raise Forbidden(f"Not authorized to {action} this listing")
        return listing

    # ─── Writes ───────────────────────────────────────────────────────────────

    def create(self, payload: BaseModel, owner: User):
        # Owner always comes from the authenticated caller, never the payload
        listing = self.model(**payload.model_dump(), owner_id=owner.id, is_active=True)
        self.db.add(listing)
        self.db.commit()
        self.db.refresh(listing)
        logger.info("Created %s %s for user %s", self.category.name, listing.id, owner.id)
        return _normalize_listing(listing)

    def update(self, raw_id: str, changes: Mapping[str, Any], owner: User):
        """Merge ``changes`` into the stored listing and re-validate the whole record."""
        listing = self._get_owned(raw_id, owner, "update")

        schema = self.category.create_schema
        aliases = _field_aliases(schema)
        current = schema.model_validate(listing).model_dump(by_alias=True)
        # Unknown keys (owner, id, timestamps...) are dropped here
        current.update({aliases[k]: v for k, v in changes.items() if k in aliases})

        try:
            validated = schema.model_validate(current)
        except pydantic.ValidationError as e:
            raise ValidationError(format_validation_errors(e.errors()))

        for field, value in validated.model_dump().items():
            setattr(listing, field, value)
        listing.updated_at = utcnow()

        self.db.commit()
        self.db.refresh(listing)
        logger.info("Updated %s %s", self.category.name, listing.id)
        return _normalize_listing(listing)

    async def delete(self, raw_id: str, owner: User, cleaner: CloudinaryImageCleaner) -> Dict[str, str]:
        # Session work goes to the threadpool; only image cleanup runs on the loop
        listing = await run_in_threadpool(self._get_owned, raw_id, owner, "delete")

        if self.category.has_images:
            await self._cleanup_images(listing, cleaner)

        await run_in_threadpool(self._remove, listing)
        return {"message": f"{self.category.label} deleted successfully"}

    def _remove(self, listing) -> None:
        self.db.delete(listing)
        self.db.commit()
        logger.info("Deleted %s %s", self.category.name, listing.id)

    async def _cleanup_images(self, listing, cleaner: CloudinaryImageCleaner) -> None:
        # Non-critical side effect: a failure here never stops the delete
        try:
            await cleaner.delete_listing_images(listing.thumbnail, listing.images)
        except Exception:
            logger.exception("Error deleting hosted images for %s %s", self.category.name, listing.id)
