from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.orm import Session
from typing import Any, Dict, List
from classifieds.core.database import get_db
from classifieds.models.user import User
from classifieds.api.deps import get_current_active_user, get_image_cleaner
from classifieds.services.categories import ListingCategory
from classifieds.services.listings import ListingService
from classifieds.utils.image_hosting import CloudinaryImageCleaner


def build_router(category: ListingCategory) -> APIRouter:
    """REST surface for one listing category, mounted at ``/{category.name}``."""
    router = APIRouter(prefix=f"/{category.name}", tags=[category.label])
    create_schema = category.create_schema
    response_schema = category.response_schema

    # ─── LIST (public) ────────────────────────────────────────────────────────

    @router.get("", response_model=List[response_schema])
    def list_listings(request: Request, db: Session = Depends(get_db)):
        """Active listings, newest first. Optional filters come from the query string."""
        return ListingService(category, db).list_public(request.query_params)

    # Declared before /{listing_id} so the literal path wins
    @router.get("/my-listings", response_model=List[response_schema])
    def list_my_listings(
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_active_user),
    ):
        return ListingService(category, db).list_mine(current_user)

    # ─── GET single (public) ──────────────────────────────────────────────────

    @router.get("/{listing_id}", response_model=response_schema)
    def get_listing(listing_id: str, db: Session = Depends(get_db)):
        return ListingService(category, db).get(listing_id)

    # ─── CREATE ───────────────────────────────────────────────────────────────

    @router.post("", response_model=response_schema, status_code=status.HTTP_201_CREATED)
    def create_listing(
        payload: create_schema,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_active_user),
    ):
        return ListingService(category, db).create(payload, current_user)

    # ─── UPDATE (partial body, owner only) ────────────────────────────────────

    @router.put("/{listing_id}", response_model=response_schema)
    def update_listing(
        listing_id: str,
        payload: Dict[str, Any] = Body(...),
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_active_user),
    ):
        return ListingService(category, db).update(listing_id, payload, current_user)

    # ─── DELETE (owner only, hard delete) ─────────────────────────────────────

    @router.delete("/{listing_id}")
    async def delete_listing(
        listing_id: str,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_active_user),
        cleaner: CloudinaryImageCleaner = Depends(get_image_cleaner),
    ):
        return await ListingService(category, db).delete(listing_id, current_user, cleaner)

    return router
