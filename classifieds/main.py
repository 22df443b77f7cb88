import logging
import secrets
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from classifieds.core.config import settings
from classifieds.core.database import engine
from classifieds.core.errors import register_exception_handlers
from classifieds.core.logging import RequestLoggingMiddleware, configure_logging
from classifieds.models.base import Base
from classifieds.models import contact, listing, user  # noqa: F401  (register tables)
from classifieds.routers import auth, contact as contact_router, listings
from classifieds.services.categories import CATEGORIES
from classifieds.utils.auth import TokenService
from classifieds.utils.image_hosting import CloudinaryImageCleaner

logger = logging.getLogger(__name__)


def _resolve_secret_key() -> str:
    if settings.SECRET_KEY:
        return settings.SECRET_KEY
    if not settings.DEBUG:
        raise RuntimeError("SECRET_KEY must be set when DEBUG is off")
    logger.warning("SECRET_KEY not set; using an ephemeral key, tokens will not survive a restart")
    return secrets.token_urlsafe(32)


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Housing, auto and parcel-courier classifieds",
        version="1.0.0"
    )

    # Process-wide collaborators, built once from configuration
    app.state.token_service = TokenService(
        secret_key=_resolve_secret_key(),
        algorithm=settings.ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    app.state.image_cleaner = CloudinaryImageCleaner(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        timeout=settings.IMAGE_DELETE_TIMEOUT_SECONDS,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    if settings.AUTO_CREATE_SCHEMA:
        Base.metadata.create_all(bind=engine)

    # Include routers
    app.include_router(auth.router, prefix="/api")
    for category in CATEGORIES:
        app.include_router(listings.build_router(category), prefix="/api")
    app.include_router(contact_router.router, prefix="/api")

    @app.get("/api/health")
    def health_check():
        return {
            "status": "ok",
            "message": "Server is running",
            "service": settings.APP_NAME,
            "timestamp": datetime.now(timezone.utc),
        }

    return app


app = create_app()
