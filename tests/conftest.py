import os
import tempfile
from pathlib import Path

import pytest

# Settings are read at import time, so the environment goes first
_DB_DIR = tempfile.mkdtemp(prefix="classifieds-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_DB_DIR) / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["CLOUDINARY_CLOUD_NAME"] = ""
os.environ["CLOUDINARY_API_KEY"] = ""
os.environ["CLOUDINARY_API_SECRET"] = ""

from fastapi.testclient import TestClient  # noqa: E402

from classifieds.core.database import SessionLocal, engine  # noqa: E402
from classifieds.main import app  # noqa: E402
from classifieds.models.base import Base  # noqa: E402


class RecordingCleaner:
    """Stands in for the image host; records what would have been deleted."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    async def delete_listing_images(self, thumbnail, images):
        self.calls.append((thumbnail, list(images or [])))
        if self.fail:
            raise RuntimeError("image host unavailable")


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def cleaner():
    original = app.state.image_cleaner
    recording = RecordingCleaner()
    app.state.image_cleaner = recording
    yield recording
    app.state.image_cleaner = original


@pytest.fixture
def client(cleaner):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def register(client, email, name="User", password="secret123"):
    r = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert r.status_code == 201, r.text
    body = r.json()
    return {"Authorization": f"Bearer {body['access_token']}"}, body["user"]


@pytest.fixture
def user_a(client):
    return register(client, "a@example.com", name="Alice")


@pytest.fixture
def user_b(client):
    return register(client, "b@example.com", name="Bob")


def housing_payload(**overrides):
    payload = {
        "listingType": "room",
        "title": "Sunny room near campus",
        "description": "Quiet room, utilities included",
        "location": "Orange County",
        "price": 1200,
        "amenities": ["wifi", "parking"],
        "thumbnail": "https://res.cloudinary.com/demo/image/upload/v1712/rentall/thumb.jpg",
        "images": [
            "https://res.cloudinary.com/demo/image/upload/v1712/rentall/one.jpg",
            "https://res.cloudinary.com/demo/image/upload/rentall/two.png",
        ],
        "contactPhone": "+1 714 555 0100",
        "availableFrom": "2026-11-01",
    }
    payload.update(overrides)
    return payload


def auto_payload(**overrides):
    payload = {
        "listingType": "sale",
        "make": "Toyota",
        "model": "Corolla",
        "year": 2015,
        "location": "Los Angeles",
        "price": 9500,
        "mileage": 82000,
        "condition": "good",
        "transmission": "automatic",
        "fuelType": "gasoline",
        "description": "One owner, clean title",
        "contactPhone": "+1 213 555 0199",
    }
    payload.update(overrides)
    return payload


def parcel_payload(**overrides):
    payload = {
        "direction": "US_to_Kazakhstan",
        "travelDate": "2026-12-15",
        "locationFrom": "Los Angeles",
        "locationTo": "Almaty",
        "description": "Can take documents and small packages",
        "contactPhone": "+1 310 555 0123",
    }
    payload.update(overrides)
    return payload
