"""
utils/image_hosting.py

Removes listing images from the Cloudinary account they were uploaded to.
Uploads happen client-side; the backend only ever cleans up, and only as a
side effect of deleting a listing. Nothing in here raises to the caller.
"""

import asyncio
import logging
import re
from typing import Iterable, List, Optional
from urllib.parse import urlparse

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

logger = logging.getLogger(__name__)

_VERSION_PREFIX = re.compile(r"^v\d+/")
_EXTENSION = re.compile(r"\.[^./]+$")


class ImageHostingError(Exception):
    """The image host refused or failed a deletion."""


def extract_public_id(url: Optional[str]) -> Optional[str]:
    """
    Return the Cloudinary public ID for a delivery URL, or None.

        https://res.cloudinary.com/<cloud>/image/upload/v1712/rentall/abc.jpg
        -> "rentall/abc"

    The ID is everything after the ``upload`` segment, minus an optional
    ``v<digits>`` version segment and the file extension. Folders are kept.
    """
    if not url or not isinstance(url, str):
        return None

    try:
        parts = urlparse(url).path.split("/")
    except ValueError:
        return None

    if "upload" not in parts:
        return None
    upload_index = parts.index("upload")

    path = "/".join(parts[upload_index + 1:])
    path = _VERSION_PREFIX.sub("", path)
    path = _EXTENSION.sub("", path)
    return path or None


class CloudinaryImageCleaner:
    def __init__(self, cloud_name: str, api_key: str, api_secret: str, timeout: float = 10.0):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout

        if self.configured:
            cloudinary.config(
                cloud_name=cloud_name,
                api_key=api_key,
                api_secret=api_secret,
                secure=True,
            )

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    async def delete_listing_images(self, thumbnail: Optional[str], images: Optional[Iterable[str]]) -> None:
        """Delete a listing's thumbnail and gallery images."""
        urls: List[str] = []
        if thumbnail:
            urls.append(thumbnail)
        urls.extend(u for u in (images or []) if u)

        if not urls:
            logger.debug("No hosted images to delete")
            return
        await self.delete_images(urls)

    async def delete_images(self, urls: List[str]) -> None:
        """Delete every URL concurrently; individual failures are only logged."""
        if not urls:
            return
        if not self.configured:
            logger.warning(
                "Image host credentials not configured; skipping deletion of %d image(s)", len(urls)
            )
            return

        results = await asyncio.gather(
            *(self._delete_one(url) for url in urls),
            return_exceptions=True,
        )

        for url, result in zip(urls, results):
            if isinstance(result, BaseException):
                logger.error("Unexpected error deleting hosted image %s: %r", url, result)

    async def _delete_one(self, url: str) -> None:
        public_id = extract_public_id(url)
        if not public_id:
            logger.warning("Could not extract public ID from URL: %s", url)
            return

        try:
            result = await asyncio.to_thread(self._destroy, public_id)
        except ImageHostingError as e:
            logger.error("Failed to delete hosted image %s: %s", public_id, e)
            return

        if result == "ok":
            logger.info("Deleted hosted image %s", public_id)
        elif result == "not found":
            logger.warning("Hosted image not found (may have been deleted already): %s", public_id)
        else:
            logger.warning("Unexpected result %r deleting hosted image %s", result, public_id)

    def _destroy(self, public_id: str) -> Optional[str]:
        # Blocking SDK call; runs in a worker thread
        try:
            response = cloudinary.uploader.destroy(
                public_id,
                invalidate=True,
                resource_type="image",
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret,
                timeout=self.timeout,
            )
        except cloudinary.exceptions.Error as e:
            raise ImageHostingError(str(e)) from e
        return (response or {}).get("result")
