"""
Storage of uploaded media files.

Files are written under ``UPLOAD_DIR`` and referenced by opaque
``/uploads/<kind>/<name>`` locators that the rest of the app never parses.
"""
import logging
import os
import uuid
from fastapi import UploadFile
from app.core.config import settings
from app.core.exceptions import InvalidInput
from app.utils.validators import validate_file_size

logger = logging.getLogger(__name__)

VIDEOS = "videos"
THUMBNAILS = "thumbnails"
PROFILES = "profiles"


class UploadStorage:
    url_prefix = "/uploads"

    def __init__(self, root: str = None):
        self.root = root or settings.UPLOAD_DIR

    def ensure_directories(self) -> None:
        """Create the upload tree once at startup; raises if it cannot be created."""
        for kind in (VIDEOS, THUMBNAILS, PROFILES):
            path = os.path.join(self.root, kind)
            os.makedirs(path, exist_ok=True)
            logger.info("Upload directory ready: %s", path)

    def path_for(self, locator: str) -> str:
        relative = locator[len(self.url_prefix):].lstrip("/")
        return os.path.join(self.root, *relative.split("/"))

    async def save(self, file: UploadFile, kind: str, max_size: int) -> str:
        content = await file.read()
        if not validate_file_size(len(content), max_size):
            raise InvalidInput(
                f"File too large. Maximum size is {max_size // (1024 * 1024)}MB."
                if content else "Uploaded file is empty"
            )
        
        file_ext = os.path.splitext(file.filename or "")[1].lower()
        filename = f"{kind}-{uuid.uuid4().hex}{file_ext}"
        with open(os.path.join(self.root, kind, filename), "wb") as buffer:
            buffer.write(content)
        
        return f"{self.url_prefix}/{kind}/{filename}"

    def remove(self, locator: str) -> None:
        path = self.path_for(locator)
        if os.path.exists(path):
            os.remove(path)


storage = UploadStorage()
