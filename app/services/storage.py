"""Disk storage for staff pictures, served back under ``/uploads``."""

from __future__ import annotations

import logging
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from app.domain.errors import PictureRejectedError

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"
STAFF_SUBDIR = "staff"

_ALLOWED_TYPES = re.compile(r"jpeg|jpg|png|gif")


@dataclass
class _PendingPicture:
    extension: str
    content: bytes


class PictureStorage:
    def __init__(self, root: Path, max_bytes: int, max_files: int) -> None:
        self.root = Path(root)
        self.max_bytes = max_bytes
        self.max_files = max_files

    @property
    def staff_dir(self) -> Path:
        return self.root / STAFF_SUBDIR

    def save_staff_pictures(self, uploads: list[UploadFile]) -> list[str]:
        """Validate every upload, then write them all; return their URL paths.

        Nothing is written if any upload is rejected.
        """
        if len(uploads) > self.max_files:
            raise PictureRejectedError(f"At most {self.max_files} pictures are allowed")

        pending = [self._read(upload) for upload in uploads]

        self.staff_dir.mkdir(parents=True, exist_ok=True)
        urls: list[str] = []
        for picture in pending:
            filename = (
                f"staff-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
                f"{picture.extension}"
            )
            (self.staff_dir / filename).write_bytes(picture.content)
            urls.append(f"{URL_PREFIX}/{STAFF_SUBDIR}/{filename}")
        logger.info("Stored %d staff picture(s)", len(urls))
        return urls

    def delete(self, url: str) -> bool:
        """Remove the file behind a stored picture URL, if it still exists."""
        prefix = f"{URL_PREFIX}/{STAFF_SUBDIR}/"
        if not url.startswith(prefix):
            logger.warning("Ignoring picture outside the staff upload dir: %s", url)
            return False
        path = self.staff_dir / Path(url[len(prefix):]).name
        if not path.exists():
            return False
        path.unlink()
        logger.info("Removed staff picture %s", path.name)
        return True

    def _read(self, upload: UploadFile) -> _PendingPicture:
        extension = Path(upload.filename or "").suffix.lower()
        if not (
            _ALLOWED_TYPES.search(extension)
            and _ALLOWED_TYPES.search(upload.content_type or "")
        ):
            raise PictureRejectedError("Only image files are allowed!")

        content = upload.file.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            raise PictureRejectedError("File too large", status_code=413)
        return _PendingPicture(extension=extension, content=content)
