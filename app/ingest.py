import logging
import re
import time
from pathlib import Path
from typing import BinaryIO, Optional
from app.core.config import MAX_UPLOAD_BYTES, VIDEO_EXTENSIONS
from app.errors import UnsupportedMediaError, UploadTooLargeError, UploadValidationError
from app.models.video import StoredVideo

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
_VIDEO_TYPES = re.compile("|".join(VIDEO_EXTENSIONS))

def sanitize_name(name: str) -> str:
    """Reduce an uploaded basename to characters that are safe on disk."""
    cleaned = re.sub(r"[^\w.-]+", "_", name).strip("._")
    return cleaned or "video"

def is_video(filename: str, content_type: Optional[str]) -> bool:
    """The extension must be a known video format and the MIME type a video type."""
    extension = Path(filename).suffix.lower().lstrip(".")
    if not extension or not _VIDEO_TYPES.fullmatch(extension):
        return False
    return bool(content_type) and content_type.lower().startswith("video/")

class VideoIngest:
    """Validates uploaded videos and writes them under ``uploads_dir``."""

    def __init__(self, uploads_dir: Path, max_bytes: int = MAX_UPLOAD_BYTES, url_prefix: str = "/uploads"):
        self.uploads_dir = Path(uploads_dir)
        self.max_bytes = max_bytes
        self.url_prefix = url_prefix.rstrip("/")
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def _target(self, original_name: str) -> Path:
        source = Path(original_name)
        stem = sanitize_name(source.stem)
        ext = source.suffix.lower()
        stamp = int(time.time() * 1000)
        candidate = self.uploads_dir / f"{stamp}-{stem}{ext}"
        counter = 1
        while candidate.exists():
            candidate = self.uploads_dir / f"{stamp}-{stem}-{counter}{ext}"
            counter += 1
        return candidate

    def store(self, original_name: Optional[str], content_type: Optional[str], fileobj: Optional[BinaryIO]) -> StoredVideo:
        """Validate and persist an upload, returning its locator."""
        if fileobj is None or not original_name:
            raise UploadValidationError("No file uploaded")
        if not is_video(original_name, content_type):
            raise UnsupportedMediaError(
                "Only video files are allowed!",
                details=f"'{original_name}' ({content_type or 'unknown type'}) is not a supported video",
            )

        target = self._target(Path(original_name).name)
        size = 0
        try:
            with open(target, "xb") as out:
                while chunk := fileobj.read(CHUNK_SIZE):
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise UploadTooLargeError(
                            "File too large",
                            details=f"Uploads are limited to {self.max_bytes // (1024 * 1024)}MB",
                        )
                    out.write(chunk)
        except BaseException:
            target.unlink(missing_ok=True)
            raise

        if size == 0:
            target.unlink(missing_ok=True)
            raise UploadValidationError("No file uploaded", details="The uploaded file is empty")

        video = StoredVideo(
            filename=target.name,
            path=target,
            url=f"{self.url_prefix}/{target.name}",
            original_name=original_name,
            size_bytes=size,
            content_type=content_type,
        )
        logger.info(f"Stored upload {video.filename} ({video.size_label})")
        return video

    def resolve(self, filename: str) -> Path:
        """Map a served filename back to its path; raises FileNotFoundError."""
        if not filename or Path(filename).name != filename or filename.startswith("."):
            raise FileNotFoundError(filename)
        path = self.uploads_dir / filename
        if not path.is_file():
            raise FileNotFoundError(filename)
        return path
