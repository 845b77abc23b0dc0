import asyncio
import logging
import time
from pathlib import Path, PurePosixPath
from typing import Any, Awaitable, Callable
from urllib.parse import quote

from movie_board.errors import MediaUploadError
from movie_board.settings_loader import Settings, load_settings_from_env

logger = logging.getLogger(__name__)

# Top-level folder per media kind inside the bucket
KIND_FOLDERS = {
    "image": "images",
    "video": "videos",
}


def classify_media(content_type: str | None) -> str | None:
    """'image' / 'video' from the MIME type prefix, None for anything else."""
    if not content_type:
        return None
    ctype = content_type.strip().lower()
    if ctype.startswith("image/"):
        return "image"
    if ctype.startswith("video/"):
        return "video"
    return None


def build_media_path(kind: str, filename: str, now_ms: int) -> str:
    """
    Storage key for an upload: images/<epoch-ms>_<name> or videos/<epoch-ms>_<name>.
    The timestamp prefix keeps repeated uploads of the same file apart.
    """
    folder = KIND_FOLDERS[kind]
    # Browsers may send a full client path; keep only the last component
    name = PurePosixPath(filename.replace("\\", "/")).name or "upload"
    return f"{folder}/{now_ms}_{name}"


class MediaBucket:
    """Filesystem-backed object bucket with public URLs"""

    def __init__(self, name: str, root: str | Path, public_base_url: str):
        self.name: str = name
        self.root: Path = Path(root) / name
        self.public_base_url: str = public_base_url.rstrip("/")

    async def _timed_call(
        self, operation: str, func: Callable[..., Awaitable[Any]], *args
    ) -> Any:
        """Run a bucket call with timing"""
        start: float = time.perf_counter()
        logger.info(f"Storage call: {operation} [{self.name}]")
        try:
            result = await func(*args)
        except Exception as e:
            elapsed: float = time.perf_counter() - start
            logger.error(
                f"Storage failed: {operation} after {elapsed:.3f}s - {str(e)}"
            )
            raise
        elapsed = time.perf_counter() - start
        logger.info(f"Storage completed: {operation} in {elapsed:.3f}s")
        return result

    def object_path(self, path: str) -> Path | None:
        """Filesystem location of a key, None if it would leave the bucket."""
        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root.resolve()):
            return None
        return target

    def _write(self, target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        # Exclusive create: an existing key is never overwritten
        with open(target, "xb") as fh:
            fh.write(data)

    async def _upload(self, path: str, data: bytes, content_type: str | None) -> str:
        target = self.object_path(path)
        if target is None:
            raise MediaUploadError(f"Invalid key: {path}")
        try:
            await asyncio.to_thread(self._write, target, data)
        except FileExistsError as e:
            raise MediaUploadError("The resource already exists") from e
        except OSError as e:
            raise MediaUploadError(f"Upload failed: {e.strerror or e}") from e
        logger.info(f"Stored {len(data)} bytes ({content_type}) at {self.name}/{path}")
        return path

    async def upload(
        self, path: str, data: bytes, content_type: str | None = None
    ) -> str:
        """Store an object under `path`. Returns the stored key."""
        return await self._timed_call(
            f"upload {path}", self._upload, path, data, content_type
        )

    def get_public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{quote(self.name)}/{quote(path)}"


def bucket_from_settings(settings: Settings | None = None) -> MediaBucket:
    """Factory for the configured media bucket"""
    settings = settings or load_settings_from_env()
    return MediaBucket(
        name=settings.media_bucket,
        root=settings.media_root,
        public_base_url=settings.media_public_base_url,
    )


# Shared bucket for the app; tests swap this for one rooted in a temp dir.
bucket = bucket_from_settings()
