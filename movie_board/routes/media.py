# movie_board/routes/media.py
from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from movie_board import media_storage

router = APIRouter(prefix="/media", tags=["media"])


@router.get("/{bucket_name}/{key:path}")
async def get_media_object(bucket_name: str, key: str):
    """Public URLs handed out by the media bucket resolve here."""
    bucket = media_storage.bucket
    target = bucket.object_path(key) if bucket_name == bucket.name else None
    if target is None or not target.is_file():
        raise HTTPException(404, "Object not found")
    return FileResponse(target)
