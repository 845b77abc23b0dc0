# --- Pydantic Models ---
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    board_id: str
    movie_name: str
    content: str
    image_url: str | None = None
    video_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EditResult(BaseModel):
    redirect: str
