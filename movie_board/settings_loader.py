import os
from typing import NamedTuple

import dotenv

dotenv.load_dotenv()

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:8000",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:8000",
)


class Settings(NamedTuple):
    db_url: str
    media_root: str
    media_bucket: str
    media_public_base_url: str
    cors_origins: tuple[str, ...]


def load_settings_from_env() -> Settings:
    """
    Reads configuration from the environment (and .env, if present).

    Example .env:
    DB_URL=sqlite+aiosqlite:///./app.db
    MEDIA_ROOT=./media_store
    MEDIA_BUCKET=media
    MEDIA_PUBLIC_BASE_URL=http://localhost:8000/media
    CORS_ORIGINS=http://localhost:3000,http://localhost:8000
    """
    raw_origins = os.environ.get("CORS_ORIGINS", "")
    origins = tuple(o.strip() for o in raw_origins.split(",") if o.strip())

    return Settings(
        db_url=os.environ.get("DB_URL", "sqlite+aiosqlite:///./app.db"),
        media_root=os.environ.get("MEDIA_ROOT", "./media_store"),
        media_bucket=os.environ.get("MEDIA_BUCKET", "media"),
        media_public_base_url=os.environ.get(
            "MEDIA_PUBLIC_BASE_URL", "http://localhost:8000/media"
        ).rstrip("/"),
        cors_origins=origins or DEFAULT_CORS_ORIGINS,
    )
