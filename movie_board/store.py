import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Index, String, Text, desc, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from movie_board.errors import PostFetchError, PostNotFoundError, PostUpdateError
from movie_board.settings_loader import load_settings_from_env

logger = logging.getLogger(__name__)

DB_URL = load_settings_from_env().db_url
# Database setup
engine = create_async_engine(
    DB_URL,
    echo=False,
)
async_session = async_sessionmaker(engine, expire_on_commit=False)

# Columns an edit may write. Anything else on a post is owned by the store.
MUTABLE_FIELDS = ("board_id", "movie_name", "content", "image_url", "video_url")


def utcnow() -> datetime:
    """Naive UTC, matching what SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class Post(Base):
    __tablename__ = "posts"

    __table_args__ = (
        # Listing page: "Show me posts sorted by date"
        Index("ix_posts_created_at", "created_at"),
        Index("ix_posts_board_created", "board_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    board_id: Mapped[str] = mapped_column(String(100))
    movie_name: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text, default="")

    # Public URLs into the media bucket. At most one is set per edit.
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    video_url: Mapped[str | None] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


async def init_db() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Post Helpers ---
async def fetch_post(post_id: str) -> Post:
    """Select-by-id on posts. Exactly one row or an error."""
    try:
        async with async_session() as session:
            result = await session.execute(select(Post).where(Post.id == post_id))
            post = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Fetching post {post_id} failed: {e}")
        raise PostFetchError(str(e)) from e

    if post is None:
        raise PostNotFoundError("Post not found")
    return post


async def update_post(post_id: str, fields: dict[str, Any]) -> int:
    """
    Update-by-id on posts, overwriting every mutable field given.
    Returns the number of matched rows; matching nothing is not an error.
    """
    unknown = set(fields) - set(MUTABLE_FIELDS)
    if unknown:
        raise ValueError(f"Not editable: {', '.join(sorted(unknown))}")

    stmt = (
        update(Post)
        .where(Post.id == post_id)
        .values(**fields, updated_at=utcnow())
    )
    try:
        async with async_session() as session:
            result = await session.execute(stmt)
            await session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Updating post {post_id} failed: {e}")
        raise PostUpdateError(str(e)) from e

    if result.rowcount == 0:
        logger.warning(f"Update matched no post with id {post_id}")
    return result.rowcount


async def list_posts() -> list[Post]:
    async with async_session() as session:
        result = await session.execute(select(Post).order_by(desc(Post.created_at)))
        return list(result.scalars().all())
