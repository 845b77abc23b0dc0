# movie_board/edit_form.py
import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from movie_board import media_storage, store
from movie_board.errors import MissingFieldError, PostEditError
from movie_board.media_storage import MediaBucket, build_media_path, classify_media

logger = logging.getLogger(__name__)

LISTING_ROUTE = "/posts"

SUBMIT_LABEL = "Update post"
SUBMIT_LABEL_BUSY = "Updating post..."

TEXT_FIELDS = ("board_id", "movie_name", "content")
FIELD_LABELS = {"board_id": "Board", "movie_name": "Movie", "content": "Content"}


@dataclass(frozen=True)
class MediaFile:
    """A file picked in the form, fully read into memory."""

    name: str
    content_type: str
    data: bytes


class Navigator(Protocol):
    def push(self, route: str) -> None: ...

    def back(self) -> None: ...


class RedirectNavigator:
    """Records where the page wants to go; the route turns it into a redirect."""

    def __init__(self, back_url: str | None = None):
        self.back_url: str | None = back_url
        self.target: str | None = None

    def push(self, route: str) -> None:
        self.target = route

    def back(self) -> None:
        self.target = self.back_url or LISTING_ROUTE


def epoch_ms() -> int:
    return int(time.time() * 1000)


class PostEditForm:
    """
    Edit state for one post.

    Lifecycle: created empty, filled once by `load()`, mutated by `change()`
    and `select_file()`, persisted by `submit()`, abandoned by `cancel()`.
    """

    def __init__(
        self,
        post_id: str,
        navigator: Navigator,
        bucket: MediaBucket | None = None,
        clock: Callable[[], int] = epoch_ms,
    ):
        self.post_id: str = post_id
        self.navigator: Navigator = navigator
        self.bucket: MediaBucket = bucket or media_storage.bucket
        self.clock: Callable[[], int] = clock

        self.board_id: str = ""
        self.movie_name: str = ""
        self.content: str = ""
        self.file: MediaFile | None = None
        self.loading: bool = False
        self.error: str | None = None

        self._loaded_for: str | None = None

    # --- View helpers ---
    @property
    def submit_label(self) -> str:
        return SUBMIT_LABEL_BUSY if self.loading else SUBMIT_LABEL

    @property
    def submit_disabled(self) -> bool:
        return self.loading

    def values(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in TEXT_FIELDS}

    # --- Operations ---
    async def load(self) -> None:
        """Fetch the post once per id and copy its text fields into the form."""
        if self._loaded_for == self.post_id:
            return
        self._loaded_for = self.post_id

        try:
            post = await store.fetch_post(self.post_id)
        except PostEditError as e:
            logger.warning(f"Could not load post {self.post_id}: {e.message}")
            self.error = e.message
            return

        self.board_id = post.board_id
        self.movie_name = post.movie_name
        self.content = post.content

    def change(self, **fields: str) -> None:
        for name, value in fields.items():
            if name not in TEXT_FIELDS:
                raise TypeError(f"Unknown form field: {name}")
            setattr(self, name, value)

    def select_file(self, file: MediaFile | None) -> None:
        self.file = file

    def _check_required(self) -> None:
        for name in TEXT_FIELDS:
            if not getattr(self, name).strip():
                raise MissingFieldError(f"{FIELD_LABELS[name]} is required")

    async def _upload_media(self) -> tuple[str | None, str | None]:
        """Upload the pending file, if any. Returns (image_url, video_url)."""
        if self.file is None:
            return None, None

        kind = classify_media(self.file.content_type)
        if kind is None:
            logger.info(
                f"Skipping upload of {self.file.name}: "
                f"unsupported type {self.file.content_type!r}"
            )
            return None, None

        path = build_media_path(kind, self.file.name, self.clock())
        stored = await self.bucket.upload(path, self.file.data, self.file.content_type)
        public_url = self.bucket.get_public_url(stored)

        if kind == "image":
            return public_url, None
        return None, public_url

    async def submit(self) -> bool:
        """Upload any new media, then overwrite the post. True on success."""
        self.loading = True
        try:
            self._check_required()
            image_url, video_url = await self._upload_media()
            await store.update_post(
                self.post_id,
                {
                    "board_id": self.board_id,
                    "movie_name": self.movie_name,
                    "content": self.content,
                    "image_url": image_url,
                    "video_url": video_url,
                },
            )
            self.navigator.push(LISTING_ROUTE)
            return True
        except PostEditError as e:
            logger.error(f"Saving post {self.post_id} failed: {e.message}")
            self.error = e.message
            return False
        except Exception as e:
            logger.exception(f"Unexpected failure saving post {self.post_id}")
            self.error = str(e) or e.__class__.__name__
            return False
        finally:
            self.loading = False

    def cancel(self) -> None:
        self.navigator.back()
