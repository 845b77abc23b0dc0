# movie_board/routes/posts.py
import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from movie_board.edit_form import LISTING_ROUTE, RedirectNavigator
from movie_board.errors import PostFetchError, PostNotFoundError
from movie_board.models import EditResult, PostOut
from movie_board.perf import timed_handler
from movie_board.routes.forms import form_from_submission
from movie_board.store import fetch_post, list_posts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/posts", tags=["posts"])


@router.get("")
async def get_posts() -> list[PostOut]:
    """All posts, newest first."""
    return [PostOut.model_validate(p) for p in await list_posts()]


@router.get("/{post_id}")
async def get_post(post_id: str) -> PostOut:
    try:
        post = await fetch_post(post_id)
    except PostNotFoundError as e:
        raise HTTPException(404, e.message)
    except PostFetchError as e:
        raise HTTPException(502, e.message)
    return PostOut.model_validate(post)


@router.post("/{post_id}/edit")
@timed_handler
async def edit_post(
    post_id: str,
    board_id: str = Form(""),
    movie_name: str = Form(""),
    content: str = Form(""),
    file: UploadFile | None = File(None),
) -> EditResult:
    """
    Same contract as the HTML form: optional media upload, then an update that
    overwrites image_url/video_url. Clients follow `redirect` on success.
    """
    navigator = RedirectNavigator()
    form = await form_from_submission(
        post_id, navigator, board_id, movie_name, content, file
    )

    if not await form.submit():
        raise HTTPException(400, form.error)

    return EditResult(redirect=navigator.target or LISTING_ROUTE)
