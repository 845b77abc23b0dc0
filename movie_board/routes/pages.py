# movie_board/routes/pages.py
import logging
from pathlib import Path
from urllib.parse import urlparse

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from movie_board.edit_form import (
    LISTING_ROUTE,
    SUBMIT_LABEL_BUSY,
    PostEditForm,
    RedirectNavigator,
)
from movie_board.perf import timed_handler
from movie_board.routes.forms import form_from_submission
from movie_board.store import list_posts

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent.parent / "templates"))

router = APIRouter(tags=["pages"])


def local_path(url: str | None, request: Request) -> str | None:
    """Path+query of `url` if it points back at this site, else None."""
    if not url:
        return None
    parsed = urlparse(url)
    if parsed.netloc and parsed.netloc != request.url.netloc:
        return None
    if not parsed.path.startswith("/") or parsed.path.startswith("//"):
        return None
    return parsed.path + (f"?{parsed.query}" if parsed.query else "")


def render_edit_page(
    request: Request, form: PostEditForm, back: str | None, status_code: int = 200
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "post_edit.html",
        {"form": form, "back": back, "busy_label": SUBMIT_LABEL_BUSY},
        status_code=status_code,
    )


@router.get("/posts", response_class=HTMLResponse)
async def posts_page(request: Request):
    posts = await list_posts()
    return templates.TemplateResponse(request, "post_list.html", {"posts": posts})


@router.get("/posts/edit/{post_id}", response_class=HTMLResponse)
@timed_handler
async def edit_page(post_id: str, request: Request):
    form = PostEditForm(post_id, RedirectNavigator())
    await form.load()
    back = local_path(request.headers.get("referer"), request)
    return render_edit_page(request, form, back)


@router.post("/posts/edit/{post_id}")
@timed_handler
async def submit_edit(
    post_id: str,
    request: Request,
    board_id: str = Form(""),
    movie_name: str = Form(""),
    content: str = Form(""),
    back: str | None = Form(None),
    file: UploadFile | None = File(None),
):
    navigator = RedirectNavigator()
    form = await form_from_submission(
        post_id, navigator, board_id, movie_name, content, file
    )

    if await form.submit():
        return RedirectResponse(navigator.target or LISTING_ROUTE, status_code=303)

    return render_edit_page(request, form, local_path(back, request), status_code=400)


@router.get("/posts/edit/{post_id}/cancel")
async def cancel_edit(post_id: str, request: Request, back: str | None = None):
    """Leave the edit page without saving anything."""
    navigator = RedirectNavigator(back_url=local_path(back, request))
    PostEditForm(post_id, navigator).cancel()
    logger.info(f"Edit of post {post_id} cancelled")
    return RedirectResponse(navigator.target or LISTING_ROUTE, status_code=303)
