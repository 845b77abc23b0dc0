# movie_board/routes/forms.py
from fastapi import UploadFile

from movie_board.edit_form import MediaFile, Navigator, PostEditForm


async def media_file_from_upload(file: UploadFile | None) -> MediaFile | None:
    """An empty file part means nothing was picked."""
    if file is None or not file.filename:
        return None
    data = await file.read()
    return MediaFile(
        name=file.filename,
        content_type=file.content_type or "application/octet-stream",
        data=data,
    )


async def form_from_submission(
    post_id: str,
    navigator: Navigator,
    board_id: str,
    movie_name: str,
    content: str,
    file: UploadFile | None,
) -> PostEditForm:
    """Rebuild the edit form from what the browser posted"""
    form = PostEditForm(post_id, navigator)
    form.change(board_id=board_id, movie_name=movie_name, content=content)
    form.select_file(await media_file_from_upload(file))
    return form
