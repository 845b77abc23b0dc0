# movie_board/errors.py


class PostEditError(Exception):
    """Base for failures surfaced to the edit form as a plain message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message: str = message


class PostFetchError(PostEditError):
    """Reading the post failed (transport, auth, driver)."""


class PostNotFoundError(PostFetchError):
    pass


class MediaUploadError(PostEditError):
    """The media bucket rejected the write."""


class PostUpdateError(PostEditError):
    pass


class MissingFieldError(PostEditError):
    """A required text field was left blank."""
