# movie_board/perf.py
import functools
import logging
import time
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import Request

logger = logging.getLogger(__name__)


@asynccontextmanager
async def log_elapsed(label: str, log: logging.Logger = logger):
    """Logs how long the wrapped block took, or how long it ran before failing"""
    start: float = time.perf_counter()
    try:
        yield
    except Exception as e:
        log.error(f"{label} failed after {time.perf_counter() - start:.3f}s - {e}")
        raise
    log.info(f"{label} took {time.perf_counter() - start:.3f}s")


def timed_handler(func: Callable) -> Callable:
    """Route decorator; FastAPI still sees the wrapped signature"""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        async with log_elapsed(f"Handler {func.__name__}"):
            return await func(*args, **kwargs)

    return wrapper


async def performance_middleware(request: Request, call_next):
    """Logs every request with its status and wall time"""
    start_time: float = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as e:
        elapsed: float = time.perf_counter() - start_time
        logger.error(
            f"{request.method} {request.url.path} raised {e!r} after {elapsed:.3f}s"
        )
        raise

    elapsed = time.perf_counter() - start_time
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} in {elapsed:.3f}s"
    )
    response.headers["X-Process-Time"] = f"{elapsed:.3f}"
    return response
