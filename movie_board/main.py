import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from movie_board.perf import performance_middleware
from movie_board.routes import media, pages, posts
from movie_board.settings_loader import load_settings_from_env
from movie_board.store import init_db

logger = logging.getLogger(__name__)
logging.basicConfig()
logging.getLogger("movie_board").setLevel(logging.INFO)

settings = load_settings_from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: tables and the media directory
    await init_db()
    Path(settings.media_root).mkdir(parents=True, exist_ok=True)
    logger.info(f"Serving media from {settings.media_root}")
    yield


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(performance_middleware)

app.include_router(pages.router)
app.include_router(posts.router)
app.include_router(media.router)


@app.get("/")
async def root():
    return {"message": "Movie board is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
