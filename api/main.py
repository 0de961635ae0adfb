import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Load .env before anything reads settings; real environment variables win.
load_dotenv()

from core import db, settings  # noqa: E402
from core.logging_config import configure_logging  # noqa: E402
from songs import repository as songs_repository  # noqa: E402
from songs import router as songs_router  # noqa: E402

configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process; handlers receive it through db.get_pool.
    pool = await db.create_pool()
    try:
        await songs_repository.create_table(pool)
        app.state.pool = pool
        logger.info("startup_complete")
        yield
    finally:
        app.state.pool = None
        await db.close_pool(pool)


app = FastAPI(
    title="Song Library API",
    description="CRUD over a song library, enriched from an external song-info service.",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed ids and bodies are client errors (400), not FastAPI's default 422.
    logger.info("request_rejected path=%s errors=%s", request.url.path, len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request."},
    )


app.include_router(songs_router.router, tags=["songs"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run(app, host=settings.listen_host(), port=settings.listen_port())
