import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from core import settings
from core.log import configure_logging
from images import router as images_router
from items import dependencies as item_dependencies
from items import router as items_router

logger = logging.getLogger("api")


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    # Build the catalogue service once per process.
    item_dependencies.init_service()
    logger.info(
        "catalog_started image_dir=%s items_file=%s",
        settings.image_dir(),
        settings.items_file(),
    )
    try:
        yield
    finally:
        item_dependencies.close_service()


app = FastAPI(lifespan=lifespan)

# Allow the frontend (FRONT_URL) to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.front_url()],
    allow_methods=["GET", "HEAD", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "request method=%s path=%s status=%s duration_ms=%.1f",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


app.include_router(items_router.router, tags=["items"])
app.include_router(images_router.router, tags=["images"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "Hello, world!"}


def run() -> None:
    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=settings.port())


if __name__ == "__main__":
    run()
