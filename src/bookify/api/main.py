"""
FastAPI application for Bookify.

Run with:
    uvicorn bookify.api.main:app --reload
"""

import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

import bookify.models  # noqa: F401  (registers every table on Base.metadata)
from bookify.api.routes import admin, auth, books, favorites, google_books, reviews
from bookify.core.config import settings
from bookify.db.session import Base, engine

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Bookify starting up (environment={settings.ENVIRONMENT}).")
    Base.metadata.create_all(bind=engine)
    Path(settings.MEDIA_ROOT, "covers").mkdir(parents=True, exist_ok=True)
    yield
    logger.info("Bookify shutting down.")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """422 with the messages grouped per field."""
    errors = defaultdict(list)
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "request"
        errors[field].append(error.get("msg", "Invalid value"))
    logger.info(f"Validation failed on {request.method} {request.url.path}: {dict(errors)}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"success": False, "errors": dict(errors)},
    )


def create_app() -> FastAPI:
    application = FastAPI(
        title="Bookify",
        description="Book catalog with reviews, ratings, favorites and recommendations",
        version="1.0.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(RequestValidationError, validation_exception_handler)

    application.include_router(auth.router)
    application.include_router(books.router)
    application.include_router(reviews.router)
    application.include_router(favorites.router)
    application.include_router(admin.router)
    application.include_router(google_books.router)

    application.mount("/storage", StaticFiles(directory=settings.MEDIA_ROOT, check_dir=False), name="storage")

    @application.get("/health", tags=["System"])
    def health():
        return {"status": "healthy", "service": "bookify"}

    return application


app = create_app()
