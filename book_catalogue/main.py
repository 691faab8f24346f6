# book_catalogue/main.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from fastapi import FastAPI

from . import __version__
from .catalog import catalog_router
from .catalog.handlers import register_exception_handlers
from .catalog.service import CatalogueService
from .config import Settings, get_settings
from .storage import BookRepository, build_repository


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("book_catalogue").setLevel(level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the repository on startup and close it on shutdown."""
    repository: BookRepository = app.state.repository
    repository.open()
    logger.info("%s v%s started (%s storage).", app.title, __version__, type(repository).__name__)
    try:
        yield
    finally:
        repository.close()
        logger.info("%s stopped.", app.title)


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[BookRepository] = None,
) -> FastAPI:
    """Build the application around one repository and one catalogue service."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    repository = repository if repository is not None else build_repository(settings)

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Catalogue of books identified by ISBN: create, read, update, "
            "partially update, delete and search."
        ),
        version=__version__,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url=None if settings.is_production else "/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = repository
    app.state.catalogue = CatalogueService(
        repository,
        isbn_prefix=settings.isbn_prefix,
        max_isbn_attempts=settings.isbn_max_attempts,
    )

    register_exception_handlers(app)
    app.include_router(catalog_router)

    # Liveness check
    @app.get("/")
    def health_check() -> Dict[str, str]:
        return {"status": "ok", "message": f"{settings.app_name} live"}

    return app


app = create_app()
