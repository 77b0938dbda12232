from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, APIRouter
from starlette.middleware.cors import CORSMiddleware

from . import __version__
from .api import catalog_router
from .config import configure_logging, cors_origins
from .database import CatalogDB

# Configure logging
configure_logging()
logger = logging.getLogger(__name__)


def create_app(db_path: Optional[str] = None) -> FastAPI:
    """Build the API app around a single catalog store handle."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = CatalogDB(db_path)
        db.connect()
        app.state.catalog_db = db
        logger.info(f"Catalog opened at {db.db_path}")
        try:
            yield
        finally:
            db.close()
            logger.info("Catalog closed")

    app = FastAPI(title="Patch Catalog API", version=__version__, lifespan=lifespan)

    # ============== Health Check ==============

    api_router = APIRouter(prefix="/api")

    @api_router.get("/")
    async def root():
        return {"message": "Patch Catalog API", "version": __version__}

    @api_router.get("/health")
    async def health_check():
        return {"status": "healthy"}

    # Include the routers
    app.include_router(api_router)
    app.include_router(catalog_router)

    app.add_middleware(
        CORSMiddleware,
        allow_credentials=True,
        allow_origins=cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


app = create_app()
