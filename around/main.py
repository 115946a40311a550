# Top imports
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from around import __version__
from around.config import Settings
from around.core.errors import ServiceError, service_error_handler
from around.core.middleware import CorsHeadersMiddleware, ErrorEnvelopeMiddleware
from around.routers import build_router
from around.services.blob_storage import BlobStorage
from around.services.metrics import metrics_middleware
from around.services.observability import init_observability
from around.services.search_index import SearchIndex


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(
    settings: Optional[Settings] = None,
    search_index: Optional[SearchIndex] = None,
    blob_storage: Optional[BlobStorage] = None,
) -> FastAPI:
    """
    Build the Around application.

    Gateways not passed in are constructed from ``settings`` at startup.
    Startup fails if the post index cannot be checked or created.
    """
    settings = settings or Settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logging.info("Starting Around service...")
        init_observability(settings)
        owns_index = app.state.search_index is None
        if owns_index:
            app.state.search_index = SearchIndex(settings)
        if app.state.blob_storage is None:
            app.state.blob_storage = BlobStorage(settings)
        try:
            await app.state.search_index.ensure_schema()
        except Exception as e:
            logging.error(f"Index initialization failed: {e}")
            if owns_index:
                await app.state.search_index.close()
                app.state.search_index = None
            raise

        yield

        # Shutdown
        logging.info("Shutting down Around service...")
        if owns_index:
            await app.state.search_index.close()
            app.state.search_index = None

    app = FastAPI(
        title="Around API",
        description="Geo-tagged post sharing: create posts with an image and search them by distance",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.search_index = search_index
    app.state.blob_storage = blob_storage

    app.add_exception_handler(ServiceError, service_error_handler)
    app.include_router(build_router())

    # Innermost first: metrics, error envelope, then CORS headers on everything
    metrics_middleware(app, settings.METRICS_ENABLED)
    app.add_middleware(ErrorEnvelopeMiddleware)
    app.add_middleware(CorsHeadersMiddleware)
    return app


app = create_app()


def main():
    settings = app.state.settings
    uvicorn.run(
        "around.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
