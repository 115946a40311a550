from fastapi import APIRouter
import logging


def build_router() -> APIRouter:
    router = APIRouter()
    log = logging.getLogger("routers")

    from .posts import router as posts_router
    router.include_router(posts_router)
    log.info("Loaded router: posts")

    from .search import router as search_router
    router.include_router(search_router)
    log.info("Loaded router: search")

    from .health import router as health_router
    router.include_router(health_router)
    log.info("Loaded router: health")

    return router
