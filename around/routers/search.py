import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response

from around.config import Settings
from around.core.deps import get_search_index, get_settings
from around.core.errors import SearchIndexError, ServiceError
from around.services.metrics import record_search
from around.services.search_index import SearchIndex
from around.utils.parsing import parse_or_default, radius_from_range

router = APIRouter(prefix="/search", tags=["search"])
log = logging.getLogger(__name__)


@router.options("")
async def search_preflight():
    """Cross-origin pre-flight: headers only, empty body"""
    return Response(status_code=200, media_type="application/json")


@router.get("")
async def search_posts(
    lat: Optional[str] = Query(None),
    lon: Optional[str] = Query(None),
    range_km: Optional[str] = Query(None, alias="range"),
    settings: Settings = Depends(get_settings),
    index: SearchIndex = Depends(get_search_index),
):
    """
    Posts within ``range`` kilometers of (lat, lon), 200km when no range is given.
    Unparsable coordinates are treated as 0.
    """
    log.info("Received one request for search")
    radius = radius_from_range(range_km, settings.DEFAULT_DISTANCE)

    try:
        posts = await index.search(parse_or_default(lat), parse_or_default(lon), radius)
    except SearchIndexError as e:
        log.error("Failed to read post from index: %s", e)
        record_search("failed")
        raise ServiceError(500, "Failed to read post from index")

    try:
        response = JSONResponse([p.to_document() for p in posts])
    except (TypeError, ValueError) as e:
        log.error("Failed to parse posts into JSON format: %s", e)
        record_search("failed")
        raise ServiceError(500, "Failed to parse posts into JSON format")

    record_search("succeed")
    return response
