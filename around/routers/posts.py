# around/routers/posts.py
import logging
import uuid

from fastapi import APIRouter, Depends, Form, Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from around.config import Settings
from around.core.deps import get_blob_storage, get_search_index, get_settings
from around.core.errors import BlobStorageError, SearchIndexError, ServiceError
from around.schemas.post import Location, Post, PostCreated
from around.services.blob_storage import BlobStorage
from around.services.metrics import record_post
from around.services.search_index import SearchIndex
from around.utils.parsing import parse_or_default

router = APIRouter(tags=["posts"])
log = logging.getLogger(__name__)


@router.post("/post", response_model=PostCreated)
async def create_post(
    request: Request,
    user: str = Form(""),
    message: str = Form(""),
    lat: str = Form(""),
    lon: str = Form(""),
    settings: Settings = Depends(get_settings),
    index: SearchIndex = Depends(get_search_index),
    blobs: BlobStorage = Depends(get_blob_storage),
):
    """
    Create a geo-tagged post from a multipart form.

    Fields: user, message, lat, lon and an ``image`` file part. Malformed
    coordinates default to 0. ``image`` is read from the parsed form so a
    missing or non-file part answers 400 instead of a validation error.
    The image is uploaded first and its URL is stored with the post; a
    failed index write leaves the upload in place.
    """
    log.info("Received one post request")
    post = Post(
        user=user,
        message=message,
        location=Location(lat=parse_or_default(lat), lon=parse_or_default(lon)),
    )
    post_id = str(uuid.uuid4())

    form = await request.form()
    image = form.get("image")
    if not isinstance(image, UploadFile) or not image.filename:
        if settings.REQUIRE_IMAGE:
            log.warning("Image is not available for post %s", post_id)
            record_post("bad_request")
            raise ServiceError(400, "Image is not available")
        image = None

    if image is not None:
        try:
            post.media_url = await run_in_threadpool(
                blobs.upload, image.file, settings.BUCKET_NAME, post_id, image.content_type
            )
        except BlobStorageError as e:
            log.error("Failed to save image to storage: %s", e)
            record_post("upload_failed")
            raise ServiceError(500, "Failed to save image to storage")

    try:
        await index.save(post, post_id)
    except SearchIndexError as e:
        log.error("Failed to save post to index: %s", e)
        record_post("index_failed")
        raise ServiceError(500, "Failed to save post to index")

    record_post("succeed")
    return PostCreated(Message=post.message)
