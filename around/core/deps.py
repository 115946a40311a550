from fastapi import Request

from around.config import Settings
from around.services.blob_storage import BlobStorage
from around.services.search_index import SearchIndex


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_search_index(request: Request) -> SearchIndex:
    return request.app.state.search_index


def get_blob_storage(request: Request) -> BlobStorage:
    return request.app.state.blob_storage
