"""
Search index gateway for Around
Stores posts in an Elasticsearch-compatible index and answers geo-distance queries
"""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from around.config import Settings
from around.core.errors import SearchIndexError
from around.schemas.post import Post
from around.services.metrics import record_skipped_hit

logger = logging.getLogger(__name__)

# location must be a geo_point for geo_distance queries to work
POST_MAPPING = {
    "mappings": {
        "properties": {
            "location": {"type": "geo_point"}
        }
    }
}


def build_client(settings: Settings) -> httpx.AsyncClient:
    """Create the shared HTTP client for the index service"""
    auth = None
    if settings.ES_USERNAME:
        auth = httpx.BasicAuth(settings.ES_USERNAME, settings.ES_PASSWORD)
    return httpx.AsyncClient(base_url=settings.ES_URL, auth=auth)


class SearchIndex:
    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.index = settings.ES_INDEX
        self.client = client or build_client(settings)

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise SearchIndexError(f"{method} {url} failed: {e}") from e

    async def ensure_schema(self) -> bool:
        """
        Create the index with a geo_point mapping unless it already exists.

        Returns:
            True if the index was created, False if it was already there.

        Raises:
            SearchIndexError: the existence check or the creation failed.
        """
        resp = await self._request("HEAD", f"/{self.index}")
        if resp.status_code == 200:
            logger.info("Index %s already exists", self.index)
            return False
        if resp.status_code != 404:
            raise SearchIndexError(f"Index check for {self.index} returned {resp.status_code}")

        resp = await self._request("PUT", f"/{self.index}", json=POST_MAPPING)
        if resp.is_error:
            raise SearchIndexError(
                f"Failed to create index {self.index}: {resp.status_code} {resp.text}"
            )
        logger.info("Created index %s", self.index)
        return True

    async def save(self, post: Post, post_id: str) -> None:
        """Index a post under ``post_id``; returns once the document is searchable."""
        resp = await self._request(
            "PUT",
            f"/{self.index}/_doc/{post_id}",
            params={"refresh": "wait_for"},
            json=post.to_document(),
        )
        if resp.is_error:
            raise SearchIndexError(f"Failed to index post {post_id}: {resp.status_code} {resp.text}")
        logger.info("Post is saved to index: %s", post.message)

    async def search(self, lat: float, lon: float, radius: str) -> List[Post]:
        """
        Find posts whose location lies within ``radius`` of (lat, lon).

        Args:
            lat: Center latitude.
            lon: Center longitude.
            radius: Distance with unit, e.g. "200km".

        Returns:
            Decoded posts. Missing fields decode to empty values; hits with
            mistyped fields are skipped and counted.
        """
        query = {
            "query": {
                "geo_distance": {
                    "distance": radius,
                    "location": {"lat": lat, "lon": lon},
                }
            }
        }
        resp = await self._request("POST", f"/{self.index}/_search", json=query)
        if resp.is_error:
            raise SearchIndexError(f"Search on {self.index} failed: {resp.status_code} {resp.text}")

        try:
            body = resp.json()
        except ValueError as e:
            raise SearchIndexError(f"Search on {self.index} returned invalid JSON") from e

        logger.info("Query took %s milliseconds", body.get("took"))

        posts = []
        for hit in (body.get("hits") or {}).get("hits") or []:
            try:
                posts.append(Post.model_validate(hit.get("_source") or {}))
            except ValidationError as e:
                record_skipped_hit()
                logger.warning("Skipping undecodable hit %s: %s", hit.get("_id"), e)
        return posts

    async def close(self):
        await self.client.aclose()
