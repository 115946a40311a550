"""
Prometheus metrics for the Around service
Counters are always registered; the HTTP middleware and the /metrics
endpoint are only active when METRICS_ENABLED is set.
"""

import time
from fastapi import FastAPI, Request
from fastapi.responses import Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST


REQUESTS_TOTAL = Counter(
    "around_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"]
)

REQUEST_DURATION = Histogram(
    "around_http_request_seconds",
    "Request duration in seconds",
    ["method", "path"]
)

POSTS_TOTAL = Counter(
    "around_posts_total",
    "Post create requests by outcome",
    ["status"]
)

SEARCHES_TOTAL = Counter(
    "around_searches_total",
    "Search requests by outcome",
    ["status"]
)

SKIPPED_HITS = Counter(
    "around_search_hits_skipped_total",
    "Search hits dropped because they could not be decoded as posts"
)


def metrics_endpoint(enabled: bool) -> Response:
    """Prometheus metrics endpoint"""
    if not enabled:
        return Response(b"metrics disabled", media_type="text/plain")
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def metrics_middleware(app: FastAPI, enabled: bool):
    """Add metrics middleware to FastAPI app"""
    if not enabled:
        return

    @app.middleware("http")
    async def _metrics(request: Request, call_next):
        start = time.time()
        response = await call_next(request)

        path = request.url.path
        REQUESTS_TOTAL.labels(
            method=request.method,
            path=path,
            status=str(response.status_code)
        ).inc()

        REQUEST_DURATION.labels(
            method=request.method,
            path=path
        ).observe(time.time() - start)

        return response


def record_post(status: str):
    POSTS_TOTAL.labels(status=status).inc()


def record_search(status: str):
    SEARCHES_TOTAL.labels(status=status).inc()


def record_skipped_hit():
    SKIPPED_HITS.inc()
