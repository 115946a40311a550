# CorsHeadersMiddleware, ErrorEnvelopeMiddleware
import logging
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)

ALLOW_ORIGIN = "*"
ALLOW_HEADERS = "Content-Type,Authorization"


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """Sets the permissive CORS headers on every response, errors included."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        response: Response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = ALLOW_ORIGIN
        response.headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
        return response


class ErrorEnvelopeMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        start = time.time()
        request_id = request.headers.get("x-request-id", str(uuid.uuid4())[:8])
        request.state.rid = request_id
        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s [%s]", request.method, request.url.path, request_id)
            response = PlainTextResponse("Internal Server Error", status_code=500)
        response.headers.setdefault("x-request-id", request_id)
        response.headers["server-timing"] = f"total;dur={(time.time() - start) * 1000:.2f}"
        return response
