from fastapi import Request
from fastapi.responses import PlainTextResponse


class AroundError(Exception):
    """Base class for failures talking to external services"""


class SearchIndexError(AroundError):
    pass


class BlobStorageError(AroundError):
    pass


class ServiceError(Exception):
    """Aborts a request with a status code and a plain-text message"""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


async def service_error_handler(request: Request, exc: ServiceError):
    return PlainTextResponse(exc.message, status_code=exc.status_code)
