"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while processing the request, please try again later"


class AirPasteError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class KeyExhaustionError(AirPasteError):
    def __init__(self, min_size: int, max_size: int):
        super().__init__(
            f"could not generate a unique key (tried sizes {min_size}-{max_size})",
            status_code=500,
        )


class RandomSourceUnavailableError(AirPasteError):
    """The OS entropy source failed. Callers must not retry."""

    def __init__(self, reason: str):
        super().__init__(f"secure random source is unavailable: {reason}", status_code=500)


class InvalidTTLError(AirPasteError):
    def __init__(self, raw: str):
        super().__init__(f"Invalid ttl: {raw!r}. Expected an integer number of seconds.", status_code=400)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(AirPasteError)
    async def handle_airpaste_error(request: Request, exc: AirPasteError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc.__cause__)
            return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=exc.status_code)
        return PlainTextResponse(str(exc), status_code=exc.status_code)

    @app.exception_handler(ValueError)
    async def handle_value_error(_request: Request, exc: ValueError):
        return PlainTextResponse(str(exc), status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)
