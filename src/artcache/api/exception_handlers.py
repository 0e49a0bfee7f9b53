"""Custom exception handlers for the FastAPI application.

Converts domain exceptions into HTTP responses so they never leak as bare 500s.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from artcache.domain.exceptions import ArtStoreError, DomainException, ValidationException

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain exceptions.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(ValidationException)
    async def validation_exception_handler(
        request: Request, exc: ValidationException
    ) -> JSONResponse:
        """Bad object type/id and friends → 400."""
        logger.warning(
            "Validation error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": exc.message},
        )

    # Store down/locked is a server-side condition the client can retry
    @app.exception_handler(ArtStoreError)
    async def art_store_exception_handler(
        request: Request, exc: ArtStoreError
    ) -> JSONResponse:
        logger.error(
            "Image store error at %s (%s): %s",
            request.url.path,
            exc.operation,
            exc.message,
            extra={"path": request.url.path, "operation": exc.operation},
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Image store unavailable"},
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request, exc: DomainException
    ) -> JSONResponse:
        logger.error("Unhandled domain error at %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": exc.message},
        )
