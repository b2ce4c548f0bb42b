"""
Error mapping for the HTTP surface.

Every DocVault error becomes a JSON response; none escapes as a 500.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..exceptions import (
    AuthenticationError,
    ConfigurationError,
    DocVaultError,
    NotFoundError,
    PermissionDeniedError,
    PolicyServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = (
    (ValidationError, 422),
    (AuthenticationError, 401),
    (PermissionDeniedError, 403),
    (NotFoundError, 404),
    (PolicyServiceError, 503),
    (ConfigurationError, 500),
)


def status_for(error: DocVaultError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return 500


async def docvault_error_handler(request: Request, exc: DocVaultError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    body = {"detail": exc.message, "error": type(exc).__name__}
    field = getattr(exc, "field", None)
    if field:
        body["field"] = field
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DocVaultError, docvault_error_handler)
