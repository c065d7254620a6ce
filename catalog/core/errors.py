"""
Typed failures for the catalog core and their HTTP mapping.

Services raise one of the five failure kinds below; the handlers registered in
``catalog.main`` turn them into JSON responses. Each kind maps to exactly one
status code so callers can rely on the code alone.
"""

from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.requests import Request

from catalog.core.logging import get_logger, get_request_id

logger = get_logger(__name__)


class CatalogError(Exception):
    """Base class for every expected failure of a catalog operation."""

    code = "catalog_error"
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthenticatedError(CatalogError):
    """No identity present where one is required."""

    code = "unauthenticated"
    status_code = 401


class ForbiddenError(CatalogError):
    """Identity present but role or ownership is insufficient."""

    code = "forbidden"
    status_code = 403


class NotFoundError(CatalogError):
    """Referenced entity or row is absent."""

    code = "not_found"
    status_code = 404


class ConflictError(CatalogError):
    """A uniqueness invariant would be violated."""

    code = "conflict"
    status_code = 409


class ValidationError(CatalogError):
    """Malformed or out-of-range input."""

    code = "validation_error"
    status_code = 422


def error_payload(code: str, message: str, details: object | None = None) -> dict[str, object]:
    error: dict[str, object] = {"code": code, "message": message}
    request_id = get_request_id()
    if request_id:
        error["request_id"] = request_id
    if details is not None:
        error["details"] = details
    return {"error": error, "detail": message}


async def catalog_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a CatalogError as ``{"error": {...}, "detail": ...}``."""
    assert isinstance(exc, CatalogError)
    logger.warning(
        "request_failed",
        error_code=exc.code,
        error_message=exc.message,
        status=exc.status_code,
        path=request.url.path,
    )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc.code, exc.message),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report request-body/query validation failures with the ValidationError shape."""
    assert isinstance(exc, RequestValidationError)
    logger.info("request_invalid", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=error_payload(
            ValidationError.code,
            "Request validation failed",
            details=jsonable_encoder(exc.errors()),
        ),
    )
