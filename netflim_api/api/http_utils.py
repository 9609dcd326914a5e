import logging
from http import HTTPStatus
from typing import Any, Optional, TypeVar

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from netflim_api.core.config import settings
from netflim_api.core.errors import AppError, NotFoundError
from netflim_api.models.common import Envelope

logger = logging.getLogger(__name__)

T = TypeVar("T")

GENERIC_MESSAGE = "An internal error occurred"


def ok(data: T, message: Optional[str] = None) -> Envelope[T]:
    return Envelope(data=data, message=message)


def not_found_if_none(value: Optional[T], detail: str = "not_found") -> T:
    """If the result is None raise a 404."""
    if value is None:
        raise NotFoundError(detail)
    return value


def error_response(
        status: int,
        error: str,
        message: str,
        details: Optional[list[dict[str, Any]]] = None) -> JSONResponse:
    body: dict[str, Any] = {
        "success": False,
        "error": error,
        "message": message,
    }
    if details:
        body["details"] = details
    return JSONResponse(status_code=status, content=body)


def _field(loc: tuple) -> str:
    # ("body", "movieData", "title") -> "movieData.title"
    parts = [str(p) for p in loc]
    if parts and parts[0] in {"body", "query", "path", "header"}:
        parts = parts[1:]
    return ".".join(parts) or "body"


def _internal_message(exc: Exception) -> str:
    return GENERIC_MESSAGE if settings.is_production else str(exc)


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error("app_error", exc_info=exc,
                     extra={"path": request.url.path})
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


async def validation_error_handler(request: Request,
                                   exc: RequestValidationError):
    details = [
        {"field": _field(tuple(err.get("loc", ()))), "message": err["msg"]}
        for err in exc.errors()
    ]
    return error_response(HTTPStatus.BAD_REQUEST, "validation_error",
                          "Request validation failed", details)


async def http_error_handler(request: Request,
                             exc: StarletteHTTPException):
    if exc.status_code == HTTPStatus.NOT_FOUND and exc.detail == "Not Found":
        return error_response(HTTPStatus.NOT_FOUND, "not_found",
                              f"Route not found - {request.url.path}")
    try:
        error = HTTPStatus(exc.status_code).phrase.lower().replace(" ", "_")
    except ValueError:
        error = "http_error"
    return error_response(exc.status_code, error, str(exc.detail))


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("integrity_error", extra={"path": request.url.path,
                                             "err": str(exc.orig)})
    return error_response(HTTPStatus.CONFLICT, "conflict",
                          "This resource conflicts with existing data")


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("database_error", exc_info=exc,
                 extra={"path": request.url.path})
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "database_error",
                          _internal_message(exc))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("unhandled_error", exc_info=exc,
                 extra={"path": request.url.path})
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "internal_error",
                          _internal_message(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Single place where every failure becomes {error, message, details}."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError,
                              validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
