import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from userbase.api import responses
from userbase.core.errors import ServiceError

logger = logging.getLogger(__name__)


def _field_name(loc) -> str:
    # loc looks like ("body", "email") or ("query", "name")
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return responses.error(exc.status_code, exc.category, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": _field_name(err.get("loc", ())),
            "message": err.get("msg", "Invalid value"),
            "location": str(err["loc"][0]) if err.get("loc") else None,
        }
        for err in exc.errors()
    ]
    return responses.error(
        status.HTTP_400_BAD_REQUEST,
        "Validation Failed",
        "Request validation failed",
        details=details,
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = f"Route {request.method} {request.url.path} not found"
    else:
        message = str(exc.detail)
    return responses.error(exc.status_code, HTTPStatus(exc.status_code).phrase, message)


async def unhandled_error_handler(request: Request, exc: Exception):
    # Details stay in the log, the caller only gets a generic message
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return responses.error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
