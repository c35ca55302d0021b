"""JSON envelope used by every endpoint."""
from typing import Any, List, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(payload: Optional[dict] = None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """{"success": true, ...payload}"""
    body = {"success": True}
    body.update(payload or {})
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def created(payload: Optional[dict] = None) -> JSONResponse:
    return success(payload, status_code=status.HTTP_201_CREATED)


def error(status_code: int, category: str, message: str, details: Optional[List[Any]] = None) -> JSONResponse:
    """{"success": false, "error": category, "message": message[, "details": [...]]}"""
    body = {"success": False, "error": category, "message": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
