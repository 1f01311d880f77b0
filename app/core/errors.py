from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _default_code(status_code: int) -> str:
    mapping = {
        400: "bad_request",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        500: "internal_server_error",
    }
    return mapping.get(status_code, "http_error")


def _default_message(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Request failed"


def _build_response(status_code: int, code: str, message: str) -> JSONResponse:
    # Only a code and a short message ever leave the service.
    return JSONResponse(status_code=status_code, content={"code": code, "message": message})


def _message_from_detail(detail: Any, status_code: int) -> str:
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, dict):
        return detail.get("message") or detail.get("detail") or _default_message(status_code)
    return _default_message(status_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = _message_from_detail(exc.detail, exc.status_code)
    response = _build_response(exc.status_code, _default_code(exc.status_code), message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def _validation_message(errors: list[dict[str, Any]]) -> str:
    if not errors:
        return "Validation failed"
    first = errors[0] or {}
    loc = first.get("loc") or []
    msg = first.get("msg") or "Validation failed"
    # Drop the request section (body/query/path) from the location
    loc_parts = [str(part) for part in loc if part not in {"body", "query", "path"}]
    if first.get("type") == "missing" and loc_parts:
        return f"{loc_parts[-1]} is required"
    if loc_parts:
        return f"{'.'.join(loc_parts)}: {msg}"
    return str(msg)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _build_response(
        status_code=400,
        code="bad_request",
        message=_validation_message(exc.errors()),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _build_response(
        status_code=500,
        code="internal_server_error",
        message="Internal server error",
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
