from __future__ import annotations

import logging
from typing import Any, Dict, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...engine.errors import ChessError


logger = logging.getLogger(__name__)

_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    422: "unprocessable_entity",
}


def error_envelope(
    *,
    code: str,
    message: str,
    err_type: str,
    request_id: str,
    field_errors: list[dict[str, str]] | None = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
            "type": err_type,
            "request_id": request_id,
        }
    }
    if field_errors:
        payload["error"]["field_errors"] = field_errors
    return payload


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "")


def _render(
    request: Request,
    status_code: int,
    message: str,
    field_errors: list[dict[str, str]] | None = None,
) -> JSONResponse:
    payload = error_envelope(
        code=status_to_code(status_code),
        message=message,
        err_type="client_error" if 400 <= status_code < 500 else "server_error",
        request_id=_request_id(request),
        field_errors=field_errors,
    )
    return JSONResponse(status_code=status_code, content=payload)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return _render(request, exc.status_code, detail)
    return await exception_handler(request, exc)


async def chess_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Engine input errors (bad FEN, bad move text) are the caller's fault
    logger.warning(
        "rejected engine input",
        extra={"request_id": _request_id(request), "error": type(exc).__name__},
    )
    return _render(request, 400, str(exc))


async def request_validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    errors = []
    rve = cast(RequestValidationError, exc)
    for e in rve.errors():
        loc = ".".join(str(p) for p in e.get("loc", []) if p is not None)
        errors.append(
            {
                "field": loc,
                "code": e.get("type", "value_error"),
                "message": e.get("msg", "invalid value"),
            }
        )
    return _render(request, 422, "Validation error", field_errors=errors or None)


async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, StarletteHTTPException):
        return await http_exception_handler(request, exc)
    if isinstance(exc, ChessError):
        return await chess_error_handler(request, exc)
    logger.exception("Unhandled exception", extra={"request_id": _request_id(request)})
    return _render(request, 500, "Internal Server Error")


def status_to_code(status_code: int) -> str:
    if status_code in _CODES:
        return _CODES[status_code]
    if 500 <= status_code < 600:
        return "internal_error"
    return "error"
