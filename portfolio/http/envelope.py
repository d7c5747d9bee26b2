"""Response envelope utilities and global exception handlers.

Every failure leaves the API as ``{success: false, error, message}`` with
the status taken from the central error map; successes are wrapped by the
routes as ``{success: true, data}``.
"""

from __future__ import annotations

import logging
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from portfolio.errors import ERROR_MAP, PortfolioError

logger = logging.getLogger(__name__)

_STATUS_TO_CODE = {
    400: "INVALID_INPUT",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    415: "UNSUPPORTED_MEDIA_TYPE",
}


def error_response(code: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        {"success": False, "error": code, "message": message},
        status_code=status_code,
    )


async def handle_portfolio_error(request: Request, exc: PortfolioError) -> JSONResponse:
    level = logging.ERROR if exc.status >= 500 else logging.INFO
    logger.log(
        level,
        "error_handler.handle",
        extra={"code": exc.code, "status": exc.status, "path": request.url.path},
    )
    return error_response(exc.code, exc.message, exc.status)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    status_code = int(getattr(exc, "status_code", 500) or 500)
    code = _STATUS_TO_CODE.get(status_code, "HTTP_ERROR" if status_code < 500 else ERROR_MAP["internal_error"]["code"])
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        {"success": False, "error": code, "message": message},
        status_code=status_code,
        headers=getattr(exc, "headers", None),
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = list(exc.errors())
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    detail = first.get("msg", "Request validation failed")
    message = f"{location}: {detail}" if location else str(detail)
    logger.info("validation_error path=%s errors_cnt=%s", request.url.path, len(errors))
    return error_response(ERROR_MAP["invalid_input"]["code"], message, int(ERROR_MAP["invalid_input"]["status"]))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return error_response(
        ERROR_MAP["internal_error"]["code"],
        "Unexpected server error",
        int(ERROR_MAP["internal_error"]["status"]),
    )


__all__ = [
    "error_response",
    "handle_portfolio_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
