"""API error taxonomy and the JSON error envelope.

Every failure leaves the API as ``{"error": {"code": ..., "message": ...}}``.
Messages are user-facing and generic; causes are only ever logged.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .logging import logger

AUTH_REQUIRED = "AUTH_REQUIRED"
AUTHZ_FORBIDDEN = "AUTHZ_FORBIDDEN"
AUTHZ_NOT_ORGANIZER = "AUTHZ_NOT_ORGANIZER"
NOT_FOUND = "NOT_FOUND"
VALIDATION_INVALID_FORMAT = "VALIDATION_INVALID_FORMAT"
VALIDATION_INVALID_SCORE = "VALIDATION_INVALID_SCORE"
VALIDATION_CANNOT_BAN_SELF = "VALIDATION_CANNOT_BAN_SELF"
BUSINESS_DUPLICATE_PARTICIPATION = "BUSINESS_DUPLICATE_PARTICIPATION"
SYSTEM_DATABASE_ERROR = "SYSTEM_DATABASE_ERROR"
EXTERNAL_STORE_ERROR = "EXTERNAL_STORE_ERROR"
SYSTEM_INTERNAL_ERROR = "SYSTEM_INTERNAL_ERROR"

# Codes for plain HTTP errors raised by the framework itself (unknown route,
# wrong method).
_STATUS_CODES = {
    401: AUTH_REQUIRED,
    403: AUTHZ_FORBIDDEN,
    404: NOT_FOUND,
}


class ApiError(StarletteHTTPException):
    """HTTP error carrying a machine-readable code."""

    status = 500
    default_code = SYSTEM_INTERNAL_ERROR
    default_message = "システムエラーが発生しました"

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None):
        self.code = code or self.default_code
        super().__init__(status_code=self.status, detail=message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.detail)


class AuthRequired(ApiError):
    status = 401
    default_code = AUTH_REQUIRED
    default_message = "認証が必要です"


class Forbidden(ApiError):
    status = 403
    default_code = AUTHZ_FORBIDDEN
    default_message = "この操作を実行する権限がありません"


class NotOrganizer(Forbidden):
    default_code = AUTHZ_NOT_ORGANIZER
    default_message = "開催者のみがこの操作を実行できます"


class NotFound(ApiError):
    status = 404
    default_code = NOT_FOUND
    default_message = "リソースが見つかりません"


class ValidationFailed(ApiError):
    status = 400
    default_code = VALIDATION_INVALID_FORMAT
    default_message = "入力形式が正しくありません"


class Conflict(ApiError):
    status = 400
    default_code = BUSINESS_DUPLICATE_PARTICIPATION
    default_message = "既に登録されています"


class StorageError(ApiError):
    default_code = SYSTEM_DATABASE_ERROR
    default_message = "データベースエラーが発生しました"


class InternalError(ApiError):
    pass


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = getattr(exc, "code", None) or _STATUS_CODES.get(exc.status_code, SYSTEM_INTERNAL_ERROR)
    return JSONResponse(
        error_body(code, str(exc.detail)),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = ValidationFailed.default_message
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        logger.info("Rejected request to %s: %s (%s)", request.url.path, first.get("msg"), location)
    return JSONResponse(error_body(VALIDATION_INVALID_FORMAT, message), status_code=400)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unexpected error in %s %s", request.method, request.url.path, exc_info=exc
    )
    error = InternalError()
    return JSONResponse(error_body(error.code, error.message), status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure with the JSON error envelope."""

    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


__all__ = [
    "AUTHZ_FORBIDDEN",
    "AUTHZ_NOT_ORGANIZER",
    "AUTH_REQUIRED",
    "ApiError",
    "AuthRequired",
    "BUSINESS_DUPLICATE_PARTICIPATION",
    "Conflict",
    "EXTERNAL_STORE_ERROR",
    "Forbidden",
    "InternalError",
    "NOT_FOUND",
    "NotFound",
    "NotOrganizer",
    "SYSTEM_DATABASE_ERROR",
    "SYSTEM_INTERNAL_ERROR",
    "StorageError",
    "VALIDATION_CANNOT_BAN_SELF",
    "VALIDATION_INVALID_FORMAT",
    "VALIDATION_INVALID_SCORE",
    "ValidationFailed",
    "error_body",
    "register_exception_handlers",
]
