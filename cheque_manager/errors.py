"""
API error envelope

Every failed request answers with {"data": null, "error": {"message", "code"}}.
Services raise AppError; the handlers below translate it and the framework /
database exceptions into that envelope.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import APP_ENV

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Raised by services for any failure the client should see"""

    def __init__(self, status_code: int, message: str, code: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


class NotFoundError(AppError):
    def __init__(self, message: str, code: str = "NOT_FOUND"):
        super().__init__(404, message, code)


class ValidationError(AppError):
    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(400, message, code)


def error_body(message: str, code: str, **extra) -> dict:
    error = {"message": message, "code": code}
    error.update(extra)
    return {"data": None, "error": error}


def error_response(status_code: int, message: str, code: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(message, code, **extra))


def _describe_validation_errors(errors: list) -> str:
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        parts.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts) or "Invalid request"


def _integrity_error_code(exc: IntegrityError) -> tuple[str, str]:
    text = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    if "unique" in text or "duplicate" in text:
        return "Duplicate entry. This record already exists.", "DUPLICATE_ENTRY"
    if "foreign key" in text:
        return "Foreign key constraint violation.", "FOREIGN_KEY_ERROR"
    if "not null" in text or "null value" in text:
        return "Required field cannot be empty.", "REQUIRED_FIELD_MISSING"
    return "Constraint violation.", "CONSTRAINT_ERROR"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} - {exc.code}: {exc.message}")
        return error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
        return error_response(400, _describe_validation_errors(exc.errors()), "VALIDATION_ERROR")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(
                404,
                "Endpoint not found" if exc.detail == "Not Found" else str(exc.detail),
                "NOT_FOUND",
                path=request.url.path,
                method=request.method,
            )
        if exc.status_code == 405:
            return error_response(405, "Method not allowed", "METHOD_NOT_ALLOWED")
        return error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        message, code = _integrity_error_code(exc)
        logger.warning(f"{request.method} {request.url.path} - {code}: {exc.orig}")
        return error_response(400, message, code)

    @app.exception_handler(OperationalError)
    async def operational_error_handler(request: Request, exc: OperationalError):
        logger.error(f"{request.method} {request.url.path} - Database error: {exc}")
        if "no such table" in str(exc):
            return error_response(
                500, "Database not initialized properly.", "DATABASE_NOT_INITIALIZED"
            )
        return error_response(500, _internal_message(exc), "INTERNAL_ERROR")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} - Unhandled error: {exc}")
        return error_response(500, _internal_message(exc), "INTERNAL_ERROR")


def _internal_message(exc: Optional[Exception]) -> str:
    if APP_ENV == "production" or exc is None:
        return "Internal server error"
    return str(exc) or "Unknown error occurred"
