"""
Centralized error → HTTP mapping.

Use cases raise typed exceptions; this module is the only place that turns
them into responses. Body shape for every error:

    {"timestamp": ..., "status": 404, "error": "Not Found", "message": "..."}
"""
import logging
import traceback
from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.auth import UnauthenticatedError
from app.application.users import EmailAlreadyExistsError, InvalidCredentialsError
from app.application.transactions import TransactionNotFoundError, TransactionValidationError
from app.application.budget import BudgetValidationError
from app.application.category_budgets import CategoryBudgetValidationError

logger = logging.getLogger(__name__)


STATUS_BY_ERROR: dict[type[Exception], int] = {
    TransactionValidationError: 400,
    BudgetValidationError: 400,
    CategoryBudgetValidationError: 400,
    InvalidCredentialsError: 401,
    UnauthenticatedError: 401,
    TransactionNotFoundError: 404,
    EmailAlreadyExistsError: 409,
}

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


def error_body(status_code: int, message: str) -> dict:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status_code,
        "error": HTTPStatus(status_code).phrase,
        "message": message,
    }


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(status_code, message), headers=headers)


def format_validation_errors(errors) -> str:
    """
    pydantic errors → "amount: Amount must be at least 0.01; month: ..."
    """
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = str(err.get("msg", "Invalid value"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def _typed_error_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
        return error_response(status_code, str(exc), headers)
    return handler


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, format_validation_errors(exc.errors()))


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Last line of defence: log the traceback, return a generic 500 body."""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return error_response(500, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class, status_code in STATUS_BY_ERROR.items():
        app.add_exception_handler(exc_class, _typed_error_handler(status_code))
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_middleware(ErrorLoggingMiddleware)
