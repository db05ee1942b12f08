"""
FastAPI dependencies (DB session, authentication, common query params)
"""
from fastapi import Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.orm import Session

from app.auth import UnauthenticatedError, user_id_from_authorization
from app.application.users import get_user
from app.infrastructure.db.session import get_db as _get_db
from app.infrastructure.db.models import User
from app.utils.validation import validate_month, validate_year


# Re-export get_db для удобства
get_db = _get_db


def query_error(name: str, message: str) -> RequestValidationError:
    """Build a validation error for a query parameter (rendered as 400 by app.api.errors)."""
    return RequestValidationError([{"loc": ("query", name), "msg": message, "type": "value_error"}])


def get_optional_user_id(request: Request) -> int | None:
    """
    User id from the bearer token, or None.

    Broken tokens are not an error at this stage, the request just stays anonymous.
    """
    return user_id_from_authorization(request.headers.get("Authorization"))


def get_current_user_id(user_id: int | None = Depends(get_optional_user_id)) -> int:
    """
    Raises:
        UnauthenticatedError(401): no valid bearer token
    """
    if user_id is None:
        raise UnauthenticatedError()
    return user_id


def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    """
    Usage:
        @router.get("/me")
        def me(user: User = Depends(get_current_user)):
            ...
    """
    return get_user(db, user_id)


def get_month_period(
    month: int = Query(...),
    year: int = Query(...),
) -> tuple[int, int]:
    """?month=&year= validated against the configured bounds."""
    for name, value, validator in (("month", month, validate_month), ("year", year, validate_year)):
        try:
            validator(value)
        except ValueError as exc:
            raise query_error(name, str(exc))
    return month, year
