"""
Password hashing and JWT session tokens
"""
import logging
from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.config import get_settings
from app.infrastructure.db.models import User

logger = logging.getLogger(__name__)

# pbkdf2_sha256: salted, slow, no native deps
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class UnauthenticatedError(Exception):
    """Missing, malformed, expired or forged token."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def create_access_token(user_id: int, email: str, now: datetime | None = None) -> str:
    """
    Issue a signed token: sub=email, user_id, iat, exp.
    """
    settings = get_settings()
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    claims = {
        "sub": email,
        "user_id": user_id,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> int:
    """
    Validate signature + expiry and return the user id embedded in the token.

    Raises:
        UnauthenticatedError: invalid signature, expired, malformed or missing claims
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise UnauthenticatedError("Invalid or expired token") from exc

    user_id = payload.get("user_id")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not payload.get("sub"):
        raise UnauthenticatedError("Token payload missing required claims")
    return user_id


def user_id_from_authorization(header: str | None) -> int | None:
    """
    Parse "Authorization: Bearer <token>".

    Parse failures are swallowed: the request simply stays anonymous and the
    authorization dependency decides whether that is acceptable.
    """
    if not header or not header.startswith("Bearer "):
        return None
    token = header[len("Bearer "):].strip()
    try:
        return verify_token(token)
    except UnauthenticatedError as exc:
        logger.debug("Ignoring bearer token: %s", exc)
        return None
