"""
User use cases: registration, login, profile lookup
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth import (
    hash_password, verify_password, get_user_by_email, create_access_token, UnauthenticatedError,
)
from app.infrastructure.db.models import User

logger = logging.getLogger(__name__)


class EmailAlreadyExistsError(Exception):
    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}")
        self.email = email


class InvalidCredentialsError(Exception):
    # Same message for unknown email and wrong password
    def __init__(self):
        super().__init__("Invalid email or password")


class RegisterUserUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        email = email.strip().lower()
        if get_user_by_email(self.db, email) is not None:
            raise EmailAlreadyExistsError(email)

        user = User(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
        )
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError:
            # Concurrent registration won the unique constraint on email
            self.db.rollback()
            raise EmailAlreadyExistsError(email)
        self.db.commit()
        logger.info("Registered user id=%s", user.id)
        return user


class LoginUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, email: str, password: str) -> str:
        """Returns a signed access token."""
        email = email.strip().lower()
        user = get_user_by_email(self.db, email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", email)
            raise InvalidCredentialsError()

        return create_access_token(user.id, user.email)


def get_user(db: Session, user_id: int) -> User:
    """
    Load the authenticated user.

    Raises:
        UnauthenticatedError: token refers to a user that no longer exists
    """
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UnauthenticatedError("User not found")
    return user
