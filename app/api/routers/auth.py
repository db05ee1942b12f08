"""
Authentication routes (register, login)
"""
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.api.schemas import ApiModel
from app.application.users import RegisterUserUseCase, LoginUseCase
from app.utils.validation import validate_password


router = APIRouter(prefix="/api/auth", tags=["auth"])


# === Request/Response models ===

class CredentialsRequest(ApiModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class RegisterRequest(CredentialsRequest):
    first_name: str | None = None
    last_name: str | None = None

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password(v)


class LoginRequest(CredentialsRequest):
    @field_validator("password")
    @classmethod
    def check_password_present(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class AuthResponse(ApiModel):
    id: int
    email: str
    first_name: str | None
    last_name: str | None
    message: str


class TokenResponse(BaseModel):
    token: str


# === Endpoints ===

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, db: Session = Depends(get_db)):
    """Регистрация нового пользователя"""
    user = RegisterUserUseCase(db).execute(
        email=req.email,
        password=req.password,
        first_name=req.first_name,
        last_name=req.last_name,
    )
    return AuthResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        message="Registered Successfully",
    )


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    """Вход: возвращает bearer-токен"""
    token = LoginUseCase(db).execute(email=req.email, password=req.password)
    return TokenResponse(token=token)
