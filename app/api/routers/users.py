"""
Current user profile
"""
from fastapi import APIRouter, Depends

from app.api.deps import get_current_user
from app.api.schemas import ApiModel
from app.infrastructure.db.models import User


router = APIRouter(prefix="/api/users", tags=["users"])


class UserResponse(ApiModel):
    id: int
    email: str
    first_name: str | None
    last_name: str | None


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
    )
