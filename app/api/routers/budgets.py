"""
Monthly budget API endpoints
"""
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Response, status
from pydantic import ValidationInfo, model_validator, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, get_month_period
from app.api.schemas import ApiModel
from app.application.budget import (
    BudgetView, SetBudgetUseCase, DeleteBudgetUseCase, get_budget,
)
from app.domain.budget import (
    BUDGET_TYPE_GENERAL, BUDGET_TYPE_CATEGORY_SUM, BUDGET_TYPES, is_valid_budget_type,
)
from app.infrastructure.db.models import User
from app.utils.validation import parse_money, validate_month, validate_year


router = APIRouter(prefix="/api/budgets", tags=["budgets"])


# === Request/Response models ===

class BudgetRequest(ApiModel):
    month: int
    year: int
    budget_type: str = BUDGET_TYPE_GENERAL
    amount: Decimal | None = None  # обязателен только для GENERAL, для CATEGORY_SUM игнорируется

    @field_validator("month")
    @classmethod
    def check_month(cls, v: int) -> int:
        return validate_month(v)

    @field_validator("year")
    @classmethod
    def check_year(cls, v: int) -> int:
        return validate_year(v)

    @field_validator("budget_type")
    @classmethod
    def check_budget_type(cls, v: str) -> str:
        if not is_valid_budget_type(v):
            raise ValueError(f"Budget type must be one of {', '.join(BUDGET_TYPES)}")
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v, info: ValidationInfo):
        if v is None or info.data.get("budget_type") == BUDGET_TYPE_CATEGORY_SUM:
            return None
        return parse_money(v)

    @model_validator(mode="after")
    def amount_required_for_general(self):
        if self.budget_type == BUDGET_TYPE_GENERAL and self.amount is None:
            raise ValueError("Amount is required for a GENERAL budget")
        return self


class BudgetResponse(ApiModel):
    id: int
    user_id: int
    month: int
    year: int
    budget_type: str
    amount: Decimal
    # GENERAL: same as amount; CATEGORY_SUM: sum of category budgets
    effective_amount: Decimal
    spent: Decimal
    remaining: Decimal
    created_at: datetime
    updated_at: datetime


def _to_response(view: BudgetView) -> BudgetResponse:
    b = view.budget
    return BudgetResponse(
        id=b.id,
        user_id=b.user_id,
        month=b.month,
        year=b.year,
        budget_type=b.budget_type,
        amount=b.amount,
        effective_amount=view.effective_amount,
        spent=view.spent,
        remaining=view.remaining,
        created_at=b.created_at,
        updated_at=b.updated_at,
    )


# === Endpoints ===

@router.get("", response_model=BudgetResponse, responses={204: {"description": "No budget for this month"}})
def get_month_budget(
    user: User = Depends(get_current_user),
    period: tuple[int, int] = Depends(get_month_period),
    db: Session = Depends(get_db),
):
    """Бюджет месяца или 204, если не задан"""
    month, year = period
    view = get_budget(db, user.id, month, year)
    if view is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return _to_response(view)


@router.put("", response_model=BudgetResponse)
def set_month_budget(
    req: BudgetRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Создать или обновить бюджет месяца (upsert по user/month/year)"""
    view = SetBudgetUseCase(db).execute(
        user_id=user.id,
        month=req.month,
        year=req.year,
        budget_type=req.budget_type,
        amount=req.amount,
    )
    return _to_response(view)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_month_budget(
    user: User = Depends(get_current_user),
    period: tuple[int, int] = Depends(get_month_period),
    db: Session = Depends(get_db),
):
    month, year = period
    DeleteBudgetUseCase(db).execute(user.id, month, year)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
