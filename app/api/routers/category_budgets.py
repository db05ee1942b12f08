"""
Category budget API endpoints
"""
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, get_month_period, query_error
from app.api.schemas import ApiModel
from app.application.category_budgets import (
    SetCategoryBudgetUseCase, DeleteCategoryBudgetUseCase, list_category_budgets,
)
from app.domain.category import category_display_name, is_valid_category
from app.infrastructure.db.models import User, CategoryBudgetModel
from app.utils.validation import parse_money, validate_month, validate_year


router = APIRouter(prefix="/api/budgets/categories", tags=["budgets"])


class CategoryBudgetRequest(ApiModel):
    month: int
    year: int
    category: str
    amount: Decimal

    @field_validator("month")
    @classmethod
    def check_month(cls, v: int) -> int:
        return validate_month(v)

    @field_validator("year")
    @classmethod
    def check_year(cls, v: int) -> int:
        return validate_year(v)

    @field_validator("category")
    @classmethod
    def check_category(cls, v: str) -> str:
        if not is_valid_category(v):
            raise ValueError(f"Unknown category: {v}")
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v):
        if v is None:
            raise ValueError("Amount is required")
        return parse_money(v)


class CategoryBudgetResponse(ApiModel):
    id: int
    user_id: int
    month: int
    year: int
    category: str
    category_name: str
    amount: Decimal
    created_at: datetime
    updated_at: datetime


def _to_response(cb: CategoryBudgetModel) -> CategoryBudgetResponse:
    return CategoryBudgetResponse(
        id=cb.id,
        user_id=cb.user_id,
        month=cb.month,
        year=cb.year,
        category=cb.category,
        category_name=category_display_name(cb.category),
        amount=cb.amount,
        created_at=cb.created_at,
        updated_at=cb.updated_at,
    )


@router.get("", response_model=list[CategoryBudgetResponse])
def get_category_budgets(
    user: User = Depends(get_current_user),
    period: tuple[int, int] = Depends(get_month_period),
    db: Session = Depends(get_db),
):
    month, year = period
    return [_to_response(cb) for cb in list_category_budgets(db, user.id, month, year)]


@router.put("", response_model=CategoryBudgetResponse)
def set_category_budget(
    req: CategoryBudgetRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    cb = SetCategoryBudgetUseCase(db).execute(
        user_id=user.id,
        month=req.month,
        year=req.year,
        category=req.category,
        amount=req.amount,
    )
    return _to_response(cb)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_category_budget(
    user: User = Depends(get_current_user),
    period: tuple[int, int] = Depends(get_month_period),
    category: str = Query(...),
    db: Session = Depends(get_db),
):
    if not is_valid_category(category):
        raise query_error("category", f"Unknown category: {category}")
    month, year = period
    DeleteCategoryBudgetUseCase(db).execute(user.id, month, year, category)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
