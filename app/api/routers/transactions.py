"""
Transaction API endpoints
"""
from datetime import date, datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import Field, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, query_error
from app.api.schemas import ApiModel
from app.application.transactions import (
    CreateTransactionUseCase, UpdateTransactionUseCase, DeleteTransactionUseCase,
    get_transaction, list_transactions,
)
from app.domain.category import category_display_name, is_valid_category
from app.domain.transaction import MAX_DESCRIPTION_LENGTH, TRANSACTION_TYPES, is_valid_transaction_type
from app.infrastructure.db.models import User, TransactionModel
from app.utils.validation import parse_money


router = APIRouter(prefix="/api/transactions", tags=["transactions"])


# === Request models ===

def _check_type(v: str | None) -> str | None:
    if v is not None and not is_valid_transaction_type(v):
        raise ValueError(f"Transaction type must be one of {', '.join(TRANSACTION_TYPES)}")
    return v


def _check_category(v: str | None) -> str | None:
    if v is not None and not is_valid_category(v):
        raise ValueError(f"Unknown category: {v}")
    return v


def _check_description(v: str | None) -> str | None:
    if v is not None and len(v) > MAX_DESCRIPTION_LENGTH:
        raise ValueError(f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")
    return v


class CreateTransactionRequest(ApiModel):
    amount: Decimal
    transaction_type: str = Field(alias="type")
    category: str
    description: str | None = None
    transaction_date: date | None = None  # default: today

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v):
        if v is None:
            raise ValueError("Amount is required")
        return parse_money(v)

    @field_validator("transaction_type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        return _check_type(v)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return _check_category(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _check_description(v)


class UpdateTransactionRequest(ApiModel):
    """All fields optional: null / missing fields keep their current value."""
    amount: Decimal | None = None
    transaction_type: str | None = Field(default=None, alias="type")
    category: str | None = None
    description: str | None = None
    transaction_date: date | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v):
        return None if v is None else parse_money(v)

    @field_validator("transaction_type")
    @classmethod
    def validate_type(cls, v: str | None) -> str | None:
        return _check_type(v)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str | None) -> str | None:
        return _check_category(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _check_description(v)


class TransactionResponse(ApiModel):
    id: int
    user_id: int
    amount: Decimal
    transaction_type: str = Field(alias="type")
    category: str
    category_name: str
    description: str | None
    transaction_date: date
    created_at: datetime


# === Helper function ===

def _to_response(tx: TransactionModel) -> TransactionResponse:
    return TransactionResponse(
        id=tx.id,
        user_id=tx.user_id,
        amount=tx.amount,
        transaction_type=tx.transaction_type,
        category=tx.category,
        category_name=category_display_name(tx.category),
        description=tx.description,
        transaction_date=tx.transaction_date,
        created_at=tx.created_at,
    )


# === Endpoints ===

@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    req: CreateTransactionRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Создать транзакцию (INCOME / EXPENSE)"""
    tx = CreateTransactionUseCase(db).execute(
        user_id=user.id,
        amount=req.amount,
        transaction_type=req.transaction_type,
        category=req.category,
        description=req.description,
        transaction_date=req.transaction_date,
    )
    return _to_response(tx)


@router.get("", response_model=list[TransactionResponse])
def get_transactions(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    transaction_type: str | None = Query(None, alias="type"),
    category: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
):
    """Лента операций: новые сверху (по дате операции, затем по id)"""
    if transaction_type is not None and not is_valid_transaction_type(transaction_type):
        raise query_error("type", f"Transaction type must be one of {', '.join(TRANSACTION_TYPES)}")
    if category is not None and not is_valid_category(category):
        raise query_error("category", f"Unknown category: {category}")
    if start_date and end_date and start_date > end_date:
        raise query_error("start_date", "start_date must not be after end_date")

    transactions = list_transactions(
        db,
        user.id,
        transaction_type=transaction_type,
        category=category,
        start_date=start_date,
        end_date=end_date,
    )
    return [_to_response(tx) for tx in transactions]


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction_by_id(
    transaction_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _to_response(get_transaction(db, user.id, transaction_id))


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    req: UpdateTransactionRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Частичное обновление: применяются только переданные поля"""
    tx = UpdateTransactionUseCase(db).execute(
        transaction_id,
        user.id,
        amount=req.amount,
        transaction_type=req.transaction_type,
        category=req.category,
        description=req.description,
        transaction_date=req.transaction_date,
    )
    return _to_response(tx)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    DeleteTransactionUseCase(db).execute(transaction_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
