"""
Transaction ledger use cases.

Ownership opacity: a transaction owned by another user is reported exactly
like a missing one (TransactionNotFoundError), never as "forbidden".
"""
from datetime import date as date_type
from decimal import Decimal
from typing import Any, List

from sqlalchemy.orm import Session

from app.domain.category import is_valid_category
from app.domain.transaction import (
    MIN_AMOUNT, MAX_AMOUNT, MAX_DESCRIPTION_LENGTH, UPDATABLE_FIELDS, is_valid_transaction_type,
)
from app.infrastructure.db.models import TransactionModel


class TransactionValidationError(ValueError):
    pass


class TransactionNotFoundError(LookupError):
    def __init__(self, transaction_id: int):
        super().__init__(f"Transaction not found: {transaction_id}")
        self.transaction_id = transaction_id


def _validate_fields(fields: dict[str, Any]) -> None:
    if "amount" in fields and Decimal(fields["amount"]) < MIN_AMOUNT:
        raise TransactionValidationError("Amount must be greater than 0")
    if "amount" in fields and Decimal(fields["amount"]) > MAX_AMOUNT:
        raise TransactionValidationError(f"Amount must be at most {MAX_AMOUNT}")
    if "transaction_type" in fields and not is_valid_transaction_type(fields["transaction_type"]):
        raise TransactionValidationError(f"Unknown transaction type: {fields['transaction_type']}")
    if "category" in fields and not is_valid_category(fields["category"]):
        raise TransactionValidationError(f"Unknown category: {fields['category']}")
    description = fields.get("description")
    if description is not None and len(description) > MAX_DESCRIPTION_LENGTH:
        raise TransactionValidationError(
            f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters"
        )


def get_transaction(db: Session, user_id: int, transaction_id: int) -> TransactionModel:
    """
    Raises:
        TransactionNotFoundError: no such row, or it belongs to another user
    """
    tx = db.query(TransactionModel).filter(
        TransactionModel.id == transaction_id,
    ).first()
    if tx is None or tx.user_id != user_id:
        raise TransactionNotFoundError(transaction_id)
    return tx


def list_transactions(
    db: Session,
    user_id: int,
    transaction_type: str | None = None,
    category: str | None = None,
    start_date: date_type | None = None,
    end_date: date_type | None = None,
) -> List[TransactionModel]:
    """
    All transactions of the user, newest first.

    Order: transaction_date DESC, id DESC, the same for every filter combination.
    Date bounds are inclusive.
    """
    if start_date and end_date and start_date > end_date:
        raise TransactionValidationError("start_date must not be after end_date")

    query = db.query(TransactionModel).filter(TransactionModel.user_id == user_id)

    if transaction_type:
        query = query.filter(TransactionModel.transaction_type == transaction_type)
    if category:
        query = query.filter(TransactionModel.category == category)
    if start_date:
        query = query.filter(TransactionModel.transaction_date >= start_date)
    if end_date:
        query = query.filter(TransactionModel.transaction_date <= end_date)

    return query.order_by(
        TransactionModel.transaction_date.desc(),
        TransactionModel.id.desc(),
    ).all()


class CreateTransactionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        amount: Decimal,
        transaction_type: str,
        category: str,
        description: str | None = None,
        transaction_date: date_type | None = None,
    ) -> TransactionModel:
        _validate_fields({
            "amount": amount,
            "transaction_type": transaction_type,
            "category": category,
            "description": description,
        })

        tx = TransactionModel(
            user_id=user_id,
            amount=Decimal(amount),
            transaction_type=transaction_type,
            category=category,
            description=description,
            # Без даты: сегодня
            transaction_date=transaction_date or date_type.today(),
        )
        self.db.add(tx)
        self.db.commit()
        self.db.refresh(tx)
        return tx


class UpdateTransactionUseCase:
    """Partial update: only supplied, non-null fields are applied."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, transaction_id: int, user_id: int, /, **changes: Any) -> TransactionModel:
        tx = get_transaction(self.db, user_id, transaction_id)

        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise TransactionValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        applied = {k: v for k, v in changes.items() if v is not None}
        _validate_fields(applied)

        for field, value in applied.items():
            setattr(tx, field, value)

        self.db.commit()
        self.db.refresh(tx)
        return tx


class DeleteTransactionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, transaction_id: int, user_id: int) -> None:
        tx = get_transaction(self.db, user_id, transaction_id)
        self.db.delete(tx)
        self.db.commit()
