"""
Category budget use cases: per-category monthly limits, upserted on
(user, month, year, category).
"""
import logging
from decimal import Decimal
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.category import is_valid_category
from app.domain.transaction import MIN_AMOUNT, MAX_AMOUNT
from app.infrastructure.db.models import CategoryBudgetModel

logger = logging.getLogger(__name__)


class CategoryBudgetValidationError(ValueError):
    pass


def _find(db: Session, user_id: int, month: int, year: int, category: str) -> CategoryBudgetModel | None:
    return db.query(CategoryBudgetModel).filter(
        CategoryBudgetModel.user_id == user_id,
        CategoryBudgetModel.month == month,
        CategoryBudgetModel.year == year,
        CategoryBudgetModel.category == category,
    ).first()


def list_category_budgets(db: Session, user_id: int, month: int, year: int) -> List[CategoryBudgetModel]:
    """One row per category that has a budget this month, ordered by category code."""
    return db.query(CategoryBudgetModel).filter(
        CategoryBudgetModel.user_id == user_id,
        CategoryBudgetModel.month == month,
        CategoryBudgetModel.year == year,
    ).order_by(CategoryBudgetModel.category.asc()).all()


def category_budget_amounts(db: Session, user_id: int, month: int, year: int) -> List[Decimal]:
    """Raw amounts for the month; summed in Python to keep Decimal exactness on every backend."""
    rows = db.query(CategoryBudgetModel.amount).filter(
        CategoryBudgetModel.user_id == user_id,
        CategoryBudgetModel.month == month,
        CategoryBudgetModel.year == year,
    ).all()
    return [Decimal(amount) for (amount,) in rows]


class SetCategoryBudgetUseCase:
    """Create or overwrite the budget of one category for a month."""

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        month: int,
        year: int,
        category: str,
        amount: Decimal,
    ) -> CategoryBudgetModel:
        if not is_valid_category(category):
            raise CategoryBudgetValidationError(f"Unknown category: {category}")
        if Decimal(amount) < MIN_AMOUNT:
            raise CategoryBudgetValidationError("Amount must be greater than 0")
        if Decimal(amount) > MAX_AMOUNT:
            raise CategoryBudgetValidationError(f"Amount must be at most {MAX_AMOUNT}")

        existing = _find(self.db, user_id, month, year, category)
        if existing:
            existing.amount = amount
            self.db.commit()
            self.db.refresh(existing)
            return existing

        row = CategoryBudgetModel(
            user_id=user_id,
            month=month,
            year=year,
            category=category,
            amount=amount,
        )
        self.db.add(row)
        try:
            self.db.flush()
        except IntegrityError:
            # Lost the create race: the unique constraint kept one row, update it instead
            self.db.rollback()
            logger.info(
                "Category budget upsert race for user=%s %s-%02d %s, retrying as update",
                user_id, year, month, category,
            )
            row = _find(self.db, user_id, month, year, category)
            row.amount = amount

        self.db.commit()
        self.db.refresh(row)
        return row


class DeleteCategoryBudgetUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, month: int, year: int, category: str) -> None:
        """No-op if there is nothing to delete."""
        row = _find(self.db, user_id, month, year, category)
        if row is None:
            return
        self.db.delete(row)
        self.db.commit()
