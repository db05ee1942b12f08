"""
Budget use cases and query helpers.

Budget = one row per (user, month, year), type GENERAL or CATEGORY_SUM.
The effective amount is computed on every read (no caching): a category budget
change is visible in the next GET of the month budget.
Spent is computed on-the-fly from the month's EXPENSE transactions.
"""
import calendar
import logging
from dataclasses import dataclass
from datetime import date as date_type
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.application.category_budgets import category_budget_amounts
from app.domain.budget import (
    BUDGET_TYPE_GENERAL, ZERO, effective_amount, is_valid_budget_type, stored_amount_for,
)
from app.domain.transaction import MIN_AMOUNT, MAX_AMOUNT, TRANSACTION_TYPE_EXPENSE
from app.infrastructure.db.models import BudgetModel, TransactionModel

logger = logging.getLogger(__name__)


class BudgetValidationError(ValueError):
    pass


@dataclass
class BudgetView:
    """Budget row plus the derived figures shown to the user."""
    budget: BudgetModel
    effective_amount: Decimal
    spent: Decimal
    remaining: Decimal


def _find(db: Session, user_id: int, month: int, year: int) -> BudgetModel | None:
    return db.query(BudgetModel).filter(
        BudgetModel.user_id == user_id,
        BudgetModel.month == month,
        BudgetModel.year == year,
    ).first()


def get_effective_amount(db: Session, budget: BudgetModel) -> Decimal:
    """GENERAL -> stored amount; CATEGORY_SUM -> sum of the month's category budgets."""
    if budget.budget_type == BUDGET_TYPE_GENERAL:
        return effective_amount(budget.budget_type, budget.amount, [])
    amounts = category_budget_amounts(db, budget.user_id, budget.month, budget.year)
    return effective_amount(budget.budget_type, budget.amount, amounts)


def get_month_spent(db: Session, user_id: int, month: int, year: int) -> Decimal:
    """Sum of EXPENSE transactions dated within the calendar month."""
    first_day = date_type(year, month, 1)
    last_day = date_type(year, month, calendar.monthrange(year, month)[1])

    rows = db.query(TransactionModel.amount).filter(
        TransactionModel.user_id == user_id,
        TransactionModel.transaction_type == TRANSACTION_TYPE_EXPENSE,
        TransactionModel.transaction_date >= first_day,
        TransactionModel.transaction_date <= last_day,
    ).all()
    return sum((Decimal(amount) for (amount,) in rows), ZERO)


def build_budget_view(db: Session, budget: BudgetModel) -> BudgetView:
    effective = get_effective_amount(db, budget)
    spent = get_month_spent(db, budget.user_id, budget.month, budget.year)
    return BudgetView(
        budget=budget,
        effective_amount=effective,
        spent=spent,
        remaining=effective - spent,
    )


def get_budget(db: Session, user_id: int, month: int, year: int) -> BudgetView | None:
    budget = _find(db, user_id, month, year)
    if budget is None:
        return None
    return build_budget_view(db, budget)


class SetBudgetUseCase:
    """
    Upsert the month budget on (user, month, year).

    GENERAL: amount required, stored verbatim on create and on every update.
    CATEGORY_SUM: stored amount fixed at 0, any supplied amount is ignored.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        month: int,
        year: int,
        budget_type: str = BUDGET_TYPE_GENERAL,
        amount: Decimal | None = None,
    ) -> BudgetView:
        if not is_valid_budget_type(budget_type):
            raise BudgetValidationError(f"Unknown budget type: {budget_type}")
        try:
            stored = stored_amount_for(budget_type, amount)
        except ValueError as exc:
            raise BudgetValidationError(str(exc)) from exc
        if budget_type == BUDGET_TYPE_GENERAL and stored < MIN_AMOUNT:
            raise BudgetValidationError("Amount must be greater than 0")
        if stored > MAX_AMOUNT:
            raise BudgetValidationError(f"Amount must be at most {MAX_AMOUNT}")

        budget = _find(self.db, user_id, month, year)
        if budget is None:
            budget = BudgetModel(
                user_id=user_id,
                month=month,
                year=year,
                budget_type=budget_type,
                amount=stored,
            )
            self.db.add(budget)
            try:
                self.db.flush()
            except IntegrityError:
                # Lost the create race: the unique constraint kept one row, update it instead
                self.db.rollback()
                logger.info(
                    "Budget upsert race for user=%s %s-%02d, retrying as update",
                    user_id, year, month,
                )
                budget = _find(self.db, user_id, month, year)
                budget.budget_type = budget_type
                budget.amount = stored
        else:
            budget.budget_type = budget_type
            budget.amount = stored

        self.db.commit()
        self.db.refresh(budget)
        logger.info("Budget set for user=%s %s-%02d type=%s", user_id, year, month, budget_type)
        return build_budget_view(self.db, budget)


class DeleteBudgetUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, month: int, year: int) -> None:
        """No-op if the month has no budget. Category budgets are left untouched."""
        budget = _find(self.db, user_id, month, year)
        if budget is None:
            return
        self.db.delete(budget)
        self.db.commit()
