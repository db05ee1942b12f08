"""
Budget domain rules

A month budget is either:
- GENERAL: one cap entered directly by the user, the stored amount is authoritative
- CATEGORY_SUM: the cap is the sum of the per-category budgets of the same month;
  the stored amount is a zero placeholder
"""
from decimal import Decimal
from typing import Iterable

BUDGET_TYPE_GENERAL = "GENERAL"
BUDGET_TYPE_CATEGORY_SUM = "CATEGORY_SUM"

BUDGET_TYPES = (BUDGET_TYPE_GENERAL, BUDGET_TYPE_CATEGORY_SUM)

ZERO = Decimal("0.00")


def is_valid_budget_type(value: str) -> bool:
    return value in BUDGET_TYPES


def stored_amount_for(budget_type: str, amount: Decimal | None) -> Decimal:
    """
    Amount to persist for a budget row.

    Raises:
        ValueError: GENERAL budget without amount
    """
    if budget_type == BUDGET_TYPE_CATEGORY_SUM:
        return ZERO
    if amount is None:
        raise ValueError("Amount is required for a GENERAL budget")
    return amount


def effective_amount(
    budget_type: str,
    stored_amount: Decimal,
    category_amounts: Iterable[Decimal],
) -> Decimal:
    """
    Budget value presented to the user.

    GENERAL -> stored amount (category budgets are ignored).
    CATEGORY_SUM -> exact Decimal sum of the category budgets, 0 if there are none.
    """
    if budget_type == BUDGET_TYPE_CATEGORY_SUM:
        return sum((Decimal(a) for a in category_amounts), ZERO)
    return Decimal(stored_amount)
