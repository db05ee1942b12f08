"""
Transaction domain rules
"""
from decimal import Decimal

# Transaction types
TRANSACTION_TYPE_INCOME = "INCOME"    # деньги пришли (зарплата, возврат, подарок)
TRANSACTION_TYPE_EXPENSE = "EXPENSE"  # деньги ушли (продукты, аренда)

TRANSACTION_TYPES = (TRANSACTION_TYPE_INCOME, TRANSACTION_TYPE_EXPENSE)

MIN_AMOUNT = Decimal("0.01")
# Largest value a Numeric(19, 2) column holds
MAX_AMOUNT = Decimal("99999999999999999.99")
MAX_DESCRIPTION_LENGTH = 500

# Fields a partial update is allowed to touch. Owner and created_at are immutable.
UPDATABLE_FIELDS = ("amount", "transaction_type", "category", "description", "transaction_date")


def is_valid_transaction_type(value: str) -> bool:
    return value in TRANSACTION_TYPES
