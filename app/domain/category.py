"""
Transaction categories — closed catalogue shared by transactions and category budgets
"""
from typing import Dict

# Income categories
INCOME_CATEGORIES: Dict[str, str] = {
    "SALARY": "Salary",
    "BUSINESS_INCOME": "Business Income",
    "INVESTMENT_RETURNS": "Investment Returns",
    "RENTAL_INCOME": "Rental Income",
    "GIFTS_RECEIVED": "Gifts Received",
    "TAX_REFUND": "Tax Refund",
    "BONUS": "Bonus",
    "SIDE_HUSTLE": "Side Hustle",
    "OTHER_INCOME": "Other Income",
}

# Expense categories (essential, lifestyle, financial, misc)
EXPENSE_CATEGORIES: Dict[str, str] = {
    "RENT_MORTGAGE": "Rent/Mortgage",
    "UTILITIES": "Utilities",
    "GROCERIES": "Groceries",
    "TRANSPORTATION": "Transportation",
    "GAS": "Gas/Fuel",
    "INSURANCE": "Insurance",
    "PHONE_INTERNET": "Phone & Internet",
    "HEALTHCARE": "Healthcare",
    "DEBT_PAYMENTS": "Debt Payments",

    "DINING_OUT": "Dining Out",
    "DELIVERY": "Delivery",
    "ENTERTAINMENT": "Entertainment",
    "SHOPPING": "Shopping",
    "SUBSCRIPTIONS": "Subscriptions",
    "GYM_FITNESS": "Gym & Fitness",
    "TRAVEL": "Travel",
    "HOBBIES": "Hobbies",
    "PERSONAL_CARE": "Personal Care",
    "GIFTS_GIVEN": "Gifts Given",

    "SAVINGS": "Savings",
    "INVESTMENTS": "Investments",
    "EMERGENCY_FUND": "Emergency Fund",
    "RETIREMENT": "Retirement",
    "TAXES": "Taxes",
    "BANK_FEES": "Bank Fees",

    "EDUCATION": "Education",
    "CHARITY": "Charity/Donations",
    "PET_EXPENSES": "Pet Expenses",
    "HOME_IMPROVEMENT": "Home Improvement",
    "CLOTHING": "Clothing",
    "BOOKS_MEDIA": "Books & Media",
    "OTHER_EXPENSE": "Other Expense",
}

TRANSACTION_CATEGORIES: Dict[str, str] = {**INCOME_CATEGORIES, **EXPENSE_CATEGORIES}


def is_valid_category(code: str) -> bool:
    return code in TRANSACTION_CATEGORIES


def category_display_name(code: str) -> str:
    """Human readable label, e.g. GAS -> "Gas/Fuel". Unknown codes are returned as-is."""
    return TRANSACTION_CATEGORIES.get(code, code)
