"""
Tests for month budget use cases and effective amount aggregation.
"""
from datetime import date
from decimal import Decimal

import pytest

from app.infrastructure.db.models import BudgetModel, CategoryBudgetModel, TransactionModel
from app.application.budget import (
    SetBudgetUseCase, DeleteBudgetUseCase, BudgetValidationError,
    get_budget, get_month_spent,
)
from app.application.category_budgets import SetCategoryBudgetUseCase, DeleteCategoryBudgetUseCase
from app.application import budget as budget_module


def _set_categories(db_session, user_id, month, year, amounts: dict):
    uc = SetCategoryBudgetUseCase(db_session)
    for category, amount in amounts.items():
        uc.execute(user_id, month, year, category, Decimal(amount))


class TestSetBudget:
    def test_general_budget_effective_equals_stored(self, db_session, user):
        _set_categories(db_session, user.id, 1, 2026, {"GROCERIES": "400.00"})

        view = SetBudgetUseCase(db_session).execute(user.id, 1, 2026, "GENERAL", Decimal("2500.00"))

        assert view.budget.amount == Decimal("2500.00")
        assert view.effective_amount == Decimal("2500.00")

    def test_general_requires_amount(self, db_session, user):
        with pytest.raises(BudgetValidationError, match="required"):
            SetBudgetUseCase(db_session).execute(user.id, 1, 2026, "GENERAL", None)

    def test_category_sum_stores_zero_placeholder(self, db_session, user):
        view = SetBudgetUseCase(db_session).execute(user.id, 1, 2026, "CATEGORY_SUM", Decimal("100"))
        assert view.budget.amount == Decimal("0")
        assert view.effective_amount == Decimal("0")

    def test_unknown_type_rejected(self, db_session, user):
        with pytest.raises(BudgetValidationError):
            SetBudgetUseCase(db_session).execute(user.id, 1, 2026, "WEEKLY", Decimal("1"))

    def test_upsert_twice_keeps_one_row_with_second_amount(self, db_session, user):
        uc = SetBudgetUseCase(db_session)
        first = uc.execute(user.id, 1, 2026, "GENERAL", Decimal("1000.00"))
        second = uc.execute(user.id, 1, 2026, "GENERAL", Decimal("1750.25"))

        assert first.budget.id == second.budget.id
        rows = db_session.query(BudgetModel).filter(
            BudgetModel.user_id == user.id,
            BudgetModel.month == 1,
            BudgetModel.year == 2026,
        ).all()
        assert len(rows) == 1
        assert rows[0].amount == Decimal("1750.25")

    def test_switch_type_general_to_category_sum(self, db_session, user):
        uc = SetBudgetUseCase(db_session)
        uc.execute(user.id, 3, 2026, "GENERAL", Decimal("900"))
        _set_categories(db_session, user.id, 3, 2026, {"TRAVEL": "120.00"})

        view = uc.execute(user.id, 3, 2026, "CATEGORY_SUM")
        assert view.budget.amount == Decimal("0")
        assert view.effective_amount == Decimal("120.00")

    def test_budgets_are_per_user(self, db_session, user, other_user):
        SetBudgetUseCase(db_session).execute(user.id, 1, 2026, "GENERAL", Decimal("10"))
        assert get_budget(db_session, other_user.id, 1, 2026) is None


class TestCategorySumAggregation:
    def test_sum_then_delete_is_reflected_immediately(self, db_session, user):
        _set_categories(db_session, user.id, 1, 2026, {
            "GROCERIES": "400.00", "DINING_OUT": "200.00", "ENTERTAINMENT": "50.00",
        })
        SetBudgetUseCase(db_session).execute(user.id, 1, 2026, "CATEGORY_SUM")

        assert get_budget(db_session, user.id, 1, 2026).effective_amount == Decimal("650.00")

        DeleteCategoryBudgetUseCase(db_session).execute(user.id, 1, 2026, "GROCERIES")
        assert get_budget(db_session, user.id, 1, 2026).effective_amount == Decimal("250.00")

    def test_only_same_month_and_user_are_summed(self, db_session, user, other_user):
        _set_categories(db_session, user.id, 1, 2026, {"GROCERIES": "100.00"})
        _set_categories(db_session, user.id, 2, 2026, {"GROCERIES": "999.00"})
        _set_categories(db_session, other_user.id, 1, 2026, {"GROCERIES": "555.00"})
        SetBudgetUseCase(db_session).execute(user.id, 1, 2026, "CATEGORY_SUM")

        assert get_budget(db_session, user.id, 1, 2026).effective_amount == Decimal("100.00")

    def test_no_category_budgets_means_zero(self, db_session, user):
        SetBudgetUseCase(db_session).execute(user.id, 5, 2026, "CATEGORY_SUM")
        assert get_budget(db_session, user.id, 5, 2026).effective_amount == Decimal("0")


class TestSpent:
    def test_spent_counts_only_month_expenses(self, db_session, user):
        db_session.add_all([
            TransactionModel(user_id=user.id, amount=Decimal("19.99"), transaction_type="EXPENSE",
                             category="GROCERIES", transaction_date=date(2026, 1, 31)),
            TransactionModel(user_id=user.id, amount=Decimal("0.01"), transaction_type="EXPENSE",
                             category="BANK_FEES", transaction_date=date(2026, 1, 1)),
            TransactionModel(user_id=user.id, amount=Decimal("3000"), transaction_type="INCOME",
                             category="SALARY", transaction_date=date(2026, 1, 15)),
            TransactionModel(user_id=user.id, amount=Decimal("50"), transaction_type="EXPENSE",
                             category="GROCERIES", transaction_date=date(2026, 2, 1)),
        ])
        db_session.commit()

        assert get_month_spent(db_session, user.id, 1, 2026) == Decimal("20.00")

        view = SetBudgetUseCase(db_session).execute(user.id, 1, 2026, "GENERAL", Decimal("100.00"))
        assert view.spent == Decimal("20.00")
        assert view.remaining == Decimal("80.00")


class TestDeleteBudget:
    def test_delete_existing(self, db_session, user):
        SetBudgetUseCase(db_session).execute(user.id, 1, 2026, "GENERAL", Decimal("10"))
        DeleteBudgetUseCase(db_session).execute(user.id, 1, 2026)
        assert get_budget(db_session, user.id, 1, 2026) is None

    def test_delete_missing_is_noop(self, db_session, user):
        DeleteBudgetUseCase(db_session).execute(user.id, 7, 2026)
        assert db_session.query(BudgetModel).count() == 0

    def test_delete_keeps_category_budgets(self, db_session, user):
        _set_categories(db_session, user.id, 1, 2026, {"GROCERIES": "10.00"})
        SetBudgetUseCase(db_session).execute(user.id, 1, 2026, "CATEGORY_SUM")
        DeleteBudgetUseCase(db_session).execute(user.id, 1, 2026)
        assert db_session.query(CategoryBudgetModel).count() == 1


class TestUpsertRace:
    def test_lost_create_race_updates_existing_row(self, db_session, user, monkeypatch):
        """Конкурентный запрос успел создать строку между поиском и вставкой"""
        SetBudgetUseCase(db_session).execute(user.id, 4, 2026, "GENERAL", Decimal("100.00"))

        real_find = budget_module._find
        calls = []

        def stale_find(*args):
            calls.append(args)
            if len(calls) == 1:
                return None
            return real_find(*args)

        monkeypatch.setattr(budget_module, "_find", stale_find)

        view = SetBudgetUseCase(db_session).execute(user.id, 4, 2026, "GENERAL", Decimal("275.50"))

        assert len(calls) == 2
        rows = db_session.query(BudgetModel).filter(BudgetModel.user_id == user.id).all()
        assert len(rows) == 1
        assert rows[0].amount == Decimal("275.50")
        assert view.effective_amount == Decimal("275.50")
