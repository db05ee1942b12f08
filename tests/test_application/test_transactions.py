"""Tests for the transaction ledger use cases."""
from datetime import date
from decimal import Decimal

import pytest

from app.infrastructure.db.models import TransactionModel
from app.application.transactions import (
    CreateTransactionUseCase, UpdateTransactionUseCase, DeleteTransactionUseCase,
    get_transaction, list_transactions,
    TransactionNotFoundError, TransactionValidationError,
)


def _create(db_session, user_id, amount="10.00", tx_type="EXPENSE", category="GROCERIES",
            tx_date=None, description=None):
    return CreateTransactionUseCase(db_session).execute(
        user_id=user_id,
        amount=Decimal(amount),
        transaction_type=tx_type,
        category=category,
        description=description,
        transaction_date=tx_date,
    )


class TestCreateTransaction:
    @pytest.mark.parametrize("amount", ["0.1", "0.2", "19.99"])
    def test_amount_is_exact(self, db_session, user, amount):
        tx = _create(db_session, user.id, amount=amount)
        stored = db_session.query(TransactionModel).filter(TransactionModel.id == tx.id).one()
        assert stored.amount == Decimal(amount)

    def test_date_defaults_to_today(self, db_session, user):
        tx = _create(db_session, user.id)
        assert tx.transaction_date == date.today()
        assert tx.created_at is not None

    def test_non_positive_amount_rejected(self, db_session, user):
        with pytest.raises(TransactionValidationError):
            _create(db_session, user.id, amount="0")

    def test_unknown_category_rejected(self, db_session, user):
        with pytest.raises(TransactionValidationError, match="category"):
            _create(db_session, user.id, category="LOTTERY")


class TestListTransactions:
    def test_newest_transaction_date_first_with_id_tiebreak(self, db_session, user, other_user):
        old = _create(db_session, user.id, tx_date=date(2026, 1, 5))
        same_day_a = _create(db_session, user.id, tx_date=date(2026, 1, 20))
        same_day_b = _create(db_session, user.id, tx_date=date(2026, 1, 20))
        _create(db_session, other_user.id, tx_date=date(2026, 1, 25))

        result = list_transactions(db_session, user.id)
        assert [t.id for t in result] == [same_day_b.id, same_day_a.id, old.id]

    def test_filters(self, db_session, user):
        salary = _create(db_session, user.id, amount="3000", tx_type="INCOME", category="SALARY",
                         tx_date=date(2026, 1, 1))
        food = _create(db_session, user.id, tx_date=date(2026, 1, 15))
        _create(db_session, user.id, tx_date=date(2026, 2, 15))

        assert [t.id for t in list_transactions(db_session, user.id, transaction_type="INCOME")] == [salary.id]
        assert [t.id for t in list_transactions(
            db_session, user.id, category="GROCERIES",
            start_date=date(2026, 1, 1), end_date=date(2026, 1, 31),
        )] == [food.id]

    def test_inverted_date_range_rejected(self, db_session, user):
        with pytest.raises(TransactionValidationError):
            list_transactions(db_session, user.id, start_date=date(2026, 2, 1), end_date=date(2026, 1, 1))


class TestOwnership:
    def test_other_users_transaction_is_not_found(self, db_session, user, other_user):
        tx = _create(db_session, user.id)
        with pytest.raises(TransactionNotFoundError):
            get_transaction(db_session, other_user.id, tx.id)
        with pytest.raises(TransactionNotFoundError):
            UpdateTransactionUseCase(db_session).execute(tx.id, other_user.id, amount=Decimal("1"))
        with pytest.raises(TransactionNotFoundError):
            DeleteTransactionUseCase(db_session).execute(tx.id, other_user.id)
        # row is untouched
        assert get_transaction(db_session, user.id, tx.id).amount == Decimal("10.00")

    def test_missing_transaction_is_not_found(self, db_session, user):
        with pytest.raises(TransactionNotFoundError, match="12345"):
            get_transaction(db_session, user.id, 12345)


class TestUpdateTransaction:
    def test_partial_update_keeps_unset_fields(self, db_session, user):
        tx = _create(db_session, user.id, amount="25.00", description="lunch", tx_date=date(2026, 1, 3))
        updated = UpdateTransactionUseCase(db_session).execute(
            tx.id, user.id, amount=Decimal("30.50"), description=None,
        )
        assert updated.amount == Decimal("30.50")
        assert updated.description == "lunch"
        assert updated.category == "GROCERIES"
        assert updated.transaction_date == date(2026, 1, 3)

    def test_owner_cannot_be_changed(self, db_session, user, other_user):
        tx = _create(db_session, user.id)
        with pytest.raises(TransactionValidationError):
            UpdateTransactionUseCase(db_session).execute(tx.id, user.id, user_id=other_user.id)
        db_session.refresh(tx)
        assert tx.user_id == user.id
        with pytest.raises(TransactionNotFoundError):
            get_transaction(db_session, other_user.id, tx.id)

    def test_amount_above_column_capacity_rejected(self, db_session, user):
        tx = _create(db_session, user.id)
        with pytest.raises(TransactionValidationError, match="at most"):
            UpdateTransactionUseCase(db_session).execute(tx.id, user.id, amount=Decimal("1" + "0" * 25))


class TestDeleteTransaction:
    def test_delete_then_second_delete_not_found(self, db_session, user):
        tx = _create(db_session, user.id)
        DeleteTransactionUseCase(db_session).execute(tx.id, user.id)
        assert db_session.query(TransactionModel).count() == 0
        with pytest.raises(TransactionNotFoundError):
            DeleteTransactionUseCase(db_session).execute(tx.id, user.id)
