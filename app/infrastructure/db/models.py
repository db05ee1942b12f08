"""
SQLAlchemy ORM models
"""
from decimal import Decimal
from datetime import date as date_type, datetime
from sqlalchemy import String, Integer, SmallInteger, Date, TIMESTAMP, Numeric, ForeignKey, UniqueConstraint, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.db.session import Base


class User(Base):
    """
    Registered user (owner of transactions and budgets)
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class TransactionModel(Base):
    """
    Income / expense entry of a user
    """
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(precision=19, scale=2), nullable=False)
    transaction_type: Mapped[str] = mapped_column(String(20), nullable=False)  # INCOME / EXPENSE
    category: Mapped[str] = mapped_column(String(50), nullable=False)  # see app.domain.category
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # When the money moved (may differ from when it was recorded)
    transaction_date: Mapped[date_type] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    __table_args__ = (
        Index('ix_transactions_user_date', 'user_id', 'transaction_date'),
    )


class BudgetModel(Base):
    """Monthly budget header: one per (user, year, month)"""
    __tablename__ = "budgets"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    month: Mapped[int] = mapped_column(SmallInteger, nullable=False)  # 1..12
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    budget_type: Mapped[str] = mapped_column(String(20), nullable=False, server_default="GENERAL")  # GENERAL / CATEGORY_SUM
    # CATEGORY_SUM: always 0, the effective amount is derived from category_budgets
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=19, scale=2), nullable=False, server_default="0"
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint('user_id', 'month', 'year', name='uq_budget_user_month'),
    )


class CategoryBudgetModel(Base):
    """Per-category spending limit within a month"""
    __tablename__ = "category_budgets"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    month: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=19, scale=2), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint('user_id', 'month', 'year', 'category', name='uq_category_budget'),
        Index('ix_category_budget_month', 'user_id', 'year', 'month'),
    )
