"""
Module: ledger_kernel.models.budget
Responsibility: ORM persistence for monthly spending limits per expense
    category.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - At most one budget per (owner_id, category, period_year, period_month),
      backed by uq_budget_owner_category_period.  BudgetService also checks
      for an existing row before inserting.
    - category and period are immutable after insert; only limit_amount
      changes.

Failure modes:
    - IntegrityError on a racing duplicate insert (mapped to
      DuplicateBudgetError by BudgetService).
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase, UUIDString
from ledger_kernel.db.types import ExactDecimal


class Budget(TrackedBase):
    """A spending limit for one expense category in one calendar month."""

    __tablename__ = "budgets"

    __table_args__ = (
        UniqueConstraint(
            "owner_id",
            "category",
            "period_year",
            "period_month",
            name="uq_budget_owner_category_period",
        ),
    )

    owner_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    category: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
    )

    period_year: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    period_month: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    limit_amount: Mapped[Decimal] = mapped_column(
        ExactDecimal(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<Budget {self.category} {self.period_year:04d}-{self.period_month:02d}: "
            f"{self.limit_amount}>"
        )
