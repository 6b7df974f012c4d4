"""
Module: ledger_kernel.models.transaction
Responsibility: ORM persistence for income and expense postings against a
    single account.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - amount > 0; the direction is carried by transaction_type.
    - Every insert, update and delete of a row is paired with exactly one
      balance write on the owning account in the same atomic unit
      (TransactionService).
    - account_id never changes after insert.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase, UUIDString
from ledger_kernel.db.types import ExactDecimal


class Transaction(TrackedBase):
    """An income or expense posting."""

    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_transaction_account_date", "account_id", "transaction_date"),
        Index("idx_transaction_category_date", "category", "transaction_date"),
        CheckConstraint(
            "transaction_type IN ('income', 'expense')",
            name="ck_transaction_type",
        ),
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id"),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(
        ExactDecimal(),
        nullable=False,
    )

    transaction_type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )

    category: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
    )

    transaction_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        String(1000),
        nullable=False,
        default="",
    )

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.transaction_type} {self.amount} "
            f"{self.category} on {self.transaction_date}>"
        )
