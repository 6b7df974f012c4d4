"""
Module: ledger_kernel.models.account
Responsibility: ORM persistence for a user's financial account and its cached
    running balance.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - current_balance == initial_balance + sum(income) - sum(expense) over
      the account's transactions.  Maintained by TransactionService, which is
      the only writer of current_balance after creation.
    - version is incremented by SQLAlchemy on every UPDATE; a write based on
      a stale read raises StaleDataError instead of losing an update.

Failure modes:
    - StaleDataError on flush when the row's version moved underneath the
      session (mapped to OptimisticLockError by the services).
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase, UUIDString
from ledger_kernel.db.types import ExactDecimal


class Account(TrackedBase):
    """
    A personal account (checking, savings, credit line, ...).

    Guarantees:
        - Never deleted by the kernel.
        - account_kind holds an AccountKind value.
    """

    __tablename__ = "accounts"

    __table_args__ = (Index("idx_account_owner", "owner_id"),)

    owner_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )

    account_kind: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    initial_balance: Mapped[Decimal] = mapped_column(
        ExactDecimal(),
        nullable=False,
    )

    # Cached running balance
    current_balance: Mapped[Decimal] = mapped_column(
        ExactDecimal(),
        nullable=False,
    )

    version: Mapped[int] = mapped_column(nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Account {self.name}: {self.current_balance}>"
