"""
Module: ledger_kernel.selectors.account_selector
Responsibility: Read-only account lookups and the owner's net worth.
Architecture position: Kernel > Selectors.
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ledger_kernel.domain.dtos import AccountInfo
from ledger_kernel.domain.values import Money
from ledger_kernel.models.account import Account
from ledger_kernel.selectors.base import BaseSelector


class AccountSelector(BaseSelector[Account]):
    """Account queries returning AccountInfo snapshots."""

    def __init__(self, session: Session):
        super().__init__(session)

    def find_by_id(self, account_id: UUID) -> AccountInfo | None:
        account = self.session.get(Account, account_id)
        if account is None:
            return None
        return AccountInfo.from_model(account)

    def list_for_owner(self, owner_id: UUID) -> list[AccountInfo]:
        """All of the owner's accounts ordered by name."""
        rows = self.session.scalars(
            select(Account)
            .where(Account.owner_id == owner_id)
            .order_by(Account.name, Account.created_at)
        ).all()
        return [AccountInfo.from_model(a) for a in rows]

    def count_for_owner(self, owner_id: UUID) -> int:
        return self.session.scalar(
            select(func.count()).select_from(Account).where(Account.owner_id == owner_id)
        ) or 0

    def net_worth(self, owner_id: UUID) -> Money:
        """Sum of the cached current balances of the owner's accounts.

        Summed in Python: the balance column is a decimal string on SQLite.
        """
        balances = self.session.scalars(
            select(Account.current_balance).where(Account.owner_id == owner_id)
        ).all()
        return Money.total(Money.of(b) for b in balances)
