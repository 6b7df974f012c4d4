"""
Module: ledger_kernel.selectors.ledger_selector
Responsibility: Verifies cached account balances against the balance derived
    by folding each account's transaction history.
Architecture position: Kernel > Selectors.  Read-only.

Invariants enforced:
    - computed balance = initial_balance + sum(income) - sum(expense).
    - The cached current_balance is the source of truth for reads; this
      selector only reports whether it agrees with the history.

Failure modes:
    - AccountNotFoundError when the account id does not resolve.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_kernel.domain.dtos import BalanceCheck
from ledger_kernel.domain.ledger import fold_balance
from ledger_kernel.domain.taxonomy import TransactionType
from ledger_kernel.domain.values import Money
from ledger_kernel.exceptions import AccountNotFoundError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.models.transaction import Transaction
from ledger_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.ledger")


class LedgerSelector(BaseSelector[Account]):
    """
    Balance verification over transaction history.

    Guarantees:
        - verify() never mutates the account; a drift is reported, not fixed.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def _get_account(self, account_id: UUID) -> Account:
        account = self.session.get(Account, account_id)
        if account is None:
            raise AccountNotFoundError(str(account_id))
        return account

    def _computed(self, account: Account) -> Money:
        rows = self.session.execute(
            select(Transaction.amount, Transaction.transaction_type).where(
                Transaction.account_id == account.id
            )
        ).all()
        return fold_balance(
            Money.of(account.initial_balance),
            [(Money.of(amount), TransactionType(kind)) for amount, kind in rows],
        )

    def computed_balance(self, account_id: UUID) -> Money:
        return self._computed(self._get_account(account_id))

    def verify(self, account_id: UUID) -> BalanceCheck:
        """Compare the cached balance with the history-derived balance."""
        account = self._get_account(account_id)
        check = BalanceCheck(
            account_id=account.id,
            cached=Money.of(account.current_balance),
            computed=self._computed(account),
        )
        if not check.is_consistent:
            logger.error(
                "balance_drift_detected",
                extra={
                    "account_id": str(account.id),
                    "cached": str(check.cached),
                    "computed": str(check.computed),
                },
            )
        return check

    def verify_owner(self, owner_id: UUID) -> list[BalanceCheck]:
        """Verify every account of the owner, ordered by account name."""
        accounts = self.session.scalars(
            select(Account).where(Account.owner_id == owner_id).order_by(Account.name)
        ).all()
        return [
            BalanceCheck(
                account_id=a.id,
                cached=Money.of(a.current_balance),
                computed=self._computed(a),
            )
            for a in accounts
        ]
