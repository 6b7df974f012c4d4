"""
AccountService -- opening accounts and reading them back.

Responsibility:
    Creates accounts with their opening balance and exposes account reads.
    There is no balance setter and no delete: after opening, the
    cached balance only moves through TransactionService.

Architecture position:
    Kernel > Services.  Reads delegate to AccountSelector.

Invariants enforced:
    - A new account starts with current_balance == initial_balance.
    - Every account has an owner.

Failure modes:
    - MissingOwnerError when no owner is given.
    - AccountNotFoundError from get() for an unknown id.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock
from ledger_kernel.domain.dtos import AccountInfo
from ledger_kernel.domain.taxonomy import AccountKind
from ledger_kernel.domain.values import Money
from ledger_kernel.exceptions import AccountNotFoundError, MissingOwnerError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.services.base import BaseService

logger = get_logger("services.account")


class AccountService(BaseService[Account]):
    """Account lifecycle: open, look up, list, net worth."""

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        auto_commit: bool = True,
    ):
        super().__init__(session, clock=clock, auto_commit=auto_commit)
        self._selector = AccountSelector(session)

    def open_account(
        self,
        owner_id: UUID | None,
        name: str,
        kind: AccountKind,
        initial_balance: Money | None = None,
    ) -> AccountInfo:
        """
        Open a new account.

        Args:
            owner_id: Owner of the account.
            name: Display name.
            kind: Account kind.
            initial_balance: Opening balance; zero when omitted.  May be
                negative (e.g. a credit line opened with a balance owed).

        Returns:
            AccountInfo of the new account.
        """
        if owner_id is None:
            raise MissingOwnerError("account")

        opening = initial_balance if initial_balance is not None else Money.zero()
        now = self._clock.now()

        with LogContext.bind(owner_id=owner_id):
            with self._atomic("open_account"):
                account = Account(
                    owner_id=owner_id,
                    name=name,
                    account_kind=AccountKind(kind).value,
                    initial_balance=opening.amount,
                    current_balance=opening.amount,
                    created_at=now,
                    updated_at=now,
                )
                self.session.add(account)
                self.session.flush()
                info = AccountInfo.from_model(account)

            logger.info(
                "account_opened",
                extra={
                    "account_id": str(info.id),
                    "account_kind": info.account_kind.value,
                    "initial_balance": str(opening),
                },
            )
        return info

    def get(self, account_id: UUID) -> AccountInfo:
        info = self._selector.find_by_id(account_id)
        if info is None:
            raise AccountNotFoundError(str(account_id))
        return info

    def find_by_id(self, account_id: UUID) -> AccountInfo | None:
        return self._selector.find_by_id(account_id)

    def list_for_owner(self, owner_id: UUID) -> list[AccountInfo]:
        return self._selector.list_for_owner(owner_id)

    def net_worth(self, owner_id: UUID) -> Money:
        return self._selector.net_worth(owner_id)
