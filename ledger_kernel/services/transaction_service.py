"""
TransactionService -- the ledger consistency engine.

Responsibility:
    Creates, updates and deletes transactions, and keeps the owning
    account's cached balance equal to the net effect of its transaction
    history while doing so.  Also exposes the transaction reads and
    aggregates the budget and dashboard services consume.

Architecture position:
    Kernel > Services -- imperative shell.
    Pure balance arithmetic lives in domain/ledger.py; reads are delegated to
    TransactionSelector.

Invariants enforced:
    - Balance invariant: after every successful write,
          current_balance == initial_balance + sum(income) - sum(expense)
      over the account's transactions.
    - Atomicity: the transaction row write and the account balance write of
      an operation commit together or not at all.
    - Per-account serialization: the account row is locked
      (SELECT ... FOR UPDATE; BEGIN IMMEDIATE on SQLite) before the balance
      is read, and the version column rejects any write based on a stale
      read.
    - Updates reverse the stored effect, then apply the incoming one.
    - The account a transaction belongs to never changes.

Failure modes:
    - NonPositiveAmountError / MissingIdentifierError: rejected before any
      write.
    - AccountNotFoundError / TransactionNotFoundError: unit rolled back.
    - OptimisticLockError / StoreFailureError: unit rolled back.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_kernel.config import DEFAULT_CONFIG, KernelConfig
from ledger_kernel.domain.clock import Clock
from ledger_kernel.domain.dtos import (
    AccountInfo,
    PeriodTotals,
    TransactionDraft,
    TransactionRecord,
)
from ledger_kernel.domain.ledger import apply_effect, rebalance, reverse_effect
from ledger_kernel.domain.taxonomy import Category, TransactionType
from ledger_kernel.domain.values import BudgetPeriod, Money
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    MissingIdentifierError,
    NonPositiveAmountError,
    TransactionNotFoundError,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.models.transaction import Transaction
from ledger_kernel.selectors.transaction_selector import TransactionSelector
from ledger_kernel.services.base import BaseService

logger = get_logger("services.transaction")


class TransactionService(BaseService[Transaction]):
    """
    Writes and reads of income/expense transactions.

    Contract:
        create/update/delete each run as one atomic unit pairing the
        transaction row write with the account balance write.

    Guarantees:
        - A failed write leaves both the transaction and the balance as they
          were.
        - update() with the same amount and type leaves the balance unchanged.

    Non-goals:
        - Does NOT retry on lock conflicts; retry policy belongs to the caller.
        - Does NOT move transactions between accounts.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        auto_commit: bool = True,
        config: KernelConfig | None = None,
    ):
        super().__init__(session, clock=clock, auto_commit=auto_commit)
        self._selector = TransactionSelector(session)
        self._recent_limit = (config or DEFAULT_CONFIG).recent_transactions_limit

    # ------------------------------------------------------------------
    # Locking helpers
    # ------------------------------------------------------------------

    def _get_account_for_update(self, account_id: UUID) -> Account:
        """Get ORM Account with row lock, refreshed from the database."""
        account = self.session.execute(
            select(Account)
            .where(Account.id == account_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if account is None:
            raise AccountNotFoundError(str(account_id))
        return account

    def _get_transaction_for_update(
        self, transaction_id: UUID
    ) -> tuple[Transaction, Account]:
        """Lock the owning account, then re-read the transaction under that lock.

        Every writer of a transaction row locks its account first, so the
        re-read sees the latest committed amount and type.
        """
        existing = self.session.get(Transaction, transaction_id)
        if existing is None:
            raise TransactionNotFoundError(str(transaction_id))

        account = self._get_account_for_update(existing.account_id)

        row = self.session.execute(
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if row is None:
            raise TransactionNotFoundError(str(transaction_id))
        return row, account

    def _write_balance(self, account: Account, updated: AccountInfo) -> None:
        previous = account.current_balance
        account.current_balance = updated.current_balance.amount
        logger.info(
            "account_balance_updated",
            extra={
                "account_id": str(account.id),
                "previous_balance": str(previous),
                "new_balance": str(updated.current_balance),
            },
        )

    @staticmethod
    def _validate_amount(amount: Money) -> None:
        if not amount.is_positive:
            raise NonPositiveAmountError(str(amount))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, draft: TransactionDraft, account_id: UUID) -> TransactionRecord:
        """
        Record a new transaction against ``account_id`` and apply its effect.

        Raises:
            NonPositiveAmountError: amount <= 0.
            AccountNotFoundError: account_id does not resolve.
        """
        self._validate_amount(draft.amount)

        with LogContext.bind(account_id=account_id):
            with self._atomic(
                "create_transaction", stale_entity=("Account", str(account_id))
            ):
                account = self._get_account_for_update(account_id)
                now = self._clock.now()
                row = Transaction(
                    account_id=account.id,
                    amount=draft.amount.amount,
                    transaction_type=TransactionType(draft.transaction_type).value,
                    category=Category(draft.category).value,
                    transaction_date=draft.transaction_date,
                    description=draft.description or "",
                    created_at=now,
                    updated_at=now,
                )
                self.session.add(row)

                updated = apply_effect(
                    AccountInfo.from_model(account),
                    draft.amount,
                    TransactionType(draft.transaction_type),
                )
                self._write_balance(account, updated)
                self.session.flush()
                record = TransactionRecord.from_model(row)

            logger.info(
                "transaction_created",
                extra={
                    "transaction_id": str(record.id),
                    "transaction_type": record.transaction_type.value,
                    "category": record.category.value,
                    "amount": str(record.amount),
                },
            )
        return record

    def update(self, draft: TransactionDraft) -> TransactionRecord:
        """
        Replace a transaction's amount, type, category, date and description.

        The stored effect is reversed and the incoming effect applied to the
        same account.  ``draft`` carries no account; the owning account is
        kept.

        Raises:
            MissingIdentifierError: draft.id is None.
            NonPositiveAmountError: amount <= 0.
            TransactionNotFoundError: draft.id does not resolve.
        """
        if draft.id is None:
            raise MissingIdentifierError("transaction")
        self._validate_amount(draft.amount)

        with LogContext.bind(transaction_id=draft.id):
            account_id: UUID | None = None
            with self._atomic(
                "update_transaction", stale_entity=("Transaction", str(draft.id))
            ):
                row, account = self._get_transaction_for_update(draft.id)
                account_id = account.id

                updated = rebalance(
                    AccountInfo.from_model(account),
                    Money.of(row.amount),
                    TransactionType(row.transaction_type),
                    draft.amount,
                    TransactionType(draft.transaction_type),
                )
                self._write_balance(account, updated)

                row.amount = draft.amount.amount
                row.transaction_type = TransactionType(draft.transaction_type).value
                row.category = Category(draft.category).value
                row.transaction_date = draft.transaction_date
                row.description = draft.description or ""
                row.updated_at = self._clock.now()
                self.session.flush()
                record = TransactionRecord.from_model(row)

            logger.info(
                "transaction_updated",
                extra={
                    "account_id": str(account_id),
                    "transaction_type": record.transaction_type.value,
                    "amount": str(record.amount),
                },
            )
        return record

    def delete(self, transaction_id: UUID) -> None:
        """
        Remove a transaction and reverse its effect on the account balance.

        Raises:
            TransactionNotFoundError: transaction_id does not resolve.
        """
        with LogContext.bind(transaction_id=transaction_id):
            with self._atomic(
                "delete_transaction", stale_entity=("Transaction", str(transaction_id))
            ):
                row, account = self._get_transaction_for_update(transaction_id)
                reversed_amount = Money.of(row.amount)
                updated = reverse_effect(
                    AccountInfo.from_model(account),
                    reversed_amount,
                    TransactionType(row.transaction_type),
                )
                self._write_balance(account, updated)
                self.session.delete(row)
                self.session.flush()

            logger.info(
                "transaction_deleted",
                extra={"reversed_amount": str(reversed_amount)},
            )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_by_id(self, transaction_id: UUID) -> TransactionRecord | None:
        return self._selector.find_by_id(transaction_id)

    def list_by_account(self, account_id: UUID) -> list[TransactionRecord]:
        """The account's transactions, newest first."""
        return self._selector.list_by_account(account_id)

    def list_recent_for_owner(
        self, owner_id: UUID, limit: int | None = None
    ) -> list[TransactionRecord]:
        """The owner's most recent transactions across all accounts."""
        return self._selector.list_recent_for_owner(
            owner_id, limit if limit is not None else self._recent_limit
        )

    def spending_by_category_and_month(
        self, owner_id: UUID, category: Category, year: int, month: int
    ) -> Money:
        return self._selector.spending_by_category_and_month(owner_id, category, year, month)

    def total_income_for_period(self, owner_id: UUID, start: date, end: date) -> Money:
        return self._selector.total_income_for_period(owner_id, start, end)

    def total_expenses_for_period(self, owner_id: UUID, start: date, end: date) -> Money:
        return self._selector.total_expenses_for_period(owner_id, start, end)

    def totals_for_period(self, owner_id: UUID, start: date, end: date) -> PeriodTotals:
        return self._selector.totals_for_period(owner_id, start, end)

    def spending_by_category(
        self, owner_id: UUID, period: BudgetPeriod
    ) -> dict[Category, Money]:
        return self._selector.spending_by_category(owner_id, period)
