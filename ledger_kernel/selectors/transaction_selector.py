"""
Module: ledger_kernel.selectors.transaction_selector
Responsibility: Read-only transaction listings and the spending/income
    aggregates the budget and dashboard services are built on.
Architecture position: Kernel > Selectors.  Used by TransactionService for
    its read operations.

Invariants enforced:
    - Listings are ordered by transaction_date DESC, then created_at DESC.
    - Aggregates cover an owner's transactions across ALL of the owner's
      accounts; date ranges are inclusive at both ends.
    - Sums are computed with Money in Python, so no aggregate passes through
      a float on any backend.

Failure modes:
    - Aggregates over no matching rows return Money.zero(), never None.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from ledger_kernel.domain.dtos import PeriodTotals, TransactionRecord
from ledger_kernel.domain.taxonomy import Category, TransactionType
from ledger_kernel.domain.values import BudgetPeriod, Money
from ledger_kernel.models.account import Account
from ledger_kernel.models.transaction import Transaction
from ledger_kernel.selectors.base import BaseSelector


class TransactionSelector(BaseSelector[Transaction]):
    """
    Selector for transaction reads.

    Contract:
        Side-effect free.  Returns TransactionRecord DTOs or Money.

    Non-goals:
        - Does NOT paginate beyond a simple limit.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def _owner_query(self, owner_id: UUID) -> Select:
        return (
            select(Transaction)
            .join(Account, Transaction.account_id == Account.id)
            .where(Account.owner_id == owner_id)
        )

    @staticmethod
    def _newest_first(query: Select) -> Select:
        return query.order_by(
            Transaction.transaction_date.desc(),
            Transaction.created_at.desc(),
        )

    def find_by_id(self, transaction_id: UUID) -> TransactionRecord | None:
        row = self.session.get(Transaction, transaction_id)
        if row is None:
            return None
        return TransactionRecord.from_model(row)

    def list_by_account(self, account_id: UUID) -> list[TransactionRecord]:
        rows = self.session.scalars(
            self._newest_first(
                select(Transaction).where(Transaction.account_id == account_id)
            )
        ).all()
        return [TransactionRecord.from_model(r) for r in rows]

    def list_recent_for_owner(self, owner_id: UUID, limit: int) -> list[TransactionRecord]:
        rows = self.session.scalars(
            self._newest_first(self._owner_query(owner_id)).limit(limit)
        ).all()
        return [TransactionRecord.from_model(r) for r in rows]

    def _sum(
        self,
        owner_id: UUID,
        transaction_type: TransactionType,
        start: date,
        end: date,
        category: Category | None = None,
    ) -> Money:
        query = (
            select(Transaction.amount)
            .join(Account, Transaction.account_id == Account.id)
            .where(
                Account.owner_id == owner_id,
                Transaction.transaction_type == transaction_type.value,
                Transaction.transaction_date >= start,
                Transaction.transaction_date <= end,
            )
        )
        if category is not None:
            query = query.where(Transaction.category == category.value)
        return Money.total(Money.of(a) for a in self.session.scalars(query))

    def spending_by_category_and_month(
        self, owner_id: UUID, category: Category, year: int, month: int
    ) -> Money:
        """Total EXPENSE amount in ``category`` during the calendar month."""
        period = BudgetPeriod(year=year, month=month)
        return self._sum(
            owner_id, TransactionType.EXPENSE, period.first_day, period.last_day, category
        )

    def total_income_for_period(self, owner_id: UUID, start: date, end: date) -> Money:
        return self._sum(owner_id, TransactionType.INCOME, start, end)

    def total_expenses_for_period(self, owner_id: UUID, start: date, end: date) -> Money:
        return self._sum(owner_id, TransactionType.EXPENSE, start, end)

    def totals_for_period(self, owner_id: UUID, start: date, end: date) -> PeriodTotals:
        return PeriodTotals(
            start=start,
            end=end,
            income=self.total_income_for_period(owner_id, start, end),
            expenses=self.total_expenses_for_period(owner_id, start, end),
        )

    def spending_by_category(
        self, owner_id: UUID, period: BudgetPeriod
    ) -> dict[Category, Money]:
        """EXPENSE totals per category for the month; only categories with spend > 0.

        Keys are in category enumeration order.
        """
        rows = self.session.execute(
            select(Transaction.category, Transaction.amount)
            .join(Account, Transaction.account_id == Account.id)
            .where(
                Account.owner_id == owner_id,
                Transaction.transaction_type == TransactionType.EXPENSE.value,
                Transaction.transaction_date >= period.first_day,
                Transaction.transaction_date <= period.last_day,
            )
        ).all()

        totals: dict[Category, Money] = {}
        for category, amount in rows:
            key = Category(category)
            totals[key] = totals.get(key, Money.zero()) + Money.of(amount)

        return {
            c: totals[c]
            for c in sorted(totals, key=lambda c: c.sort_key)
            if totals[c].is_positive
        }
