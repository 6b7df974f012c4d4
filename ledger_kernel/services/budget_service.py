"""
BudgetService -- the budget aggregation engine.

Responsibility:
    Maintains monthly per-category spending limits and derives
    spend-vs-limit summaries for them from the transaction history.

Architecture position:
    Kernel > Services.  Depends on TransactionService for the monthly
    category spending aggregate and on domain/budgeting.py for the summary
    arithmetic.

Invariants enforced:
    - At most one budget per (owner, category, period): an existence query
      before insert, backed by a unique constraint for racing inserts.
    - Budgets are only defined for expense categories.
    - Only the limit of an existing budget can change.
    - Summaries and listings are ordered by category enumeration order.

Failure modes:
    - MissingOwnerError / MissingIdentifierError / InvalidBudgetLimitError /
      NonExpenseCategoryError: rejected before any write.
    - DuplicateBudgetError: (owner, category, period) already budgeted.
    - BudgetNotFoundError: id does not resolve.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from ledger_kernel.config import DEFAULT_CONFIG, KernelConfig
from ledger_kernel.domain import budgeting
from ledger_kernel.domain.clock import Clock
from ledger_kernel.domain.dtos import BudgetDraft, BudgetRecord, BudgetSummary
from ledger_kernel.domain.taxonomy import Category, is_expense_category
from ledger_kernel.domain.values import BudgetPeriod, Money
from ledger_kernel.exceptions import (
    BudgetNotFoundError,
    DuplicateBudgetError,
    InvalidBudgetLimitError,
    MissingIdentifierError,
    MissingOwnerError,
    NonExpenseCategoryError,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.budget import Budget
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.transaction_service import TransactionService

logger = get_logger("services.budget")


class BudgetService(BaseService[Budget]):
    """
    Budget writes, listings and period summaries.

    Contract:
        Summaries are computed on demand and never stored.  ``spent`` is the
        owner's EXPENSE total in the budget's category for the budget's
        calendar month, across all of the owner's accounts.

    Non-goals:
        - Does NOT roll unused budget over into the next period.
    """

    def __init__(
        self,
        session: Session,
        transactions: TransactionService | None = None,
        clock: Clock | None = None,
        auto_commit: bool = True,
        config: KernelConfig | None = None,
    ):
        super().__init__(session, clock=clock, auto_commit=auto_commit)
        cfg = config or DEFAULT_CONFIG
        self._transactions = transactions or TransactionService(
            session, clock=clock, auto_commit=auto_commit, config=cfg
        )
        self._warning_percent = Decimal(cfg.budget_warning_percent)
        self._caution_percent = Decimal(cfg.budget_caution_percent)

    @staticmethod
    def _validate_limit(limit: Money) -> None:
        if not limit.is_positive:
            raise InvalidBudgetLimitError(str(limit))

    def _exists(self, owner_id: UUID, category: Category, period: BudgetPeriod) -> bool:
        return bool(
            self.session.scalar(
                select(
                    exists().where(
                        Budget.owner_id == owner_id,
                        Budget.category == category.value,
                        Budget.period_year == period.year,
                        Budget.period_month == period.month,
                    )
                )
            )
        )

    def _get(self, budget_id: UUID) -> Budget:
        budget = self.session.get(Budget, budget_id)
        if budget is None:
            raise BudgetNotFoundError(str(budget_id))
        return budget

    def create(self, draft: BudgetDraft) -> BudgetRecord:
        """
        Create a budget for an expense category in one month.

        Raises:
            MissingOwnerError: draft.owner_id is None.
            InvalidBudgetLimitError: limit <= 0.
            NonExpenseCategoryError: category is an income category.
            DuplicateBudgetError: the owner already budgets this category
                and period.
        """
        if draft.owner_id is None:
            raise MissingOwnerError("budget")
        self._validate_limit(draft.limit)
        category = Category(draft.category)
        if not is_expense_category(category):
            raise NonExpenseCategoryError(category.value)

        def conflict() -> DuplicateBudgetError:
            logger.warning(
                "budget_conflict",
                extra={"category": category.value, "period": str(draft.period)},
            )
            return DuplicateBudgetError(
                str(draft.owner_id), category.display_name, str(draft.period)
            )

        with LogContext.bind(owner_id=draft.owner_id):
            if self._exists(draft.owner_id, category, draft.period):
                raise conflict()

            with self._atomic("create_budget", on_integrity_error=conflict):
                now = self._clock.now()
                budget = Budget(
                    owner_id=draft.owner_id,
                    category=category.value,
                    period_year=draft.period.year,
                    period_month=draft.period.month,
                    limit_amount=draft.limit.amount,
                    created_at=now,
                    updated_at=now,
                )
                self.session.add(budget)
                self.session.flush()
                record = BudgetRecord.from_model(budget)

            logger.info(
                "budget_created",
                extra={
                    "budget_id": str(record.id),
                    "category": category.value,
                    "period": str(record.period),
                    "limit": str(record.limit),
                },
            )
        return record

    def update(self, draft: BudgetDraft) -> BudgetRecord:
        """
        Change the limit of an existing budget.

        ``draft.category`` and ``draft.period`` are ignored; a budget's
        category and period never change.

        Raises:
            MissingIdentifierError: draft.id is None.
            InvalidBudgetLimitError: limit <= 0.
            BudgetNotFoundError: draft.id does not resolve.
        """
        if draft.id is None:
            raise MissingIdentifierError("budget")
        self._validate_limit(draft.limit)

        with LogContext.bind(budget_id=draft.id):
            with self._atomic("update_budget"):
                budget = self._get(draft.id)
                previous = budget.limit_amount
                budget.limit_amount = draft.limit.amount
                budget.updated_at = self._clock.now()
                self.session.flush()
                record = BudgetRecord.from_model(budget)

            logger.info(
                "budget_updated",
                extra={"previous_limit": str(previous), "limit": str(record.limit)},
            )
        return record

    def delete(self, budget_id: UUID) -> None:
        """Raises BudgetNotFoundError if budget_id does not resolve."""
        with LogContext.bind(budget_id=budget_id):
            with self._atomic("delete_budget"):
                self.session.delete(self._get(budget_id))
                self.session.flush()
            logger.info("budget_deleted")

    def find_by_id(self, budget_id: UUID) -> BudgetRecord | None:
        budget = self.session.get(Budget, budget_id)
        return BudgetRecord.from_model(budget) if budget is not None else None

    def list_for_period(self, owner_id: UUID, period: BudgetPeriod) -> list[BudgetRecord]:
        """The owner's budgets for ``period`` in category order."""
        rows = self.session.scalars(
            select(Budget).where(
                Budget.owner_id == owner_id,
                Budget.period_year == period.year,
                Budget.period_month == period.month,
            )
        ).all()
        records = [BudgetRecord.from_model(r) for r in rows]
        return sorted(records, key=lambda r: r.category.sort_key)

    def list_for_owner(self, owner_id: UUID) -> list[BudgetRecord]:
        """All of the owner's budgets, newest period first, then category order."""
        rows = self.session.scalars(select(Budget).where(Budget.owner_id == owner_id)).all()
        records = [BudgetRecord.from_model(r) for r in rows]
        return sorted(
            records,
            key=lambda r: (-r.period.year, -r.period.month, r.category.sort_key),
        )

    def summary_for_period(self, owner_id: UUID, period: BudgetPeriod) -> list[BudgetSummary]:
        """Spend-vs-limit summaries of the owner's budgets for ``period``."""
        summaries = [
            budgeting.summarize(
                budget,
                self._transactions.spending_by_category_and_month(
                    owner_id, budget.category, period.year, period.month
                ),
                warning_percent=self._warning_percent,
                caution_percent=self._caution_percent,
            )
            for budget in self.list_for_period(owner_id, period)
        ]
        return budgeting.sort_by_category(summaries)

    def available_categories(self, owner_id: UUID, period: BudgetPeriod) -> list[Category]:
        """Expense categories the owner has not budgeted for ``period``."""
        return budgeting.available_categories(
            b.category for b in self.list_for_period(owner_id, period)
        )

    @property
    def warning_percent(self) -> Decimal:
        return self._warning_percent
