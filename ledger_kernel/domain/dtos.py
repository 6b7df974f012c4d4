"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable data structures that cross the service boundary:
    drafts (caller input), records (persisted state read back), and derived
    reports (budget summaries, period totals, balance checks, dashboard).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    from_model() class methods are boundary converters invoked only from
    services and selectors, never from domain logic.

Invariants enforced:
    - Services and selectors return these DTOs, never ORM entities.
    - Every monetary field is a Money value object, never a raw Decimal.

Data flow:
    TransactionDraft -> Transaction (ORM) -> TransactionRecord
    BudgetDraft      -> Budget (ORM)      -> BudgetRecord -> BudgetSummary
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from ledger_kernel.domain.taxonomy import AccountKind, Category, TransactionType
from ledger_kernel.domain.values import BudgetPeriod, Money

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account as AccountModel
    from ledger_kernel.models.budget import Budget as BudgetModel
    from ledger_kernel.models.transaction import Transaction as TransactionModel


class BudgetStatus(str, Enum):
    """Progress band of a budget for its period."""

    ON_TRACK = "on_track"
    CAUTION = "caution"
    WARNING = "warning"
    EXCEEDED = "exceeded"


@dataclass(frozen=True)
class AccountInfo:
    """
    Pure domain representation of an account.

    Contract:
        Immutable snapshot of account state.  The ledger functions take and
        return AccountInfo; the service writes ``current_balance`` back to
        the row.

    Non-goals:
        - Does NOT carry the account's transactions.
    """

    id: UUID
    owner_id: UUID
    name: str
    account_kind: AccountKind
    initial_balance: Money
    current_balance: Money

    @classmethod
    def from_model(cls, model: AccountModel) -> AccountInfo:
        return cls(
            id=model.id,
            owner_id=model.owner_id,
            name=model.name,
            account_kind=AccountKind(model.account_kind),
            initial_balance=Money.of(model.initial_balance),
            current_balance=Money.of(model.current_balance),
        )


@dataclass(frozen=True)
class TransactionDraft:
    """
    Caller input for creating or updating a transaction.

    ``id`` is required for updates and ignored on create.  The owning account
    is passed separately to ``create`` and cannot be changed by ``update``.
    """

    amount: Money
    transaction_type: TransactionType
    category: Category
    transaction_date: date
    description: str = ""
    id: UUID | None = None


@dataclass(frozen=True)
class TransactionRecord:
    """A persisted transaction."""

    id: UUID
    account_id: UUID
    amount: Money
    transaction_type: TransactionType
    category: Category
    transaction_date: date
    description: str
    created_at: datetime

    @classmethod
    def from_model(cls, model: TransactionModel) -> TransactionRecord:
        return cls(
            id=model.id,
            account_id=model.account_id,
            amount=Money.of(model.amount),
            transaction_type=TransactionType(model.transaction_type),
            category=Category(model.category),
            transaction_date=model.transaction_date,
            description=model.description,
            created_at=model.created_at,
        )


@dataclass(frozen=True)
class BudgetDraft:
    """
    Caller input for creating or updating a budget.

    On update only ``limit`` is applied; ``category`` and ``period`` of an
    existing budget are immutable.
    """

    owner_id: UUID | None
    category: Category
    period: BudgetPeriod
    limit: Money
    id: UUID | None = None


@dataclass(frozen=True)
class BudgetRecord:
    """A persisted budget."""

    id: UUID
    owner_id: UUID
    category: Category
    period: BudgetPeriod
    limit: Money
    created_at: datetime

    @classmethod
    def from_model(cls, model: BudgetModel) -> BudgetRecord:
        return cls(
            id=model.id,
            owner_id=model.owner_id,
            category=Category(model.category),
            period=BudgetPeriod(year=model.period_year, month=model.period_month),
            limit=Money.of(model.limit_amount),
            created_at=model.created_at,
        )


@dataclass(frozen=True)
class BudgetSummary:
    """
    Derived spend-vs-limit view of one budget.  Never persisted.

    Guarantees:
        - remaining == budget.limit - spent (may be negative)
        - is_exceeded == (spent > budget.limit)
    """

    budget: BudgetRecord
    spent: Money
    remaining: Money
    usage_percentage: Decimal
    is_exceeded: bool
    status: BudgetStatus


@dataclass(frozen=True)
class PeriodTotals:
    """Income and expense totals over an inclusive date range."""

    start: date
    end: date
    income: Money
    expenses: Money

    @property
    def net(self) -> Money:
        return self.income - self.expenses


@dataclass(frozen=True)
class BalanceCheck:
    """Cached account balance compared with the fold over its history."""

    account_id: UUID
    cached: Money
    computed: Money

    @property
    def is_consistent(self) -> bool:
        return self.cached == self.computed

    @property
    def drift(self) -> Money:
        return self.cached - self.computed


@dataclass(frozen=True)
class DashboardSummary:
    """Per-owner overview for one calendar month."""

    owner_id: UUID
    period: BudgetPeriod
    total_accounts: int
    net_worth: Money
    period_income: Money
    period_expenses: Money
    total_budgets: int
    budgets_on_track: int
    budgets_over_limit: int
    total_budgeted: Money
    total_spent_on_budgets: Money
    spending_by_category: dict[Category, Money] = field(default_factory=dict)
    recent_transactions: tuple[TransactionRecord, ...] = ()

    @property
    def period_net(self) -> Money:
        return self.period_income - self.period_expenses
