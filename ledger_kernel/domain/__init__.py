"""
Pure domain layer.

Data transfer objects, value types and balance/budget arithmetic with NO
dependencies on the ORM, the database, or I/O.  All domain objects are
immutable and deterministic.
"""

from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.dtos import (
    AccountInfo,
    BalanceCheck,
    BudgetDraft,
    BudgetRecord,
    BudgetStatus,
    BudgetSummary,
    DashboardSummary,
    PeriodTotals,
    TransactionDraft,
    TransactionRecord,
)
from ledger_kernel.domain.ledger import apply_effect, rebalance, reverse_effect
from ledger_kernel.domain.taxonomy import (
    AccountKind,
    Category,
    TransactionType,
    is_expense_category,
    is_income_category,
)
from ledger_kernel.domain.values import BudgetPeriod, Money

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "AccountInfo",
    "BalanceCheck",
    "BudgetDraft",
    "BudgetRecord",
    "BudgetStatus",
    "BudgetSummary",
    "DashboardSummary",
    "PeriodTotals",
    "TransactionDraft",
    "TransactionRecord",
    "apply_effect",
    "rebalance",
    "reverse_effect",
    "AccountKind",
    "Category",
    "TransactionType",
    "is_expense_category",
    "is_income_category",
    "BudgetPeriod",
    "Money",
]
