"""
Budgeting -- spend-vs-limit arithmetic for monthly category budgets.

Responsibility:
    Pure computation of budget summaries from a budget and the amount spent
    against it, plus the status banding and the "which categories can still
    be budgeted" rule.  The budget service supplies the spent amount from the
    transaction history.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - remaining = limit - spent, allowed to go negative.
    - usage_percentage = spent / limit * 100, rounded half-up to 2 places;
      defined as 0 when the limit is 0.
    - exceeded iff spent > limit (spending exactly the limit is not exceeded).
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from ledger_kernel.domain.dtos import BudgetRecord, BudgetStatus, BudgetSummary
from ledger_kernel.domain.taxonomy import Category, expense_categories
from ledger_kernel.domain.values import Money

DEFAULT_WARNING_PERCENT = Decimal("80")
DEFAULT_CAUTION_PERCENT = Decimal("60")

_HUNDRED = Decimal("100")
_CENT = Decimal("0.01")


def usage_percentage(spent: Money, limit: Money) -> Decimal:
    if limit.is_zero:
        return Decimal("0")
    return (spent.amount / limit.amount * _HUNDRED).quantize(_CENT, rounding=ROUND_HALF_UP)


def classify(
    usage: Decimal,
    exceeded: bool,
    warning_percent: Decimal = DEFAULT_WARNING_PERCENT,
    caution_percent: Decimal = DEFAULT_CAUTION_PERCENT,
) -> BudgetStatus:
    """Map a usage percentage to its progress band."""
    if exceeded:
        return BudgetStatus.EXCEEDED
    if usage >= warning_percent:
        return BudgetStatus.WARNING
    if usage >= caution_percent:
        return BudgetStatus.CAUTION
    return BudgetStatus.ON_TRACK


def summarize(
    budget: BudgetRecord,
    spent: Money,
    warning_percent: Decimal = DEFAULT_WARNING_PERCENT,
    caution_percent: Decimal = DEFAULT_CAUTION_PERCENT,
) -> BudgetSummary:
    """Build the derived summary of ``budget`` given what was spent in its period."""
    usage = usage_percentage(spent, budget.limit)
    exceeded = spent > budget.limit
    return BudgetSummary(
        budget=budget,
        spent=spent,
        remaining=budget.limit - spent,
        usage_percentage=usage,
        is_exceeded=exceeded,
        status=classify(usage, exceeded, warning_percent, caution_percent),
    )


def available_categories(budgeted: Iterable[Category]) -> list[Category]:
    """Expense categories not yet budgeted, in enumeration order."""
    taken = set(budgeted)
    return [c for c in expense_categories() if c not in taken]


def sort_by_category(summaries: Iterable[BudgetSummary]) -> list[BudgetSummary]:
    return sorted(summaries, key=lambda s: s.budget.category.sort_key)
