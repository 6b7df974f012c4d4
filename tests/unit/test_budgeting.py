"""
Unit tests for budget summary arithmetic.

Verifies:
- remaining / usage / exceeded for the canonical cases
- status banding thresholds
- available categories
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from ledger_kernel.domain.budgeting import (
    available_categories,
    classify,
    sort_by_category,
    summarize,
    usage_percentage,
)
from ledger_kernel.domain.dtos import BudgetRecord, BudgetStatus
from ledger_kernel.domain.taxonomy import Category, expense_categories
from ledger_kernel.domain.values import BudgetPeriod, Money


def make_budget(limit: str, category: Category = Category.FOOD) -> BudgetRecord:
    return BudgetRecord(
        id=uuid4(),
        owner_id=uuid4(),
        category=category,
        period=BudgetPeriod(2024, 3),
        limit=Money.of(limit),
        created_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
    )


class TestSummarize:
    def test_under_limit(self):
        """Limit 500, spent 450: remaining 50, usage 90.0, not exceeded."""
        summary = summarize(make_budget("500.00"), Money.of("450.00"))
        assert summary.remaining == Money.of("50.00")
        assert summary.usage_percentage == Decimal("90.0")
        assert summary.is_exceeded is False
        assert summary.status is BudgetStatus.WARNING

    def test_over_limit(self):
        """Limit 500, spent 520: remaining -20, exceeded."""
        summary = summarize(make_budget("500.00"), Money.of("520.00"))
        assert summary.remaining == Money.of("-20.00")
        assert summary.usage_percentage == Decimal("104.00")
        assert summary.is_exceeded is True
        assert summary.status is BudgetStatus.EXCEEDED

    def test_exactly_at_limit_not_exceeded(self):
        summary = summarize(make_budget("500"), Money.of("500"))
        assert summary.is_exceeded is False
        assert summary.remaining.is_zero
        assert summary.usage_percentage == Decimal("100")

    def test_nothing_spent(self):
        summary = summarize(make_budget("500"), Money.zero())
        assert summary.usage_percentage == Decimal("0")
        assert summary.remaining == Money.of("500")
        assert summary.status is BudgetStatus.ON_TRACK


class TestUsagePercentage:
    def test_rounds_half_up_to_cents(self):
        # 1/3 * 100 = 33.333...
        assert usage_percentage(Money.of("1"), Money.of("3")) == Decimal("33.33")
        # 2/3 * 100 = 66.666...
        assert usage_percentage(Money.of("2"), Money.of("3")) == Decimal("66.67")

    def test_zero_limit_is_zero(self):
        assert usage_percentage(Money.of("10"), Money.zero()) == Decimal("0")


class TestClassify:
    @pytest.mark.parametrize(
        "usage, expected",
        [
            ("0", BudgetStatus.ON_TRACK),
            ("59.99", BudgetStatus.ON_TRACK),
            ("60", BudgetStatus.CAUTION),
            ("79.99", BudgetStatus.CAUTION),
            ("80", BudgetStatus.WARNING),
            ("100", BudgetStatus.WARNING),
        ],
    )
    def test_bands(self, usage, expected):
        assert classify(Decimal(usage), exceeded=False) is expected

    def test_exceeded_wins(self):
        assert classify(Decimal("10"), exceeded=True) is BudgetStatus.EXCEEDED

    def test_custom_thresholds(self):
        assert (
            classify(Decimal("50"), False, Decimal("90"), Decimal("50"))
            is BudgetStatus.CAUTION
        )


class TestAvailableCategories:
    def test_none_budgeted(self):
        assert available_categories([]) == list(expense_categories())

    def test_excludes_budgeted_keeps_order(self):
        result = available_categories([Category.HOUSING, Category.FOOD])
        assert Category.FOOD not in result
        assert Category.HOUSING not in result
        assert result[0] is Category.TRANSPORTATION
        assert result == [c for c in expense_categories() if c not in (Category.FOOD, Category.HOUSING)]

    def test_never_offers_income(self):
        assert Category.SALARY not in available_categories([])


def test_sort_by_category_uses_enumeration_order():
    summaries = [
        summarize(make_budget("100", Category.TRAVEL), Money.zero()),
        summarize(make_budget("100", Category.FOOD), Money.zero()),
        summarize(make_budget("100", Category.UTILITIES), Money.zero()),
    ]
    ordered = [s.budget.category for s in sort_by_category(summaries)]
    assert ordered == [Category.FOOD, Category.UTILITIES, Category.TRAVEL]
