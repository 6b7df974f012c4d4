"""
Taxonomy -- closed enumerations for accounts, transactions and categories.

The category set is partitioned into income and expense categories. Callers
ask ``is_expense_category`` rather than matching on names, so adding a member
forces a decision about which side of the partition it belongs to.
"""

from enum import Enum


class AccountKind(str, Enum):
    """Kinds of personal accounts."""

    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_LINE = "credit_line"
    OTHER = "other"


class TransactionType(str, Enum):
    """Direction of a transaction's effect on its account."""

    INCOME = "income"
    EXPENSE = "expense"


class Category(str, Enum):
    """Transaction categories, in display order.

    Declaration order is the canonical sort order for budget listings.
    """

    # Income
    SALARY = "salary"
    FREELANCE = "freelance"
    INVESTMENT = "investment"
    GIFT = "gift"
    OTHER_INCOME = "other_income"

    # Expense
    FOOD = "food"
    TRANSPORTATION = "transportation"
    HOUSING = "housing"
    UTILITIES = "utilities"
    HEALTHCARE = "healthcare"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    EDUCATION = "education"
    TRAVEL = "travel"
    OTHER_EXPENSE = "other_expense"

    @property
    def kind(self) -> TransactionType:
        return _CATEGORY_KIND[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES.get(self, self.value.replace("_", " ").title())

    @property
    def sort_key(self) -> int:
        return _ORDER[self]


_INCOME = frozenset(
    {
        Category.SALARY,
        Category.FREELANCE,
        Category.INVESTMENT,
        Category.GIFT,
        Category.OTHER_INCOME,
    }
)

_CATEGORY_KIND: dict[Category, TransactionType] = {
    c: (TransactionType.INCOME if c in _INCOME else TransactionType.EXPENSE)
    for c in Category
}

_ORDER: dict[Category, int] = {c: i for i, c in enumerate(Category)}

_DISPLAY_NAMES: dict[Category, str] = {
    Category.OTHER_INCOME: "Other Income",
    Category.OTHER_EXPENSE: "Other Expense",
}


def is_expense_category(category: Category) -> bool:
    return _CATEGORY_KIND[category] is TransactionType.EXPENSE


def is_income_category(category: Category) -> bool:
    return _CATEGORY_KIND[category] is TransactionType.INCOME


def expense_categories() -> tuple[Category, ...]:
    """All expense categories in declaration order."""
    return tuple(c for c in Category if is_expense_category(c))


def income_categories() -> tuple[Category, ...]:
    """All income categories in declaration order."""
    return tuple(c for c in Category if is_income_category(c))
