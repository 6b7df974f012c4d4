"""
Values -- Immutable, self-validating domain value objects.

Responsibility:
    Provides the value types every balance and budget computation is written
    in terms of: Money (exact decimal amount) and BudgetPeriod (calendar
    year + month).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every other domain module. No outward dependencies.

Invariants enforced:
    - All monetary amounts are Decimal, never float. Float input is rejected
      at construction so binary rounding error cannot enter a balance.
    - Money equality is by decimal value: Money.of("1.0") == Money.of("1.00"),
      and equal values hash equally.
    - BudgetPeriod month is always 1..12.

Failure modes:
    - TypeError when Money is built from a float or mixed with a non-Money.
    - ValueError on unparseable amounts or invalid periods.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Wraps an arbitrary-precision Decimal. The kernel is single-currency,
        so Money carries no currency code; arithmetic never rounds.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - amount is always a Decimal (never float)
        - Repeated add/subtract sequences accumulate no rounding error

    Non-goals:
        - Does NOT perform currency conversion
        - Does NOT auto-round -- callers must explicitly call .round()
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if isinstance(self.amount, float):
            raise TypeError("Money cannot be built from float; pass Decimal, str or int")
        if not isinstance(self.amount, Decimal):
            try:
                object.__setattr__(self, "amount", Decimal(str(self.amount)))
            except (InvalidOperation, ValueError) as e:
                raise ValueError(f"Invalid amount: {self.amount}") from e
        if not self.amount.is_finite():
            raise ValueError(f"Invalid amount: {self.amount}")

    @classmethod
    def of(cls, amount: Decimal | str | int) -> Money:
        """
        Factory method for creating Money.

        Raises:
            TypeError: If amount is a float.
            ValueError: If amount cannot be converted to Decimal.
        """
        return cls(amount=amount)

    @classmethod
    def zero(cls) -> Money:
        """Create a zero amount."""
        return cls(amount=_ZERO)

    @classmethod
    def total(cls, amounts: Iterable[Money]) -> Money:
        """Sum an iterable of Money; an empty iterable totals zero."""
        result = _ZERO
        for money in amounts:
            result += money.amount
        return cls(amount=result)

    @property
    def is_zero(self) -> bool:
        """Check if amount is zero."""
        return self.amount == _ZERO

    @property
    def is_positive(self) -> bool:
        """Check if amount is positive."""
        return self.amount > _ZERO

    @property
    def is_negative(self) -> bool:
        """Check if amount is negative."""
        return self.amount < _ZERO

    def round(self, places: int = 2, rounding: str = ROUND_HALF_UP) -> Money:
        """Return a new Money quantized to ``places`` decimal places."""
        quantum = Decimal(1).scaleb(-places)
        return Money(amount=self.amount.quantize(quantum, rounding=rounding))

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(amount=self.amount + other.amount)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(amount=self.amount - other.amount)

    def __neg__(self) -> Money:
        return Money(amount=-self.amount)

    def __abs__(self) -> Money:
        return Money(amount=abs(self.amount))

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.amount >= other.amount

    def __str__(self) -> str:
        return str(self.amount)

    def __repr__(self) -> str:
        return f"Money({self.amount!r})"


@dataclass(frozen=True, slots=True, order=True)
class BudgetPeriod:
    """
    A calendar month that budgets and monthly aggregates are keyed by.

    Guarantees:
        - Ordered chronologically (year, then month).
        - str() renders as ``YYYY-MM``; parse() accepts the same form.
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Invalid month: {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"Invalid year: {self.year}")

    @classmethod
    def parse(cls, value: str) -> BudgetPeriod:
        """Parse ``YYYY-MM``."""
        try:
            year_str, month_str = value.strip().split("-")
            return cls(year=int(year_str), month=int(month_str))
        except (AttributeError, ValueError) as e:
            raise ValueError(f"Invalid budget period: {value!r}") from e

    @classmethod
    def containing(cls, day: date) -> BudgetPeriod:
        return cls(year=day.year, month=day.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def next(self) -> BudgetPeriod:
        if self.month == 12:
            return BudgetPeriod(year=self.year + 1, month=1)
        return BudgetPeriod(year=self.year, month=self.month + 1)

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
