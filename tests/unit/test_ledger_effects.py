"""
Unit tests for the pure ledger effect functions.

Verifies:
- INCOME raises and EXPENSE lowers the balance
- reverse undoes apply for any amount and type
- rebalance is reverse-old then apply-new
"""

from decimal import Decimal
from uuid import uuid4

from hypothesis import given
from hypothesis import strategies as st

from ledger_kernel.domain.dtos import AccountInfo
from ledger_kernel.domain.ledger import (
    apply_effect,
    fold_balance,
    rebalance,
    reverse_effect,
)
from ledger_kernel.domain.taxonomy import AccountKind, TransactionType
from ledger_kernel.domain.values import Money

amounts = st.decimals(
    min_value=Decimal("0.01"),
    max_value=Decimal("999999999.99"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
).map(Money.of)

balances = st.decimals(
    min_value=Decimal("-999999999.99"),
    max_value=Decimal("999999999.99"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
).map(Money.of)

types = st.sampled_from(list(TransactionType))


def make_account(balance: str | Money = "1000.00") -> AccountInfo:
    money = balance if isinstance(balance, Money) else Money.of(balance)
    return AccountInfo(
        id=uuid4(),
        owner_id=uuid4(),
        name="Checking",
        account_kind=AccountKind.CHECKING,
        initial_balance=money,
        current_balance=money,
    )


class TestApplyEffect:
    def test_income_increases(self):
        account = apply_effect(make_account(), Money.of("200"), TransactionType.INCOME)
        assert account.current_balance == Money.of("1200.00")

    def test_expense_decreases(self):
        account = apply_effect(make_account(), Money.of("50"), TransactionType.EXPENSE)
        assert account.current_balance == Money.of("950.00")

    def test_expense_may_overdraw(self):
        account = apply_effect(make_account("10"), Money.of("25"), TransactionType.EXPENSE)
        assert account.current_balance == Money.of("-15")

    def test_input_not_mutated(self):
        """AccountInfo is immutable; apply returns a new snapshot."""
        original = make_account()
        apply_effect(original, Money.of("1"), TransactionType.INCOME)
        assert original.current_balance == Money.of("1000.00")

    def test_initial_balance_untouched(self):
        account = apply_effect(make_account(), Money.of("1"), TransactionType.INCOME)
        assert account.initial_balance == Money.of("1000.00")


class TestReverseEffect:
    def test_reverse_income(self):
        account = reverse_effect(make_account("1200"), Money.of("200"), TransactionType.INCOME)
        assert account.current_balance == Money.of("1000")

    def test_reverse_expense(self):
        account = reverse_effect(make_account("950"), Money.of("50"), TransactionType.EXPENSE)
        assert account.current_balance == Money.of("1000")

    @given(balance=balances, amount=amounts, kind=types)
    def test_reverse_undoes_apply(self, balance, amount, kind):
        """reverse(apply(a, x, t), x, t) == a for all a, x, t."""
        account = make_account(balance)
        round_trip = reverse_effect(apply_effect(account, amount, kind), amount, kind)
        assert round_trip == account


class TestRebalance:
    def test_income_to_expense(self):
        """Updating +200 INCOME to 50 EXPENSE on 1200 yields 950."""
        account = rebalance(
            make_account("1200"),
            Money.of("200"),
            TransactionType.INCOME,
            Money.of("50"),
            TransactionType.EXPENSE,
        )
        assert account.current_balance == Money.of("950")

    @given(balance=balances, amount=amounts, kind=types)
    def test_same_values_net_zero(self, balance, amount, kind):
        """Rebalancing to identical amount and type leaves the balance unchanged."""
        account = make_account(balance)
        assert rebalance(account, amount, kind, amount, kind).current_balance == balance

    @given(balance=balances, old=amounts, new=amounts, old_kind=types, new_kind=types)
    def test_equals_reverse_then_apply(self, balance, old, new, old_kind, new_kind):
        account = make_account(balance)
        expected = apply_effect(reverse_effect(account, old, old_kind), new, new_kind)
        assert rebalance(account, old, old_kind, new, new_kind) == expected


class TestFoldBalance:
    def test_empty_history(self):
        assert fold_balance(Money.of("100"), []) == Money.of("100")

    def test_mixed_history(self):
        history = [
            (Money.of("200"), TransactionType.INCOME),
            (Money.of("50"), TransactionType.EXPENSE),
            (Money.of("0.01"), TransactionType.EXPENSE),
        ]
        assert fold_balance(Money.of("1000"), history) == Money.of("1149.99")
