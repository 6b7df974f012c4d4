"""
True concurrency tests: many threads, one session each, real commits.

Verifies:
- N concurrent creates on one account leave initial + N * amount
- Mixed concurrent create/update/delete keep the balance equal to history
- Concurrent creation of the same budget admits exactly one

Uses ``session_factory`` (never the rollback ``session`` fixture) so that
each thread commits through its own connection.  On SQLite the writers are
serialized by BEGIN IMMEDIATE; on PostgreSQL by SELECT ... FOR UPDATE and
the budget unique constraint.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal
from threading import Barrier
from uuid import uuid4

import pytest

from ledger_kernel.domain.dtos import BudgetDraft, TransactionDraft
from ledger_kernel.domain.taxonomy import AccountKind, Category, TransactionType
from ledger_kernel.domain.values import BudgetPeriod, Money
from ledger_kernel.exceptions import DuplicateBudgetError
from ledger_kernel.selectors.ledger_selector import LedgerSelector
from ledger_kernel.services.account_service import AccountService
from ledger_kernel.services.budget_service import BudgetService
from ledger_kernel.services.transaction_service import TransactionService

pytestmark = [pytest.mark.concurrency]

THREADS = 10


def draft(amount: str, kind: TransactionType = TransactionType.INCOME, id=None) -> TransactionDraft:
    return TransactionDraft(
        amount=Money.of(amount),
        transaction_type=kind,
        category=Category.GIFT if kind is TransactionType.INCOME else Category.FOOD,
        transaction_date=date(2024, 3, 1),
        id=id,
    )


def open_shared_account(session_factory, opening: str = "1000.00"):
    setup = session_factory()
    try:
        return AccountService(setup).open_account(
            uuid4(), "Shared", AccountKind.CHECKING, Money.of(opening)
        )
    finally:
        setup.close()


class TestConcurrentCreates:
    """Concurrent writers on one account never lose an update."""

    def test_n_creates_sum_exactly(self, session_factory):
        """Ten threads each add 25.00 to the same account at once."""
        account = open_shared_account(session_factory)
        barrier = Barrier(THREADS)

        def worker(_):
            s = session_factory()
            try:
                barrier.wait(timeout=30)
                TransactionService(s).create(draft("25.00"), account.id)
                return True
            finally:
                s.close()

        with ThreadPoolExecutor(max_workers=THREADS) as pool:
            results = list(pool.map(worker, range(THREADS)))

        assert results == [True] * THREADS

        verify = session_factory()
        expected = Money.of(Decimal("1000.00") + THREADS * Decimal("25.00"))
        assert AccountService(verify).get(account.id).current_balance == expected
        assert len(TransactionService(verify).list_by_account(account.id)) == THREADS

    def test_mixed_operations_stay_consistent(self, session_factory):
        """Creates, updates and deletes racing on one account keep the invariant."""
        account = open_shared_account(session_factory)

        seed = session_factory()
        try:
            service = TransactionService(seed)
            existing = [
                service.create(draft("10.00", TransactionType.EXPENSE), account.id).id
                for _ in range(THREADS)
            ]
        finally:
            seed.close()

        barrier = Barrier(THREADS)

        def worker(i):
            s = session_factory()
            try:
                service = TransactionService(s)
                barrier.wait(timeout=30)
                if i % 3 == 0:
                    service.create(draft("7.50"), account.id)
                elif i % 3 == 1:
                    service.update(draft("3.25", TransactionType.INCOME, id=existing[i]))
                else:
                    service.delete(existing[i])
            finally:
                s.close()

        with ThreadPoolExecutor(max_workers=THREADS) as pool:
            list(pool.map(worker, range(THREADS)))

        verify = session_factory()
        check = LedgerSelector(verify).verify(account.id)
        assert check.is_consistent, f"cached {check.cached} != computed {check.computed}"


class TestConcurrentBudgets:
    def test_exactly_one_budget_wins(self, session_factory):
        owner_id = uuid4()
        period = BudgetPeriod(2024, 3)
        barrier = Barrier(THREADS)

        def worker(_):
            s = session_factory()
            try:
                barrier.wait(timeout=30)
                BudgetService(s).create(
                    BudgetDraft(owner_id, Category.FOOD, period, Money.of("100"))
                )
                return "created"
            except DuplicateBudgetError:
                return "duplicate"
            finally:
                s.close()

        with ThreadPoolExecutor(max_workers=THREADS) as pool:
            outcomes = list(pool.map(worker, range(THREADS)))

        assert outcomes.count("created") == 1
        assert outcomes.count("duplicate") == THREADS - 1

        verify = session_factory()
        assert len(BudgetService(verify).list_for_period(owner_id, period)) == 1
