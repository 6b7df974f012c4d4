"""
Ledger -- balance effects of a transaction on its account.

Responsibility:
    Pure functions computing the account state after a transaction's effect
    is applied or reversed.  Services call these before writing anything, then
    persist the returned ``current_balance``.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - INCOME raises the balance by ``amount``; EXPENSE lowers it.
    - reverse_effect(apply_effect(a, x, t), x, t) == a for every a, x, t.
    - A change of amount or type is always reverse-old then apply-new,
      never a single signed delta.
"""

from dataclasses import replace

from ledger_kernel.domain.dtos import AccountInfo
from ledger_kernel.domain.taxonomy import TransactionType
from ledger_kernel.domain.values import Money


def signed_amount(amount: Money, transaction_type: TransactionType) -> Money:
    """The balance delta of a transaction: +amount for income, -amount for expense."""
    if transaction_type is TransactionType.INCOME:
        return amount
    if transaction_type is TransactionType.EXPENSE:
        return -amount
    raise ValueError(f"Unknown transaction type: {transaction_type!r}")


def apply_effect(
    account: AccountInfo, amount: Money, transaction_type: TransactionType
) -> AccountInfo:
    """Return ``account`` with the transaction's effect added to its balance."""
    return replace(
        account,
        current_balance=account.current_balance + signed_amount(amount, transaction_type),
    )


def reverse_effect(
    account: AccountInfo, amount: Money, transaction_type: TransactionType
) -> AccountInfo:
    """Return ``account`` with the transaction's effect removed from its balance."""
    return replace(
        account,
        current_balance=account.current_balance - signed_amount(amount, transaction_type),
    )


def rebalance(
    account: AccountInfo,
    old_amount: Money,
    old_type: TransactionType,
    new_amount: Money,
    new_type: TransactionType,
) -> AccountInfo:
    """Replace one transaction's effect with another's: reverse old, then apply new."""
    return apply_effect(reverse_effect(account, old_amount, old_type), new_amount, new_type)


def fold_balance(
    initial_balance: Money, effects: list[tuple[Money, TransactionType]]
) -> Money:
    """Initial balance plus every effect in ``effects``; the history-derived balance."""
    return initial_balance + Money.total(
        signed_amount(amount, transaction_type) for amount, transaction_type in effects
    )
