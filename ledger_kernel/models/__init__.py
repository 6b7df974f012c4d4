"""ORM models for the ledger kernel."""

from ledger_kernel.models.account import Account
from ledger_kernel.models.budget import Budget
from ledger_kernel.models.transaction import Transaction

__all__ = [
    "Account",
    "Budget",
    "Transaction",
]
