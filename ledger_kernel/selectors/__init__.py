"""Read-only query selectors (the Q side of CQRS-lite)."""

from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.selectors.base import BaseSelector
from ledger_kernel.selectors.ledger_selector import LedgerSelector
from ledger_kernel.selectors.transaction_selector import TransactionSelector

__all__ = [
    "AccountSelector",
    "BaseSelector",
    "LedgerSelector",
    "TransactionSelector",
]
