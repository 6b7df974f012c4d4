"""
Ledger Kernel

A personal-finance ledger with:
- Cached account balances kept consistent with their transaction history
- Atomic create/update/delete of transactions paired with balance writes
- Monthly per-category budgets and spend-vs-limit summaries
- Exact decimal arithmetic throughout
"""

__version__ = "0.1.0"
