"""Kernel services: the write side and the upward interface."""

from ledger_kernel.services.account_service import AccountService
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.budget_service import BudgetService
from ledger_kernel.services.dashboard_service import DashboardService
from ledger_kernel.services.transaction_service import TransactionService

__all__ = [
    "AccountService",
    "BaseService",
    "BudgetService",
    "DashboardService",
    "TransactionService",
]
