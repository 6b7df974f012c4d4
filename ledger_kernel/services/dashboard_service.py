"""
DashboardService -- one-call monthly overview for an owner.

Read-only composition of the account, transaction and budget reads: net
worth, the month's income and expenses, budget progress counters, spending
per expense category, and the most recent transactions.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from ledger_kernel.config import DEFAULT_CONFIG, KernelConfig
from ledger_kernel.domain.dtos import DashboardSummary
from ledger_kernel.domain.values import BudgetPeriod, Money
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.services.budget_service import BudgetService
from ledger_kernel.services.transaction_service import TransactionService

logger = get_logger("services.dashboard")


class DashboardService:
    """Builds DashboardSummary snapshots.  Never writes."""

    def __init__(self, session: Session, config: KernelConfig | None = None):
        cfg = config or DEFAULT_CONFIG
        self._config = cfg
        self._accounts = AccountSelector(session)
        self._transactions = TransactionService(session, config=cfg)
        self._budgets = BudgetService(session, transactions=self._transactions, config=cfg)

    def overview(
        self,
        owner_id: UUID,
        period: BudgetPeriod,
        recent_limit: int | None = None,
    ) -> DashboardSummary:
        """
        Build the overview of ``owner_id`` for ``period``.

        A budget counts as on track when it is not exceeded and its usage is
        at most the warning threshold; exceeded budgets count as over limit.
        """
        with LogContext.bind(owner_id=owner_id):
            totals = self._transactions.totals_for_period(
                owner_id, period.first_day, period.last_day
            )
            summaries = self._budgets.summary_for_period(owner_id, period)

            on_track = 0
            over_limit = 0
            for summary in summaries:
                if summary.is_exceeded:
                    over_limit += 1
                elif summary.usage_percentage <= self._budgets.warning_percent:
                    on_track += 1

            overview = DashboardSummary(
                owner_id=owner_id,
                period=period,
                total_accounts=self._accounts.count_for_owner(owner_id),
                net_worth=self._accounts.net_worth(owner_id),
                period_income=totals.income,
                period_expenses=totals.expenses,
                total_budgets=len(summaries),
                budgets_on_track=on_track,
                budgets_over_limit=over_limit,
                total_budgeted=Money.total(s.budget.limit for s in summaries),
                total_spent_on_budgets=Money.total(s.spent for s in summaries),
                spending_by_category=self._transactions.spending_by_category(owner_id, period),
                recent_transactions=tuple(
                    self._transactions.list_recent_for_owner(
                        owner_id,
                        recent_limit
                        if recent_limit is not None
                        else self._config.recent_transactions_limit,
                    )
                ),
            )
            logger.debug(
                "dashboard_built",
                extra={"period": str(period), "total_budgets": overview.total_budgets},
            )
        return overview
