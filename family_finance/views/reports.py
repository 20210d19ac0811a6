"""
Read-only Report Pages

Monthly summary, account overview and balance snapshot. Each fetches
the user's rows and hands them to a pure function in reports/; none of
them write anything.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from family_finance.audit import AuditLogger
from family_finance.config import get_settings
from family_finance.i18n import Lang
from family_finance.models.records import Account, Transaction
from family_finance.reports.balance import AccountSummary, build_account_overview, current_balance
from family_finance.reports.summary import MonthSummary, build_monthly_summary, latest_month
from family_finance.services.export import ExportFile, export_account_overview, export_balance_snapshot
from family_finance.services.storage import RecordStorageInterface
from family_finance.views.base import fetch_models


class ReportView:
    """Shared loading for pages built from accounts and transactions."""

    account_order = (("name", False),)
    transaction_order = (("date", False),)

    def __init__(
        self,
        storage: RecordStorageInterface,
        user_id: str,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self.user_id = user_id
        self._audit_logger = audit_logger or AuditLogger()
        self.accounts: list[Account] = []
        self.transactions: list[Transaction] = []
        self.load_error: Optional[str] = None

    async def load(self) -> None:
        self.accounts, account_error = await fetch_models(
            self._storage, "accounts", self.user_id, Account, self._audit_logger,
            order_by=self.account_order,
        )
        self.transactions, tx_error = await fetch_models(
            self._storage, "transactions", self.user_id, Transaction, self._audit_logger,
            order_by=self.transaction_order,
        )
        self.load_error = account_error or tx_error

    def _log_export(self, result: ExportFile) -> ExportFile:
        self._audit_logger.log_export(self.user_id, result.filename, result.sheet_count)
        return result


class SummaryView(ReportView):
    """Monthly category summary, totals in the reporting currency only."""

    transaction_order = (("date", True),)

    def __init__(self, *args, currency: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.currency = currency or get_settings().app.reporting_currency
        self.months: list[MonthSummary] = []

    async def load(self) -> None:
        self.transactions, self.load_error = await fetch_models(
            self._storage, "transactions", self.user_id, Transaction, self._audit_logger,
            order_by=self.transaction_order,
        )
        self.months = build_monthly_summary(self.transactions, currency=self.currency)

    @property
    def expanded_month(self) -> Optional[str]:
        return latest_month(self.months)


class AccountOverviewView(ReportView):
    """Per-account monthly statements."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.overview: dict[str, AccountSummary] = {}

    async def load(self) -> None:
        await super().load()
        self.overview = build_account_overview(self.accounts, self.transactions)

    def export(self, lang: Lang, today: Optional[date] = None) -> ExportFile:
        return self._log_export(export_account_overview(self.overview, lang, today=today))


class BalanceView(ReportView):
    """Current balance of every account."""

    def balances(self) -> list[tuple[Account, Decimal]]:
        return [(acc, current_balance(acc, self.transactions)) for acc in self.accounts]

    def export(self, lang: Lang) -> ExportFile:
        return self._log_export(export_balance_snapshot(self.accounts, self.transactions, lang))
