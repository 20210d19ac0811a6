"""Page view-models: local list state plus load/save/delete against storage."""

from family_finance.views.accounts import AccountsView
from family_finance.views.base import CrudView, fetch_models
from family_finance.views.fixed_expenses import (
    DEMO_FIXED_EXPENSES,
    TEMPLATE_FIXED_EXPENSES,
    DemoModeError,
    FixedExpensesView,
    ImportResult,
    MonthlyCard,
    classify_import_error,
)
from family_finance.views.projects import ProjectsView
from family_finance.views.reports import AccountOverviewView, BalanceView, ReportView, SummaryView
from family_finance.views.transactions import (
    TransactionsView,
    change_category,
    form_from_transaction,
    new_transaction_form,
)
from family_finance.views.worklog import WorkLogView, suggested_hours

__all__ = [
    # Base
    "CrudView",
    "ReportView",
    "fetch_models",
    # CRUD pages
    "AccountsView",
    "FixedExpensesView",
    "ProjectsView",
    "TransactionsView",
    "WorkLogView",
    # Report pages
    "AccountOverviewView",
    "BalanceView",
    "SummaryView",
    # Fixed expenses
    "DEMO_FIXED_EXPENSES",
    "TEMPLATE_FIXED_EXPENSES",
    "DemoModeError",
    "ImportResult",
    "MonthlyCard",
    "classify_import_error",
    # Form helpers
    "change_category",
    "form_from_transaction",
    "new_transaction_form",
    "suggested_hours",
]
