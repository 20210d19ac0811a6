"""Report package: pure aggregation over fetched rows."""

from family_finance.reports.balance import (
    UNASSIGNED_ACCOUNT_KEY,
    AccountSummary,
    MonthBucket,
    balance_through_month,
    build_account_overview,
    build_month_buckets,
    current_balance,
    family_totals_by_currency,
    month_key,
    previous_month,
    transactions_for_account,
)
from family_finance.reports.summary import (
    EXCLUDED_CATEGORIES,
    UNCATEGORIZED,
    CategorySummary,
    MonthSummary,
    TypeSummary,
    build_monthly_summary,
    latest_month,
    percent_share,
)
from family_finance.reports.worklog import (
    HolidayFilter,
    HoursBucket,
    WorkHourStats,
    compute_work_hour_stats,
    filter_holidays,
    week_start,
)

__all__ = [
    # Balance
    "UNASSIGNED_ACCOUNT_KEY",
    "AccountSummary",
    "MonthBucket",
    "balance_through_month",
    "build_account_overview",
    "build_month_buckets",
    "current_balance",
    "family_totals_by_currency",
    "month_key",
    "previous_month",
    "transactions_for_account",
    # Summary
    "EXCLUDED_CATEGORIES",
    "UNCATEGORIZED",
    "CategorySummary",
    "MonthSummary",
    "TypeSummary",
    "build_monthly_summary",
    "latest_month",
    "percent_share",
    # Work hours
    "HolidayFilter",
    "HoursBucket",
    "WorkHourStats",
    "compute_work_hour_stats",
    "filter_holidays",
    "week_start",
]
