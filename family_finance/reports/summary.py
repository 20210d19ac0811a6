"""
Monthly Category Summary

Groups income and expense rows by month, then type, then category.

Only the reporting currency counts toward totals and percentage shares;
rows in other currencies are still listed under their category.
Transfer and project categories are listed too, but they are left out
of the monthly total and of the percentage denominator, and get no
percentage of their own.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from family_finance.models.records import Transaction, TransactionType


UNCATEGORIZED = "未分类"

EXCLUDED_CATEGORIES = frozenset({"转账", "工程", "Transfer", "Project"})

SUMMARY_TYPES = (TransactionType.INCOME, TransactionType.EXPENSE)


class CategorySummary(BaseModel):
    """One category inside a month/type section."""

    category: str
    transactions: list[Transaction] = Field(default_factory=list)
    total: Decimal = Decimal("0")
    percent: Optional[Decimal] = None

    @property
    def is_excluded(self) -> bool:
        return self.category in EXCLUDED_CATEGORIES


class TypeSummary(BaseModel):
    """All income (or all expense) rows of one month."""

    type: TransactionType
    total: Decimal = Decimal("0")
    categories: dict[str, CategorySummary] = Field(default_factory=dict)

    @property
    def percent_base(self) -> Decimal:
        return sum(
            (c.total for c in self.categories.values() if not c.is_excluded),
            Decimal("0"),
        )


class MonthSummary(BaseModel):
    month: str
    types: dict[TransactionType, TypeSummary] = Field(default_factory=dict)


def percent_share(part: Decimal, base: Decimal) -> Optional[Decimal]:
    """part / base × 100 to two decimals, None when base is zero."""
    if base == 0:
        return None
    return (part / base * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def build_monthly_summary(
    transactions: Iterable[Transaction],
    currency: str = "CAD",
) -> list[MonthSummary]:
    """
    Summarize income/expense rows per month, newest month first.

    Within a month, categories keep the order they were first seen in
    and rows keep the input order.
    """
    months: dict[str, MonthSummary] = {}
    for tx in transactions:
        kind = tx.kind
        if kind not in SUMMARY_TYPES or tx.date is None:
            continue

        month = months.setdefault(tx.month, MonthSummary(month=tx.month))
        section = month.types.setdefault(kind, TypeSummary(type=kind))
        category = tx.category or UNCATEGORIZED
        bucket = section.categories.setdefault(category, CategorySummary(category=category))

        bucket.transactions.append(tx)
        if tx.currency != currency:
            continue
        bucket.total += tx.amount
        if not bucket.is_excluded:
            section.total += tx.amount

    for month in months.values():
        for section in month.types.values():
            base = section.percent_base
            for bucket in section.categories.values():
                if not bucket.is_excluded:
                    bucket.percent = percent_share(bucket.total, base)

    return [months[key] for key in sorted(months, reverse=True)]


def latest_month(summaries: list[MonthSummary]) -> Optional[str]:
    """The month the summary page opens expanded."""
    return max((s.month for s in summaries), default=None)
