"""
Balance Aggregation

Computes running balances and per-month income/expense/transfer buckets
from an account's anchor (initial_balance, initial_date) and the user's
transactions.

RULES:
- Amounts are summed with their stored sign. Type is only used to
  sort rows into buckets and to drop transfers, never to flip a sign.
- Transfers never move a balance or a total, but they are listed.
- Rows dated before the account's initial_date are ignored entirely.
- Rows without a date are ignored.
- A month with no rows has no bucket.

Everything here is a pure function over in-memory lists.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from family_finance.models.records import Account, Transaction, TransactionType


UNASSIGNED_ACCOUNT_KEY = "未分配账户"


def month_key(value: Optional[date]) -> str:
    """YYYY-MM for a date, "" when missing."""
    return value.strftime("%Y-%m") if value else ""


def previous_month(key: str) -> str:
    """The YYYY-MM before `key`."""
    year, month = (int(part) for part in key.split("-"))
    if month == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{month - 1:02d}"


def transactions_for_account(
    account_id: Optional[str],
    transactions: Iterable[Transaction],
) -> list[Transaction]:
    """
    Rows belonging to one account, oldest first.

    `account_id=None` selects the rows with no account.
    """
    rows = [tx for tx in transactions if tx.account_id == account_id]
    rows.sort(key=lambda tx: tx.date.isoformat() if tx.date else "")
    return rows


def _counts_toward_balance(account: Account, tx: Transaction) -> bool:
    if tx.date is None or tx.is_transfer:
        return False
    if account.initial_date and tx.date < account.initial_date:
        return False
    return True


def balance_through_month(
    account: Account,
    transactions: Iterable[Transaction],
    month: Optional[str] = None,
) -> Decimal:
    """
    Balance at the end of `month` (YYYY-MM).

    initial_balance plus every non-transfer amount dated on/after the
    initial date and in or before `month`. `month=None` has no upper
    bound, which gives the current balance.

    `transactions` must already be limited to this account.
    """
    balance = account.initial_balance
    for tx in transactions:
        if not _counts_toward_balance(account, tx):
            continue
        if month is not None and month_key(tx.date) > month:
            continue
        balance += tx.amount
    return balance


def current_balance(account: Account, transactions: Iterable[Transaction]) -> Decimal:
    """Balance Snapshot figure for one account, from the full transaction list."""
    own = transactions_for_account(account.id, transactions)
    return balance_through_month(account, own, month=None)


class MonthBucket(BaseModel):
    """One month of one account."""

    month: str
    income: list[Transaction] = Field(default_factory=list)
    expense: list[Transaction] = Field(default_factory=list)
    transfer: list[Transaction] = Field(default_factory=list)
    income_total: Decimal = Decimal("0")
    expense_total: Decimal = Decimal("0")
    prev_balance: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        # Expenses are expected to be stored negative already
        return self.income_total + self.expense_total

    @property
    def next_balance(self) -> Decimal:
        return self.prev_balance + self.net


def build_month_buckets(
    account: Account,
    transactions: Iterable[Transaction],
) -> dict[str, MonthBucket]:
    """
    Per-month buckets for one account, oldest month first.

    `transactions` must already be limited to this account. Bucket lists
    show every row of the month, including ones dated before the
    account's initial_date; only the balances skip those.
    """
    rows = [tx for tx in transactions if tx.date is not None]
    rows.sort(key=lambda tx: tx.date)

    by_month: dict[str, list[Transaction]] = defaultdict(list)
    for tx in rows:
        by_month[month_key(tx.date)].append(tx)

    buckets: dict[str, MonthBucket] = {}
    for month in sorted(by_month):
        bucket = MonthBucket(
            month=month,
            prev_balance=balance_through_month(account, rows, previous_month(month)),
        )
        for tx in by_month[month]:
            kind = tx.kind
            if kind is TransactionType.TRANSFER:
                bucket.transfer.append(tx)
            elif kind is TransactionType.INCOME:
                bucket.income.append(tx)
                bucket.income_total += tx.amount
            elif kind is TransactionType.EXPENSE:
                bucket.expense.append(tx)
                bucket.expense_total += tx.amount
        buckets[month] = bucket

    return buckets


class AccountSummary(BaseModel):
    """Account Overview section for one account (or the unassigned bucket)."""

    key: str
    account: Account
    months: dict[str, MonthBucket] = Field(default_factory=dict)

    @property
    def total_income(self) -> Decimal:
        return sum((m.income_total for m in self.months.values()), Decimal("0"))

    @property
    def total_expense(self) -> Decimal:
        return sum((m.expense_total for m in self.months.values()), Decimal("0"))

    @property
    def total_net(self) -> Decimal:
        return self.total_income + self.total_expense


def build_account_overview(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
) -> dict[str, AccountSummary]:
    """
    Group the user's transactions by account, then by month.

    Keys are account ids, plus UNASSIGNED_ACCOUNT_KEY for rows without
    an account. Accounts without transactions are left out; an account id
    that no longer exists gets a placeholder account named after the id.
    """
    by_id = {acc.id: acc for acc in accounts}

    grouped: dict[str, list[Transaction]] = defaultdict(list)
    for tx in transactions:
        grouped[tx.account_id or UNASSIGNED_ACCOUNT_KEY].append(tx)

    overview: dict[str, AccountSummary] = {}
    for key, rows in grouped.items():
        account = by_id.get(key) or Account(id=key, name=key)
        overview[key] = AccountSummary(
            key=key,
            account=account,
            months=build_month_buckets(account, rows),
        )
    return overview


def family_totals_by_currency(accounts: Iterable[Account]) -> dict[str, Decimal]:
    """Accounts page header: balance + initial_balance summed per currency."""
    totals: dict[str, Decimal] = {}
    for acc in accounts:
        currency = acc.currency or "UNKNOWN"
        totals[currency] = totals.get(currency, Decimal("0")) + acc.balance + acc.initial_balance
    return totals
