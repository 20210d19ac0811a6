"""
Excel Export

Builds .xlsx workbooks in memory with openpyxl and returns the bytes
for a download button. Nothing is written to disk.

Column headers and row labels are Chinese UI keys passed through t(),
so an English interface gets English headers. Amounts are written as
numbers, dates as ISO text.
"""

import re
from datetime import date
from decimal import Decimal
from io import BytesIO
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from openpyxl import Workbook
from pydantic import BaseModel

from family_finance.i18n import Lang, as_lang, t
from family_finance.models.records import Account, Transaction, WorkLog
from family_finance.reports.balance import AccountSummary, current_balance


XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

MAX_SHEET_NAME = 31
_SHEET_NAME_FORBIDDEN = re.compile(r"[\\/?*\[\]:]")

DETAIL_HEADERS = ("日期", "分类", "二级分类", "备注", "金额")


class ExportFile(BaseModel):
    """A finished workbook ready for download."""

    filename: str
    content: bytes
    sheet_count: int
    mime_type: str = XLSX_MIME


def sanitize_sheet_name(name: Optional[str]) -> str:
    """Replace characters Excel rejects in sheet names and cut to 31 chars."""
    return _SHEET_NAME_FORBIDDEN.sub("_", name or "Sheet")[:MAX_SHEET_NAME]


def _cell(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, date):
        return value.isoformat()
    if value is None:
        return ""
    return value


def _to_bytes(wb: Workbook) -> bytes:
    bio = BytesIO()
    wb.save(bio)
    return bio.getvalue()


def _single_sheet(
    filename: str,
    sheet_name: str,
    headers: Sequence[str],
    rows: Iterable[Sequence[Any]],
    lang: Union[Lang, str],
) -> ExportFile:
    wb = Workbook()
    ws = wb.active
    ws.title = sanitize_sheet_name(sheet_name)
    ws.append([t(header, lang) for header in headers])
    for row in rows:
        ws.append([_cell(value) for value in row])
    return ExportFile(filename=filename, content=_to_bytes(wb), sheet_count=1)


# =============================================================================
# FLAT LISTS
# =============================================================================

def export_accounts(accounts: Iterable[Account], lang: Union[Lang, str]) -> ExportFile:
    """Accounts page: one row per account."""
    headers = ("账户名称", "分类", "所有人", "余额", "币种", "卡号", "备注", "初始余额", "起始日期")
    rows = (
        (
            acc.name, acc.category, acc.owner, acc.balance, acc.currency,
            acc.card_number, acc.note, acc.initial_balance, acc.initial_date,
        )
        for acc in accounts
    )
    return _single_sheet("accounts.xlsx", "Accounts", headers, rows, lang)


def export_transactions(
    transactions: Iterable[Transaction],
    account_names: Mapping[str, str],
    lang: Union[Lang, str],
) -> ExportFile:
    """Transactions page: the account column shows the name, or the raw id if unknown."""
    headers = ("日期", "类型", "分类", "二级分类", "金额", "账户", "币种", "备注")
    rows = (
        (
            tx.date, tx.type, tx.category, tx.subcategory, tx.amount,
            account_names.get(tx.account_id or "", tx.account_id or ""),
            tx.currency, tx.note,
        )
        for tx in transactions
    )
    return _single_sheet("transactions.xlsx", "Transactions", headers, rows, lang)


def export_balance_snapshot(
    accounts: Iterable[Account],
    transactions: Sequence[Transaction],
    lang: Union[Lang, str],
) -> ExportFile:
    """Balance page: initial and current balance per account, two decimals."""
    headers = ("账户名称", "币种", "初始余额", "当前余额", "备注")
    rows = (
        (
            acc.name,
            acc.currency,
            f"{acc.initial_balance:.2f}",
            f"{current_balance(acc, transactions):.2f}",
            acc.note,
        )
        for acc in accounts
    )
    title = "账户余额" if as_lang(lang) is Lang.ZH else "Balance"
    return _single_sheet(f"{title}.xlsx", title, headers, rows, lang)


def export_worklogs(
    worklogs: Iterable[WorkLog],
    project_names: Mapping[str, str],
    lang: Union[Lang, str],
    today: Optional[date] = None,
) -> ExportFile:
    """Worklog page: one row per entry, project name resolved with a fallback."""
    today = today or date.today()
    headers = ("日期", "项目", "出发时间", "回家时间", "总工时", "实际工时", "地点", "备注", "节假日")
    no_project = t("无项目", lang)
    rows = (
        (
            log.date,
            project_names.get(log.project_id or "", no_project),
            log.start_time.strftime("%H:%M") if log.start_time else "",
            log.end_time.strftime("%H:%M") if log.end_time else "",
            log.hours,
            log.actual_hours,
            log.location,
            log.note,
            log.is_holiday,
        )
        for log in worklogs
    )
    return _single_sheet(f"worklogs_{today.isoformat()}.xlsx", "WorkLogs", headers, rows, lang)


# =============================================================================
# ACCOUNT OVERVIEW
# =============================================================================

def _detail_rows(transactions: Iterable[Transaction]) -> list[list[Any]]:
    return [
        [_cell(tx.date), tx.category, tx.subcategory, tx.note, _cell(tx.amount)]
        for tx in transactions
    ]


def export_account_overview(
    overview: Mapping[str, AccountSummary],
    lang: Union[Lang, str],
    today: Optional[date] = None,
) -> ExportFile:
    """
    One sheet per account, laid out as a printable statement:
    the anchor, then per month the opening balance, income rows,
    expense rows, transfer rows (only when present), net and closing
    balance. Months run oldest first.
    """
    today = today or date.today()
    wb = Workbook()
    wb.remove(wb.active)
    headers = [t(header, lang) for header in DETAIL_HEADERS]

    for key, summary in overview.items():
        account = summary.account
        ws = wb.create_sheet(sanitize_sheet_name(account.name or key))
        rows: list[list[Any]] = [
            [f"{t('账户', lang)}：{account.name}"],
            [t("初始余额", lang), _cell(account.initial_balance)],
            [t("初始日期", lang), _cell(account.initial_date)],
            [],
        ]

        for month, bucket in summary.months.items():
            rows.append([f"{month} {t('上月余额', lang)}", _cell(bucket.prev_balance)])
            rows.append([f"{month} {t('收入汇总（正）', lang)}", _cell(bucket.income_total)])
            rows.append(list(headers))
            rows.extend(_detail_rows(bucket.income))
            rows.append([])

            rows.append([f"{month} {t('支出汇总（负）', lang)}", _cell(bucket.expense_total)])
            rows.append(list(headers))
            rows.extend(_detail_rows(bucket.expense))
            rows.append([])

            if bucket.transfer:
                rows.append([f"{month} {t('转账（仅展示，不计入汇总）', lang)}"])
                rows.append(list(headers))
                rows.extend(_detail_rows(bucket.transfer))
                rows.append([])

            rows.append([f"{month} {t('当月净额 = 收入 + 支出', lang)}", _cell(bucket.net)])
            rows.append([f"{month} {t('下月余额 = 上月余额 + 净额', lang)}", _cell(bucket.next_balance)])
            rows.append([])

        for row in rows:
            ws.append(row)

    if not wb.worksheets:
        wb.create_sheet(sanitize_sheet_name(t("账户总览", lang)))

    return ExportFile(
        filename=f"账户总览_{today.isoformat()}.xlsx",
        content=_to_bytes(wb),
        sheet_count=len(wb.worksheets),
    )
