"""
Tests for the Excel exports

Workbooks are read back with openpyxl and checked for sheet names,
headers and the statement layout.
"""

import pytest
from datetime import date
from io import BytesIO

from openpyxl import load_workbook

from family_finance.i18n import Lang
from family_finance.models import Account, Transaction, WorkLog
from family_finance.reports import build_account_overview
from family_finance.services.export import (
    XLSX_MIME,
    export_account_overview,
    export_accounts,
    export_balance_snapshot,
    export_transactions,
    export_worklogs,
    sanitize_sheet_name,
)


def open_book(result):
    return load_workbook(BytesIO(result.content))


def first_column(ws):
    return [row[0] for row in ws.iter_rows(values_only=True)]


@pytest.fixture
def account():
    return Account(id="a1", name="Chequing", initial_balance=100, initial_date="2024-01-01", note="main")


@pytest.fixture
def transactions():
    return [
        Transaction(date="2024-01-15", type="收入", category="工资", amount=50, account_id="a1"),
        Transaction(date="2024-02-10", type="支出", category="食物", amount=-30, account_id="a1"),
    ]


class TestSheetNames:

    def test_forbidden_characters_replaced(self):
        assert sanitize_sheet_name("A/B:C?[1]") == "A_B_C__1_"

    def test_truncated_to_31(self):
        assert len(sanitize_sheet_name("x" * 40)) == 31

    def test_empty_name(self):
        assert sanitize_sheet_name("") == "Sheet"


class TestFlatExports:
    """Single-sheet exports of the list pages."""

    def test_accounts_headers_follow_language(self, account):
        result = export_accounts([account], Lang.EN)
        ws = open_book(result)["Accounts"]
        header = [cell.value for cell in ws[1]]

        assert result.filename == "accounts.xlsx"
        assert result.mime_type == XLSX_MIME
        assert header[0] == "Account Name"
        assert ws["A2"].value == "Chequing"
        assert ws["H2"].value == 100

    def test_transactions_show_account_name_or_id(self):
        rows = [
            Transaction(date="2024-01-15", amount=5, account_id="a1"),
            Transaction(date="2024-01-16", amount=6, account_id="gone"),
        ]
        result = export_transactions(rows, {"a1": "Chequing"}, Lang.ZH)
        ws = open_book(result)["Transactions"]

        assert ws["A1"].value == "日期"
        assert ws["A2"].value == "2024-01-15"
        assert ws["F2"].value == "Chequing"
        assert ws["F3"].value == "gone"

    def test_balance_snapshot_title_and_values(self, account, transactions):
        zh = export_balance_snapshot([account], transactions, Lang.ZH)
        en = export_balance_snapshot([account], transactions, Lang.EN)

        assert zh.filename == "账户余额.xlsx"
        assert en.filename == "Balance.xlsx"
        ws = open_book(zh)["账户余额"]
        assert [c.value for c in ws[2]][:4] == ["Chequing", "CAD", "100.00", "120.00"]

    def test_worklogs_project_fallback(self):
        logs = [
            WorkLog(date="2024-05-14", project_id="p1", start_time="08:00", end_time="16:00", hours=8),
            WorkLog(date="2024-05-15", project_id=None, hours=3),
        ]
        result = export_worklogs(logs, {"p1": "Deck"}, Lang.ZH, today=date(2024, 5, 16))
        ws = open_book(result)["WorkLogs"]

        assert result.filename == "worklogs_2024-05-16.xlsx"
        assert ws["B2"].value == "Deck"
        assert ws["C2"].value == "08:00"
        assert ws["B3"].value == "无项目"


class TestAccountOverviewExport:
    """One statement sheet per account."""

    def test_statement_layout(self, account, transactions):
        overview = build_account_overview([account], transactions)
        result = export_account_overview(overview, Lang.ZH, today=date(2024, 3, 1))
        book = open_book(result)

        assert result.filename == "账户总览_2024-03-01.xlsx"
        assert book.sheetnames == ["Chequing"]
        labels = first_column(book["Chequing"])
        assert labels[0] == "账户：Chequing"
        assert "2024-01 上月余额" in labels
        assert "2024-02 下月余额 = 上月余额 + 净额" in labels

        ws = book["Chequing"]
        closing = next(
            row for row in ws.iter_rows(values_only=True)
            if row[0] == "2024-02 下月余额 = 上月余额 + 净额"
        )
        assert closing[1] == 120

    def test_transfer_block_only_when_present(self, account, transactions):
        labels = first_column(open_book(
            export_account_overview(build_account_overview([account], transactions), Lang.ZH)
        )["Chequing"])
        assert not any(label and "转账" in str(label) for label in labels)

        with_transfer = transactions + [
            Transaction(date="2024-02-11", type="转账", amount=-500, account_id="a1"),
        ]
        labels = first_column(open_book(
            export_account_overview(build_account_overview([account], with_transfer), Lang.ZH)
        )["Chequing"])
        assert "2024-02 转账（仅展示，不计入汇总）" in labels

    def test_sheet_per_account_with_safe_names(self, transactions):
        accounts = [
            Account(id="a1", name="Visa/Master"),
            Account(id="a2", name="Cash"),
        ]
        rows = transactions + [Transaction(date="2024-01-01", type="收入", amount=1, account_id="a2")]
        result = export_account_overview(build_account_overview(accounts, rows), Lang.EN)

        assert open_book(result).sheetnames == ["Visa_Master", "Cash"]
        assert result.sheet_count == 2

    def test_empty_overview_still_has_a_sheet(self):
        result = export_account_overview({}, Lang.ZH)
        assert result.sheet_count == 1
        assert len(open_book(result).sheetnames) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
