"""
Tests for the page view-models

All pages run against InMemoryRecordStorage.

Test strategy:
1. A write is always followed by a reload of the whole list
2. Rows are always scoped to the signed-in user
3. Backend failures are logged; loads degrade, writes raise
"""

import asyncio
import pytest
from datetime import date
from decimal import Decimal

from family_finance.audit import AuditLogger
from family_finance.models import AuditEventType
from family_finance.reports import HolidayFilter
from family_finance.services.storage import InMemoryRecordStorage, StorageError
from family_finance.validation import FormValidationError
from family_finance.views import (
    AccountOverviewView,
    AccountsView,
    BalanceView,
    DemoModeError,
    FixedExpensesView,
    ProjectsView,
    SummaryView,
    TransactionsView,
    WorkLogView,
)
from family_finance.views.fixed_expenses import (
    MISSING_UNIQUE_INDEX_HINT,
    RLS_POLICY_HINT,
    TEMPLATE_FIXED_EXPENSES,
    classify_import_error,
)
from family_finance.views.transactions import change_category, form_from_transaction, new_transaction_form
from family_finance.views.worklog import suggested_hours


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def storage():
    return InMemoryRecordStorage()


@pytest.fixture
def audit():
    return AuditLogger()


def event_types(audit):
    return [event.event_type for event in audit.events]


class TestAccountsView:
    """List/create/edit/delete cycle."""

    def test_create_then_list(self, storage, audit):
        view = AccountsView(storage, "u1", audit)
        saved = run(view.save({"name": "Chequing", "owner": "A", "initial_balance": "100"}))

        assert saved.id
        assert [acc.name for acc in view.items] == ["Chequing"]
        assert storage.rows("accounts")[0]["user_id"] == "u1"
        assert AuditEventType.RECORD_CREATED in event_types(audit)

    def test_edit_updates_in_place(self, storage, audit):
        view = AccountsView(storage, "u1", audit)
        saved = run(view.save({"name": "Chequing", "owner": "A"}))
        run(view.save({"name": "Savings", "owner": "A"}, editing_id=saved.id))

        assert len(view.items) == 1
        assert view.items[0].name == "Savings"

    def test_missing_name_sends_nothing(self, storage):
        view = AccountsView(storage, "u1")
        with pytest.raises(FormValidationError) as exc_info:
            run(view.save({"name": "", "owner": ""}))

        assert exc_info.value.messages == ["账户名称和所有人不能为空"]
        assert storage.rows("accounts") == []

    def test_rows_are_scoped_to_user(self, audit):
        storage = InMemoryRecordStorage({"accounts": [
            {"id": "a1", "user_id": "u1", "name": "Mine"},
            {"id": "a2", "user_id": "u2", "name": "Theirs"},
        ]})
        view = AccountsView(storage, "u1", audit)
        run(view.load())
        assert [acc.id for acc in view.items] == ["a1"]

    def test_delete_removes_row(self, storage, audit):
        view = AccountsView(storage, "u1", audit)
        saved = run(view.save({"name": "Chequing", "owner": "A"}))
        assert run(view.delete(saved.id)) is True
        assert view.items == []

    def test_family_totals(self, storage):
        view = AccountsView(storage, "u1")
        run(view.save({"name": "A", "owner": "x", "balance": "10", "initial_balance": "100"}))
        run(view.save({"name": "B", "owner": "x", "currency": "USD", "initial_balance": "5"}))
        assert view.family_totals() == {"CAD": Decimal("110"), "USD": Decimal("5")}


class TestFailures:
    """Backend errors on load and on write."""

    def test_failed_load_leaves_empty_list(self, storage, audit):
        view = AccountsView(storage, "u1", audit)
        storage.fail_next("timeout")
        run(view.load())

        assert view.items == []
        assert view.load_error == "timeout"
        assert AuditEventType.LOAD_FAILED in event_types(audit)

    def test_failed_save_is_logged_and_raised(self, storage, audit):
        view = ProjectsView(storage, "u1", audit)
        storage.fail_next("permission denied")
        with pytest.raises(StorageError, match="permission denied"):
            run(view.save({"name": "Deck"}))
        assert AuditEventType.SAVE_FAILED in event_types(audit)

    def test_update_of_missing_row_raises(self, storage):
        view = ProjectsView(storage, "u1")
        with pytest.raises(StorageError):
            run(view.save({"name": "Deck"}, editing_id="nope"))


class TestTransactionsView:

    def test_newest_first_with_account_names(self, audit):
        storage = InMemoryRecordStorage({"accounts": [
            {"id": "a1", "user_id": "u1", "name": "Chequing"},
        ]})
        view = TransactionsView(storage, "u1", audit)
        run(view.load_accounts())
        run(view.save({"date": "2024-01-05", "type": "支出", "amount": "-10", "account_id": "a1"}))
        run(view.save({"date": "2024-02-05", "type": "收入", "amount": "20", "account_id": "gone"}))

        assert [tx.date for tx in view.items] == [date(2024, 2, 5), date(2024, 1, 5)]
        assert view.account_name("a1") == "Chequing"
        assert view.account_name("gone") == "gone"
        assert view.account_name(None) == ""

    def test_amount_sign_is_kept(self, storage):
        view = TransactionsView(storage, "u1")
        saved = run(view.save({"date": "2024-01-05", "type": "支出", "amount": "-42.10"}))
        assert saved.amount == Decimal("-42.10")

    def test_date_required(self, storage):
        view = TransactionsView(storage, "u1")
        with pytest.raises(FormValidationError):
            run(view.save({"type": "支出", "amount": "1"}))

    def test_new_form_defaults(self):
        form = new_transaction_form("USD")
        assert form["currency"] == "USD"
        assert form["type"] == "支出"
        assert form["date"] is None

    def test_changing_category_clears_subcategory(self):
        form = {"category": "食物", "subcategory": "超市"}
        assert change_category(form, "车辆") == {"category": "车辆", "subcategory": ""}

    def test_edit_form_round_trip(self, storage):
        view = TransactionsView(storage, "u1")
        saved = run(view.save({"date": "2024-01-05", "type": "收入", "amount": "5", "note": "x"}))
        form = form_from_transaction(saved)
        form["note"] = "y"
        run(view.save(form, editing_id=saved.id))
        assert view.items[0].note == "y"
        assert len(view.items) == 1


class TestFixedExpensesView:
    """Soft delete, restore, template import and demo mode."""

    def test_deactivated_row_leaves_card_not_list(self, storage, audit):
        view = FixedExpensesView(storage, "u1", audit)
        rent = run(view.save({"name": "房租", "amount": "1500", "sort_order": "1"}))
        run(view.save({"name": "宽带", "amount": "74", "sort_order": "2"}))

        run(view.deactivate(rent.id))
        card = view.monthly_card()

        assert len(view.items) == 2
        assert [exp.name for exp in card.items] == ["宽带"]
        assert card.totals == {"CAD": Decimal("74")}
        assert AuditEventType.RECORD_SOFT_DELETED in event_types(audit)

        run(view.restore(rent.id))
        assert len(view.monthly_card().items) == 2

    def test_empty_or_failed_load_gives_empty_card(self, storage):
        view = FixedExpensesView(storage, "u1")
        run(view.load())
        assert view.monthly_card().items == []

        storage.fail_next("timeout")
        run(view.load())
        card = view.monthly_card()
        assert card.items == []
        assert card.totals == {}
        assert view.load_error == "timeout"

    def test_hard_delete(self, storage):
        view = FixedExpensesView(storage, "u1")
        saved = run(view.save({"name": "房租", "amount": "1500"}))
        run(view.delete(saved.id))
        assert view.items == []

    @pytest.mark.parametrize("amount", ["abc", "-5", "inf"])
    def test_bad_amount_rejected(self, storage, amount):
        view = FixedExpensesView(storage, "u1")
        with pytest.raises(FormValidationError) as exc_info:
            run(view.save({"name": "房租", "amount": amount}))
        assert "金额必须是有效的正数" in exc_info.value.messages

    def test_zero_amount_allowed(self, storage):
        view = FixedExpensesView(storage, "u1")
        saved = run(view.save({"name": "Free", "amount": "0"}))
        assert saved.amount == Decimal("0")
        assert saved.sort_order == 0

    def test_blank_amount_saves_as_zero(self, storage):
        view = FixedExpensesView(storage, "u1")
        saved = run(view.save({"name": "Rent", "amount": ""}))
        assert saved.amount == Decimal("0")
        assert storage.rows("fixed_expenses")[0]["amount"] == 0

    def test_unreadable_sort_order_saves_as_zero(self, storage):
        view = FixedExpensesView(storage, "u1")
        saved = run(view.save({"name": "Rent", "amount": "10", "sort_order": "inf"}))
        assert saved.sort_order == 0

    def test_template_import_is_idempotent(self, storage, audit):
        view = FixedExpensesView(storage, "u1", audit)
        first = run(view.import_template())
        second = run(view.import_template())

        assert first.ok and second.ok
        assert first.imported == len(TEMPLATE_FIXED_EXPENSES)
        assert len(storage.rows("fixed_expenses")) == len(TEMPLATE_FIXED_EXPENSES)
        assert [exp.sort_order for exp in view.items] == sorted(exp.sort_order for exp in view.items)
        assert view.import_needs_confirmation()

    def test_template_import_reactivates_rows(self, storage):
        view = FixedExpensesView(storage, "u1")
        run(view.import_template())
        run(view.deactivate(view.items[0].id))
        run(view.import_template())
        assert all(exp.is_active for exp in view.items)

    def test_template_import_keeps_users_apart(self, storage):
        run(FixedExpensesView(storage, "u1").import_template())
        run(FixedExpensesView(storage, "u2").import_template())
        assert len(storage.rows("fixed_expenses")) == 2 * len(TEMPLATE_FIXED_EXPENSES)

    def test_import_failure_returns_hint(self, storage, audit):
        view = FixedExpensesView(storage, "u1", audit)
        storage.fail_next("there is no unique or exclusion constraint matching the ON CONFLICT")
        result = run(view.import_template())

        assert not result.ok
        assert result.hint == MISSING_UNIQUE_INDEX_HINT
        assert AuditEventType.TEMPLATE_IMPORT_FAILED in event_types(audit)

    def test_import_error_classification(self):
        assert classify_import_error("new row violates row-level security policy") == RLS_POLICY_HINT
        assert classify_import_error("network down") is None

    def test_demo_user_cannot_import(self, storage):
        view = FixedExpensesView(storage, "u1", is_demo=True)
        with pytest.raises(DemoModeError):
            run(view.import_template())

    def test_demo_edits_stay_local(self, storage):
        view = FixedExpensesView(storage, "u1", is_demo=True)
        run(view.load())
        assert len(view.items) == 5

        run(view.save({"name": "Gym", "amount": "70"}, editing_id="5"))
        added = run(view.save({"name": "Parking", "amount": "30"}))
        run(view.deactivate("1"))

        assert view.get("5").name == "Gym"
        assert added.id == "6"
        assert len(view.monthly_card().items) == 5
        assert storage.rows("fixed_expenses") == []


class TestWorkLogView:

    def test_hours_filled_from_clock_times(self, storage):
        view = WorkLogView(storage, "u1")
        saved = run(view.save({
            "date": "2024-05-14",
            "start_time": "07:30",
            "end_time": "16:00",
            "hours": "",
        }))
        assert saved.hours == 8.5

    def test_suggested_hours(self):
        assert suggested_hours("08:00", "16:20") == 8.33
        assert suggested_hours("22:00", "02:00") == 4.0
        assert suggested_hours(None, "10:00") == 0.0

    def test_project_name_fallback(self, audit):
        storage = InMemoryRecordStorage({"projects": [
            {"id": "p1", "user_id": "u1", "name": "Deck"},
        ]})
        view = WorkLogView(storage, "u1", audit)
        run(view.load_projects())
        assert view.project_name("p1") == "Deck"
        assert view.project_name(None) == "无项目"

    def test_stats_from_loaded_entries(self, storage):
        view = WorkLogView(storage, "u1")
        run(view.save({"date": "2024-05-14", "hours": "8", "is_holiday": True}))
        run(view.save({"date": "2024-05-15", "hours": "3"}))
        stats = view.stats(HolidayFilter.EXCLUDE, today=date(2024, 5, 16))
        assert stats.this_week == 3


class TestReportViews:
    """Read-only pages over accounts and transactions."""

    @pytest.fixture
    def seeded(self):
        return InMemoryRecordStorage({
            "accounts": [
                {"id": "a1", "user_id": "u1", "name": "Chequing", "initial_balance": 100,
                 "initial_date": "2024-01-01", "currency": "CAD"},
            ],
            "transactions": [
                {"id": "t1", "user_id": "u1", "account_id": "a1", "date": "2024-01-15",
                 "type": "收入", "category": "工资", "amount": 50, "currency": "CAD"},
                {"id": "t2", "user_id": "u1", "account_id": "a1", "date": "2024-02-10",
                 "type": "支出", "category": "食物", "amount": -30, "currency": "CAD"},
                {"id": "t3", "user_id": "u1", "account_id": "a1", "date": "2024-02-11",
                 "type": "转账", "category": "转账", "amount": -1000, "currency": "CAD"},
            ],
        })

    def test_balance_snapshot(self, seeded):
        view = BalanceView(seeded, "u1")
        run(view.load())
        [(account, balance)] = view.balances()
        assert account.name == "Chequing"
        assert balance == Decimal("120")

    def test_account_overview(self, seeded):
        view = AccountOverviewView(seeded, "u1")
        run(view.load())
        months = view.overview["a1"].months
        assert list(months) == ["2024-01", "2024-02"]
        assert months["2024-02"].prev_balance == Decimal("150")
        assert len(months["2024-02"].transfer) == 1

    def test_summary_opens_latest_month(self, seeded):
        view = SummaryView(seeded, "u1", currency="CAD")
        run(view.load())
        assert [m.month for m in view.months] == ["2024-02", "2024-01"]
        assert view.expanded_month == "2024-02"

    def test_failed_load_sets_error(self, seeded, audit):
        view = BalanceView(seeded, "u1", audit)
        seeded.fail_next("offline")
        run(view.load())
        assert view.load_error == "offline"
        assert view.accounts == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
