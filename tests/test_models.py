"""
Tests for Family Finance models

Test strategy:
1. Stored rows are coerced, never rejected
2. Payloads sent to storage are JSON-friendly
3. Audit events carry the context needed to trace a write
"""

import pytest
from datetime import date, time
from decimal import Decimal

from family_finance.models import (
    Account,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    FixedExpense,
    Project,
    Transaction,
    TransactionType,
    WorkLog,
    hours_between,
)


class TestRecordCoercion:
    """Rows come back as typed and are read leniently."""

    def test_missing_amount_becomes_zero(self):
        tx = Transaction(amount=None)
        assert tx.amount == Decimal("0")

    def test_unparseable_amount_becomes_zero(self):
        assert Transaction(amount="abc").amount == Decimal("0")
        assert Account(balance="NaN", initial_balance="").balance == Decimal("0")

    def test_amount_keeps_sign(self):
        assert Transaction(amount="-80.50").amount == Decimal("-80.50")

    def test_invalid_date_becomes_none(self):
        assert Transaction(date="not a date").date is None
        assert Transaction(date="").date is None

    def test_timestamp_prefix_is_read_as_date(self):
        assert Transaction(date="2024-03-05T10:00:00+00:00").date == date(2024, 3, 5)

    def test_missing_text_becomes_empty(self):
        account = Account(name=None, note=None)
        assert account.name == ""
        assert account.note == ""

    def test_empty_foreign_key_becomes_none(self):
        assert Transaction(account_id="").account_id is None
        assert WorkLog(project_id="").project_id is None

    def test_numeric_id_is_stringified(self):
        assert FixedExpense(id=7).id == "7"

    def test_currency_defaults_to_cad(self):
        assert Account(currency=None).currency == "CAD"
        assert Transaction(currency="usd").currency == "USD"

    def test_extra_columns_are_ignored(self):
        tx = Transaction.model_validate({"amount": 1, "account": {"name": "x"}})
        assert tx.amount == Decimal("1")


class TestTransactionType:
    """Type literals in both languages."""

    @pytest.mark.parametrize("raw,expected", [
        ("收入", TransactionType.INCOME),
        ("支出", TransactionType.EXPENSE),
        ("转账", TransactionType.TRANSFER),
        ("Income", TransactionType.INCOME),
        ("EXPENSE", TransactionType.EXPENSE),
        ("transfer", TransactionType.TRANSFER),
    ])
    def test_parse_recognizes_spellings(self, raw, expected):
        assert TransactionType.parse(raw) is expected

    def test_parse_unknown_is_none(self):
        assert TransactionType.parse("工程") is None
        assert TransactionType.parse(None) is None

    def test_transaction_keeps_stored_type_text(self):
        tx = Transaction(type="income")
        assert tx.type == "income"
        assert tx.kind is TransactionType.INCOME
        assert not tx.is_transfer

    def test_month_key(self):
        assert Transaction(date="2024-02-10").month == "2024-02"
        assert Transaction().month == ""


class TestPayload:
    """What gets sent on insert/update."""

    def test_server_columns_are_not_sent(self):
        payload = Account(id="a1", name="Chequing", created_at="2024-01-01T00:00:00Z").to_payload(user_id="u1")
        assert "id" not in payload
        assert "created_at" not in payload
        assert payload["user_id"] == "u1"

    def test_values_are_json_friendly(self):
        payload = Account(name="Chequing", initial_balance="100.5", initial_date="2024-01-01").to_payload()
        assert payload["initial_balance"] == 100.5
        assert payload["initial_date"] == "2024-01-01"

    def test_empty_project_dates_are_null(self):
        payload = Project(name="Deck", expected_start_date="").to_payload(user_id="u1")
        assert payload["expected_start_date"] is None


class TestFixedExpense:

    def test_active_unless_explicitly_false(self):
        assert FixedExpense(is_active=None).is_active is True
        assert FixedExpense(is_active=False).is_active is False
        assert FixedExpense(is_active="false").is_active is False

    def test_sort_order_is_lenient(self):
        assert FixedExpense(sort_order="").sort_order == 0
        assert FixedExpense(sort_order="20").sort_order == 20

    @pytest.mark.parametrize("raw", ["inf", "-inf", "1e400", "nan", "abc"])
    def test_out_of_range_sort_order_is_zero(self, raw):
        assert FixedExpense(sort_order=raw).sort_order == 0


class TestWorkHours:
    """Hours from clock times and overrides."""

    def test_hours_between_rounds_to_two_decimals(self):
        assert hours_between(time(8, 0), time(16, 20)) == 8.33

    def test_end_before_start_crosses_midnight(self):
        assert hours_between(time(22, 0), time(2, 0)) == 4.0

    def test_missing_time_gives_zero(self):
        assert hours_between(None, time(10, 0)) == 0.0

    def test_actual_hours_wins(self):
        log = WorkLog(start_time="08:00", end_time="17:00", hours=9, actual_hours=7.5)
        assert log.effective_hours == 7.5

    def test_stored_hours_before_computed(self):
        log = WorkLog(start_time="08:00", end_time="17:00", hours=8)
        assert log.effective_hours == 8

    def test_computed_when_nothing_stored(self):
        log = WorkLog(start_time="08:00", end_time="12:30")
        assert log.effective_hours == 4.5

    def test_holiday_flag(self):
        assert WorkLog(is_holiday="true").is_holiday is True
        assert WorkLog(is_holiday=None).is_holiday is False


class TestAuditModels:
    """Tests for audit-related models."""

    def test_record_created_event(self):
        event = AuditEventBuilder.record_created("accounts", "a1", "u1")
        assert event.event_type == AuditEventType.RECORD_CREATED
        assert event.table == "accounts"
        assert event.record_id == "a1"

    def test_save_failed_is_error(self):
        event = AuditEventBuilder.save_failed("transactions", "u1", "permission denied")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "permission denied"

    def test_load_failed_is_not_user_action(self):
        event = AuditEventBuilder.load_failed("worklogs", "u1", "timeout")
        assert event.is_user_action is False

    def test_log_dict_is_serializable(self):
        event = AuditEventBuilder.template_imported("u1", 9)
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "template_imported"
        assert log_dict["details"] == {"item_count": 9}
        assert isinstance(log_dict["event_id"], str)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
