"""
Tests for services and the orchestrator

The Supabase client is replaced by small fakes that record the calls
made on them; nothing here needs a network.
"""

import asyncio
import pytest
from decimal import Decimal
from types import SimpleNamespace

from family_finance.audit import AuditLogger
from family_finance.i18n import Lang, format_amount, fixed_expense_display_name, subcategories_for, t
from family_finance.models import AuditEventType
from family_finance.orchestrator import LOCAL_USER_ID, NAV_ROUTES, FinanceApp, create_app_components
from family_finance.services.auth import RESET_SENT, AuthError, AuthService
from family_finance.services.storage import (
    InMemoryRecordStorage,
    NotFoundError,
    StorageError,
    SupabaseRecordStorage,
)


def run(coro):
    return asyncio.run(coro)


# =============================================================================
# FAKES
# =============================================================================

class FakeAuth:
    def __init__(self, fail=False, user_id="u1", email="me@example.com"):
        self.fail = fail
        self.user = SimpleNamespace(id=user_id, email=email)
        self.signed_out = False

    def sign_in_with_password(self, credentials):
        if self.fail:
            raise RuntimeError("Invalid login credentials")
        self.user.email = credentials["email"]
        return SimpleNamespace(user=self.user, session=SimpleNamespace(access_token="tok"))

    def reset_password_for_email(self, email):
        if self.fail:
            raise RuntimeError("rate limited")

    def get_session(self):
        return SimpleNamespace(user=self.user, access_token="tok")

    def sign_out(self):
        self.signed_out = True


class FakeQuery:
    """Records the builder chain; execute() returns the canned rows."""

    def __init__(self, table, data=None, error=None):
        self.table = table
        self.calls = []
        self._data = data if data is not None else []
        self._error = error

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        if self._error:
            raise self._error
        return SimpleNamespace(data=self._data)


class FakeDb:
    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error
        self.queries = []

    def table(self, name):
        query = FakeQuery(name, self.data, self.error)
        self.queries.append(query)
        return query


def fake_client(auth=None, db=None):
    inner = SimpleNamespace(auth=auth or FakeAuth())
    if db is not None:
        inner.table = db.table
    return SimpleNamespace(client=inner)


# =============================================================================
# AUTH
# =============================================================================

class TestAuthService:

    def test_sign_in_returns_session(self):
        audit = AuditLogger()
        service = AuthService(fake_client(), audit)
        session = service.sign_in("me@example.com", "pw")

        assert session.user_id == "u1"
        assert session.access_token == "tok"
        assert not session.is_demo
        assert audit.events[-1].event_type == AuditEventType.SIGNED_IN

    def test_demo_email_flagged(self):
        service = AuthService(fake_client())
        assert service.sign_in("Demo1@example.com", "pw").is_demo

    def test_sign_in_failure_uses_generic_message(self):
        audit = AuditLogger()
        service = AuthService(fake_client(FakeAuth(fail=True)), audit)
        with pytest.raises(AuthError, match="登录失败，请检查邮箱和密码"):
            service.sign_in("me@example.com", "bad")
        assert audit.events[-1].event_type == AuditEventType.SIGN_IN_FAILED

    def test_password_reset(self):
        assert AuthService(fake_client()).request_password_reset("me@example.com") == RESET_SENT
        with pytest.raises(AuthError, match="发送失败"):
            AuthService(fake_client(FakeAuth(fail=True))).request_password_reset("x")

    def test_current_session(self):
        assert AuthService(fake_client()).current_session().user_id == "u1"

    def test_sign_out(self):
        auth = FakeAuth()
        AuthService(fake_client(auth)).sign_out("u1")
        assert auth.signed_out


class TestAuditLogger:

    def test_keeps_only_recent_events(self):
        audit = AuditLogger(max_events=3)
        for idx in range(5):
            audit.log_record_created("accounts", f"a{idx}", "u1")

        assert [event.record_id for event in audit.events] == ["a2", "a3", "a4"]


# =============================================================================
# SUPABASE STORAGE
# =============================================================================

class TestSupabaseRecordStorage:
    """Query shape sent to the PostgREST builder."""

    def test_list_scopes_and_orders(self):
        db = FakeDb(data=[{"id": "1"}])
        storage = SupabaseRecordStorage(fake_client(db=db))
        rows = run(storage.list_records("transactions", "u1", order_by=(("date", True),)))

        assert rows == [{"id": "1"}]
        calls = db.queries[0].calls
        assert ("eq", ("user_id", "u1"), {}) in calls
        assert ("order", ("date",), {"desc": True}) in calls

    def test_upsert_conflict_columns(self):
        db = FakeDb(data=[])
        storage = SupabaseRecordStorage(fake_client(db=db))
        run(storage.upsert_records("fixed_expenses", [{"name": "x"}], ("user_id", "name")))

        name, args, kwargs = db.queries[0].calls[0]
        assert name == "upsert"
        assert kwargs["on_conflict"] == "user_id,name"

    def test_update_of_missing_row(self):
        storage = SupabaseRecordStorage(fake_client(db=FakeDb(data=[])))
        with pytest.raises(NotFoundError):
            run(storage.update_record("accounts", "a1", "u1", {"name": "x"}))

    def test_backend_error_text_is_kept(self):
        error = RuntimeError("ignored")
        error.message = "new row violates row-level security policy"
        storage = SupabaseRecordStorage(fake_client(db=FakeDb(error=error)))
        with pytest.raises(StorageError, match="row-level security"):
            run(storage.insert_record("accounts", {"name": "x"}))


# =============================================================================
# LOCALIZATION
# =============================================================================

class TestTranslations:

    def test_chinese_is_identity(self):
        assert t("账户管理", Lang.ZH) == "账户管理"

    def test_english_lookup_and_fallback(self):
        assert t("账户管理", Lang.EN) == "Accounts"
        assert t("没有这个词", "en") == "没有这个词"

    def test_unknown_language_is_chinese(self):
        assert t("账户管理", "fr") == "账户管理"

    def test_format_amount(self):
        assert format_amount(Decimal("1234.5")) == "1,234.50"
        assert format_amount(None) == "0.00"

    def test_fixed_expense_names(self):
        assert fixed_expense_display_name("房租", Lang.EN) == "Rent"
        assert fixed_expense_display_name("房租", Lang.ZH) == "房租"

    def test_subcategories(self):
        assert "买菜" in subcategories_for("食物")
        assert subcategories_for("不存在") == []


# =============================================================================
# ORCHESTRATOR
# =============================================================================

class TestFinanceApp:

    def test_offline_components(self):
        app, client = create_app_components(use_storage=False)
        assert client is None
        assert app.is_offline
        assert app.restore_session().user_id == LOCAL_USER_ID

        view = app.accounts()
        run(view.save({"name": "Cash", "owner": "me"}))
        run(app.accounts().load())
        assert view.user_id == LOCAL_USER_ID

    def test_offline_sign_in_refused(self):
        app, _ = create_app_components(use_storage=False)
        with pytest.raises(AuthError):
            app.sign_in("me@example.com", "pw")

    def test_pages_need_a_session(self):
        app = FinanceApp(InMemoryRecordStorage(), auth=AuthService(fake_client()))
        with pytest.raises(AuthError):
            app.transactions()

    def test_demo_fixed_expenses_survive_reruns(self):
        app = FinanceApp(InMemoryRecordStorage(), auth=AuthService(fake_client()))
        app.sign_in("demo1@example.com", "pw")

        first = app.fixed_expenses()
        assert first.is_demo
        assert app.fixed_expenses() is first

        app.sign_out()
        assert app.session is None
        app.sign_in("me@example.com", "pw")
        assert not app.fixed_expenses().is_demo

    def test_every_route_has_a_label(self):
        assert [route for route, _ in NAV_ROUTES][0] == "accounts"
        assert all(label for _, label in NAV_ROUTES)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
