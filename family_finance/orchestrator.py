"""
Main Orchestrator for Family Finance

This module ties together storage, auth and audit logging, and hands
out the page view-models for the signed-in user.

DESIGN DECISION: The orchestrator enforces the boundaries:
- No page is built without a signed-in user
- Every view-model is scoped to that user's id
- Every view-model shares one audit logger

One FinanceApp lives per browser session, because the Supabase auth
session lives on the client it was created with.
"""

from typing import Optional

import structlog

from family_finance.audit import AuditLogger
from family_finance.models.records import UserSession
from family_finance.services.auth import AuthError, AuthService
from family_finance.services.storage import (
    InMemoryRecordStorage,
    RecordStorageInterface,
    SupabaseClient,
    SupabaseRecordStorage,
)
from family_finance.views import (
    AccountOverviewView,
    AccountsView,
    BalanceView,
    FixedExpensesView,
    ProjectsView,
    SummaryView,
    TransactionsView,
    WorkLogView,
)


logger = structlog.get_logger(__name__)


# (route, label key) in menu order
NAV_ROUTES: list[tuple[str, str]] = [
    ("accounts", "账户管理"),
    ("fixed-expenses", "固定花销管理"),
    ("transactions", "收入/支出"),
    ("summary", "收支汇总"),
    ("account-overview", "账户总揽"),
    ("worklog", "工程记录"),
    ("balance", "账户余额"),
    ("projects", "项目管理"),
]

DEFAULT_ROUTE = "accounts"

LOCAL_USER_ID = "local"


class FinanceApp:
    """
    Session-level entry point.

    Flow:
    1. sign_in → UserSession
    2. page views are created for session.user_id
    3. sign_out → session dropped
    """

    def __init__(
        self,
        storage: RecordStorageInterface,
        auth: Optional[AuthService] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._auth = auth
        self._audit_logger = audit_logger or AuditLogger()
        self.session: Optional[UserSession] = None
        self._demo_fixed_expenses: Optional[FixedExpensesView] = None

    @property
    def is_offline(self) -> bool:
        """No auth backend: a single local user on in-memory storage."""
        return self._auth is None

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def restore_session(self) -> Optional[UserSession]:
        """Pick up a session the auth client already holds."""
        if self.is_offline:
            self.session = UserSession(user_id=LOCAL_USER_ID)
        elif self.session is None:
            self.session = self._auth.current_session()
        return self.session

    def sign_in(self, email: str, password: str) -> UserSession:
        """
        Raises:
            AuthError: On any sign-in failure
        """
        if self.is_offline:
            raise AuthError("登录失败，请检查邮箱和密码")
        self.session = self._auth.sign_in(email, password)
        self._demo_fixed_expenses = None
        return self.session

    def request_password_reset(self, email: str) -> str:
        if self.is_offline:
            raise AuthError("发送失败，请确认邮箱正确")
        return self._auth.request_password_reset(email)

    def sign_out(self) -> None:
        user_id = self.session.user_id if self.session else None
        if not self.is_offline:
            self._auth.sign_out(user_id)
        self.session = None
        self._demo_fixed_expenses = None

    def _require_user(self) -> UserSession:
        if self.session is None:
            raise AuthError("请先登录")
        return self.session

    # -- page views -------------------------------------------------------

    def _args(self) -> tuple:
        return self._storage, self._require_user().user_id, self._audit_logger

    def accounts(self) -> AccountsView:
        return AccountsView(*self._args())

    def fixed_expenses(self) -> FixedExpensesView:
        """Demo accounts keep one view per session so their local edits survive reruns."""
        session = self._require_user()
        if not session.is_demo:
            return FixedExpensesView(*self._args())
        if self._demo_fixed_expenses is None:
            self._demo_fixed_expenses = FixedExpensesView(*self._args(), is_demo=True)
        return self._demo_fixed_expenses

    def transactions(self) -> TransactionsView:
        return TransactionsView(*self._args())

    def summary(self) -> SummaryView:
        return SummaryView(*self._args())

    def account_overview(self) -> AccountOverviewView:
        return AccountOverviewView(*self._args())

    def worklog(self) -> WorkLogView:
        return WorkLogView(*self._args())

    def balance(self) -> BalanceView:
        return BalanceView(*self._args())

    def projects(self) -> ProjectsView:
        return ProjectsView(*self._args())


def create_app_components(
    use_storage: bool = True,
) -> tuple[FinanceApp, Optional[SupabaseClient]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to connect to Supabase.
                    Set to False for testing or offline use with
                    in-memory storage and no sign-in.

    Returns:
        (finance_app, supabase_client)
    """
    audit_logger = AuditLogger()

    if use_storage:
        try:
            client = SupabaseClient()
            client.connect()
            app = FinanceApp(
                storage=SupabaseRecordStorage(client),
                auth=AuthService(client, audit_logger),
                audit_logger=audit_logger,
            )
            return app, client
        except Exception as e:
            # Storage not configured - continue without it
            logger.warning("storage_not_configured", error=str(e))

    return FinanceApp(storage=InMemoryRecordStorage(), audit_logger=audit_logger), None
