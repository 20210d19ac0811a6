"""
Authentication Service

Email/password sign-in, sign-out and password reset, all delegated to
Supabase Auth. The session lives on the Supabase client, so the same
client must be used for auth and for table queries.

Failures are reported with fixed UI messages (Chinese keys); the
backend's own text only goes to the audit log.
"""

from typing import Optional

from family_finance.audit import AuditLogger
from family_finance.config import get_settings
from family_finance.models.records import UserSession
from family_finance.services.storage.supabase_store import SupabaseClient, backend_message


SIGN_IN_FAILED = "登录失败，请检查邮箱和密码"
RESET_FAILED = "发送失败，请确认邮箱正确"
RESET_SENT = "已发送重设密码邮件，请检查邮箱"


class AuthError(Exception):
    """Sign-in or password reset failed. The message is a UI key."""
    pass


class AuthService:
    """Wraps the auth half of the Supabase client."""

    def __init__(
        self,
        client: SupabaseClient,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._client = client
        self._audit_logger = audit_logger
        self._settings = get_settings().app

    @property
    def _auth(self):
        return self._client.client.auth

    def _session_from(self, user, session) -> UserSession:
        email = getattr(user, "email", None)
        return UserSession(
            user_id=str(user.id),
            email=email,
            access_token=getattr(session, "access_token", None),
            is_demo=self._settings.is_demo_email(email),
        )

    def sign_in(self, email: str, password: str) -> UserSession:
        """
        Sign in with email and password.

        Raises:
            AuthError: With the generic sign-in failure message
        """
        try:
            response = self._auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_sign_in_failed(email, backend_message(e))
            raise AuthError(SIGN_IN_FAILED)

        user = getattr(response, "user", None)
        if user is None:
            if self._audit_logger:
                self._audit_logger.log_sign_in_failed(email, "no user in response")
            raise AuthError(SIGN_IN_FAILED)

        session = self._session_from(user, getattr(response, "session", None))
        if self._audit_logger:
            self._audit_logger.log_signed_in(session.user_id, session.email)
        return session

    def sign_out(self, user_id: Optional[str] = None) -> None:
        """Sign out. A backend failure is logged; the local session is dropped anyway."""
        try:
            self._auth.sign_out()
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_error("sign_out_failed", backend_message(e))
        if self._audit_logger:
            self._audit_logger.log_signed_out(user_id)

    def request_password_reset(self, email: str) -> str:
        """
        Send a password reset email.

        Returns:
            The confirmation message key

        Raises:
            AuthError: With the generic send failure message
        """
        try:
            self._auth.reset_password_for_email(email)
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_password_reset(email, succeeded=False)
                self._audit_logger.log_error("password_reset_failed", backend_message(e))
            raise AuthError(RESET_FAILED)
        if self._audit_logger:
            self._audit_logger.log_password_reset(email, succeeded=True)
        return RESET_SENT

    def current_session(self) -> Optional[UserSession]:
        """The signed-in user, or None when there is no session."""
        try:
            session = self._auth.get_session()
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_error("get_session_failed", backend_message(e))
            return None
        if session is None or getattr(session, "user", None) is None:
            return None
        return self._session_from(session.user, session)
