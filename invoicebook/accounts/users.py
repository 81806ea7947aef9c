"""
Invoicing App Accounts

Admin and Staff accounts sharing one persisted list. The logged-in
account is persisted as a session pointer and removed on logout.

Only admins register, edit or delete accounts, and nobody can delete
the account they are logged in with.
"""

import secrets
from typing import Optional

import structlog

from invoicebook.audit import AuditLogger
from invoicebook.models.accounts import AccountRole, AuthUser
from invoicebook.models.audit import AuditEventType, AuditSeverity
from invoicebook.models.invoice import new_id
from invoicebook.repositories import SessionStore, UserRepository

logger = structlog.get_logger(__name__)


class AccountError(Exception):
    """Base exception for account operations."""
    pass


class AuthenticationError(AccountError):
    """Credentials did not match, or the account lacks portal access."""
    pass


class PermissionDeniedError(AccountError):
    """The current account may not perform this action."""
    pass


class AccountService:
    """
    Login, logout and account administration.
    """

    def __init__(
        self,
        users: UserRepository,
        session: SessionStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._users = users
        self._session = session
        self._audit_logger = audit_logger

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._session.get()

    def list_users(self) -> list[AuthUser]:
        return self._users.all()

    def login(self, identifier: str, password: str, admin_portal: bool = False) -> AuthUser:
        """
        Log in by username or mobile number.

        Args:
            identifier: Username or mobile
            password: Account password
            admin_portal: Only Admin accounts may log in through it

        Raises:
            AuthenticationError: Bad credentials or non-admin on the admin portal
        """
        user = self._users.find_by_identifier(identifier)
        if user is None or not _password_matches(user, password):
            self._audit(AuditEventType.LOGIN_FAILED, None, "Access denied: invalid credentials",
                        AuditSeverity.WARNING)
            raise AuthenticationError("Access Denied. Invalid credentials.")

        if admin_portal and not user.is_admin:
            self._audit(AuditEventType.LOGIN_FAILED, user.id, "Non-admin refused at admin portal",
                        AuditSeverity.WARNING)
            raise AuthenticationError("This portal is restricted to Administrators.")

        self._session.set(user)
        self._audit(AuditEventType.USER_LOGGED_IN, user.id, f"{user.username} logged in")
        return user

    def logout(self) -> None:
        user = self.current_user
        self._session.clear()
        if user is not None:
            self._audit(AuditEventType.USER_LOGGED_OUT, user.id, f"{user.username} logged out")

    def register(
        self,
        name: str,
        password: str,
        email: str = "",
        mobile: str = "",
        role: AccountRole = AccountRole.STAFF,
    ) -> AuthUser:
        """
        Create an account. The username is the email, or the mobile if no email.

        Raises:
            PermissionDeniedError: If the current account is not an admin
            ValueError: If name, password or both contacts are missing
        """
        self._require_admin()
        user = AuthUser(
            id=f"user-{new_id()}",
            role=role,
            name=_required(name, "name"),
            username=_username(email, mobile),
            password=_required(password, "password"),
            mobile=mobile or None,
            email=email or None,
        )
        self._users.add(user)
        self._audit(AuditEventType.USER_REGISTERED, user.id, f"{user.username} registered")
        return user

    def update_user(self, user: AuthUser) -> AuthUser:
        """
        Replace an account. If it is the logged-in account, the session follows.

        Raises:
            PermissionDeniedError: If the current account is not an admin
            NotFoundError: If the account does not exist
        """
        self._require_admin()
        updated = self._users.update(user)
        current = self.current_user
        if current is not None and current.id == updated.id:
            self._session.set(updated)
        self._audit(AuditEventType.USER_UPDATED, updated.id, f"{updated.username} updated")
        return updated

    def delete_user(self, user_id: str) -> Optional[AuthUser]:
        """
        Remove an account.

        Raises:
            PermissionDeniedError: Not an admin, or deleting your own account
        """
        current = self._require_admin()
        if current.id == user_id:
            raise PermissionDeniedError("You cannot delete your own account while logged in.")
        removed = self._users.delete(user_id)
        if removed is not None:
            self._audit(AuditEventType.USER_DELETED, user_id, f"{removed.username} deleted")
        return removed

    def _require_admin(self) -> AuthUser:
        current = self.current_user
        if current is None or not current.is_admin:
            raise PermissionDeniedError("Only administrators can manage accounts.")
        return current

    def _audit(
        self,
        event_type: AuditEventType,
        user_id: Optional[str],
        description: str,
        severity: AuditSeverity = AuditSeverity.INFO,
    ) -> None:
        logger.info(event_type.value, user_id=user_id)
        if self._audit_logger:
            self._audit_logger.log_account_event(event_type, user_id, description, severity)


def _password_matches(user: AuthUser, password: str) -> bool:
    if user.password is None:
        return False
    return secrets.compare_digest(user.password.encode(), password.encode())


def _required(value: str, field: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{field} is required")
    return value


def _username(email: str, mobile: str) -> str:
    username = (email or "").strip() or (mobile or "").strip()
    if not username:
        raise ValueError("email or mobile is required")
    return username
