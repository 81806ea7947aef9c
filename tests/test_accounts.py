"""
Tests for app accounts and the personal wallet.
"""

import pytest
from datetime import date

from invoicebook.accounts import (
    AuthenticationError,
    PermissionDeniedError,
    compute_wallet_stats,
)
from invoicebook.models import AccountRole, Transaction, TransactionType, WalletRole


def login_admin(app):
    return app.accounts.login("arvin_hanif", "arvin_hanif")


class TestAccounts:
    """Login, session and account administration."""

    def test_seed_admin_can_log_in(self, app):
        """Test the seed admin by username."""
        user = login_admin(app)
        assert user.id == "admin-01"
        assert app.accounts.current_user.id == "admin-01"

    def test_login_by_mobile(self, app):
        """Test the mobile number works as identifier."""
        assert app.accounts.login("01XXXXXXXXX", "arvin_hanif").id == "admin-01"

    def test_bad_password(self, app):
        """Test wrong credentials are refused."""
        with pytest.raises(AuthenticationError):
            app.accounts.login("arvin_hanif", "wrong")
        assert app.accounts.current_user is None

    def test_logout_clears_session(self, app):
        """Test the session pointer is removed."""
        login_admin(app)
        app.accounts.logout()
        assert app.accounts.current_user is None

    def test_session_survives_new_components(self, app, store):
        """Test the session is persisted in the store."""
        from invoicebook.orchestrator import create_app_components

        login_admin(app)
        assert create_app_components(app.settings, store=store).accounts.current_user.id == "admin-01"

    def test_register_staff(self, app):
        """Test registration uses the email as username, else the mobile."""
        login_admin(app)
        staff = app.accounts.register(name="Karim", password="secret", mobile="01811222333")
        assert staff.username == "01811222333"
        assert staff.role == AccountRole.STAFF
        assert [u.id for u in app.accounts.list_users()] == ["admin-01", staff.id]

        app.accounts.logout()
        assert app.accounts.login("01811222333", "secret").id == staff.id

    def test_register_requires_contact(self, app):
        """Test an account needs an email or a mobile."""
        login_admin(app)
        with pytest.raises(ValueError):
            app.accounts.register(name="Nobody", password="secret")
        with pytest.raises(ValueError):
            app.accounts.register(name=" ", password="secret", mobile="01811222333")

    def test_staff_cannot_use_admin_portal(self, app):
        """Test the admin portal restriction."""
        login_admin(app)
        app.accounts.register(name="Karim", password="secret", email="karim@example.com")
        app.accounts.logout()

        with pytest.raises(AuthenticationError):
            app.accounts.login("karim@example.com", "secret", admin_portal=True)
        assert app.accounts.current_user is None

    def test_staff_cannot_manage_accounts(self, app):
        """Test only admins register or delete accounts."""
        login_admin(app)
        app.accounts.register(name="Karim", password="secret", email="karim@example.com")
        app.accounts.logout()
        app.accounts.login("karim@example.com", "secret")

        with pytest.raises(PermissionDeniedError):
            app.accounts.register(name="Other", password="x", email="o@example.com")
        with pytest.raises(PermissionDeniedError):
            app.accounts.delete_user("admin-01")

    def test_cannot_delete_self(self, app):
        """Test the logged-in account is protected."""
        login_admin(app)
        with pytest.raises(PermissionDeniedError):
            app.accounts.delete_user("admin-01")

    def test_delete_other_account(self, app):
        """Test an admin removes another account."""
        login_admin(app)
        staff = app.accounts.register(name="Karim", password="secret", email="karim@example.com")
        assert app.accounts.delete_user(staff.id).id == staff.id
        assert app.accounts.delete_user(staff.id) is None

    def test_update_current_user_refreshes_session(self, app):
        """Test editing yourself updates the session copy."""
        admin = login_admin(app)
        app.accounts.update_user(admin.model_copy(update={"name": "Arvin H."}))
        assert app.accounts.current_user.name == "Arvin H."


class TestWallet:
    """Wallet stats, admin login and permissions."""

    def test_stats(self):
        """Test income, expenses and balance."""
        stats = compute_wallet_stats([
            Transaction(description="Salary", amount=5000, type=TransactionType.INCOME),
            Transaction(description="Rent", amount=1500, type=TransactionType.EXPENSE),
            Transaction(description="Food", amount=500, type=TransactionType.EXPENSE),
        ])
        assert stats.total_income == 5000
        assert stats.total_expenses == 2000
        assert stats.total_balance == 3000

    def test_fresh_profile(self, app):
        """Test the default wallet profile."""
        profile = app.wallet.profile
        assert profile.name == "User"
        assert profile.role == WalletRole.USER
        assert profile.currency == "৳"

    def test_user_cannot_add(self, app):
        """Test changes need the admin role."""
        with pytest.raises(PermissionDeniedError):
            app.wallet.add_transaction("Salary", 5000, TransactionType.INCOME)

    def test_wrong_admin_credentials(self, app):
        """Test the fixed wallet credentials are checked."""
        with pytest.raises(AuthenticationError):
            app.wallet.login("Arvin_Hanif", "nope")
        assert app.wallet.profile.role == WalletRole.USER

    def test_admin_add_delete_and_logout(self, app):
        """Test the full admin cycle."""
        profile = app.wallet.login("Arvin_Hanif", "Arvin_Hanif")
        assert profile.role == WalletRole.ADMIN
        assert profile.name == "Arvin Hanif"

        salary = app.wallet.add_transaction("Salary", 5000, "INCOME", on=date(2024, 5, 1))
        app.wallet.add_transaction("Rent", 1500, TransactionType.EXPENSE)
        assert salary.date == "2024-05-01"
        assert [t.description for t in app.wallet.transactions()] == ["Rent", "Salary"]
        assert app.wallet.stats().total_balance == 3500

        assert app.wallet.delete_transaction(salary.id).id == salary.id
        assert app.wallet.stats().total_balance == -1500

        profile = app.wallet.logout()
        assert profile.role == WalletRole.USER
        assert profile.name == "User"
        with pytest.raises(PermissionDeniedError):
            app.wallet.delete_transaction("anything")

    def test_negative_amount_is_refused(self, app):
        """Test the amount is checked when a transaction is entered."""
        app.wallet.login("Arvin_Hanif", "Arvin_Hanif")
        with pytest.raises(ValueError):
            app.wallet.add_transaction("Oops", -10, TransactionType.EXPENSE)
        assert app.wallet.transactions() == []

    def test_rename_blank_falls_back(self, app):
        """Test a blank display name becomes "User"."""
        assert app.wallet.rename("Nadia").name == "Nadia"
        assert app.wallet.rename("   ").name == "User"
