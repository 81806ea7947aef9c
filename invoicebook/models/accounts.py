"""
Account and Wallet Models

Two independent account notions live side by side:
- AuthUser: the invoicing app's Admin/Staff accounts.
- WalletProfile: the single-user personal wallet, which flips between
  USER and ADMIN roles on login/logout.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from invoicebook.models.invoice import LedgerModel, new_id


class AccountRole(str, Enum):
    """Invoicing app account role."""
    ADMIN = "Admin"
    STAFF = "Staff"


class AuthUser(LedgerModel):
    """
    An invoicing app account.

    Login accepts either `username` or `mobile` as the identifier.
    """
    id: str = Field(default_factory=lambda: f"user-{new_id()}")
    role: AccountRole = AccountRole.STAFF
    name: str
    username: str
    password: Optional[str] = None
    mobile: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN


class TransactionType(str, Enum):
    """Direction of a wallet transaction."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class WalletRole(str, Enum):
    """Wallet profile role. Only ADMIN may add or delete transactions."""
    ADMIN = "ADMIN"
    USER = "USER"


class Transaction(LedgerModel):
    """A single wallet entry."""
    id: str = Field(default_factory=new_id)
    description: str = ""
    amount: float
    type: TransactionType
    date: str = Field(default_factory=lambda: date.today().isoformat())


class WalletProfile(LedgerModel):
    """The wallet owner's display profile."""
    name: str = "User"
    currency: str = "৳"
    avatar_seed: str = "Warrick"
    role: WalletRole = WalletRole.USER


class WalletStats(BaseModel):
    """Derived wallet totals."""
    total_balance: float
    total_income: float
    total_expenses: float
