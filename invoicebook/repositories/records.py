"""
Invoice, account and wallet collections, plus single-document stores.
"""

from typing import Callable, Generic, Optional, TypeVar

from pydantic import TypeAdapter

from invoicebook.models.accounts import AccountRole, AuthUser, Transaction, WalletProfile
from invoicebook.models.invoice import BusinessInfo, Invoice, LedgerModel
from invoicebook.repositories import keys
from invoicebook.repositories.base import Repository
from invoicebook.services.storage import DocumentStore

M = TypeVar("M", bound=LedgerModel)


def default_business() -> BusinessInfo:
    return BusinessInfo(
        name="Warrick Studios",
        email="billing@warrick.io",
        phone="+880 1XXX-XXXXXX",
        address="Gulshan, Dhaka, Bangladesh",
    )


def default_users() -> list[AuthUser]:
    """The master admin present before anyone registers."""
    return [AuthUser(
        id="admin-01",
        role=AccountRole.ADMIN,
        name="Arvin Hanif",
        username="arvin_hanif",
        password="arvin_hanif",
        mobile="01XXXXXXXXX",
        email="arvin@warrick.io",
    )]


class InvoiceRepository(Repository[Invoice]):
    """The shared invoice collection, newest first."""

    entity_name = "invoice"

    def __init__(self, documents: DocumentStore):
        super().__init__(documents, keys.INVOICES, Invoice)

    def find_by_number(self, invoice_number: str) -> list[Invoice]:
        """Every invoice carrying this number. Legacy data may hold duplicates."""
        return [inv for inv in self.all() if inv.invoice_number == invoice_number]


class UserRepository(Repository[AuthUser]):
    """Invoicing app accounts. Registration order is kept (appended, not prepended)."""

    entity_name = "user"
    prepend_new = False

    def __init__(self, documents: DocumentStore):
        super().__init__(documents, keys.USERS, AuthUser, seed=default_users)

    def find_by_identifier(self, identifier: str) -> Optional[AuthUser]:
        """Account whose username or mobile equals `identifier`."""
        for user in self.all():
            if user.username == identifier or (user.mobile and user.mobile == identifier):
                return user
        return None


class TransactionRepository(Repository[Transaction]):
    """Wallet transactions, newest first."""

    entity_name = "transaction"

    def __init__(self, documents: DocumentStore):
        super().__init__(documents, keys.WALLET_TRANSACTIONS, Transaction)


class SingleDocument(Generic[M]):
    """One model stored under one key, with a default when nothing is stored."""

    def __init__(
        self,
        documents: DocumentStore,
        key: str,
        model: type[M],
        default: Callable[[], Optional[M]],
    ):
        self._documents = documents
        self._key = key
        self._adapter = TypeAdapter(Optional[model])
        self._default = default

    def get(self) -> Optional[M]:
        return self._documents.load(self._key, self._adapter, self._default)

    def set(self, value: M) -> M:
        self._documents.save(self._key, value, self._adapter)
        return value

    def clear(self) -> None:
        self._documents.remove(self._key)


class BusinessProfileStore(SingleDocument[BusinessInfo]):
    """The issuing business profile, seeded with the studio defaults."""

    def __init__(self, documents: DocumentStore):
        super().__init__(documents, keys.BUSINESS, BusinessInfo, default_business)

    def get(self) -> BusinessInfo:
        return super().get() or default_business()


class SessionStore(SingleDocument[AuthUser]):
    """Pointer to the logged-in account. Absent when nobody is logged in."""

    def __init__(self, documents: DocumentStore):
        super().__init__(documents, keys.SESSION, AuthUser, lambda: None)


class WalletProfileStore(SingleDocument[WalletProfile]):
    """The wallet owner's profile."""

    def __init__(self, documents: DocumentStore, currency_symbol: str = "৳"):
        super().__init__(
            documents,
            keys.WALLET_PROFILE,
            WalletProfile,
            lambda: WalletProfile(currency=currency_symbol),
        )

    def get(self) -> WalletProfile:
        return super().get() or WalletProfile()
