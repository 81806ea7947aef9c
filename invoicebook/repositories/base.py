"""
Collection Repository

DESIGN DECISION: Each collection (invoices, products, customers, ...)
is one document under one key, rewritten wholesale on every change.
The repository owns that document and enforces `id` uniqueness on
every insert, so no caller reassigns a collection behind its back.

New records go to the FRONT of the collection by default: lists read
newest first.
"""

from typing import Callable, Generic, Iterable, Optional, TypeVar

from pydantic import TypeAdapter

from invoicebook.models.invoice import LedgerModel
from invoicebook.services.storage import DocumentStore, DuplicateError, NotFoundError

T = TypeVar("T", bound=LedgerModel)


class Repository(Generic[T]):
    """
    CRUD over one persisted collection of models that carry an `id`.

    The collection is re-read from storage on every call, so writes made
    by another session sharing the store are always visible.
    """

    entity_name = "record"
    # Lists read newest first unless a collection opts out
    prepend_new = True

    def __init__(
        self,
        documents: DocumentStore,
        key: str,
        model: type[T],
        seed: Optional[Callable[[], list[T]]] = None,
    ):
        """
        Args:
            documents: Document layer to persist through
            key: Unprefixed storage key for the collection
            model: The record model
            seed: Records used when nothing is stored yet
        """
        self._documents = documents
        self._key = key
        self._model = model
        self._adapter = TypeAdapter(list[model])
        self._seed = seed or list

    def all(self) -> list[T]:
        """All records, newest first."""
        return self._documents.load(self._key, self._adapter, self._seed)

    def get(self, record_id: str) -> Optional[T]:
        for record in self.all():
            if record.id == record_id:
                return record
        return None

    def require(self, record_id: str) -> T:
        """Like get(), but a missing record raises NotFoundError."""
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(f"{self.entity_name.capitalize()} not found: {record_id}")
        return record

    def add(self, record: T) -> T:
        """
        Insert a new record at the front of the collection.

        Raises:
            DuplicateError: If a record with the same id exists
        """
        records = self.all()
        if any(existing.id == record.id for existing in records):
            raise DuplicateError(f"{self.entity_name.capitalize()} already exists: {record.id}")
        self._write([record, *records] if self.prepend_new else [*records, record])
        return record

    def update(self, record: T) -> T:
        """
        Replace a record wholesale, keeping its position.

        Raises:
            NotFoundError: If no record has this id
        """
        records = self.all()
        for idx, existing in enumerate(records):
            if existing.id == record.id:
                records[idx] = record
                self._write(records)
                return record
        raise NotFoundError(f"{self.entity_name.capitalize()} not found: {record.id}")

    def delete(self, record_id: str) -> Optional[T]:
        """Remove a record. Returns the removed record, or None if absent."""
        records = self.all()
        kept = [r for r in records if r.id != record_id]
        if len(kept) == len(records):
            return None
        removed = next(r for r in records if r.id == record_id)
        self._write(kept)
        return removed

    def replace_all(self, records: Iterable[T]) -> None:
        """
        Overwrite the whole collection in one write.

        Raises:
            DuplicateError: If two records share an id
        """
        records = list(records)
        ids = [r.id for r in records]
        if len(ids) != len(set(ids)):
            raise DuplicateError(f"Duplicate {self.entity_name} ids in collection")
        self._write(records)

    def count(self) -> int:
        return len(self.all())

    def _write(self, records: list[T]) -> None:
        self._documents.save(self._key, records, self._adapter)
