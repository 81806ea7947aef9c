"""
Versioned JSON documents over a key-value store.

Every persisted value is wrapped in an envelope:

    {"schemaVersion": 1, "data": <payload>}

A bare payload without the envelope is an older document and is read
as schema version 0. Anything unreadable (bad JSON, a newer schema
version, a payload that fails model validation) is treated as absent:
the caller gets its default and a warning is logged. This never raises.
"""

import json
from typing import Any, Callable, Optional, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

from invoicebook.services.storage.interface import KeyValueStore

logger = structlog.get_logger(__name__)

SCHEMA_VERSION = 1

T = TypeVar("T")


class DocumentStore:
    """
    Reads and writes whole JSON documents under prefixed keys.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key_prefix: str = "",
        on_fallback: Optional[Callable[[str, str], None]] = None,
    ):
        """
        Args:
            store: Backing key-value store
            key_prefix: Prepended to every key
            on_fallback: Called with (key, reason) whenever a stored
                document is discarded in favour of the default
        """
        self._store = store
        self._prefix = key_prefix
        self._on_fallback = on_fallback

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def load(self, key: str, adapter: TypeAdapter[T], default: Callable[[], T]) -> T:
        """
        Load and validate a document.

        Args:
            key: Unprefixed key
            adapter: Validates the payload into its Python type
            default: Factory for the value used when the key is absent
                or unreadable
        """
        raw = self._store.get(self.full_key(key))
        if raw is None:
            return default()

        try:
            payload = self._unwrap(json.loads(raw))
            return adapter.validate_python(payload)
        except (ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            self._fallback(key, str(e))
            return default()

    def save(self, key: str, value: Any, adapter: TypeAdapter) -> None:
        """Serialize a value and replace the stored document."""
        payload = adapter.dump_python(value, mode="json", by_alias=True)
        document = {"schemaVersion": SCHEMA_VERSION, "data": payload}
        self._store.set(self.full_key(key), json.dumps(document, ensure_ascii=False))

    def remove(self, key: str) -> None:
        self._store.remove(self.full_key(key))

    def exists(self, key: str) -> bool:
        return self._store.get(self.full_key(key)) is not None

    def _unwrap(self, document: Any) -> Any:
        if isinstance(document, dict) and "schemaVersion" in document:
            version = document["schemaVersion"]
            if not isinstance(version, int) or version > SCHEMA_VERSION:
                raise ValueError(f"Unsupported schema version: {version!r}")
            if "data" not in document:
                raise ValueError("Document envelope has no data")
            return document["data"]
        # Schema version 0: the payload itself
        return document

    def _fallback(self, key: str, reason: str) -> None:
        logger.warning("document_discarded", key=self.full_key(key), reason=reason)
        if self._on_fallback is not None:
            self._on_fallback(key, reason)
