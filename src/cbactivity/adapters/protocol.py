"""Adapter protocols for key/value backends.

Defines the interfaces a storage backend implements so the activity can run
against a real Couchbase cluster, an in-memory cluster, or a pooled wrapper
around either.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Protocol, runtime_checkable

from cbactivity.adapters.models import BucketTarget


@runtime_checkable
class KeyValueStore(Protocol):
    """Key/value primitives on an open bucket.

    Mutations return the document's CAS token after the write. Failures are
    raised as ``cbactivity.errors`` types, never as client library exceptions.

    Usage:
        with connector.open_bucket(target) as store:
            cas = store.upsert("order-1", {"qty": 2}, expiry=60)
            doc = store.get("order-1")
    """

    def insert(self, key: str, value: Any, expiry: int = 0) -> int:
        """Create a document.

        Args:
            key: Document key.
            value: JSON-serializable document body.
            expiry: Time-to-live in seconds (0 = never expires).

        Returns:
            CAS token of the new document.

        Raises:
            DuplicateKeyError: If the key already exists.
        """
        ...

    def upsert(self, key: str, value: Any, expiry: int = 0) -> int:
        """Create or overwrite a document.

        Args:
            key: Document key.
            value: JSON-serializable document body.
            expiry: Time-to-live in seconds (0 = never expires).

        Returns:
            CAS token of the written document.
        """
        ...

    def remove(self, key: str) -> int:
        """Delete a document.

        Returns:
            CAS token of the removal.

        Raises:
            NotFoundError: If the key does not exist.
        """
        ...

    def get(self, key: str) -> Any:
        """Read a document, decoded into a generic JSON value.

        Raises:
            NotFoundError: If the key does not exist.
        """
        ...


@runtime_checkable
class BucketConnector(Protocol):
    """Acquires bucket handles for a connection target.

    The returned context manager owns the underlying connection: leaving the
    ``with`` block releases it on every exit path. Pooled implementations may
    keep the connection open past the block instead.
    """

    def open_bucket(self, target: BucketTarget) -> AbstractContextManager[KeyValueStore]:
        """Connect, authenticate and open ``target.bucket``.

        Raises:
            ClusterConnectionError: Server unreachable or address malformed.
            AuthenticationError: Credentials rejected.
            BucketOpenError: Bucket missing or bucket credentials rejected.
        """
        ...
