"""Couchbase adapter implementing the BucketConnector protocol.

Connects with the ``couchbase`` Python SDK, authenticates with a password
authenticator, waits for the key/value service and opens the bucket's default
collection. SDK exceptions are translated into ``cbactivity.errors`` types.

Usage:
    from cbactivity.adapters.couchbase import CouchbaseConnector
    from cbactivity.adapters.models import BucketTarget
    from cbactivity.config import CouchbaseSettings

    connector = CouchbaseConnector(CouchbaseSettings(kv_timeout=5.0))
    target = BucketTarget("couchbase://localhost", "Administrator", "password", "orders")

    with connector.open_bucket(target) as store:
        cas = store.upsert("order-1", {"qty": 2})
        doc = store.get("order-1")
    # cluster connection closed here
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from cbactivity.adapters.models import BucketTarget
from cbactivity.config import CouchbaseSettings
from cbactivity.errors import (
    ActivityError,
    AuthenticationError,
    BucketOpenError,
    ClusterConnectionError,
    DuplicateKeyError,
    NotFoundError,
    OperationError,
)

try:
    from couchbase.auth import PasswordAuthenticator
    from couchbase.cluster import Cluster
    from couchbase.diagnostics import ServiceType
    from couchbase.exceptions import (
        AuthenticationException,
        CouchbaseException,
        DocumentExistsException,
        DocumentNotFoundException,
    )
    from couchbase.options import (
        ClusterOptions,
        ClusterTimeoutOptions,
        GetOptions,
        InsertOptions,
        RemoveOptions,
        UpsertOptions,
        WaitUntilReadyOptions,
    )
except ImportError as e:
    raise ImportError(
        "couchbase is required for CouchbaseConnector. Install with: pip install cbactivity"
    ) from e

if TYPE_CHECKING:
    from couchbase.collection import Collection


def _translate_operation_error(exc: CouchbaseException, method: str, key: str) -> ActivityError:
    """Map an SDK exception raised by a key/value call to an activity error."""
    if isinstance(exc, DocumentExistsException):
        return DuplicateKeyError(f"document {key} already exists", method=method, key=key)
    if isinstance(exc, DocumentNotFoundException):
        return NotFoundError(f"document {key} not found", method=method, key=key)
    return OperationError(f"{method} error: {exc}", method=method, key=key)


class CouchbaseStore:
    """KeyValueStore over a Couchbase collection.

    Attributes:
        collection: The underlying SDK collection.
    """

    def __init__(self, collection: Collection, kv_timeout: float) -> None:
        self._collection = collection
        self._timeout = timedelta(seconds=kv_timeout)

    @property
    def collection(self) -> Collection:
        """Get the underlying SDK collection."""
        return self._collection

    def _mutation_options(self, expiry: int) -> dict[str, Any]:
        params: dict[str, Any] = {"timeout": self._timeout}
        if expiry:
            params["expiry"] = timedelta(seconds=expiry)
        return params

    def insert(self, key: str, value: Any, expiry: int = 0) -> int:
        try:
            result = self._collection.insert(key, value, InsertOptions(**self._mutation_options(expiry)))
        except CouchbaseException as e:
            raise _translate_operation_error(e, "Insert", key) from e
        return int(result.cas)

    def upsert(self, key: str, value: Any, expiry: int = 0) -> int:
        try:
            result = self._collection.upsert(key, value, UpsertOptions(**self._mutation_options(expiry)))
        except CouchbaseException as e:
            raise _translate_operation_error(e, "Upsert", key) from e
        return int(result.cas)

    def remove(self, key: str) -> int:
        try:
            result = self._collection.remove(key, RemoveOptions(timeout=self._timeout))
        except CouchbaseException as e:
            raise _translate_operation_error(e, "Remove", key) from e
        return int(result.cas)

    def get(self, key: str) -> Any:
        try:
            result = self._collection.get(key, GetOptions(timeout=self._timeout))
        except CouchbaseException as e:
            raise _translate_operation_error(e, "Get", key) from e
        return result.value


class CouchbaseConnector:
    """BucketConnector backed by a Couchbase cluster.

    Each ``open_bucket`` call opens its own cluster connection and closes it
    when the ``with`` block exits. Wrap in ``BucketPool`` to reuse
    connections across invocations.

    Attributes:
        settings: Connection and timeout settings.
    """

    def __init__(
        self,
        settings: CouchbaseSettings | None = None,
        cluster_factory: Callable[[str, ClusterOptions], Any] | None = None,
    ) -> None:
        """Initialize connector.

        Args:
            settings: Connector settings (environment defaults if None).
            cluster_factory: Callable building a connected cluster from a
                connection string and options (``Cluster`` if None).
        """
        self._settings = settings or CouchbaseSettings()
        self._cluster_factory = cluster_factory or Cluster

    @property
    def settings(self) -> CouchbaseSettings:
        return self._settings

    def _cluster_options(self, target: BucketTarget) -> ClusterOptions:
        username, password = target.credentials()
        timeout_opts = ClusterTimeoutOptions(
            connect_timeout=timedelta(seconds=self._settings.connect_timeout),
            kv_timeout=timedelta(seconds=self._settings.kv_timeout),
        )
        return ClusterOptions(PasswordAuthenticator(username, password), timeout_options=timeout_opts)

    def _connect(self, target: BucketTarget) -> Any:
        connection_string = target.connection_string(self._settings.enable_tls)
        try:
            cluster = self._cluster_factory(connection_string, self._cluster_options(target))
        except AuthenticationException as e:
            raise AuthenticationError(f"Authentication failed for {target.server}: {e}") from e
        except CouchbaseException as e:
            raise ClusterConnectionError(f"Connection error: {e}") from e

        if not self._settings.wait_until_ready:
            return cluster

        # Bad credentials otherwise only show up on the first operation
        try:
            cluster.wait_until_ready(
                timedelta(seconds=self._settings.connect_timeout),
                WaitUntilReadyOptions(service_types=[ServiceType.KeyValue]),
            )
        except AuthenticationException as e:
            cluster.close()
            raise AuthenticationError(f"Authentication failed for {target.server}: {e}") from e
        except CouchbaseException as e:
            cluster.close()
            raise ClusterConnectionError(f"Connection error: cluster not ready: {e}") from e
        return cluster

    @contextmanager
    def open_bucket(self, target: BucketTarget) -> Iterator[CouchbaseStore]:
        """Connect and open ``target.bucket``'s default collection.

        Args:
            target: Connection target.

        Yields:
            Store bound to the bucket's default collection.

        Raises:
            ClusterConnectionError: Server unreachable or address malformed.
            AuthenticationError: Credentials rejected.
            BucketOpenError: Bucket missing or not accessible.
        """
        cluster = self._connect(target)
        try:
            try:
                collection = cluster.bucket(target.bucket).default_collection()
            except CouchbaseException as e:
                raise BucketOpenError(
                    f"Error while opening bucket {target.bucket} with the specified credentials: {e}"
                ) from e
            yield CouchbaseStore(collection, self._settings.kv_timeout)
        finally:
            cluster.close()
