"""In-memory cluster implementing the BucketConnector protocol.

Simple dict-based backend suitable for single-process use and testing.
Follows the same contract as the Couchbase connector: reachable servers,
users and buckets are registered up front, mutations return increasing CAS
tokens, and documents are stored as JSON copies.

Usage:
    cluster = MemoryCluster(servers=["localhost"])
    cluster.add_user("app", "secret")
    cluster.create_bucket("orders")

    connector = MemoryConnector(cluster)
    with connector.open_bucket(BucketTarget("localhost", "app", "secret", "orders")) as store:
        store.insert("order-1", {"qty": 2}, expiry=60)
"""

from __future__ import annotations

import itertools
import json
import threading
import time
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from cbactivity.adapters.models import BucketTarget
from cbactivity.errors import (
    AuthenticationError,
    BucketOpenError,
    ClusterConnectionError,
    DuplicateKeyError,
    NotFoundError,
    OperationError,
)


@dataclass(slots=True)
class _Document:
    body: str
    cas: int
    expires_at: float | None = None


@dataclass
class MemoryBucket:
    """A named bucket.

    Structure:
        documents[key] = _Document(body=<json text>, cas, expires_at)
    """

    name: str
    password: str = field(default="", repr=False)
    documents: dict[str, _Document] = field(default_factory=dict, repr=False)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class MemoryCluster:
    """Process-local stand-in for a Couchbase cluster.

    Args:
        servers: Host names (optionally ``host:port``) that accept connections.
        clock: Time source in seconds, used for document expiry.
    """

    def __init__(
        self,
        servers: Iterable[str] = ("localhost",),
        clock: Callable[[], float] = time.monotonic,
    ):
        self._servers = set(servers)
        self._clock = clock
        self._users: dict[str, str] = {}
        self._buckets: dict[str, MemoryBucket] = {}
        self._cas = itertools.count(1)
        self._cas_lock = threading.Lock()
        self.connections_opened = 0
        self.connections_open = 0
        """Connection accounting:
        connections_opened: total connections ever accepted.
        connections_open: connections not yet released.
        """

    def add_user(self, username: str, password: str) -> None:
        """Register an RBAC user."""
        self._users[username] = password

    def create_bucket(self, name: str, password: str = "") -> MemoryBucket:
        """Create (or replace) a bucket."""
        bucket = MemoryBucket(name=name, password=password)
        self._buckets[name] = bucket
        return bucket

    def bucket(self, name: str) -> MemoryBucket | None:
        """Get a bucket by name."""
        return self._buckets.get(name)

    def next_cas(self) -> int:
        """Allocate a new CAS token (strictly increasing, never zero)."""
        with self._cas_lock:
            return next(self._cas)

    def now(self) -> float:
        return self._clock()

    def connect(self, target: BucketTarget) -> None:
        """Check reachability and RBAC credentials for ``target``.

        Raises:
            ClusterConnectionError: No seed host is registered.
            AuthenticationError: User unknown or password wrong.
        """
        hosts = target.hosts()
        if not any(h in self._servers or h.split(":", 1)[0] in self._servers for h in hosts):
            raise ClusterConnectionError(f"Connection error: no reachable host in {target.server}")
        if target.username and self._users.get(target.username) != target.password:
            raise AuthenticationError(f"Authentication failed for user {target.username}")
        self.connections_opened += 1
        self.connections_open += 1

    def disconnect(self) -> None:
        self.connections_open -= 1

    def open(self, target: BucketTarget) -> MemoryBucket:
        """Resolve ``target.bucket``, checking bucket-level credentials.

        Raises:
            BucketOpenError: Bucket missing or bucket password rejected.
        """
        bucket = self._buckets.get(target.bucket)
        if bucket is None:
            raise BucketOpenError(f"bucket {target.bucket} does not exist")
        if not target.username and bucket.password != target.bucket_password:
            raise BucketOpenError(f"invalid credentials for bucket {target.bucket}")
        return bucket


def _encode(value: Any, method: str, key: str) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise OperationError(f"{method} error: {e}", method=method, key=key) from e


class MemoryStore:
    """KeyValueStore over a MemoryBucket."""

    def __init__(self, cluster: MemoryCluster, bucket: MemoryBucket):
        self._cluster = cluster
        self._bucket = bucket

    @property
    def bucket(self) -> MemoryBucket:
        return self._bucket

    def _live(self, key: str) -> _Document | None:
        """Get a document, dropping it if expired. Caller holds the lock."""
        doc = self._bucket.documents.get(key)
        if doc is not None and doc.expires_at is not None and doc.expires_at <= self._cluster.now():
            del self._bucket.documents[key]
            return None
        return doc

    def _write(self, key: str, body: str, expiry: int) -> int:
        expires_at = self._cluster.now() + expiry if expiry else None
        cas = self._cluster.next_cas()
        self._bucket.documents[key] = _Document(body=body, cas=cas, expires_at=expires_at)
        return cas

    def insert(self, key: str, value: Any, expiry: int = 0) -> int:
        body = _encode(value, "Insert", key)
        with self._bucket.lock:
            if self._live(key) is not None:
                raise DuplicateKeyError(f"document {key} already exists", method="Insert", key=key)
            return self._write(key, body, expiry)

    def upsert(self, key: str, value: Any, expiry: int = 0) -> int:
        body = _encode(value, "Upsert", key)
        with self._bucket.lock:
            return self._write(key, body, expiry)

    def remove(self, key: str) -> int:
        with self._bucket.lock:
            if self._live(key) is None:
                raise NotFoundError(f"document {key} not found", method="Remove", key=key)
            del self._bucket.documents[key]
            return self._cluster.next_cas()

    def get(self, key: str) -> Any:
        with self._bucket.lock:
            doc = self._live(key)
            if doc is None:
                raise NotFoundError(f"document {key} not found", method="Get", key=key)
            return json.loads(doc.body)


class MemoryConnector:
    """BucketConnector over a MemoryCluster.

    Every ``open_bucket`` counts as one connection and is released when the
    ``with`` block exits, so tests can assert that nothing leaks.
    """

    def __init__(self, cluster: MemoryCluster | None = None):
        self._cluster = cluster if cluster is not None else MemoryCluster()

    @property
    def cluster(self) -> MemoryCluster:
        return self._cluster

    @contextmanager
    def open_bucket(self, target: BucketTarget) -> Iterator[MemoryStore]:
        self._cluster.connect(target)
        try:
            yield MemoryStore(self._cluster, self._cluster.open(target))
        finally:
            self._cluster.disconnect()
