"""Key/value backend adapters.

Provides protocols and implementations for:
- BucketConnector: acquires bucket handles for a connection target
- KeyValueStore: insert/upsert/remove/get on an open bucket

Usage:
    from cbactivity.adapters import BucketConnector, BucketPool, BucketTarget

    # Implementations
    from cbactivity.adapters.couchbase import CouchbaseConnector  # couchbase SDK
    from cbactivity.adapters.memory import MemoryConnector  # in-process
"""

from cbactivity.adapters.memory import MemoryCluster, MemoryConnector
from cbactivity.adapters.models import BucketTarget
from cbactivity.adapters.pool import BucketPool
from cbactivity.adapters.protocol import BucketConnector, KeyValueStore

__all__ = [
    # Protocols
    "BucketConnector",
    "KeyValueStore",
    # Types
    "BucketTarget",
    # Implementations
    "BucketPool",
    "MemoryCluster",
    "MemoryConnector",
]
