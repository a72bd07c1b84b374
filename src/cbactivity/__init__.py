"""cbactivity: Couchbase key/value activity for workflow engines.

Usage:
    from cbactivity import CouchbaseActivity, MappingContext

    activity = CouchbaseActivity()
    ctx = MappingContext({
        "method": "Get",
        "key": "order-1",
        "server": "couchbase://localhost",
        "username": "Administrator",
        "password": "password",
        "bucket": "orders",
    })
    activity.eval(ctx)
    print(ctx.outputs["output"])
"""

__version__ = "0.1.0"

# Activity
from cbactivity.activity import (
    COUCHBASE_METADATA,
    Activity,
    ActivityContext,
    ActivityMetadata,
    CouchbaseActivity,
    MappingContext,
    Method,
    OperationRequest,
    OperationResult,
    SlotSpec,
)

# Adapters
from cbactivity.adapters import (
    BucketConnector,
    BucketPool,
    BucketTarget,
    KeyValueStore,
    MemoryCluster,
    MemoryConnector,
)

# Configuration
from cbactivity.config import ActivitySettings, CouchbaseSettings

# Errors
from cbactivity.errors import (
    ActivityError,
    AuthenticationError,
    BucketOpenError,
    ClusterConnectionError,
    DuplicateKeyError,
    InvalidInputError,
    NotFoundError,
    OperationError,
    UnsupportedMethodError,
)

__all__ = [
    # Version
    "__version__",
    # Activity
    "Activity",
    "ActivityContext",
    "CouchbaseActivity",
    "MappingContext",
    "Method",
    "OperationRequest",
    "OperationResult",
    "ActivityMetadata",
    "SlotSpec",
    "COUCHBASE_METADATA",
    # Adapters
    "BucketConnector",
    "KeyValueStore",
    "BucketTarget",
    "BucketPool",
    "MemoryCluster",
    "MemoryConnector",
    # Configuration
    "ActivitySettings",
    "CouchbaseSettings",
    # Errors
    "ActivityError",
    "InvalidInputError",
    "UnsupportedMethodError",
    "ClusterConnectionError",
    "AuthenticationError",
    "BucketOpenError",
    "DuplicateKeyError",
    "NotFoundError",
    "OperationError",
]
