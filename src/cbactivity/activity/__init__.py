"""Workflow activity performing Couchbase key/value operations.

Usage:
    from cbactivity.activity import CouchbaseActivity, MappingContext, Method
"""

from cbactivity.activity.activity import CouchbaseActivity
from cbactivity.activity.context import MappingContext
from cbactivity.activity.models import (
    COUCHBASE_METADATA,
    ActivityMetadata,
    Method,
    OperationRequest,
    OperationResult,
    SlotSpec,
)
from cbactivity.activity.protocol import Activity, ActivityContext

__all__ = [
    # Protocols
    "Activity",
    "ActivityContext",
    # Implementations
    "CouchbaseActivity",
    "MappingContext",
    # Types
    "Method",
    "OperationRequest",
    "OperationResult",
    "ActivityMetadata",
    "SlotSpec",
    "COUCHBASE_METADATA",
]
