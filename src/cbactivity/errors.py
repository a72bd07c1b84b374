"""Error taxonomy for the Couchbase activity.

Every failure surfaced to the host is an ``ActivityError``. Adapters translate
client library exceptions into these types with ``raise ... from exc`` so the
original cause stays attached.

Hierarchy:
    ActivityError
    ├── InvalidInputError        (malformed input slot, also ValueError)
    ├── UnsupportedMethodError   (method not Insert/Upsert/Remove/Get)
    ├── ClusterConnectionError   (unreachable/malformed server, also ConnectionError)
    ├── AuthenticationError      (credentials rejected)
    ├── BucketOpenError          (bucket missing or bucket credentials rejected)
    ├── DuplicateKeyError        (Insert on an existing key)
    ├── NotFoundError            (Remove/Get on a missing key)
    └── OperationError           (any other failure while running an operation)
"""

from __future__ import annotations


class ActivityError(Exception):
    """Base class for all activity failures.

    Attributes:
        method: Method name of the failed invocation, when known.
        key: Document key of the failed invocation, when known.
    """

    def __init__(self, message: str, *, method: str | None = None, key: str | None = None):
        super().__init__(message)
        self.method = method
        self.key = key


class InvalidInputError(ActivityError, ValueError):
    """Raised when an input slot is missing or has the wrong type.

    Attributes:
        slot: Name of the offending input slot.
    """

    def __init__(self, slot: str, message: str):
        super().__init__(f"invalid input '{slot}': {message}")
        self.slot = slot


class UnsupportedMethodError(ActivityError):
    """Raised when the method slot names an unknown operation."""

    def __init__(self, method: str):
        super().__init__(f"method {method} not recognized", method=method)


class ClusterConnectionError(ActivityError, ConnectionError):
    """Raised when the cluster address is malformed or unreachable."""

    pass


class AuthenticationError(ActivityError):
    """Raised when the cluster rejects the supplied credentials."""

    pass


class BucketOpenError(ActivityError):
    """Raised when a bucket cannot be opened."""

    pass


class DuplicateKeyError(ActivityError):
    """Raised when inserting a key that already exists."""

    pass


class NotFoundError(ActivityError):
    """Raised when removing or reading a key that does not exist."""

    pass


class OperationError(ActivityError):
    """Raised for transport or server failures during an operation."""

    pass
