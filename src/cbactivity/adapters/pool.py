"""Pooled bucket handles shared across activity invocations.

Wraps any BucketConnector so repeated invocations against the same target
reuse one open connection instead of reconnecting every time. The host owns
the pool's lifetime and must close it.

Usage:
    pool = BucketPool(CouchbaseConnector())
    activity = CouchbaseActivity(connector=pool)
    ...
    pool.close()

    # Or scoped
    with BucketPool(CouchbaseConnector()) as pool:
        CouchbaseActivity(connector=pool).eval(ctx)
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Any

from cbactivity.adapters.models import BucketTarget
from cbactivity.adapters.protocol import BucketConnector, KeyValueStore
from cbactivity.errors import ClusterConnectionError, OperationError


@dataclass(slots=True)
class _Handle:
    stack: ExitStack
    store: KeyValueStore
    users: int = 0
    evicted: bool = False
    closed: bool = False


class BucketPool:
    """BucketConnector that keeps one open handle per target.

    Structure:
        _handles[target] = _Handle(stack, store, users, evicted, closed)

    The first ``open_bucket`` for a target enters the wrapped connector's
    context and keeps it open. Failed opens are not cached. A handle whose
    operation fails with ``OperationError`` is evicted so the next
    invocation reconnects.

    Handles are reference counted: an evicted, released or pool-closed
    handle stays open until the last caller inside ``open_bucket`` for it
    leaves, so one caller's failure never closes a connection another
    caller is still using.

    Thread Safety:
        Bookkeeping is guarded by a lock. Opens for a new target happen under
        the lock, so concurrent first use of a target connects once.

    Args:
        connector: Connector that actually opens buckets.
    """

    def __init__(self, connector: BucketConnector):
        self._connector = connector
        self._lock = threading.Lock()
        self._handles: dict[BucketTarget, _Handle] = {}
        self._closed = False

    @property
    def connector(self) -> BucketConnector:
        return self._connector

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, target: object) -> bool:
        return target in self._handles

    def _acquire(self, target: BucketTarget) -> _Handle:
        with self._lock:
            if self._closed:
                raise ClusterConnectionError("Connection error: bucket pool is closed")
            handle = self._handles.get(target)
            if handle is None:
                with ExitStack() as stack:
                    store = stack.enter_context(self._connector.open_bucket(target))
                    handle = _Handle(stack=stack.pop_all(), store=store)
                self._handles[target] = handle
            handle.users += 1
            return handle

    @staticmethod
    def _claim_close(handle: _Handle) -> bool:
        """Mark an evicted idle handle closed. Caller holds the lock."""
        if handle.evicted and handle.users == 0 and not handle.closed:
            handle.closed = True
            return True
        return False

    def _evict(self, target: BucketTarget, handle: _Handle) -> None:
        with self._lock:
            if self._handles.get(target) is handle:
                del self._handles[target]
            handle.evicted = True

    def _leave(self, handle: _Handle) -> None:
        with self._lock:
            handle.users -= 1
            close = self._claim_close(handle)
        if close:
            handle.stack.close()

    @contextmanager
    def open_bucket(self, target: BucketTarget) -> Iterator[KeyValueStore]:
        """Yield the pooled handle for ``target``, opening it on first use.

        Leaving the block does not close the connection unless the handle
        was evicted and this was its last user.
        """
        handle = self._acquire(target)
        try:
            yield handle.store
        except OperationError:
            self._evict(target, handle)
            raise
        finally:
            self._leave(handle)

    def release(self, target: BucketTarget) -> bool:
        """Forget the handle for ``target`` and close it once unused.

        Returns:
            True if a handle was pooled.
        """
        with self._lock:
            handle = self._handles.pop(target, None)
            if handle is None:
                return False
            handle.evicted = True
            close = self._claim_close(handle)
        if close:
            handle.stack.close()
        return True

    def close(self) -> None:
        """Close every idle pooled handle. Busy handles close when their last user leaves.

        Further opens fail.
        """
        with self._lock:
            self._closed = True
            handles = list(self._handles.values())
            self._handles.clear()
            idle = []
            for handle in handles:
                handle.evicted = True
                if self._claim_close(handle):
                    idle.append(handle)
        with ExitStack() as stack:
            for handle in idle:
                stack.callback(handle.stack.close)

    def __enter__(self) -> BucketPool:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
