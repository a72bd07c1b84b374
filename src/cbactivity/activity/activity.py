"""Couchbase key/value activity.

Reads a request from the host's input slots, opens the requested bucket,
performs one of Insert, Upsert, Remove or Get and writes the result to the
``output`` slot.

Usage:
    from cbactivity import CouchbaseActivity, MappingContext

    activity = CouchbaseActivity()  # real cluster, settings from COUCHBASE_*
    ctx = MappingContext({
        "method": "Upsert",
        "key": "order-1",
        "data": '{"qty":2}',
        "server": "couchbase://localhost",
        "username": "Administrator",
        "password": "password",
        "bucket": "orders",
    })
    activity.eval(ctx)
    cas = ctx.outputs["output"]
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from cbactivity.activity.models import (
    COUCHBASE_METADATA,
    OV_OUTPUT,
    ActivityMetadata,
    Method,
    OperationRequest,
    OperationResult,
)
from cbactivity.activity.protocol import ActivityContext
from cbactivity.adapters.protocol import BucketConnector, KeyValueStore
from cbactivity.config import CouchbaseSettings
from cbactivity.errors import ActivityError
from cbactivity.log import InvocationLogger, get_logger


class CouchbaseActivity:
    """Activity performing a single key/value operation per invocation.

    The connector decides connection lifetime: a plain connector opens and
    closes a cluster connection per invocation, a ``BucketPool`` reuses them.

    Attributes:
        connector: Source of bucket handles.
        metadata: Slot description exposed to the host.
    """

    def __init__(
        self,
        connector: BucketConnector | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,  # type: ignore[type-arg]
        metadata: ActivityMetadata = COUCHBASE_METADATA,
    ) -> None:
        """Initialize the activity.

        Args:
            connector: Bucket connector (a ``CouchbaseConnector`` with
                environment settings if None).
            logger: Logger for this activity (``cbactivity.log.get_logger()``
                if None).
            metadata: Slot description.
        """
        if connector is None:
            from cbactivity.adapters.couchbase import CouchbaseConnector

            connector = CouchbaseConnector()
        self._connector = connector
        self._logger = logger if logger is not None else get_logger()
        self._metadata = metadata

    @classmethod
    def from_settings(
        cls,
        settings: CouchbaseSettings,
        logger: logging.Logger | logging.LoggerAdapter | None = None,  # type: ignore[type-arg]
    ) -> CouchbaseActivity:
        """Create an activity backed by a Couchbase cluster.

        Args:
            settings: Connector settings.
            logger: Optional logger.

        Returns:
            Configured CouchbaseActivity instance.
        """
        from cbactivity.adapters.couchbase import CouchbaseConnector

        return cls(CouchbaseConnector(settings), logger)

    @property
    def metadata(self) -> ActivityMetadata:
        return self._metadata

    @property
    def connector(self) -> BucketConnector:
        return self._connector

    def eval(self, context: ActivityContext) -> bool:
        """Run one key/value operation against the host context.

        Args:
            context: Host slots. Inputs are read once up front; ``output`` is
                written only on success.

        Returns:
            True once the output slot holds the result.

        Raises:
            ActivityError: Any validation, connection or operation failure.
                Logged once at ERROR level before being raised.
        """
        try:
            request = OperationRequest.from_inputs(context.get_input)
        except ActivityError as e:
            self._logger.error("Rejected invocation: %s", e)
            raise

        log = InvocationLogger(self._logger, request.method.value, request.key)
        try:
            result = self.execute(request, log)
        except ActivityError as e:
            if e.method is None:
                e.method = request.method.value
            if e.key is None:
                e.key = request.key
            log.error("%s error: %s", request.method.value, e)
            raise

        context.set_output(OV_OUTPUT, result.value)
        return True

    async def eval_async(self, context: ActivityContext) -> bool:
        """Run ``eval`` in the default executor.

        Note: the Couchbase client used here is blocking, so the call is
        moved off the event loop thread.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: self.eval(context))

    def execute(
        self,
        request: OperationRequest,
        log: logging.Logger | logging.LoggerAdapter | None = None,  # type: ignore[type-arg]
    ) -> OperationResult:
        """Acquire the bucket and run ``request``.

        The bucket handle is released when this returns or raises.

        Args:
            request: Validated request.
            log: Logger for this invocation (activity logger if None).

        Returns:
            Result of the single operation performed.
        """
        log = log or self._logger
        target = request.target
        log.debug("Opening bucket %s on %s", target.bucket, target.server)
        with self._connector.open_bucket(target) as store:
            value = _dispatch(store, request)
        log.debug("%s completed", request.method.value)
        return OperationResult(method=request.method, key=request.key, value=value)


def _dispatch(store: KeyValueStore, request: OperationRequest) -> Any:
    """Invoke the primitive matching ``request.method``."""
    if request.method is Method.INSERT:
        return store.insert(request.key, request.data, request.expiry)
    if request.method is Method.UPSERT:
        return store.upsert(request.key, request.data, request.expiry)
    if request.method is Method.REMOVE:
        return store.remove(request.key)
    return store.get(request.key)
