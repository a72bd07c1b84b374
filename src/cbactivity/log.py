"""Logger construction for the activity.

Loggers are handed to ``CouchbaseActivity`` at construction rather than
looked up from module state, so hosts can route each activity's records
wherever they like.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from cbactivity.config import ActivitySettings

LOGGER_NAME = "cbactivity.activity"


def get_logger(name: str = LOGGER_NAME, settings: ActivitySettings | None = None) -> logging.Logger:
    """Return a named logger with the configured level applied.

    Args:
        name: Logger name.
        settings: Source of the log level (environment defaults if None).

    Returns:
        The standard library logger for ``name``.
    """
    settings = settings or ActivitySettings()
    logger = logging.getLogger(name)
    logger.setLevel(settings.log_level.upper())
    return logger


class InvocationLogger(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Logger scoped to a single activity invocation.

    Prefixes each message with the method and key being processed and
    attaches them as ``extra`` fields for structured handlers.
    """

    def __init__(self, logger: logging.Logger | logging.LoggerAdapter, method: str, key: str):  # type: ignore[type-arg]
        super().__init__(logger, {"method": method, "key": key})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        kwargs["extra"] = {**extra, **kwargs.get("extra", {})}
        return f"[{extra['method']} {extra['key']}] {msg}", kwargs
