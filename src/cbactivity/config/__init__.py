"""Configuration module using Pydantic Settings.

Provides typed configuration for the activity and connectors with
environment variable support.

Usage:
    from cbactivity.config import ActivitySettings, CouchbaseSettings

    settings = CouchbaseSettings(kv_timeout=5.0)
    activity = ActivitySettings(log_level="DEBUG")
"""

from cbactivity.config.settings import ActivitySettings, CouchbaseSettings

__all__ = [
    "ActivitySettings",
    "CouchbaseSettings",
]
