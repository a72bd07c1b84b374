"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the
activity and its Couchbase connector.

Usage:
    from cbactivity.config import ActivitySettings, CouchbaseSettings

    # Load from environment variables (CBACTIVITY_*, COUCHBASE_*)
    activity_settings = ActivitySettings()
    cb_settings = CouchbaseSettings()

    # Or override with explicit values
    cb_settings = CouchbaseSettings(enable_tls=True, kv_timeout=5.0)
"""

from __future__ import annotations

try:
    from pydantic import Field
    from pydantic_settings import BaseSettings, SettingsConfigDict
except ImportError as e:
    raise ImportError(
        "pydantic-settings is required for config module. "
        "Install with: pip install cbactivity"
    ) from e


class CouchbaseSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the Couchbase connector.

    Attributes:
        enable_tls: Use ``couchbases://`` for servers given without a scheme.
        connect_timeout: Seconds allowed for bootstrap and bucket open.
        kv_timeout: Seconds allowed per key/value operation.
        wait_until_ready: Block until the key/value service reports ready
            before opening the bucket. Surfaces bad credentials at connect
            time instead of on the first operation.

    Environment Variables:
        COUCHBASE_ENABLE_TLS
        COUCHBASE_CONNECT_TIMEOUT
        COUCHBASE_KV_TIMEOUT
        COUCHBASE_WAIT_UNTIL_READY
    """

    model_config = SettingsConfigDict(
        env_prefix="COUCHBASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enable_tls: bool = False
    connect_timeout: float = Field(default=10.0, gt=0)
    kv_timeout: float = Field(default=2.5, gt=0)
    wait_until_ready: bool = True


class ActivitySettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the activity itself.

    Attributes:
        log_level: Level applied to the default activity logger.

    Environment Variables:
        CBACTIVITY_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="CBACTIVITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
