"""Tests for environment-driven settings and logger construction."""

import logging

import pytest
from pydantic import ValidationError

from cbactivity import ActivitySettings, CouchbaseSettings
from cbactivity.log import InvocationLogger, get_logger


def test_couchbase_defaults(monkeypatch):
    for name in ("ENABLE_TLS", "CONNECT_TIMEOUT", "KV_TIMEOUT", "WAIT_UNTIL_READY"):
        monkeypatch.delenv(f"COUCHBASE_{name}", raising=False)

    settings = CouchbaseSettings(_env_file=None)

    assert settings.enable_tls is False
    assert settings.connect_timeout == 10.0
    assert settings.kv_timeout == 2.5
    assert settings.wait_until_ready is True


def test_couchbase_settings_from_env(monkeypatch):
    monkeypatch.setenv("COUCHBASE_ENABLE_TLS", "true")
    monkeypatch.setenv("COUCHBASE_KV_TIMEOUT", "7.5")

    settings = CouchbaseSettings(_env_file=None)

    assert settings.enable_tls is True
    assert settings.kv_timeout == 7.5


def test_timeouts_must_be_positive():
    with pytest.raises(ValidationError):
        CouchbaseSettings(_env_file=None, kv_timeout=0)


def test_get_logger_applies_level():
    logger = get_logger("test.cbactivity.level", ActivitySettings(_env_file=None, log_level="debug"))

    assert logger.level == logging.DEBUG


def test_activity_log_level_from_env(monkeypatch):
    monkeypatch.setenv("CBACTIVITY_LOG_LEVEL", "WARNING")

    assert ActivitySettings(_env_file=None).log_level == "WARNING"


def test_invocation_logger_scopes_records(caplog):
    base = logging.getLogger("test.cbactivity.scoped")
    log = InvocationLogger(base, "Get", "order-1")

    with caplog.at_level(logging.INFO, logger="test.cbactivity.scoped"):
        log.info("hello %s", "there", extra={"attempt": 1})

    record = caplog.records[0]
    assert record.getMessage() == "[Get order-1] hello there"
    assert record.method == "Get"
    assert record.key == "order-1"
    assert record.attempt == 1
