"""Tests for BucketTarget connection-string handling and credentials."""

import pytest

from cbactivity import BucketTarget, ClusterConnectionError


def _target(server, username="app", bucket_password=""):
    return BucketTarget(server, username, "secret", "orders", bucket_password)


@pytest.mark.parametrize(
    ("server", "tls", "expected"),
    [
        ("localhost", False, "couchbase://localhost"),
        ("localhost", True, "couchbases://localhost"),
        ("  10.0.0.1:8091 ", False, "couchbase://10.0.0.1:8091"),
        ("couchbase://a,b", True, "couchbase://a,b"),
        ("couchbases://a?ssl=no_verify", False, "couchbases://a?ssl=no_verify"),
    ],
)
def test_connection_string(server, tls, expected):
    assert _target(server).connection_string(tls) == expected


@pytest.mark.parametrize("server", ["", "   ", "http://localhost", "couchbase://", "couchbase://,"])
def test_malformed_server_rejected(server):
    with pytest.raises(ClusterConnectionError):
        _target(server).connection_string()


def test_hosts_strip_scheme_and_options():
    target = _target("couchbases://a:11207, b/orders?ssl=no_verify")

    assert target.hosts() == ["a:11207", "b"]


def test_rbac_credentials_preferred():
    assert _target("localhost", bucket_password="bp").credentials() == ("app", "secret")


def test_bucket_credentials_when_no_username():
    assert _target("localhost", username="", bucket_password="bp").credentials() == (
        "orders",
        "bp",
    )


def test_target_is_hashable():
    assert len({_target("localhost"), _target("localhost")}) == 1
