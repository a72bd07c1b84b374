"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from cbactivity import CouchbaseActivity, MappingContext, MemoryCluster, MemoryConnector


@pytest.fixture
def cluster():
    """Memory cluster with one RBAC user and two buckets."""
    cluster = MemoryCluster(servers=["localhost"])
    cluster.add_user("app", "secret")
    cluster.create_bucket("orders")
    cluster.create_bucket("legacy", password="bucket-secret")
    return cluster


@pytest.fixture
def connector(cluster):
    return MemoryConnector(cluster)


@pytest.fixture
def activity(connector):
    return CouchbaseActivity(connector=connector)


@pytest.fixture
def make_context():
    """Build a MappingContext with valid connection slots plus overrides."""

    def _make(**overrides):
        inputs = {
            "server": "couchbase://localhost",
            "username": "app",
            "password": "secret",
            "bucket": "orders",
            "expiry": 0,
        }
        inputs.update(overrides)
        return MappingContext(inputs)

    return _make
