"""Tests for the in-memory cluster and store.

Focus: key/value semantics the activity relies on (duplicate keys, missing
keys, CAS tokens, expiry) and connection accounting.
"""

import pytest

from cbactivity import (
    AuthenticationError,
    BucketConnector,
    BucketOpenError,
    BucketTarget,
    ClusterConnectionError,
    DuplicateKeyError,
    KeyValueStore,
    MemoryCluster,
    MemoryConnector,
    NotFoundError,
    OperationError,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def target():
    return BucketTarget("couchbase://localhost", "app", "secret", "orders")


def test_connector_and_store_satisfy_protocols(connector, target):
    assert isinstance(connector, BucketConnector)
    with connector.open_bucket(target) as store:
        assert isinstance(store, KeyValueStore)


def test_cas_tokens_increase(connector, target):
    with connector.open_bucket(target) as store:
        first = store.insert("a", 1)
        second = store.upsert("a", 2)
        third = store.remove("a")

    assert 0 < first < second < third


def test_insert_existing_key_raises(connector, target):
    with connector.open_bucket(target) as store:
        store.insert("a", {"v": 1})
        with pytest.raises(DuplicateKeyError):
            store.insert("a", {"v": 2})
        assert store.get("a") == {"v": 1}


def test_get_and_remove_missing_key_raise(connector, target):
    with connector.open_bucket(target) as store:
        with pytest.raises(NotFoundError):
            store.get("nope")
        with pytest.raises(NotFoundError):
            store.remove("nope")


def test_stored_values_are_copies(connector, target):
    """Mutating the caller's object after a write does not change the stored document."""
    doc = {"items": [1]}
    with connector.open_bucket(target) as store:
        store.upsert("a", doc)
        doc["items"].append(2)
        assert store.get("a") == {"items": [1]}


def test_non_json_value_raises_operation_error(connector, target):
    with connector.open_bucket(target) as store:
        with pytest.raises(OperationError):
            store.upsert("a", object())


def test_expired_documents_disappear(target):
    clock = FakeClock()
    cluster = MemoryCluster(servers=["localhost"], clock=clock)
    cluster.add_user("app", "secret")
    cluster.create_bucket("orders")

    with MemoryConnector(cluster).open_bucket(target) as store:
        store.upsert("ttl", "v", expiry=10)
        store.upsert("forever", "v")

        clock.now += 9
        assert store.get("ttl") == "v"

        clock.now += 1
        with pytest.raises(NotFoundError):
            store.get("ttl")
        assert store.get("forever") == "v"

        # expired key can be inserted again
        store.insert("ttl", "again")


def test_server_with_port_and_multiple_hosts(connector):
    target = BucketTarget("couchbase://down-host,localhost:11210", "app", "secret", "orders")

    with connector.open_bucket(target) as store:
        store.upsert("a", 1)


def test_unknown_server_raises_connection_error(connector):
    with pytest.raises(ClusterConnectionError):
        with connector.open_bucket(BucketTarget("remote", "app", "secret", "orders")):
            pass


def test_wrong_password_raises_authentication_error(connector):
    with pytest.raises(AuthenticationError):
        with connector.open_bucket(BucketTarget("localhost", "app", "bad", "orders")):
            pass


def test_missing_bucket_raises_and_releases(connector, cluster):
    with pytest.raises(BucketOpenError):
        with connector.open_bucket(BucketTarget("localhost", "app", "secret", "nope")):
            pass

    assert cluster.connections_opened == 1
    assert cluster.connections_open == 0


def test_connection_released_when_body_raises(connector, cluster, target):
    with pytest.raises(RuntimeError):
        with connector.open_bucket(target):
            assert cluster.connections_open == 1
            raise RuntimeError("boom")

    assert cluster.connections_open == 0
