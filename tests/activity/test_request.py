"""Tests for request validation and activity metadata.

Focus: explicit validation of host inputs (no silent defaults for wrong
types), and method resolution happening before anything else.
"""

import pytest

from cbactivity import (
    COUCHBASE_METADATA,
    InvalidInputError,
    MappingContext,
    Method,
    OperationRequest,
    UnsupportedMethodError,
)


def _request(**inputs):
    base = {
        "method": "Upsert",
        "key": "k",
        "data": {"a": 1},
        "server": "localhost",
        "username": "app",
        "password": "secret",
        "bucket": "orders",
    }
    base.update(inputs)
    return OperationRequest.from_inputs(MappingContext(base).get_input)


def test_valid_request_fields():
    req = _request(expiry=60)

    assert req.method is Method.UPSERT
    assert req.key == "k"
    assert req.data == {"a": 1}
    assert req.expiry == 60
    assert req.bucket_name == "orders"


def test_target_carries_connection_fields():
    target = _request(bucketPassword="bp").target

    assert target.server == "localhost"
    assert target.username == "app"
    assert target.password == "secret"
    assert target.bucket == "orders"
    assert target.bucket_password == "bp"


def test_passwords_hidden_from_repr():
    req = _request(bucketPassword="bucket-pw")

    assert "secret" not in repr(req)
    assert "secret" not in repr(req.target)
    assert "bucket-pw" not in repr(req.target)


def test_method_checked_before_other_slots():
    """Unknown method wins even when every other slot is missing."""
    with pytest.raises(UnsupportedMethodError):
        OperationRequest.from_inputs(MappingContext({"method": "Delete"}).get_input)


def test_method_names_are_case_sensitive():
    with pytest.raises(UnsupportedMethodError):
        _request(method="upsert")


@pytest.mark.parametrize(
    ("slot", "value"),
    [
        ("method", 1),
        ("method", None),
        ("key", None),
        ("key", ""),
        ("key", 42),
        ("server", None),
        ("bucket", ""),
        ("username", 5),
        ("password", b"secret"),
        ("bucketPassword", 1),
        ("expiry", "10"),
        ("expiry", -1),
        ("expiry", True),
        ("expiry", 1.5),
        ("data", None),
        ("data", {1, 2}),
    ],
)
def test_wrong_slot_values_raise_invalid_input(slot, value):
    with pytest.raises(InvalidInputError) as exc_info:
        _request(**{slot: value})

    assert exc_info.value.slot == slot


def test_empty_credentials_are_left_to_the_cluster():
    """Why: an unprotected bucket accepts empty credentials, so validation must not refuse them."""
    req = _request(username=None, password=None, bucketPassword=None)

    assert req.username == ""
    assert req.bucket_password == ""
    assert req.target.credentials() == (req.bucket_name, "")


def test_missing_expiry_means_never():
    assert _request().expiry == 0


@pytest.mark.parametrize("method", ["Remove", "Get"])
def test_data_and_expiry_ignored_for_reads_and_removes(method):
    """Why: a host may leave stale data/expiry slots bound on Get/Remove."""
    req = _request(method=method, data=None, expiry="garbage")

    assert req.data is None
    assert req.expiry == 0


def test_invalid_input_is_value_error():
    with pytest.raises(ValueError):
        _request(key=None)


def test_metadata_describes_all_slots():
    descriptor = COUCHBASE_METADATA.to_dict()

    names = [s["name"] for s in descriptor["inputs"]]
    assert names == [
        "key",
        "data",
        "method",
        "expiry",
        "server",
        "username",
        "password",
        "bucket",
        "bucketPassword",
    ]
    method_slot = descriptor["inputs"][2]
    assert method_slot["allowed"] == ["Insert", "Upsert", "Remove", "Get"]
    assert descriptor["outputs"] == [{"name": "output", "type": "any"}]
