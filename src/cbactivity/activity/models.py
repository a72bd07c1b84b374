"""Data models for activity invocations.

Defines the request read from the host's input slots, the result written to
its output slot, and the declarative metadata describing those slots.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from cbactivity.adapters.models import BucketTarget
from cbactivity.errors import InvalidInputError, UnsupportedMethodError

# Input slots
IV_KEY = "key"
IV_DATA = "data"
IV_METHOD = "method"
IV_EXPIRY = "expiry"
IV_SERVER = "server"
IV_USERNAME = "username"
IV_PASSWORD = "password"
IV_BUCKET = "bucket"
IV_BUCKET_PASSWORD = "bucketPassword"

# Output slots
OV_OUTPUT = "output"


class Method(Enum):
    """Key/value operation to perform."""

    INSERT = "Insert"
    UPSERT = "Upsert"
    REMOVE = "Remove"
    GET = "Get"

    @property
    def writes_data(self) -> bool:
        """Whether the operation stores ``data`` (and honours ``expiry``)."""
        return self in (Method.INSERT, Method.UPSERT)

    @classmethod
    def parse(cls, value: str) -> Method:
        """Resolve a method name.

        Raises:
            UnsupportedMethodError: If ``value`` is not a known method name.
        """
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedMethodError(value) from None


def _require_str(inputs: Callable[[str], Any], slot: str) -> str:
    value = inputs(slot)
    if value is None:
        raise InvalidInputError(slot, "value is required")
    if not isinstance(value, str):
        raise InvalidInputError(slot, f"expected string, got {type(value).__name__}")
    if not value:
        raise InvalidInputError(slot, "must not be empty")
    return value


def _optional_str(inputs: Callable[[str], Any], slot: str) -> str:
    value = inputs(slot)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidInputError(slot, f"expected string, got {type(value).__name__}")
    return value


def _expiry(inputs: Callable[[str], Any]) -> int:
    value = inputs(IV_EXPIRY)
    if value is None:
        return 0
    # bool is an int subclass; True is not a TTL
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(IV_EXPIRY, f"expected integer, got {type(value).__name__}")
    if value < 0:
        raise InvalidInputError(IV_EXPIRY, "must be >= 0")
    return value


def _data(inputs: Callable[[str], Any]) -> Any:
    value = inputs(IV_DATA)
    if value is None:
        raise InvalidInputError(IV_DATA, "value is required for Insert and Upsert")
    try:
        json.dumps(value)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(IV_DATA, f"not JSON serializable: {e}") from e
    return value


@dataclass(slots=True)
class OperationRequest:
    """A validated key/value request built from host inputs.

    Attributes:
        key: Document key.
        method: Operation to perform.
        data: Document body for Insert/Upsert (None otherwise).
        expiry: Time-to-live in seconds for Insert/Upsert (0 = never).
        server: Cluster address.
        username: RBAC user name.
        password: RBAC password.
        bucket_name: Bucket to open.
        bucket_password: Legacy bucket-level password.
    """

    key: str
    method: Method
    server: str
    bucket_name: str
    data: Any = None
    expiry: int = 0
    username: str = ""
    password: str = field(default="", repr=False)
    bucket_password: str = field(default="", repr=False)

    @property
    def target(self) -> BucketTarget:
        """Connection target for this request."""
        return BucketTarget(
            server=self.server,
            username=self.username,
            password=self.password,
            bucket=self.bucket_name,
            bucket_password=self.bucket_password,
        )

    @classmethod
    def from_inputs(cls, inputs: Callable[[str], Any]) -> OperationRequest:
        """Read and validate every input slot.

        The method is resolved first so an unknown method fails before any
        other slot is inspected and before any connection is attempted.

        Args:
            inputs: Slot accessor, typically ``context.get_input``.

        Returns:
            Validated request.

        Raises:
            InvalidInputError: A slot is missing or has the wrong type.
            UnsupportedMethodError: The method name is unknown.
        """
        method = Method.parse(_require_str(inputs, IV_METHOD))
        key = _require_str(inputs, IV_KEY)

        return cls(
            key=key,
            method=method,
            server=_require_str(inputs, IV_SERVER),
            bucket_name=_require_str(inputs, IV_BUCKET),
            data=_data(inputs) if method.writes_data else None,
            expiry=_expiry(inputs) if method.writes_data else 0,
            username=_optional_str(inputs, IV_USERNAME),
            password=_optional_str(inputs, IV_PASSWORD),
            bucket_password=_optional_str(inputs, IV_BUCKET_PASSWORD),
        )


@dataclass(slots=True)
class OperationResult:
    """Outcome of a successful operation.

    Attributes:
        method: Operation that produced the value.
        key: Document key.
        value: CAS token for mutations, the decoded document for Get.
    """

    method: Method
    key: str
    value: Any


@dataclass(frozen=True, slots=True)
class SlotSpec:
    """Declaration of one input or output slot.

    Attributes:
        name: Slot name as used by the host.
        type: Host-facing type name ("string", "integer", "any").
        required: Whether the host must always supply the slot.
        allowed: Permitted values, empty when unrestricted.
    """

    name: str
    type: str
    required: bool = False
    allowed: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ActivityMetadata:
    """Static description of an activity's contract with the host."""

    ref: str
    title: str
    inputs: tuple[SlotSpec, ...]
    outputs: tuple[SlotSpec, ...]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable descriptor."""

        def slot(s: SlotSpec) -> dict[str, Any]:
            d: dict[str, Any] = {"name": s.name, "type": s.type}
            if s.required:
                d["required"] = True
            if s.allowed:
                d["allowed"] = list(s.allowed)
            return d

        return {
            "ref": self.ref,
            "title": self.title,
            "inputs": [slot(s) for s in self.inputs],
            "outputs": [slot(s) for s in self.outputs],
        }


COUCHBASE_METADATA = ActivityMetadata(
    ref="cbactivity.couchbase",
    title="Couchbase Connector",
    inputs=(
        SlotSpec(IV_KEY, "string", required=True),
        SlotSpec(IV_DATA, "any"),
        SlotSpec(IV_METHOD, "string", required=True, allowed=tuple(m.value for m in Method)),
        SlotSpec(IV_EXPIRY, "integer"),
        SlotSpec(IV_SERVER, "string", required=True),
        SlotSpec(IV_USERNAME, "string"),
        SlotSpec(IV_PASSWORD, "string"),
        SlotSpec(IV_BUCKET, "string", required=True),
        SlotSpec(IV_BUCKET_PASSWORD, "string"),
    ),
    outputs=(SlotSpec(OV_OUTPUT, "any"),),
)
