"""Protocols for the host runtime contract.

The host engine owns invocation and slot storage. An activity only needs to
read named inputs and write named outputs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cbactivity.activity.models import ActivityMetadata


@runtime_checkable
class ActivityContext(Protocol):
    """Per-invocation view of the host's input and output slots."""

    def get_input(self, name: str) -> Any:
        """Value of input slot ``name``, or None when unset."""
        ...

    def set_output(self, name: str, value: Any) -> None:
        """Write ``value`` to output slot ``name``."""
        ...


@runtime_checkable
class Activity(Protocol):
    """A unit of work the host can evaluate.

    ``eval`` returns True when the activity completed and produced its
    outputs. Failures are raised; the host decides whether to retry, fail
    the flow or route to a compensating step.
    """

    @property
    def metadata(self) -> ActivityMetadata:
        """Static description of the activity's slots."""
        ...

    def eval(self, context: ActivityContext) -> bool:
        """Run the activity against ``context``."""
        ...
