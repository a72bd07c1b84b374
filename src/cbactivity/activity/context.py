"""Dict-backed activity context.

Suitable for embedding the activity outside a workflow engine and for tests.

Usage:
    ctx = MappingContext({"method": "Get", "key": "order-1", ...})
    activity.eval(ctx)
    ctx.outputs["output"]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class MappingContext:
    """ActivityContext over plain dictionaries.

    Attributes:
        inputs: Input slot values.
        outputs: Output slot values written by the activity.
    """

    inputs: Mapping[str, Any] = field(default_factory=dict)
    outputs: dict[str, Any] = field(default_factory=dict)

    def get_input(self, name: str) -> Any:
        return self.inputs.get(name)

    def set_output(self, name: str, value: Any) -> None:
        self.outputs[name] = value
