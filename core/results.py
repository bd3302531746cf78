"""
Normalized Results
------------------
Tagged outcome of one tool invocation.

A NormalizedResult holds exactly one of a typed payload or a BridgeError.
Payload types are per tool so parsed CLI output never travels further as
an untyped value.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Union
import json

from .errors import BridgeError


@dataclass(frozen=True)
class OrgListing:
    """Parsed output of `sf org list --json`."""
    data: Any

    def to_json(self) -> Any:
        return self.data


@dataclass(frozen=True)
class QueryRecords:
    """Records returned by `sf data query --json`."""
    records: List[Any] = field(default_factory=list)

    def to_json(self) -> Any:
        return list(self.records)

    def __len__(self) -> int:
        return len(self.records)


Payload = Union[OrgListing, QueryRecords]


@dataclass(frozen=True)
class NormalizedResult:
    """Success payload or error, never both."""
    payload: Optional[Payload] = None
    error: Optional[BridgeError] = None

    def __post_init__(self) -> None:
        if (self.payload is None) == (self.error is None):
            raise ValueError("NormalizedResult needs exactly one of payload or error")

    @classmethod
    def ok(cls, payload: Payload) -> "NormalizedResult":
        return cls(payload=payload)

    @classmethod
    def fail(cls, error: BridgeError) -> "NormalizedResult":
        return cls(error=error)

    @property
    def success(self) -> bool:
        return self.error is None

    def to_text(self) -> str:
        """Render the payload (or public error) as JSON text."""
        if self.error is not None:
            return render_json(self.error.to_payload())
        return render_json(self.payload.to_json())

    def __repr__(self) -> str:
        if self.success:
            return f"NormalizedResult(ok {type(self.payload).__name__})"
        return f"NormalizedResult(fail {self.error.kind.value})"


def render_json(value: Any) -> str:
    """Serialize a payload for transport as text."""
    return json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False)
