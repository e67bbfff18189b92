"""Feed-level errors raised by the parsing adapter.

Sequence gaps and stale deltas are not errors: the engine reports them via its
return value and the ResyncRequired signal.
"""

from __future__ import annotations

from typing import Any


class FeedError(Exception):
    pass


class MalformedNumericError(FeedError, ValueError):
    def __init__(self, field: str, raw: Any, reason: str = "not a decimal") -> None:
        super().__init__(f"malformed {field}: {raw!r} ({reason})")
        self.field = field
        self.raw = raw
        self.reason = reason


class UnknownMessageError(FeedError):
    def __init__(self, kind: Any) -> None:
        super().__init__(f"unknown orderbook message type: {kind!r}")
        self.kind = kind
