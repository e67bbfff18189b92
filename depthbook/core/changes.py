"""Change detection between consecutive book states.

``ChangeAnnotator.diff`` is a pure function of two states. ``ChangeTracker``
is the consumer-side helper that remembers the previous state and applies the
freshness window (highlights fade after ``window_ms``); the engine itself
never runs timers.
"""

from __future__ import annotations

import time
from decimal import Decimal
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from .side import PriceLevelSide
from .types import BookChanges, ChangeSet, OrderBookState, SideName, SizeChange


def _now_ms() -> int:
    return int(time.time() * 1000)


class ChangeAnnotator:
    @staticmethod
    def diff_sides(previous: PriceLevelSide, current: PriceLevelSide) -> ChangeSet:
        prev = previous.as_dict()
        new_prices = set()
        changes: Dict[Decimal, SizeChange] = {}
        for price, size in current.as_dict().items():
            before = prev.get(price)
            if before is None:
                new_prices.add(price)
            elif size != before:
                changes[price] = SizeChange.INCREASE if size > before else SizeChange.DECREASE
        return ChangeSet(new_prices=frozenset(new_prices), size_changes=changes)

    @classmethod
    def diff(cls, previous: OrderBookState, current: OrderBookState, side: SideName) -> ChangeSet:
        return cls.diff_sides(previous.side(side), current.side(side))


def _empty_state() -> OrderBookState:
    return OrderBookState(bids=PriceLevelSide("bids"), asks=PriceLevelSide("asks"))


@dataclass
class ChangeTracker:
    window_ms: int = 1000
    clock: Callable[[], int] = _now_ms
    previous: OrderBookState = field(default_factory=_empty_state)
    last: Optional[BookChanges] = None

    def update(self, state: OrderBookState) -> BookChanges:
        changes = BookChanges(
            bids=ChangeAnnotator.diff(self.previous, state, "bids"),
            asks=ChangeAnnotator.diff(self.previous, state, "asks"),
            at_ms=self.clock(),
        )
        self.previous = state
        self.last = changes
        return changes

    def is_fresh(self, changes: BookChanges, now_ms: Optional[int] = None) -> bool:
        now = self.clock() if now_ms is None else now_ms
        return (now - changes.at_ms) < self.window_ms

    def fresh_changes(self, now_ms: Optional[int] = None) -> BookChanges:
        if self.last is None or not self.is_fresh(self.last, now_ms):
            return BookChanges()
        return self.last

    def reset(self) -> None:
        self.previous = _empty_state()
        self.last = None
