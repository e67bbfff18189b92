from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Tuple

from .side import PriceLevelSide


def apply_updates(side: PriceLevelSide, updates: Iterable[Tuple[Decimal, Decimal]]) -> int:
    """Apply (price, size) updates in arrival order; size 0 deletes the level.

    Repeated prices within one batch resolve last-write-wins. Returns the number
    of updates applied.
    """
    n = 0
    for price, size in updates:
        side.upsert(price, size)
        n += 1
    return n


class DeltaMerger:
    """Stateless merger used by the engine; kept as a class so it can be swapped in tests."""

    def apply(self, side: PriceLevelSide, updates: Iterable[Tuple[Decimal, Decimal]]) -> int:
        return apply_updates(side, updates)
