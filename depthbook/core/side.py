"""One side of a price-levelled book.

Storage is a plain ``price -> size`` dict; canonical order (bids descending,
asks ascending) is computed on every read, never maintained on write.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .types import CumulativeLevel, PriceLevel, SideName

_ZERO = Decimal(0)


class PriceLevelSide:
    __slots__ = ("name", "_levels")

    def __init__(self, name: SideName, levels: Iterable[Tuple[Decimal, Decimal]] = ()) -> None:
        if name not in ("bids", "asks"):
            raise ValueError(f"unknown side: {name!r}")
        self.name: SideName = name
        self._levels: Dict[Decimal, Decimal] = {}
        self.replace_all(levels)

    @property
    def descending(self) -> bool:
        return self.name == "bids"

    def replace_all(self, levels: Iterable[Tuple[Decimal, Decimal] | PriceLevel]) -> None:
        self._levels.clear()
        for lvl in levels:
            price, size = (lvl.price, lvl.size) if isinstance(lvl, PriceLevel) else lvl
            if size > _ZERO:
                self._levels[price] = size
            else:
                self._levels.pop(price, None)

    def upsert(self, price: Decimal, size: Decimal) -> None:
        if size == _ZERO:
            self._levels.pop(price, None)
        else:
            self._levels[price] = size

    def _sorted_items(self) -> List[Tuple[Decimal, Decimal]]:
        return sorted(self._levels.items(), key=lambda x: x[0], reverse=self.descending)

    def levels(self) -> List[PriceLevel]:
        return [PriceLevel(p, s) for p, s in self._sorted_items()]

    def snapshot_sorted_with_totals(self) -> List[CumulativeLevel]:
        out: List[CumulativeLevel] = []
        running = _ZERO
        for price, size in self._sorted_items():
            running += size
            out.append(CumulativeLevel(price=price, size=size, total=running))
        return out

    def best(self) -> Optional[PriceLevel]:
        if not self._levels:
            return None
        p = max(self._levels) if self.descending else min(self._levels)
        return PriceLevel(p, self._levels[p])

    def depth(self) -> Decimal:
        return sum(self._levels.values(), _ZERO)

    def size_at(self, price: Decimal) -> Decimal:
        return self._levels.get(price, _ZERO)

    def as_dict(self) -> Dict[Decimal, Decimal]:
        return dict(self._levels)

    def copy(self) -> "PriceLevelSide":
        other = PriceLevelSide(self.name)
        other._levels = dict(self._levels)
        return other

    def __len__(self) -> int:
        return len(self._levels)

    def __contains__(self, price: object) -> bool:
        return price in self._levels

    def __iter__(self) -> Iterator[PriceLevel]:
        return iter(self.levels())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PriceLevelSide):
            return NotImplemented
        return self.name == other.name and self._levels == other._levels

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PriceLevelSide({self.name!r}, levels={len(self._levels)})"
