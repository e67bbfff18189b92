"""Common typed models for price levels, book state, and change annotations."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Literal, Mapping, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .side import PriceLevelSide

SideName = Literal["bids", "asks"]


class SizeChange(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


class PriceDirection(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True, slots=True)
class PriceLevel:
    price: Decimal
    size: Decimal


@dataclass(frozen=True, slots=True)
class CumulativeLevel:
    price: Decimal
    size: Decimal
    total: Decimal  # running size from the best price through this one


@dataclass(frozen=True, slots=True)
class ProjectedRow:
    price: Decimal
    size: Decimal
    total: Decimal
    percent_of_total: Decimal


@dataclass(frozen=True)
class OrderBookState:
    """Point-in-time view of both sides; sequence is None until a snapshot lands."""

    bids: "PriceLevelSide"
    asks: "PriceLevelSide"
    sequence: Optional[int] = None

    def side(self, name: SideName) -> "PriceLevelSide":
        if name == "bids":
            return self.bids
        if name == "asks":
            return self.asks
        raise ValueError(f"unknown side: {name!r}")


@dataclass(frozen=True)
class ChangeSet:
    new_prices: frozenset[Decimal] = frozenset()
    size_changes: Mapping[Decimal, SizeChange] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.new_prices and not self.size_changes

    def change_for(self, price: Decimal) -> Optional[SizeChange]:
        return self.size_changes.get(price)

    def to_dict(self) -> dict:
        return {
            "new_prices": sorted(str(p) for p in self.new_prices),
            "size_changes": {str(p): c.value for p, c in sorted(self.size_changes.items())},
        }


@dataclass(frozen=True)
class BookChanges:
    bids: ChangeSet = field(default_factory=ChangeSet)
    asks: ChangeSet = field(default_factory=ChangeSet)
    at_ms: int = 0  # when the diff was computed (consumer clock)

    def side(self, name: SideName) -> ChangeSet:
        return self.bids if name == "bids" else self.asks

    def is_empty(self) -> bool:
        return self.bids.is_empty() and self.asks.is_empty()
