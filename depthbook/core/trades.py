"""Last traded price and direction; independent of the book engine."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .types import PriceDirection


@dataclass
class LastPriceTracker:
    last_price: Optional[Decimal] = None
    last_size: Optional[Decimal] = None
    direction: Optional[PriceDirection] = None
    trades: int = 0

    def on_trade(self, price: Decimal, size: Decimal) -> Optional[PriceDirection]:
        # Direction stays unset on the very first trade; equal prices count as DOWN.
        if self.last_price is not None:
            self.direction = PriceDirection.UP if price > self.last_price else PriceDirection.DOWN
        self.last_price = price
        self.last_size = size
        self.trades += 1
        return self.direction
