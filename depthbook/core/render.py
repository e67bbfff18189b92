"""Plain-text ladder: asks (worst to best) above the last price, bids below."""
from __future__ import annotations

from decimal import ROUND_DOWN, Decimal
from typing import List, Optional, Sequence

from .projector import LevelProjector
from .trades import LastPriceTracker
from .types import BookChanges, ChangeSet, OrderBookState, PriceDirection, ProjectedRow, SizeChange

_ARROWS = {PriceDirection.UP: "▲", PriceDirection.DOWN: "▼"}
_SIZE_MARKS = {SizeChange.INCREASE: "+", SizeChange.DECREASE: "-"}


def _fmt_price(p: Decimal, decimals: int) -> str:
    q = Decimal(1).scaleb(-decimals)
    return f"{p.quantize(q):,}"


def _fmt_qty(q: Decimal) -> str:
    return f"{q.to_integral_value(rounding=ROUND_DOWN):,}"


def format_rows(rows: Sequence[ProjectedRow], changes: Optional[ChangeSet] = None, decimals: int = 1) -> List[str]:
    lines: List[str] = []
    for r in rows:
        new = "*" if changes is not None and r.price in changes.new_prices else " "
        mark = _SIZE_MARKS.get(changes.change_for(r.price), " ") if changes is not None else " "
        bar = "#" * int(r.percent_of_total / 10)
        lines.append(
            f"{new}{_fmt_price(r.price, decimals):>12} {mark}{_fmt_qty(r.size):>10} {_fmt_qty(r.total):>12}  {bar}"
        )
    return lines


def render_ladder(
    state: OrderBookState,
    *,
    max_rows: int = 8,
    reverse_asks: bool = True,
    last: Optional[LastPriceTracker] = None,
    changes: Optional[BookChanges] = None,
    decimals: int = 1,
) -> str:
    asks = LevelProjector.project(state.asks.snapshot_sorted_with_totals(), max_rows, reverse_order=reverse_asks)
    bids = LevelProjector.project(state.bids.snapshot_sorted_with_totals(), max_rows)
    out = [f"{'Price':>13} {'Size':>11} {'Total':>12}"]
    out.extend(format_rows(asks, changes.asks if changes else None, decimals))
    if last is not None and last.last_price is not None:
        out.append(f"{_fmt_price(last.last_price, decimals):>13} {_ARROWS.get(last.direction, '')}")
    else:
        out.append(f"{'-':>13}")
    out.extend(format_rows(bids, changes.bids if changes else None, decimals))
    return "\n".join(out)
