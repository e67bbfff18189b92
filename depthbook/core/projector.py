"""Top-N display rows with cumulative totals and share of full side depth."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Sequence

from .types import CumulativeLevel, ProjectedRow

_ZERO = Decimal(0)
_HUNDRED = Decimal(100)


class LevelProjector:
    @staticmethod
    def project(
        levels: Sequence[CumulativeLevel],
        max_rows: int,
        reverse_order: bool = False,
    ) -> List[ProjectedRow]:
        """Truncate to the ``max_rows`` best levels, then optionally reverse.

        Truncation runs on canonical (best-first) order so "top N" is always the
        N best prices; reversal is only for display (asks shown worst-to-best
        nearest the spread). Percentages are relative to the whole side.
        """
        if max_rows <= 0 or not levels:
            return []
        grand_total = levels[-1].total
        rows = [
            ProjectedRow(
                price=lvl.price,
                size=lvl.size,
                total=lvl.total,
                percent_of_total=(lvl.total / grand_total * _HUNDRED) if grand_total != _ZERO else _ZERO,
            )
            for lvl in levels[:max_rows]
        ]
        if reverse_order:
            rows.reverse()
        return rows
