"""Price level side storage, ordering, and cumulative totals."""

from __future__ import annotations

import random

import pytest

from depthbook.core.side import PriceLevelSide
from depthbook.core.types import CumulativeLevel, PriceLevel
from tests.helpers.books import D, levels


@pytest.mark.unit
def test_bids_descending_asks_ascending() -> None:
    bids = PriceLevelSide("bids", levels((100, 1), (102, 2), (101, 3)))
    asks = PriceLevelSide("asks", levels((105, 1), (103, 2), (104, 3)))
    assert [lvl.price for lvl in bids.levels()] == [D(102), D(101), D(100)]
    assert [lvl.price for lvl in asks.levels()] == [D(103), D(104), D(105)]
    assert bids.best() == PriceLevel(D(102), D(2))
    assert asks.best() == PriceLevel(D(103), D(2))


@pytest.mark.unit
@pytest.mark.parametrize("name", ["bids", "asks"])
def test_sort_and_total_invariants_random(name: str) -> None:
    rng = random.Random(7)
    side = PriceLevelSide(name)  # type: ignore[arg-type]
    for _ in range(300):
        price = D(f"{rng.randint(9900, 10100) / 10:.1f}")
        size = D(rng.choice([0, 0, 1, 2, 5, 10, 25]))
        side.upsert(price, size)
    rows = side.snapshot_sorted_with_totals()
    assert rows, "random walk should leave some levels"
    prices = [r.price for r in rows]
    assert prices == sorted(prices, reverse=(name == "bids"))
    assert len(set(prices)) == len(prices)
    totals = [r.total for r in rows]
    assert all(a <= b for a, b in zip(totals, totals[1:]))
    assert totals[-1] == sum(r.size for r in rows) == side.depth()
    assert all(r.size > 0 for r in rows)


@pytest.mark.unit
def test_snapshot_sorted_with_totals_values() -> None:
    asks = PriceLevelSide("asks", levels((101, 3), (100, 5), (102, 1)))
    assert asks.snapshot_sorted_with_totals() == [
        CumulativeLevel(D(100), D(5), D(5)),
        CumulativeLevel(D(101), D(3), D(8)),
        CumulativeLevel(D(102), D(1), D(9)),
    ]


@pytest.mark.unit
def test_zero_size_upsert_deletes_level() -> None:
    side = PriceLevelSide("bids", levels((100, 5)))
    side.upsert(D(100), D(0))
    assert D(100) not in side
    assert all(r.price != D(100) for r in side.snapshot_sorted_with_totals())
    # Deleting an absent level is a no-op
    side.upsert(D(99), D(0))
    assert len(side) == 0
    assert side.best() is None
    assert side.snapshot_sorted_with_totals() == []


@pytest.mark.unit
def test_upsert_overwrites_size() -> None:
    side = PriceLevelSide("asks", levels((100, 5)))
    side.upsert(D(100), D("7.5"))
    assert side.size_at(D(100)) == D("7.5")
    assert len(side) == 1


@pytest.mark.unit
def test_replace_all_discards_prior_and_skips_zero() -> None:
    side = PriceLevelSide("bids", levels((100, 5), (99, 1)))
    side.replace_all(levels((98, 2), (97, 0), (96, 4)))
    assert side.as_dict() == {D(98): D(2), D(96): D(4)}
    # Accepts PriceLevel records too
    side.replace_all([PriceLevel(D(50), D(1))])
    assert side.as_dict() == {D(50): D(1)}


@pytest.mark.unit
def test_equal_decimal_prices_are_one_level() -> None:
    side = PriceLevelSide("asks")
    side.upsert(D("100.0"), D(1))
    side.upsert(D("100.00"), D(2))
    assert len(side) == 1
    assert side.size_at(D(100)) == D(2)


@pytest.mark.unit
def test_copy_is_independent_and_equal() -> None:
    side = PriceLevelSide("bids", levels((100, 5)))
    snap = side.copy()
    assert snap == side
    side.upsert(D(101), D(1))
    assert snap != side
    assert D(101) not in snap


@pytest.mark.unit
def test_unknown_side_name_rejected() -> None:
    with pytest.raises(ValueError):
        PriceLevelSide("middle")  # type: ignore[arg-type]
