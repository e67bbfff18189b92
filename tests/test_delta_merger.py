from __future__ import annotations

import pytest

from depthbook.core.merger import DeltaMerger, apply_updates
from depthbook.core.side import PriceLevelSide
from tests.helpers.books import D, levels


@pytest.mark.unit
def test_merge_upserts_and_deletes_in_order() -> None:
    side = PriceLevelSide("bids", levels((100, 5), (99, 2)))
    n = DeltaMerger().apply(side, levels((100, 6), (99, 0), (98, 1)))
    assert n == 3
    assert side.as_dict() == {D(100): D(6), D(98): D(1)}


@pytest.mark.unit
def test_last_write_wins_within_batch() -> None:
    side = PriceLevelSide("asks")
    apply_updates(side, levels((101, 1), (101, 4), (102, 3), (102, 0)))
    assert side.as_dict() == {D(101): D(4)}
    # delete then re-add within the same batch keeps the re-added level
    apply_updates(side, levels((101, 0), (101, 9)))
    assert side.size_at(D(101)) == D(9)


@pytest.mark.unit
def test_empty_batch_is_noop() -> None:
    side = PriceLevelSide("asks", levels((101, 1)))
    assert apply_updates(side, []) == 0
    assert side.as_dict() == {D(101): D(1)}
