from __future__ import annotations

import pytest

from depthbook.core.changes import ChangeAnnotator, ChangeTracker
from depthbook.core.types import SizeChange
from tests.helpers.books import D, state


@pytest.mark.unit
def test_change_detection_scenario() -> None:
    prev = state(asks={100: 5, 101: 3})
    cur = state(asks={100: 5, 101: 4, 102: 1})
    cs = ChangeAnnotator.diff(prev, cur, "asks")
    assert cs.new_prices == {D(102)}
    assert dict(cs.size_changes) == {D(101): SizeChange.INCREASE}
    assert D(100) not in cs.new_prices and D(100) not in cs.size_changes


@pytest.mark.unit
def test_decrease_and_removed_levels() -> None:
    prev = state(bids={100: 5, 99: 3, 98: 1})
    cur = state(bids={100: 2, 99: 3})
    cs = ChangeAnnotator.diff(prev, cur, "bids")
    assert cs.new_prices == frozenset()
    assert dict(cs.size_changes) == {D(100): SizeChange.DECREASE}
    # Removed price 98 produces no entry
    assert cs.change_for(D(98)) is None


@pytest.mark.unit
def test_sides_are_independent() -> None:
    prev = state(bids={100: 1}, asks={101: 1})
    cur = state(bids={100: 1}, asks={101: 2})
    assert ChangeAnnotator.diff(prev, cur, "bids").is_empty()
    assert ChangeAnnotator.diff(prev, cur, "asks").size_changes == {D(101): SizeChange.INCREASE}


@pytest.mark.unit
def test_tracker_first_update_marks_everything_new() -> None:
    tracker = ChangeTracker(clock=lambda: 0)
    ch = tracker.update(state(bids={100: 1, 99: 2}, asks={101: 1}))
    assert ch.bids.new_prices == {D(100), D(99)}
    assert ch.asks.new_prices == {D(101)}


@pytest.mark.unit
def test_tracker_diffs_consecutive_states_and_expires() -> None:
    now = [1_000]
    tracker = ChangeTracker(window_ms=1000, clock=lambda: now[0])
    tracker.update(state(asks={100: 5, 101: 3}))
    now[0] = 2_000
    ch = tracker.update(state(asks={100: 5, 101: 4, 102: 1}))
    assert ch.at_ms == 2_000
    assert ch.asks.new_prices == {D(102)}
    assert tracker.is_fresh(ch, now_ms=2_999)
    assert not tracker.is_fresh(ch, now_ms=3_000)
    assert tracker.fresh_changes(now_ms=2_500) is ch
    assert tracker.fresh_changes(now_ms=3_500).is_empty()


@pytest.mark.unit
def test_tracker_reset_forgets_previous() -> None:
    tracker = ChangeTracker(clock=lambda: 0)
    tracker.update(state(bids={100: 1}))
    tracker.reset()
    assert tracker.last is None
    assert tracker.update(state(bids={100: 1})).bids.new_prices == {D(100)}


@pytest.mark.unit
def test_changeset_to_dict_is_json_friendly() -> None:
    cs = ChangeAnnotator.diff(state(asks={101: 3}), state(asks={101: 1, 102: 1}), "asks")
    assert cs.to_dict() == {"new_prices": ["102"], "size_changes": {"101": "decrease"}}
