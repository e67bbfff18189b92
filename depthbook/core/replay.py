"""Offline replay of recorded feed sessions.

Consumes JSONL files of decoded envelopes (one per line) as written by
``Recorder``; blank lines are skipped and undecodable lines are counted as
malformed.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .adapter import FeedAdapter, TradeFeedAdapter
from .changes import ChangeTracker
from .orderbook import OrderBookEngine
from .trades import LastPriceTracker
from .types import OrderBookState

log = logging.getLogger(__name__)


@dataclass
class ReplayResult:
    state: OrderBookState
    synced: bool
    messages: int = 0
    applied: int = 0
    dropped: int = 0
    resync_count: int = 0
    malformed: int = 0
    resubscribe_requests: list[dict] = field(default_factory=list)

    def summary(self) -> dict:
        best_bid = self.state.bids.best()
        best_ask = self.state.asks.best()
        return {
            "sequence": self.state.sequence,
            "synced": self.synced,
            "messages": self.messages,
            "applied": self.applied,
            "dropped": self.dropped,
            "resync_count": self.resync_count,
            "malformed": self.malformed,
            "bids": len(self.state.bids),
            "asks": len(self.state.asks),
            "best_bid": [str(best_bid.price), str(best_bid.size)] if best_bid else None,
            "best_ask": [str(best_ask.price), str(best_ask.size)] if best_ask else None,
        }


def iter_jsonl(path: Path) -> Iterator[dict]:
    with Path(path).open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            s = line.strip()
            if not s:
                continue
            try:
                obj = json.loads(s)
            except json.JSONDecodeError as exc:
                log.warning("%s:%d: skipping undecodable line (%s)", path, lineno, exc)
                yield {"_undecodable": s}
                continue
            if not isinstance(obj, dict):
                log.warning("%s:%d: skipping non-object line", path, lineno)
                yield {"_undecodable": s}
                continue
            yield obj


def process_stream(adapter: FeedAdapter, events: Iterable[dict]) -> ReplayResult:
    """Feed a stream of envelopes through ``adapter`` in order and summarize."""
    requests: list[dict] = []
    prev_hook = adapter.on_resubscribe

    def _capture(req: dict) -> None:
        requests.append(req)
        if prev_hook is not None:
            prev_hook(req)

    adapter.on_resubscribe = _capture
    messages = 0
    undecodable = 0
    try:
        for ev in events:
            if "_undecodable" in ev:
                undecodable += 1
                continue
            messages += 1
            adapter.handle_message(ev)
    finally:
        adapter.on_resubscribe = prev_hook

    engine = adapter.engine
    return ReplayResult(
        state=engine.current_state(),
        synced=engine.synced,
        messages=messages,
        applied=engine.snapshots + engine.applied_deltas,
        dropped=engine.dropped_deltas,
        resync_count=engine.resync_count,
        malformed=adapter.malformed_count + undecodable,
        resubscribe_requests=requests,
    )


def replay_from_jsonl(
    path: Path,
    topic: str,
    *,
    tracker: Optional[ChangeTracker] = None,
    adapter_kwargs: Optional[dict] = None,
) -> ReplayResult:
    engine = OrderBookEngine()
    adapter = FeedAdapter(engine, topic=topic, tracker=tracker, **(adapter_kwargs or {}))
    return process_stream(adapter, iter_jsonl(path))


def replay_trades_from_jsonl(path: Path, topic: str, tracker: Optional[LastPriceTracker] = None) -> LastPriceTracker:
    tracker = tracker or LastPriceTracker()
    adapter = TradeFeedAdapter(tracker, topic=topic)
    for ev in iter_jsonl(path):
        if "_undecodable" not in ev:
            adapter.handle_message(ev)
    return tracker
