"""Thin adapter between decoded feed envelopes and the book engine.

Envelope schema (BTSE-style futures orderbook topic):
- {"topic": "update:BTCPFC", "data": {"type": "snapshot"|"delta", "bids": [[p, s], ...],
   "asks": [[p, s], ...], "prevSeqNum": int, "seqNum": int, "timestamp": int}}

Trade topic:
- {"topic": "tradeHistoryApi", "data": [{"price": str, "size": str, "side": str, "timestamp": int}, ...]}

Prices and sizes arrive as decimal strings. A malformed number drops that one
message (logged and counted); processing continues with the next message.
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .changes import ChangeTracker
from .errors import FeedError, MalformedNumericError, UnknownMessageError
from .orderbook import OrderBookEngine, ResyncRequired
from .recorder import Recorder
from .trades import LastPriceTracker
from .types import BookChanges, OrderBookState
from depthbook.utils.structlog import StructLogger

log = logging.getLogger(__name__)

StateListener = Callable[[OrderBookState, Optional[BookChanges]], None]
Pairs = Iterable[Iterable[Any]]


def _now_ms() -> int:
    return int(time.time() * 1000)


def subscribe_request(topic: str) -> dict:
    # Same payload every time; re-subscribing to an active topic is harmless.
    return {"op": "subscribe", "args": [topic]}


def _topic_matches(received: Any, topic: str, *, allow_prefix: bool = False) -> bool:
    if received == topic:
        return True
    # The trade channel publishes under the bare topic name.
    return allow_prefix and received == topic.split(":", 1)[0]


def parse_decimal(raw: Any, field: str) -> Decimal:
    if isinstance(raw, bool) or raw is None:
        raise MalformedNumericError(field, raw)
    try:
        val = Decimal(raw if isinstance(raw, (str, int)) else str(raw))
    except (InvalidOperation, TypeError, ValueError):
        raise MalformedNumericError(field, raw) from None
    if not val.is_finite():
        raise MalformedNumericError(field, raw, "not finite")
    if val < 0:
        raise MalformedNumericError(field, raw, "negative")
    return val


def parse_levels(pairs: Pairs, field: str) -> List[Tuple[Decimal, Decimal]]:
    if pairs is None:
        return []
    if not isinstance(pairs, (list, tuple)):
        raise MalformedNumericError(field, pairs, "expected a list of [price, size]")
    out: List[Tuple[Decimal, Decimal]] = []
    for item in pairs:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise MalformedNumericError(field, item, "expected [price, size]")
        p, s = item
        out.append((parse_decimal(p, f"{field}.price"), parse_decimal(s, f"{field}.size")))
    return out


def _parse_seq(data: dict, key: str) -> int:
    raw = data.get(key)
    if raw is None or isinstance(raw, bool):
        raise MalformedNumericError(key, raw, "missing")
    if isinstance(raw, (float, Decimal)):
        try:
            integral = raw == int(raw)
        except (OverflowError, ValueError):
            integral = False
        if not integral:
            raise MalformedNumericError(key, raw, "not an integer")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise MalformedNumericError(key, raw, "not an integer") from None


class FeedAdapter:
    def __init__(
        self,
        engine: OrderBookEngine,
        *,
        topic: str,
        tracker: ChangeTracker | None = None,
        on_state: StateListener | None = None,
        on_resubscribe: Callable[[dict], None] | None = None,
        slog: StructLogger | None = None,
        recorder: Recorder | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.engine = engine
        self.topic = topic
        self.instrument = topic.split(":", 1)[-1]
        self.tracker = tracker
        self.on_state = on_state
        self.on_resubscribe = on_resubscribe
        self.slog = slog
        self.recorder = recorder
        self.clock = clock
        self.malformed_count = 0
        self.resubscribe_requests = 0
        engine.add_resync_listener(self._on_resync)

    # Typed entry points (already-decoded envelopes)
    def on_snapshot(self, bids: Pairs, asks: Pairs, seq_num: int) -> None:
        pb = parse_levels(bids, "bids")
        pa = parse_levels(asks, "asks")
        self.engine.apply_snapshot(pb, pa, seq_num)
        if self.slog is not None:
            self.slog.log_snapshot(
                ts=self.clock(), instrument=self.instrument, seq=int(seq_num),
                bids=len(self.engine.bids), asks=len(self.engine.asks),
            )
        self._publish()

    def on_delta(self, bids: Pairs, asks: Pairs, prev_seq_num: int, seq_num: int) -> bool:
        pb = parse_levels(bids, "bids")
        pa = parse_levels(asks, "asks")
        applied = self.engine.apply_delta(pb, pa, prev_seq_num, seq_num)
        changes = self._publish() if applied else None
        if self.slog is not None:
            self.slog.log_delta(
                ts=self.clock(), instrument=self.instrument, prev_seq=int(prev_seq_num), seq=int(seq_num),
                applied=applied,
                changes={"bids": changes.bids.to_dict(), "asks": changes.asks.to_dict()} if changes else None,
            )
        return applied

    def handle_message(self, message: dict) -> bool:
        """Route one decoded envelope; returns True if it updated the book."""
        if not isinstance(message, dict) or not _topic_matches(message.get("topic"), self.topic):
            return False
        if self.recorder is not None:
            self.recorder.record(message)
        try:
            data = message.get("data")
            if not isinstance(data, dict):
                raise UnknownMessageError(type(data).__name__)
            kind = data.get("type")
            if kind == "snapshot":
                self.on_snapshot(data.get("bids", []), data.get("asks", []), _parse_seq(data, "seqNum"))
                return True
            if kind == "delta":
                return self.on_delta(
                    data.get("bids", []), data.get("asks", []),
                    _parse_seq(data, "prevSeqNum"), _parse_seq(data, "seqNum"),
                )
            raise UnknownMessageError(kind)
        except FeedError as exc:
            self.malformed_count += 1
            log.warning("dropping orderbook message: %s", exc)
            if self.slog is not None:
                self.slog.log_malformed(
                    ts=self.clock(), instrument=self.instrument, error=str(exc),
                    field=getattr(exc, "field", None),
                )
            return False

    def _publish(self) -> Optional[BookChanges]:
        state = self.engine.current_state()
        changes = self.tracker.update(state) if self.tracker is not None else None
        if self.on_state is not None:
            self.on_state(state, changes)
        return changes

    def _on_resync(self, signal: ResyncRequired) -> None:
        self.resubscribe_requests += 1
        if self.slog is not None:
            self.slog.log_resync(
                ts=self.clock(), instrument=self.instrument, reason=signal.reason,
                expected_prev=signal.expected_prev, received_prev=signal.received_prev,
                received_seq=signal.received_seq,
            )
        if self.on_resubscribe is not None:
            self.on_resubscribe(subscribe_request(self.topic))


class TradeFeedAdapter:
    def __init__(
        self,
        tracker: LastPriceTracker,
        *,
        topic: str,
        slog: StructLogger | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.tracker = tracker
        self.topic = topic
        self.instrument = topic.split(":", 1)[-1]
        self.slog = slog
        self.clock = clock
        self.malformed_count = 0

    def on_trade(self, price: Any, size: Any) -> None:
        p = parse_decimal(price, "price")
        s = parse_decimal(size, "size")
        direction = self.tracker.on_trade(p, s)
        if self.slog is not None:
            self.slog.log_trade(
                ts=self.clock(), instrument=self.instrument, price=str(p), size=str(s),
                direction=direction.value if direction else None,
            )

    def handle_message(self, message: dict) -> bool:
        if not isinstance(message, dict) or not _topic_matches(message.get("topic"), self.topic, allow_prefix=True):
            return False
        trades = message.get("data")
        if not isinstance(trades, list) or not trades:
            return False
        # Entries are newest first; only the latest trade moves the last price.
        latest = trades[0]
        try:
            if not isinstance(latest, dict):
                raise MalformedNumericError("trade", latest, "expected object")
            self.on_trade(latest.get("price"), latest.get("size"))
        except FeedError as exc:
            self.malformed_count += 1
            log.warning("dropping trade message: %s", exc)
            if self.slog is not None:
                self.slog.log_malformed(
                    ts=self.clock(), instrument=self.instrument, error=str(exc),
                    field=getattr(exc, "field", None),
                )
            return False
        return True
