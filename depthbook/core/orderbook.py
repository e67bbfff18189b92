"""Order book synchronization engine for snapshot + delta feeds.

This module is offline-testable; it does not require network. It keeps both
sides of one instrument's book, verifies delta sequence continuity, and emits
a ResyncRequired signal when a gap is detected so the transport can
re-subscribe.

States:
- UNSYNCED: initial, and after any gap. Deltas are dropped (nothing valid to
  extend) and ResyncRequired is re-emitted.
- SYNCED: after a snapshot. Deltas are validated and merged.

Callers must apply messages one at a time in arrival order; there is no
internal locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, List, Literal, Optional, Tuple

from .merger import DeltaMerger
from .sequence import GateResult, SequenceGate
from .side import PriceLevelSide
from .types import OrderBookState

log = logging.getLogger(__name__)

Updates = Iterable[Tuple[Decimal, Decimal]]


class SyncState(str, Enum):
    UNSYNCED = "unsynced"
    SYNCED = "synced"


@dataclass(frozen=True, slots=True)
class ResyncRequired:
    reason: Literal["sequence_gap", "stale_delta"]
    expected_prev: Optional[int]
    received_prev: int
    received_seq: int


ResyncListener = Callable[[ResyncRequired], None]


class OrderBookEngine:
    def __init__(
        self,
        *,
        on_resync: ResyncListener | None = None,
        merger: DeltaMerger | None = None,
    ) -> None:
        self.bids = PriceLevelSide("bids")
        self.asks = PriceLevelSide("asks")
        self.gate = SequenceGate()
        self.merger = merger or DeltaMerger()
        self.state = SyncState.UNSYNCED
        self._listeners: List[ResyncListener] = []
        if on_resync is not None:
            self._listeners.append(on_resync)
        # Counters for replay reports
        self.snapshots = 0
        self.applied_deltas = 0
        self.dropped_deltas = 0
        self.resync_count = 0

    def add_resync_listener(self, listener: ResyncListener) -> None:
        self._listeners.append(listener)

    @property
    def synced(self) -> bool:
        return self.state is SyncState.SYNCED

    @property
    def last_sequence(self) -> Optional[int]:
        return self.gate.last_sequence

    def apply_snapshot(self, bids: Updates, asks: Updates, seq_num: int) -> None:
        self.bids.replace_all(bids)
        self.asks.replace_all(asks)
        self.gate.accept_snapshot(seq_num)
        if self.state is not SyncState.SYNCED:
            log.info("snapshot seq=%s: book synced (%d bids, %d asks)", seq_num, len(self.bids), len(self.asks))
        self.state = SyncState.SYNCED
        self.snapshots += 1

    def apply_delta(self, bid_updates: Updates, ask_updates: Updates, prev_seq_num: int, seq_num: int) -> bool:
        """Apply delta with sequence verification.

        Returns True if applied, False if the delta was dropped (stale or gap);
        in the latter case ResyncRequired has been emitted.
        """
        if self.state is SyncState.UNSYNCED:
            self.dropped_deltas += 1
            self._emit(ResyncRequired("stale_delta", None, int(prev_seq_num), int(seq_num)))
            return False

        expected = self.gate.last_sequence
        if self.gate.validate_delta(prev_seq_num, seq_num) is GateResult.GAP_DETECTED:
            log.warning(
                "sequence gap detected, requesting new snapshot: last=%s prev=%s seq=%s",
                expected, prev_seq_num, seq_num,
            )
            # Clear the stale baseline so it cannot mask a second gap.
            self.gate.reset()
            self.state = SyncState.UNSYNCED
            self.dropped_deltas += 1
            self.resync_count += 1
            self._emit(ResyncRequired("sequence_gap", expected, int(prev_seq_num), int(seq_num)))
            return False

        self.merger.apply(self.bids, bid_updates)
        self.merger.apply(self.asks, ask_updates)
        self.applied_deltas += 1
        return True

    def current_state(self) -> OrderBookState:
        return OrderBookState(bids=self.bids.copy(), asks=self.asks.copy(), sequence=self.gate.last_sequence)

    def _emit(self, signal: ResyncRequired) -> None:
        for listener in self._listeners:
            listener(signal)
