"""Sequence verification for snapshot/delta feeds.

Each delta declares the sequence number it extends (``prev_seq_num``). A delta
is accepted only when that matches the last accepted sequence exactly; any
mismatch means the local replica may be stale and only a fresh snapshot can
re-establish a baseline.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class GateResult(str, Enum):
    ACCEPT = "accept"
    GAP_DETECTED = "gap_detected"


@dataclass
class SequenceGate:
    last_sequence: Optional[int] = None

    def accept_snapshot(self, seq_num: int) -> None:
        self.last_sequence = int(seq_num)

    def validate_delta(self, prev_seq_num: int, seq_num: int) -> GateResult:
        # On a gap last_sequence is left untouched; the owner decides when to reset().
        if self.last_sequence is None or self.last_sequence != int(prev_seq_num):
            return GateResult.GAP_DETECTED
        self.last_sequence = int(seq_num)
        return GateResult.ACCEPT

    def reset(self) -> None:
        self.last_sequence = None
