from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Optional


def _ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


@dataclass
class BaseEvent:
    ts: int
    run_id: str
    step: str  # e.g., snapshot | delta | resync | malformed | trade | info
    instrument: Optional[str] = None
    meta: Optional[dict[str, Any]] = None

    def to_jsonl(self) -> str:
        d = asdict(self)
        return json.dumps(d, ensure_ascii=False, default=str)


class StructLogger:
    def __init__(self, run_dir: Path, run_id: str) -> None:
        self.run_dir = run_dir
        self.run_id = run_id
        _ensure_dir(run_dir)
        self.events_fp = run_dir / "events.jsonl"

    def _write(self, event: BaseEvent) -> None:
        with self.events_fp.open("a", encoding="utf-8") as f:
            f.write(event.to_jsonl() + "\n")

    # Full book replacement
    def log_snapshot(
        self, *, ts: int, instrument: str, seq: int, bids: int, asks: int
    ) -> None:
        self._write(
            BaseEvent(
                ts=ts,
                run_id=self.run_id,
                step="snapshot",
                instrument=instrument,
                meta={"seq": seq, "bids": bids, "asks": asks},
            )
        )

    # Incremental update outcome
    def log_delta(
        self,
        *,
        ts: int,
        instrument: str,
        prev_seq: int,
        seq: int,
        applied: bool,
        changes: Optional[dict[str, Any]] = None,
    ) -> None:
        self._write(
            BaseEvent(
                ts=ts,
                run_id=self.run_id,
                step="delta",
                instrument=instrument,
                meta={"prev_seq": prev_seq, "seq": seq, "applied": applied, "changes": changes},
            )
        )

    # Resubscribe request after a gap or stale delta
    def log_resync(
        self,
        *,
        ts: int,
        instrument: str,
        reason: str,
        expected_prev: Optional[int],
        received_prev: int,
        received_seq: int,
    ) -> None:
        self._write(
            BaseEvent(
                ts=ts,
                run_id=self.run_id,
                step="resync",
                instrument=instrument,
                meta={
                    "reason": reason,
                    "expected_prev": expected_prev,
                    "received_prev": received_prev,
                    "received_seq": received_seq,
                },
            )
        )

    # Message dropped by the parser
    def log_malformed(
        self, *, ts: int, instrument: Optional[str], error: str, field: Optional[str] = None
    ) -> None:
        self._write(
            BaseEvent(
                ts=ts,
                run_id=self.run_id,
                step="malformed",
                instrument=instrument,
                meta={"error": error, "field": field},
            )
        )

    def log_trade(
        self,
        *,
        ts: int,
        instrument: str,
        price: str,
        size: str,
        direction: Optional[str],
    ) -> None:
        self._write(
            BaseEvent(
                ts=ts,
                run_id=self.run_id,
                step="trade",
                instrument=instrument,
                meta={"price": price, "size": size, "direction": direction},
            )
        )

    # Generic info hook (e.g., replay summary)
    def log_info(
        self, *, ts: int, instrument: Optional[str], tag: str, payload: dict[str, Any]
    ) -> None:
        self._write(
            BaseEvent(ts=ts, run_id=self.run_id, step=tag, instrument=instrument, meta=payload)
        )


def init_run_dir(base_logs: Path, run_id: str) -> Path:
    run_dir = base_logs / run_id
    _ensure_dir(run_dir)
    return run_dir
