"""Replay a recorded orderbook session and print the resulting ladder.

Consumes data/stubs/ws/orderbook_<INSTRUMENT>.jsonl (and trades_<INSTRUMENT>.jsonl
when present) in STUB mode, or explicit --book/--trades files.
Outputs JSONL events under logs/<run_id>/ and a JSON summary in reports/.
"""
from __future__ import annotations

import json
import logging
import sys
import time
from argparse import ArgumentParser
from pathlib import Path
from typing import Optional, Sequence

# Ensure project root is importable when run directly
_ROOT = Path(__file__).resolve().parents[2]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from depthbook.core.adapter import FeedAdapter  # noqa: E402
from depthbook.core.changes import ChangeTracker  # noqa: E402
from depthbook.core.config import load_runtime  # noqa: E402
from depthbook.core.orderbook import OrderBookEngine  # noqa: E402
from depthbook.core.recorder import Recorder  # noqa: E402
from depthbook.core.render import render_ladder  # noqa: E402
from depthbook.core.replay import iter_jsonl, process_stream, replay_trades_from_jsonl  # noqa: E402
from depthbook.utils.structlog import StructLogger, init_run_dir  # noqa: E402


def setup_logger(logs_dir: Path) -> logging.Logger:
    logger = logging.getLogger("depthbook")
    logger.setLevel(logging.INFO)
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    # app.log always follows the current run directory
    for h in list(logger.handlers):
        if isinstance(h, logging.FileHandler):
            logger.removeHandler(h)
            h.close()
    fh = logging.FileHandler(logs_dir / "app.log")
    fh.setLevel(logging.INFO)
    fh.setFormatter(fmt)
    logger.addHandler(fh)
    if not any(not isinstance(h, logging.FileHandler) for h in logger.handlers):
        sh = logging.StreamHandler(sys.stderr)
        sh.setLevel(logging.WARNING)
        sh.setFormatter(fmt)
        logger.addHandler(sh)
    return logger


def run(
    book_path: Path,
    trades_path: Optional[Path] = None,
    *,
    config_path: Optional[Path] = None,
    logs_base: Optional[Path] = None,
    reports_dir: Path = Path("reports"),
    max_rows: Optional[int] = None,
    record_path: Optional[Path] = None,
) -> dict:
    runtime = load_runtime(config_path)
    feed = runtime.app.feed
    display = runtime.app.display
    rows = display.max_rows if max_rows is None else max_rows

    run_id = f"replay_{feed.instrument}_{int(time.time())}"
    logs_dir = init_run_dir(logs_base or runtime.app.logs_path, run_id)
    logger = setup_logger(logs_dir)
    slog = StructLogger(logs_dir, run_id) if runtime.modes.record else None

    engine = OrderBookEngine()
    tracker = ChangeTracker(window_ms=display.change_window_ms)
    recorder = Recorder(record_path) if record_path is not None else None
    adapter = FeedAdapter(engine, topic=feed.orderbook_topic, tracker=tracker, slog=slog, recorder=recorder)
    try:
        result = process_stream(adapter, iter_jsonl(book_path))
    finally:
        if recorder is not None:
            recorder.close()
    logger.info("replayed %s: %s", book_path, result.summary())

    last = None
    if trades_path is not None and Path(trades_path).exists():
        last = replay_trades_from_jsonl(trades_path, feed.trade_topic)

    print(render_ladder(
        result.state,
        max_rows=rows,
        reverse_asks=display.reverse_asks,
        last=last,
        changes=tracker.last,
        decimals=display.price_decimals,
    ))

    summary = {
        "instrument": feed.instrument,
        **result.summary(),
        "last_price": str(last.last_price) if last and last.last_price is not None else None,
        "direction": last.direction.value if last and last.direction else None,
        "log_dir": str(logs_dir),
        "recorded": recorder.count if recorder is not None else 0,
    }
    if slog is not None:
        slog.log_info(ts=int(time.time() * 1000), instrument=feed.instrument, tag="summary", payload=summary)
    reports_dir.mkdir(parents=True, exist_ok=True)
    (reports_dir / f"replay_book_{feed.instrument}.json").write_text(json.dumps(summary, ensure_ascii=False, indent=2))
    return summary


def main(argv: Optional[Sequence[str]] = None) -> None:
    runtime = load_runtime()
    stub_dir = runtime.app.data_path / "ws"
    inst = runtime.app.feed.instrument
    ap = ArgumentParser()
    ap.add_argument("--book", type=Path, default=stub_dir / f"orderbook_{inst}.jsonl")
    ap.add_argument("--trades", type=Path, default=stub_dir / f"trades_{inst}.jsonl")
    ap.add_argument("--config", type=Path, default=None)
    ap.add_argument("--max-rows", type=int, default=None)
    ap.add_argument("--reports", type=Path, default=Path("reports"))
    ap.add_argument("--record", type=Path, default=None, help="copy matching envelopes to this JSONL file")
    args = ap.parse_args(argv)
    summary = run(
        args.book,
        args.trades,
        config_path=args.config,
        reports_dir=args.reports,
        max_rows=args.max_rows,
        record_path=args.record,
    )
    print(json.dumps(summary, ensure_ascii=False))


if __name__ == "__main__":
    main()
