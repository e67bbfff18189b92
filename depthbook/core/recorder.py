"""Raw envelope capture: one JSON object per line, readable by ``replay.iter_jsonl``."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, TextIO


class Recorder:
    """Append-only session file for orderbook envelopes.

    The file is opened lazily on the first record and kept open until
    ``close()``; each line is flushed so a crashed session stays replayable.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.count = 0
        self._fh: Optional[TextIO] = None

    @property
    def closed(self) -> bool:
        return self._fh is None

    def open(self) -> "Recorder":
        if self._fh is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.path.open("a", encoding="utf-8")
        return self

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> "Recorder":
        return self.open()

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def record(self, message: Any) -> bool:
        # Only decoded envelopes are kept; anything else could not be replayed.
        if not isinstance(message, dict):
            return False
        fh = self._fh if self._fh is not None else self.open()._fh
        fh.write(json.dumps(message, ensure_ascii=False, default=str) + "\n")
        fh.flush()
        self.count += 1
        return True
