from __future__ import annotations

from pathlib import Path

import pytest

from depthbook.core.orderbook import OrderBookEngine, ResyncRequired

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def resyncs() -> list[ResyncRequired]:
    return []


@pytest.fixture
def engine(resyncs) -> OrderBookEngine:
    return OrderBookEngine(on_resync=resyncs.append)


@pytest.fixture
def stub_dir() -> Path:
    return ROOT / "data" / "stubs" / "ws"
