"""Configure test environment and enforce stub-only, no-network tests."""

from __future__ import annotations

import sys
from pathlib import Path
import socket
import pytest

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _env_and_block_network(monkeypatch):
    # Replay recorded sessions only; never touch a live feed
    monkeypatch.setenv("STUB_MODE", "true")
    monkeypatch.setenv("RECORD_EVENTS", "false")
    monkeypatch.delenv("DEPTHBOOK_CONFIG", raising=False)

    def _no_network(*args, **kwargs):  # noqa: ANN001, D401
        raise RuntimeError("Network access blocked in tests/CI")

    monkeypatch.setattr(socket, "create_connection", _no_network)
