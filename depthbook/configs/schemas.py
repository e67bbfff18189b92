"""Pydantic-based configuration schemas and YAML loader.

These schemas define the feed subscription and display settings for one
instrument's book.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class FeedConfig(BaseModel):
    """Exchange topics and endpoints for a single instrument."""

    instrument: str = Field("BTCPFC")
    orderbook_topic: str = Field("update:BTCPFC", description="Incremental orderbook topic (snapshot + delta)")
    trade_topic: str = Field("tradeHistoryApi:BTCPFC")
    ws_url: str = Field("wss://ws.btse.com/ws/oss/futures")
    trade_ws_url: str = Field("wss://ws.btse.com/ws/futures")


class DisplayConfig(BaseModel):
    """Ladder projection and change-highlight settings."""

    max_rows: int = Field(8, ge=0)
    change_window_ms: int = Field(1000, ge=0, description="How long a change annotation counts as fresh")
    reverse_asks: bool = True
    price_decimals: int = Field(1, ge=0)


class AppConfig(BaseModel):
    """Top-level application config."""

    data_path: Path = Field(Path("data/stubs"))
    logs_path: Path = Field(Path("logs"))
    feed: FeedConfig = FeedConfig()
    display: DisplayConfig = DisplayConfig()


def load_yaml(path: Path) -> dict[str, Any]:
    return yaml.safe_load(Path(path).read_text()) or {}


def load_app_config(path: Path) -> AppConfig:
    obj = load_yaml(path)
    return AppConfig(**obj)
