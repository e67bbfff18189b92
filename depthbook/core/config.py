"""Runtime configuration loader and mode switches.

Modes:
- STUB_MODE: read recorded JSONL sessions from data/stubs instead of a live feed
- RECORD_EVENTS: write structured JSONL events for each processed message

Defaults: STUB_MODE=true, RECORD_EVENTS=false
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from depthbook.configs.schemas import AppConfig, load_app_config

DEFAULT_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "config.yaml"


@dataclass
class Modes:
    stub: bool = True
    record: bool = False


def getenv_bool(key: str, default: bool) -> bool:
    val = os.getenv(key)
    if val is None:
        return default
    return val.lower() in {"1", "true", "yes", "on"}


def get_modes() -> Modes:
    return Modes(
        stub=getenv_bool("STUB_MODE", True),
        record=getenv_bool("RECORD_EVENTS", False),
    )


@dataclass
class RuntimeConfig:
    app: AppConfig
    modes: Modes


def load_runtime(app_path: Optional[Path] = None) -> RuntimeConfig:
    """Load runtime configuration.

    Priority:
    1) Explicit `app_path` argument
    2) `DEPTHBOOK_CONFIG` env var
    3) Packaged default config.yaml; if missing, schema defaults
    """
    if app_path is None:
        env_p = os.getenv("DEPTHBOOK_CONFIG")
        app_path = Path(env_p) if env_p else DEFAULT_CONFIG
    app: AppConfig
    if Path(app_path).exists() or app_path != DEFAULT_CONFIG:
        app = load_app_config(Path(app_path))
    else:
        app = AppConfig()
    return RuntimeConfig(app=app, modes=get_modes())
