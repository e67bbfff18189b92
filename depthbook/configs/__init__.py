from .schemas import (
    AppConfig,
    DisplayConfig,
    FeedConfig,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "DisplayConfig",
    "FeedConfig",
    "load_app_config",
]
