from .changes import ChangeAnnotator, ChangeTracker
from .merger import DeltaMerger
from .orderbook import OrderBookEngine, ResyncRequired, SyncState
from .projector import LevelProjector
from .sequence import GateResult, SequenceGate
from .side import PriceLevelSide
from .trades import LastPriceTracker
from .types import (
    BookChanges,
    ChangeSet,
    CumulativeLevel,
    OrderBookState,
    PriceDirection,
    PriceLevel,
    ProjectedRow,
    SizeChange,
)

__all__ = [
    "ChangeAnnotator",
    "ChangeTracker",
    "DeltaMerger",
    "OrderBookEngine",
    "ResyncRequired",
    "SyncState",
    "LevelProjector",
    "GateResult",
    "SequenceGate",
    "PriceLevelSide",
    "LastPriceTracker",
    "BookChanges",
    "ChangeSet",
    "CumulativeLevel",
    "OrderBookState",
    "PriceDirection",
    "PriceLevel",
    "ProjectedRow",
    "SizeChange",
]
