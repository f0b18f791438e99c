"""
Topple Storage Layer.

Local single-slot persistence for game snapshots and undo/redo history.
"""

from topple.storage.history import SnapshotHistory
from topple.storage.models import GameConfigRecord, GameRecord, PlayerRecord
from topple.storage.snapshot_store import SnapshotStore

__all__ = [
    "GameConfigRecord",
    "GameRecord",
    "PlayerRecord",
    "SnapshotHistory",
    "SnapshotStore",
]
