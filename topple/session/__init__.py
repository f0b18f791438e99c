"""
Topple Session Layer.

Drives the engine for a UI: applies actions, keeps undo/redo history,
saves snapshots, and reports what each transition did.
"""

from topple.session.events import EventPayload, GameEvent, classify_transition
from topple.session.manager import GameSession

__all__ = [
    "EventPayload",
    "GameEvent",
    "GameSession",
    "classify_transition",
]
