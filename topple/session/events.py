"""
Topple - Transition Events

Names what a transition did by comparing the snapshot before and after.
Rejected actions return the same snapshot, which classifies as None, so
a UI can tell a refused action apart from an accepted one.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from topple.engine.base import GameStatus, LogEntryType
from topple.engine.game import Game


class GameEvent(Enum):
    """Events that can occur during a game."""

    GAME_STARTED = auto()
    TURN_ORDER_SET = auto()
    DICE_ROLLED = auto()
    PIECE_PLACED = auto()
    TOPPLE_DECLARED = auto()
    ROUND_ENDED = auto()
    ROUND_STARTED = auto()
    GAME_WON = auto()
    GAME_RESET = auto()
    TURN_ADVANCED = auto()
    STATE_UPDATED = auto()


@dataclass
class EventPayload:
    """Wrapper for a transition event."""

    event: GameEvent
    game_id: str | None
    player_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


def classify_transition(old: Game | None, new: Game | None) -> GameEvent | None:
    """
    Determine the game event from a pair of snapshots.

    Returns:
        The event, or None if nothing changed
    """
    if old is new or old == new:
        return None
    if new is None:
        return GameEvent.GAME_RESET
    if old is None or old.id != new.id:
        return GameEvent.GAME_STARTED

    if new.status == GameStatus.GAME_END and old.status != GameStatus.GAME_END:
        return GameEvent.GAME_WON
    if new.status == GameStatus.ROUND_END and old.status == GameStatus.PLAYING:
        if new.topple_occurred and not old.topple_occurred:
            return GameEvent.TOPPLE_DECLARED
        if new.board != old.board:
            return GameEvent.PIECE_PLACED
        return GameEvent.ROUND_ENDED
    if new.status == GameStatus.PLAYING and old.status == GameStatus.ROUND_END:
        return GameEvent.ROUND_STARTED

    if new.board != old.board:
        return GameEvent.PIECE_PLACED
    if len(new.log) > len(old.log) and new.log[-1].type == LogEntryType.DICE_ROLL:
        return GameEvent.DICE_ROLLED
    if [p.id for p in new.players] != [p.id for p in old.players]:
        return GameEvent.TURN_ORDER_SET
    if old.active_player is None and new.active_player is not None:
        return GameEvent.TURN_ORDER_SET
    if new.current_player_index != old.current_player_index:
        return GameEvent.TURN_ADVANCED

    return GameEvent.STATE_UPDATED


def build_payload(event: GameEvent, old: Game | None, new: Game | None) -> EventPayload:
    """Wrap an event with the acting player and a status summary."""
    game = new or old
    player_id = None
    data: dict[str, Any] = {}
    if new is not None:
        if old is not None and len(new.log) > len(old.log):
            player_id = new.log[-1].player_id or new.log[len(old.log)].player_id
        data = {
            "status": new.status.value,
            "round_number": new.round_number,
            "current_player_index": new.current_player_index,
        }
    return EventPayload(
        event=event,
        game_id=game.id if game else None,
        player_id=player_id,
        data=data,
    )
