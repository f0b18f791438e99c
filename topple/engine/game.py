"""
Topple - Game Snapshot

The complete, immutable state of one game. Every transition builds a new
Game value with dataclasses.replace(); nothing is edited in place.
"""

from dataclasses import dataclass
from datetime import datetime

from topple.engine.base import GameLogEntry, GameStatus, PlayerColor, ScoreEvent
from topple.engine.board import Board
from topple.engine.players import Player


@dataclass(frozen=True)
class Game:
    """
    Snapshot of a game.

    Attributes:
        id: Unique game identifier
        status: Lifecycle state, drives which actions are legal
        players: Players in turn order
        current_player_index: Index of the player whose turn it is
        round_number: Current round (1-based)
        victory_points: Score needed to win at a round boundary
        board: Current board
        created_at: When the game was set up
        updated_at: When the snapshot was produced
        dice_roll: Die value waiting to be used, if any
        topple_occurred: True once a topple was declared this round
        topple_player_id: Player who caused this round's topple
        dice_rolled_in_round: True once any die was rolled this round
        log: Append-only audit trail
        score_events: Every score event of the game, append-only
    """
    id: str
    status: GameStatus
    players: tuple[Player, ...]
    current_player_index: int
    round_number: int
    victory_points: int
    board: Board
    created_at: datetime
    updated_at: datetime
    dice_roll: int | None = None
    topple_occurred: bool = False
    topple_player_id: str | None = None
    dice_rolled_in_round: bool = False
    log: tuple[GameLogEntry, ...] = ()
    score_events: tuple[ScoreEvent, ...] = ()

    @property
    def current_player(self) -> Player | None:
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    @property
    def active_player(self) -> Player | None:
        """The player flagged active, if any."""
        return next((p for p in self.players if p.is_active), None)

    def player_index(self, player_id: str) -> int | None:
        for i, player in enumerate(self.players):
            if player.id == player_id:
                return i
        return None

    def get_player(self, player_id: str) -> Player | None:
        index = self.player_index(player_id)
        return None if index is None else self.players[index]

    @property
    def all_pieces_played(self) -> bool:
        return all(p.pieces_remaining == 0 for p in self.players)

    def score_total(self, player_id: str, color: PlayerColor | None = None) -> int:
        """Sum of recorded score events for a player (optionally one color)."""
        return sum(
            event.points
            for event in self.score_events
            if event.player_id == player_id and (color is None or event.color == color)
        )
