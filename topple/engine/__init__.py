"""
Topple Game Engine.

Pure Python game logic with zero storage/UI dependencies.
Handles the board, placement rules, scoring, rounds and the reducer.
"""

from topple.engine.base import (
    GameLogEntry,
    GameStatus,
    LogEntryType,
    Piece,
    PlayerColor,
    Position,
    ScoreEvent,
    ScoreReason,
)
from topple.engine.board import Board, BoardEngine, Cell
from topple.engine.game import Game
from topple.engine.game_state import (
    CompleteTurn,
    EndRound,
    GameAction,
    GameStateEngine,
    InitialDiceRoll,
    LoadGame,
    PlacePiece,
    Rejection,
    ResetGame,
    RollDice,
    SetupGame,
    StartNewRound,
    ToggleTopple,
    TransitionResult,
    apply_action,
    game_reducer,
)
from topple.engine.placement import PlacementRules
from topple.engine.players import DualColorMode, Player, SingleColorMode
from topple.engine.round import RoundEngine
from topple.engine.scoring import ScoringEngine
from topple.engine.validators import GameConfig, PlayerConfig, validate_game_config

__all__ = [
    # Data Classes
    "Board",
    "Cell",
    "Game",
    "GameConfig",
    "GameLogEntry",
    "Piece",
    "Player",
    "PlayerConfig",
    "Position",
    "ScoreEvent",
    "SingleColorMode",
    "DualColorMode",
    "TransitionResult",
    # Enums
    "GameStatus",
    "LogEntryType",
    "PlayerColor",
    "Rejection",
    "ScoreReason",
    # Actions
    "GameAction",
    "SetupGame",
    "InitialDiceRoll",
    "RollDice",
    "PlacePiece",
    "CompleteTurn",
    "ToggleTopple",
    "EndRound",
    "StartNewRound",
    "ResetGame",
    "LoadGame",
    # Engines
    "BoardEngine",
    "PlacementRules",
    "ScoringEngine",
    "RoundEngine",
    "GameStateEngine",
    "apply_action",
    "game_reducer",
    "validate_game_config",
]
