"""
Topple - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

from datetime import datetime, timezone
from typing import Callable

import pytest

from topple.engine.base import Piece, PlayerColor, Position
from topple.engine.board import Board, BoardEngine
from topple.engine.game import Game
from topple.engine.game_state import GameStateEngine, InitialDiceRoll, SetupGame
from topple.engine.validators import GameConfig, PlayerConfig


# =============================================================================
# TIME AND PIECES
# =============================================================================

@pytest.fixture
def now() -> datetime:
    """A fixed, millisecond-aligned UTC timestamp."""
    return datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_piece(now) -> Callable[..., Piece]:
    """Factory for pieces with sequential ids."""
    counter = {"n": 0}

    def _make(player_id: str = "player-1", color: PlayerColor = PlayerColor.PINK, round_number: int = 1) -> Piece:
        counter["n"] += 1
        return Piece(
            id=f"piece-{counter['n']}",
            player_id=player_id,
            color=color,
            placed_at=now,
            round_number=round_number,
        )

    return _make


@pytest.fixture
def fill(make_piece) -> Callable[..., Board]:
    """
    Factory that stacks pieces onto a board.

    Usage: fill(board, [(row, col), ...], player_id=..., color=...)
    """
    def _fill(
        board: Board,
        positions: list[tuple[int, int]],
        player_id: str = "player-1",
        color: PlayerColor = PlayerColor.PINK,
    ) -> Board:
        for row, col in positions:
            board = BoardEngine.place_piece(board, Position(row, col), make_piece(player_id, color))
        return board

    return _fill


# =============================================================================
# SETUP CONFIGURATIONS
# =============================================================================

@pytest.fixture
def two_player_config() -> GameConfig:
    return GameConfig(
        player_count=2,
        players=(
            PlayerConfig(name="Alice", color=PlayerColor.PINK, order=0),
            PlayerConfig(name="Bob", color=PlayerColor.YELLOW, order=1),
        ),
        victory_points=100,
    )


@pytest.fixture
def three_player_config() -> GameConfig:
    return GameConfig(
        player_count=3,
        players=(
            PlayerConfig(name="Alice", color="pink", order=0),
            PlayerConfig(name="Bob", color="yellow", order=1),
            PlayerConfig(name="Cara", color="orange", order=2),
        ),
    )


@pytest.fixture
def dual_color_config() -> GameConfig:
    """Two players, each controlling two colors."""
    return GameConfig(
        player_count=2,
        players=(
            PlayerConfig(name="Alice", color=PlayerColor.PINK, color2=PlayerColor.ORANGE, order=0),
            PlayerConfig(name="Bob", color=PlayerColor.YELLOW, color2=PlayerColor.PURPLE, order=1),
        ),
    )


# =============================================================================
# GAME STATE FIXTURES
# =============================================================================

@pytest.fixture
def new_game(two_player_config, now) -> Game:
    """A freshly set up two-player game (nobody active yet)."""
    return GameStateEngine.apply(None, SetupGame(two_player_config), now=now).game


@pytest.fixture
def started_game(new_game, now) -> Game:
    """Two-player game where Alice won the initial roll and is active."""
    rolls = {"player-1": 6, "player-2": 2}
    return GameStateEngine.apply(new_game, InitialDiceRoll(rolls), now=now).game


@pytest.fixture
def started_dual_game(dual_color_config, now) -> Game:
    """Dual-color game where Alice won the initial roll and is active."""
    game = GameStateEngine.apply(None, SetupGame(dual_color_config), now=now).game
    return GameStateEngine.apply(game, InitialDiceRoll({"player-1": 5, "player-2": 3}), now=now).game


@pytest.fixture
def started_three_player_game(three_player_config, now) -> Game:
    game = GameStateEngine.apply(None, SetupGame(three_player_config), now=now).game
    rolls = {"player-1": 6, "player-2": 1, "player-3": 4}
    return GameStateEngine.apply(game, InitialDiceRoll(rolls), now=now).game
