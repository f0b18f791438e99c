"""Tests for topple/session/manager.py - GameSession."""

from unittest.mock import MagicMock

import pytest

from topple.config.settings import Settings
from topple.engine.base import GameStatus
from topple.engine.board import CENTER
from topple.engine.dice import scripted_roller
from topple.engine.game_state import (
    EndRound,
    InitialDiceRoll,
    PlacePiece,
    Rejection,
    RollDice,
    ToggleTopple,
)
from topple.engine.validators import PlayerConfig
from topple.session.events import GameEvent
from topple.session.manager import GameSession
from topple.storage.history import SnapshotHistory
from topple.storage.snapshot_store import SnapshotStore

PLAYERS = [PlayerConfig("Alice", "pink", order=0), PlayerConfig("Bob", "yellow", order=1)]


@pytest.fixture
def mock_store():
    """Mock snapshot store."""
    store = MagicMock(spec=SnapshotStore)
    store.load.return_value = None
    return store


@pytest.fixture
def events():
    return []


@pytest.fixture
def session(mock_store, events):
    return GameSession(
        store=mock_store,
        roller=scripted_roller([1, 1, 1, 1]),
        on_event=events.append,
        default_victory_points=40,
    )


@pytest.fixture
def started(session):
    session.new_game(PLAYERS)
    session.dispatch(InitialDiceRoll({"player-1": 6, "player-2": 3}))
    return session


class TestNewGame:
    """Tests for GameSession.new_game()."""

    def test_sets_up_and_saves(self, session, mock_store, events):
        """Test a new game is set up and saved."""
        result = session.new_game(PLAYERS)
        assert result.accepted
        assert session.game.status == GameStatus.PLAYING
        assert session.game.victory_points == 40
        mock_store.save.assert_called_once_with(session.game)
        mock_store.save_config.assert_called_once()
        assert [p.event for p in events] == [GameEvent.GAME_STARTED]

    def test_explicit_victory_points(self, session):
        """Test explicit victory points."""
        session.new_game(PLAYERS, victory_points=75)
        assert session.game.victory_points == 75

    def test_invalid_setup(self, session, mock_store, events):
        """Test an invalid setup."""
        result = session.new_game([PlayerConfig("", "pink")])
        assert result.rejection == Rejection.INVALID_CONFIG
        assert result.errors
        assert session.game is None
        mock_store.save.assert_not_called()
        mock_store.save_config.assert_not_called()
        assert events == []

    def test_last_config(self, session, mock_store):
        """Test the last config is remembered."""
        mock_store.load_config.return_value = "config"
        assert session.last_config() == "config"


class TestDispatch:
    """Tests for GameSession.dispatch()."""

    def test_rejected_action_changes_nothing(self, started, mock_store, events):
        """Test rejected action changes nothing."""
        game = started.game
        saves = mock_store.save.call_count
        result = started.dispatch(PlacePiece(CENTER, "player-1"))
        assert result.rejection == Rejection.NO_DICE_ROLL
        assert started.game is game
        assert mock_store.save.call_count == saves
        assert events[-1].event == GameEvent.TURN_ORDER_SET

    def test_events_follow_play(self, started, events):
        """Test events follow play."""
        started.dispatch(RollDice())
        started.dispatch(PlacePiece(CENTER, "player-1"))
        started.dispatch(ToggleTopple("player-2"))
        assert [p.event for p in events] == [
            GameEvent.GAME_STARTED,
            GameEvent.TURN_ORDER_SET,
            GameEvent.DICE_ROLLED,
            GameEvent.PIECE_PLACED,
            GameEvent.TOPPLE_DECLARED,
        ]

    def test_saves_every_transition(self, started, mock_store):
        """Test every transition is saved."""
        started.dispatch(RollDice())
        mock_store.save.assert_called_with(started.game)

    def test_history_records_play_only(self, started):
        """Test history records play only."""
        started.dispatch(RollDice())
        assert len(started.history) == 3
        started.dispatch(EndRound())
        assert len(started.history) == 3

    def test_reset_clears_store_and_history(self, started, mock_store, events):
        """Test reset clears store and history."""
        started.reset()
        assert started.game is None
        mock_store.clear.assert_called_once()
        assert len(started.history) == 0
        assert events[-1].event == GameEvent.GAME_RESET

    def test_works_without_store(self):
        """Test a session without a store."""
        session = GameSession(roller=scripted_roller([2]))
        session.new_game(PLAYERS)
        session.dispatch(RollDice())
        assert session.game.dice_roll == 2
        assert session.resume() is None
        assert session.last_config() is None


class TestUndoRedo:
    """Tests for undo/redo through the history."""

    def test_undo_and_redo(self, started):
        """Test undoing and redoing moves."""
        started.dispatch(RollDice())
        rolled = started.game
        started.dispatch(PlacePiece(CENTER, "player-1"))
        placed = started.game

        assert started.undo() == rolled
        assert started.game == rolled
        assert started.can_redo
        assert started.redo() == placed
        assert started.game == placed

    def test_undo_saves_restored_snapshot(self, started, mock_store):
        """Test undo saves restored snapshot."""
        started.dispatch(RollDice())
        previous = started.undo()
        mock_store.save.assert_called_with(previous)

    def test_undo_does_not_grow_history(self, started):
        """Test undo does not grow history."""
        started.dispatch(RollDice())
        size = len(started.history)
        started.undo()
        started.redo()
        assert len(started.history) == size

    def test_nothing_to_undo(self, session):
        """Test undo with nothing to undo."""
        assert session.undo() is None
        assert session.redo() is None
        assert not session.can_undo

    def test_action_after_undo_drops_redo(self, started):
        """Test action after undo drops redo."""
        started.dispatch(RollDice())
        started.undo()
        started.dispatch(RollDice())
        assert not started.can_redo


class TestResume:
    """Tests for resuming a saved game."""

    def test_resume_from_store(self, tmp_path, started_game):
        """Test resuming from the store."""
        store = SnapshotStore(tmp_path / "game-state.json")
        store.save(started_game)
        session = GameSession(store=store)
        assert session.resume() == started_game
        assert session.game == started_game
        assert session.history.current == started_game

    def test_resume_without_save(self, session, events):
        """Test resuming with no saved game."""
        assert session.resume() is None
        assert session.game is None
        assert events == []


class TestFromSettings:
    def test_wires_paths_and_limits(self, tmp_path):
        """Test from_settings wires paths and limits."""
        settings = Settings(
            snapshot_path=tmp_path / "s.json",
            config_path=tmp_path / "c.json",
            history_limit=5,
            default_victory_points=60,
        )
        session = GameSession.from_settings(settings)
        session.new_game(PLAYERS)
        assert session.history.limit == 5
        assert session.game.victory_points == 60
        assert (tmp_path / "s.json").is_file()
        assert (tmp_path / "c.json").is_file()


class TestHistoryWiring:
    """Tests for the history a session is given."""

    def test_uses_supplied_empty_history(self):
        """Test an empty caller-supplied history is the one the session keeps."""
        history = SnapshotHistory(limit=2)
        session = GameSession(history=history)
        assert session.history is history

    def test_supplied_limit_applies(self):
        """Test the supplied limit caps recorded snapshots."""
        session = GameSession(history=SnapshotHistory(limit=2), roller=scripted_roller([3, 4, 5]))
        session.new_game(PLAYERS)
        for _ in range(3):
            session.dispatch(RollDice())
        assert len(session.history) == 2
        assert session.history.limit == 2
