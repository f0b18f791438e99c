"""
Topple - Game Session

High-level driver that ties the reducer to persistence and undo/redo.
The UI layer talks to a GameSession; the session applies actions,
records history, saves snapshots and notifies a listener of what changed.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from topple.config.settings import Settings, get_settings
from topple.engine.base import GameStatus
from topple.engine.dice import DiceRoller
from topple.engine.game import Game
from topple.engine.game_state import (
    GameAction,
    LoadGame,
    ResetGame,
    SetupGame,
    TransitionResult,
    apply_action,
)
from topple.engine.validators import GameConfig, PlayerConfig
from topple.session.events import EventPayload, GameEvent, build_payload, classify_transition
from topple.storage.history import SnapshotHistory
from topple.storage.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class GameSession:
    """Owns the live snapshot and coordinates reducer, store and history.

    Snapshots are pushed onto the history while a round is being played,
    and saved after every accepted transition that leaves the game in a
    non-setup state.
    """

    def __init__(
        self,
        store: SnapshotStore | None = None,
        history: SnapshotHistory | None = None,
        *,
        roller: DiceRoller | None = None,
        on_event: Callable[[EventPayload], None] | None = None,
        default_victory_points: int = 100,
    ) -> None:
        self._store = store
        self._history = history if history is not None else SnapshotHistory()
        self._roller = roller
        self._on_event = on_event
        self._default_victory_points = default_victory_points
        self._game: Game | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        **kwargs,
    ) -> GameSession:
        """Build a session wired to the configured store and history limit."""
        settings = settings or get_settings()
        return cls(
            store=SnapshotStore(settings.snapshot_path, settings.config_path),
            history=SnapshotHistory(settings.history_limit),
            default_victory_points=settings.default_victory_points,
            **kwargs,
        )

    @property
    def game(self) -> Game | None:
        return self._game

    @property
    def history(self) -> SnapshotHistory:
        return self._history

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    # -- Actions -------------------------------------------------------------

    def dispatch(self, action: GameAction) -> TransitionResult:
        """Apply an action to the live snapshot.

        Returns:
            The TransitionResult; rejected actions leave everything as is.
        """
        result = apply_action(self._game, action, self._roller)
        if not result.accepted:
            return result

        if isinstance(action, (SetupGame, ResetGame)):
            self._history.clear()
        self._commit(result.game, record_history=not isinstance(action, LoadGame))
        return result

    def new_game(
        self,
        players: Sequence[PlayerConfig],
        victory_points: int | None = None,
    ) -> TransitionResult:
        """Set up a game, remembering the configuration for next time."""
        config = GameConfig(
            player_count=len(players),
            players=tuple(players),
            victory_points=victory_points or self._default_victory_points,
        )
        result = self.dispatch(SetupGame(config))
        if result.accepted and self._store is not None:
            self._store.save_config(config)
        return result

    def last_config(self) -> GameConfig | None:
        return self._store.load_config() if self._store else None

    def resume(self) -> Game | None:
        """Load the saved game, if any, as the live snapshot."""
        if self._store is None:
            return None
        saved = self._store.load()
        if saved is None:
            return None
        self._history.clear()
        self.dispatch(LoadGame(saved))
        self._history.push(saved)
        return saved

    def reset(self) -> None:
        self.dispatch(ResetGame())

    def undo(self) -> Game | None:
        """Return to the previous snapshot in history."""
        previous = self._history.undo()
        if previous is not None:
            self.dispatch(LoadGame(previous))
        return previous

    def redo(self) -> Game | None:
        following = self._history.redo()
        if following is not None:
            self.dispatch(LoadGame(following))
        return following

    # -- Internals -----------------------------------------------------------

    def _commit(self, game: Game | None, *, record_history: bool) -> None:
        old = self._game
        self._game = game

        event = classify_transition(old, game)
        if event is None:
            return
        logger.debug("Transition %s for game %s", event.name, (game or old).id)

        if event == GameEvent.GAME_RESET:
            if self._store is not None:
                self._store.clear()
        elif game is not None:
            if record_history and game.status == GameStatus.PLAYING:
                self._history.push(game)
            if self._store is not None and game.status != GameStatus.SETUP:
                self._store.save(game)

        if self._on_event is not None:
            self._on_event(build_payload(event, old, game))
