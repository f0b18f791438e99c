"""
Topple - Game State Engine

The reducer: takes the current snapshot and an action and returns the
next snapshot. It is the only writer of game state.

Invalid actions never raise. They leave the snapshot unchanged and report
a Rejection reason in the TransitionResult, which callers are free to
ignore (game_reducer() drops it entirely). This keeps a stale or
out-of-sync UI from crashing the engine.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Mapping

from topple.engine.base import (
    PIECES_EXHAUSTED_PENALTY,
    TOPPLE_BONUS,
    TOPPLE_PENALTY,
    GameStatus,
    LogDraft,
    LogEntryType,
    Piece,
    PlayerColor,
    Position,
    ScoreEvent,
    ScoreReason,
    column_label,
    extend_log,
    new_id,
    row_label,
    utc_now,
)
from topple.engine.board import BoardEngine
from topple.engine.dice import DiceRoller, roll_die
from topple.engine.game import Game
from topple.engine.placement import PlacementRules
from topple.engine.players import Player, bonus_color, split_topple_penalty
from topple.engine.round import RoundEngine
from topple.engine.scoring import ScoringEngine
from topple.engine.validators import (
    GameConfig,
    validate_color,
    validate_die_value,
    validate_game_config,
)

logger = logging.getLogger(__name__)


class Rejection(Enum):
    """Why an action left the snapshot unchanged."""
    NO_GAME = "no_game"
    INVALID_CONFIG = "invalid_config"
    WRONG_STATUS = "wrong_status"
    NOT_FIRST_ROUND = "not_first_round"
    INVALID_ROLLS = "invalid_rolls"
    TIED_ROLL = "tied_roll"
    NO_CURRENT_PLAYER = "no_current_player"
    NO_DICE_ROLL = "no_dice_roll"
    UNKNOWN_PLAYER = "unknown_player"
    PLAYER_NOT_ACTIVE = "player_not_active"
    INVALID_COLOR = "invalid_color"
    NO_PIECES_LEFT = "no_pieces_left"
    ILLEGAL_POSITION = "illegal_position"
    ROUND_ALREADY_ENDED = "round_already_ended"
    UNKNOWN_ACTION = "unknown_action"


# =============================================================================
# ACTIONS
# =============================================================================

@dataclass(frozen=True)
class SetupGame:
    """Create a fresh game from a setup configuration."""
    config: GameConfig


@dataclass(frozen=True)
class InitialDiceRoll:
    """
    Decide who starts, from one roll per player.

    Attributes:
        rolls: Player id to rolled value
        player_order: Optional explicit turn order (player ids), applied
            whatever the roll outcome
    """
    rolls: Mapping[str, int]
    player_order: tuple[str, ...] | None = None


@dataclass(frozen=True)
class RollDice:
    """Roll the die for the current player."""


@dataclass(frozen=True)
class PlacePiece:
    """
    Place a piece for the active player.

    Attributes:
        position: Target cell
        player_id: Placing player
        color: Piece color (dual-color players pick one; defaults to primary)
    """
    position: Position
    player_id: str
    color: PlayerColor | None = None


@dataclass(frozen=True)
class CompleteTurn:
    """Pass the turn to the next player without placing."""


@dataclass(frozen=True)
class ToggleTopple:
    """Declare that player_id knocked the stacks over."""
    player_id: str


@dataclass(frozen=True)
class EndRound:
    """End the current round."""


@dataclass(frozen=True)
class StartNewRound:
    """Start the next round after a round end."""


@dataclass(frozen=True)
class ResetGame:
    """Discard the game."""


@dataclass(frozen=True)
class LoadGame:
    """Replace the snapshot wholesale (restore or undo/redo)."""
    game: Game


GameAction = (
    SetupGame
    | InitialDiceRoll
    | RollDice
    | PlacePiece
    | CompleteTurn
    | ToggleTopple
    | EndRound
    | StartNewRound
    | ResetGame
    | LoadGame
)


@dataclass(frozen=True)
class TransitionResult:
    """
    Outcome of applying an action.

    Attributes:
        game: The next snapshot (the input snapshot when rejected)
        rejection: Why the action was refused, None if it was applied
        errors: Validation messages for a refused setup
    """
    game: Game | None
    rejection: Rejection | None = None
    errors: tuple[str, ...] = ()

    @property
    def accepted(self) -> bool:
        return self.rejection is None


# =============================================================================
# ENGINE
# =============================================================================

class GameStateEngine:
    """
    Stateless reducer over game snapshots.

    All methods are class methods. State is passed in and returned,
    never stored.
    """

    @classmethod
    def apply(
        cls,
        state: Game | None,
        action: GameAction,
        roller: DiceRoller | None = None,
        now: datetime | None = None,
    ) -> TransitionResult:
        """
        Apply one action to a snapshot.

        Args:
            state: Current snapshot, or None when no game exists
            action: Action to apply
            roller: Die source for RollDice (defaults to roll_die)
            now: Current time (defaults to utc_now())

        Returns:
            TransitionResult with the next snapshot
        """
        now = now or utc_now()

        if isinstance(action, SetupGame):
            return cls.setup(state, action.config, now)
        if isinstance(action, LoadGame):
            return TransitionResult(action.game)
        if isinstance(action, ResetGame):
            return TransitionResult(None)

        if state is None:
            return cls._reject(state, action, Rejection.NO_GAME)

        if isinstance(action, InitialDiceRoll):
            return cls.initial_dice_roll(state, action, now)
        if isinstance(action, RollDice):
            return cls.roll_dice(state, roller or roll_die, now)
        if isinstance(action, PlacePiece):
            return cls.place_piece(state, action, now)
        if isinstance(action, CompleteTurn):
            return cls.complete_turn(state, now)
        if isinstance(action, ToggleTopple):
            return cls.toggle_topple(state, action.player_id, now)
        if isinstance(action, EndRound):
            return cls.end_round(state, now)
        if isinstance(action, StartNewRound):
            return cls.start_new_round(state, now)

        return cls._reject(state, action, Rejection.UNKNOWN_ACTION)

    @classmethod
    def _reject(
        cls,
        state: Game | None,
        action: object,
        reason: Rejection,
        errors: tuple[str, ...] = (),
    ) -> TransitionResult:
        logger.debug("Rejected %s: %s", type(action).__name__, reason.value)
        return TransitionResult(state, reason, errors)

    # -- Setup ---------------------------------------------------------------

    @classmethod
    def setup(cls, state: Game | None, config: GameConfig, now: datetime) -> TransitionResult:
        """
        Build a fresh game: scores at 0, full supplies, empty board, round 1.

        No player is active until the initial dice roll decides who starts.
        """
        errors = validate_game_config(config)
        if errors:
            return cls._reject(state, SetupGame(config), Rejection.INVALID_CONFIG, tuple(errors))

        players = tuple(
            Player.create(
                player_id=f"player-{i + 1}",
                name=p.name.strip(),
                color=validate_color(p.color),
                color2=validate_color(p.color2) if config.is_two_player and p.color2 else None,
                order=p.order,
            )
            for i, p in enumerate(config.players)
        )
        draft = LogDraft(type=LogEntryType.ROUND_START, message="Game started - Round 1")
        game = Game(
            id=new_id(),
            status=GameStatus.PLAYING,
            players=players,
            current_player_index=0,
            round_number=1,
            victory_points=config.victory_points,
            board=BoardEngine.create_empty_board(),
            created_at=now,
            updated_at=now,
            log=extend_log((), [draft], 1, now),
        )
        logger.info("Game %s set up with %d players", game.id, len(players))
        return TransitionResult(game)

    @classmethod
    def initial_dice_roll(
        cls,
        state: Game,
        action: InitialDiceRoll,
        now: datetime,
    ) -> TransitionResult:
        """
        Settle the starting player from one roll per player.

        A unique highest roll rotates the seating so the winner goes first
        and makes them active. On a tie nobody becomes active and the tied
        players roll again. An explicit player order is applied either way.
        """
        if state.status != GameStatus.PLAYING:
            return cls._reject(state, action, Rejection.WRONG_STATUS)
        if state.round_number != 1:
            return cls._reject(state, action, Rejection.NOT_FIRST_ROUND)

        rolls = dict(action.rolls)
        known_ids = {p.id for p in state.players}
        if not rolls or not set(rolls) <= known_ids:
            return cls._reject(state, action, Rejection.INVALID_ROLLS)
        if any(not isinstance(v, int) or not 1 <= v <= 6 for v in rolls.values()):
            return cls._reject(state, action, Rejection.INVALID_ROLLS)

        max_roll = max(rolls.values())
        leaders = [pid for pid, value in rolls.items() if value == max_roll]

        order = action.player_order
        order_applies = (
            order is not None
            and len(order) == len(state.players)
            and set(order) == known_ids
        )

        players = state.players
        if order_applies:
            players = tuple(state.get_player(pid).with_order(i) for i, pid in enumerate(order))
        elif len(leaders) == 1:
            seated = sorted(state.players, key=lambda p: p.order)
            start = next(i for i, p in enumerate(seated) if p.id == leaders[0])
            rotated = seated[start:] + seated[:start]
            players = tuple(p.with_order(i) for i, p in enumerate(rotated))

        if len(leaders) == 1:
            index = next(i for i, p in enumerate(players) if p.id == leaders[0])
            players = tuple(p.with_active(i == index) for i, p in enumerate(players))
            return TransitionResult(replace(
                state,
                players=players,
                current_player_index=index,
                updated_at=now,
            ))

        if order_applies:
            return TransitionResult(replace(state, players=players, updated_at=now))

        return cls._reject(state, action, Rejection.TIED_ROLL)

    # -- Turns ---------------------------------------------------------------

    @classmethod
    def roll_dice(cls, state: Game, roller: DiceRoller, now: datetime) -> TransitionResult:
        """Roll the die for the current player, re-activating them if needed."""
        if state.status != GameStatus.PLAYING:
            return cls._reject(state, RollDice(), Rejection.WRONG_STATUS)

        current = state.current_player
        if current is None:
            return cls._reject(state, RollDice(), Rejection.NO_CURRENT_PLAYER)

        players = state.players
        if not current.is_active:
            logger.debug("Re-activating current player %s before rolling", current.id)
            players = tuple(
                p.with_active(i == state.current_player_index)
                for i, p in enumerate(players)
            )

        value = validate_die_value(roller())
        draft = LogDraft(
            type=LogEntryType.DICE_ROLL,
            message=f"{current.name} rolled a {value}",
            player_id=current.id,
            player_name=current.name,
        )
        return TransitionResult(replace(
            state,
            players=players,
            dice_roll=value,
            dice_rolled_in_round=True,
            log=extend_log(state.log, [draft], state.round_number, now),
            updated_at=now,
        ))

    @classmethod
    def place_piece(cls, state: Game, action: PlacePiece, now: datetime) -> TransitionResult:
        """
        Place a piece, score it and pass the turn.

        When this placement uses up the last piece on the board (and no
        topple happened) the placing player loses 3 points and the round
        ends, possibly ending the game.
        """
        if state.status != GameStatus.PLAYING:
            return cls._reject(state, action, Rejection.WRONG_STATUS)
        if state.dice_roll is None:
            return cls._reject(state, action, Rejection.NO_DICE_ROLL)

        index = state.player_index(action.player_id)
        if index is None:
            return cls._reject(state, action, Rejection.UNKNOWN_PLAYER)

        player = state.players[index]
        if not player.is_active:
            return cls._reject(state, action, Rejection.PLAYER_NOT_ACTIVE)

        color = action.color or player.color
        if not player.owns_color(color):
            return cls._reject(state, action, Rejection.INVALID_COLOR)
        if player.pieces_left(color) == 0:
            return cls._reject(state, action, Rejection.NO_PIECES_LEFT)

        position = action.position
        if not PlacementRules.can_place_piece(position, state.dice_roll, state.board):
            return cls._reject(state, action, Rejection.ILLEGAL_POSITION)

        piece = Piece(
            id=new_id(),
            player_id=player.id,
            color=color,
            placed_at=now,
            round_number=state.round_number,
        )
        board = BoardEngine.place_piece(state.board, position, piece)
        events = list(ScoringEngine.calculate_score(
            board, position, player, state.board, color, state.round_number,
        ))

        gained = sum(event.points for event in events)
        updated = player.with_piece_used(color)
        if gained:
            updated = updated.with_points(gained, color)

        players = list(state.players)
        players[index] = updated

        drafts = [LogDraft(
            type=LogEntryType.PLACEMENT,
            message=(
                f"{player.name} placed a {color.value} piece at "
                f"row {row_label(position.row)}, column {column_label(position.col)}"
            ),
            player_id=player.id,
            player_name=player.name,
            position=position,
        )]
        drafts.extend(
            LogDraft(
                type=LogEntryType.SCORE,
                message=f"{player.name} scored {event.points} points ({event.details})",
                player_id=player.id,
                player_name=player.name,
                points=event.points,
            )
            for event in events
        )

        pieces_exhausted = all(p.pieces_remaining == 0 for p in players)
        if pieces_exhausted and not state.topple_occurred and state.dice_rolled_in_round:
            players[index] = players[index].with_points(-PIECES_EXHAUSTED_PENALTY, color)
            events.append(ScoreEvent(
                id=new_id(),
                player_id=player.id,
                points=-PIECES_EXHAUSTED_PENALTY,
                reason=ScoreReason.PIECES_EXHAUSTED_PENALTY,
                round_number=state.round_number,
                details="Last player when all pieces played",
                color=color,
            ))
            drafts.append(LogDraft(
                type=LogEntryType.SCORE,
                message=f"{player.name} lost {PIECES_EXHAUSTED_PENALTY} points (last player when all pieces played)",
                player_id=player.id,
                player_name=player.name,
                points=-PIECES_EXHAUSTED_PENALTY,
            ))

        next_index = (state.current_player_index + 1) % len(players)
        new_state = replace(
            state,
            board=board,
            players=tuple(p.with_active(i == next_index) for i, p in enumerate(players)),
            current_player_index=next_index,
            dice_roll=None,
            log=extend_log(state.log, drafts, state.round_number, now),
            score_events=state.score_events + tuple(events),
            updated_at=now,
        )

        if pieces_exhausted:
            new_state = RoundEngine.end_round(replace(new_state, status=GameStatus.ROUND_END), now)

        return TransitionResult(new_state)

    @classmethod
    def complete_turn(cls, state: Game, now: datetime) -> TransitionResult:
        """Pass the turn to the next player and discard any pending roll."""
        if state.status != GameStatus.PLAYING:
            return cls._reject(state, CompleteTurn(), Rejection.WRONG_STATUS)

        next_index = (state.current_player_index + 1) % len(state.players)
        return TransitionResult(replace(
            state,
            players=tuple(p.with_active(i == next_index) for i, p in enumerate(state.players)),
            current_player_index=next_index,
            dice_roll=None,
            updated_at=now,
        ))

    # -- Topple and rounds -----------------------------------------------------

    @classmethod
    def toggle_topple(cls, state: Game, player_id: str, now: datetime) -> TransitionResult:
        """
        Record a topple caused by player_id and end the round.

        The causing player loses 10 points; the player seated immediately
        before them gains 3.
        """
        action = ToggleTopple(player_id)
        if state.status != GameStatus.PLAYING:
            return cls._reject(state, action, Rejection.WRONG_STATUS)

        index = state.player_index(player_id)
        if index is None:
            return cls._reject(state, action, Rejection.UNKNOWN_PLAYER)

        players = list(state.players)
        causing = players[index]
        previous_index = (index - 1) % len(players)
        previous = players[previous_index]

        events: list[ScoreEvent] = []
        for color, delta in split_topple_penalty(causing, TOPPLE_PENALTY).items():
            causing = causing.with_points(delta, color)
            events.append(ScoreEvent(
                id=new_id(),
                player_id=causing.id,
                points=delta,
                reason=ScoreReason.TOPPLE_PENALTY,
                round_number=state.round_number,
                details="Caused a topple",
                color=color,
            ))
        players[index] = causing

        color = bonus_color(previous)
        players[previous_index] = previous.with_points(TOPPLE_BONUS, color)
        events.append(ScoreEvent(
            id=new_id(),
            player_id=previous.id,
            points=TOPPLE_BONUS,
            reason=ScoreReason.TOPPLE_BONUS,
            round_number=state.round_number,
            details=f"Bonus for {causing.name}'s topple",
            color=color,
        ))

        drafts = [
            LogDraft(
                type=LogEntryType.TOPPLE,
                message=f"{causing.name} caused a topple! (-{TOPPLE_PENALTY} points)",
                player_id=causing.id,
                player_name=causing.name,
                points=-TOPPLE_PENALTY,
            ),
            LogDraft(
                type=LogEntryType.SCORE,
                message=f"{previous.name} received +{TOPPLE_BONUS} bonus for topple",
                player_id=previous.id,
                player_name=previous.name,
                points=TOPPLE_BONUS,
            ),
        ]
        logger.info("Game %s: topple by %s in round %d", state.id, causing.id, state.round_number)

        toppled = replace(
            state,
            players=tuple(players),
            status=GameStatus.ROUND_END,
            dice_roll=None,
            topple_occurred=True,
            topple_player_id=causing.id,
            log=extend_log(state.log, drafts, state.round_number, now),
            score_events=state.score_events + tuple(events),
            updated_at=now,
        )
        return TransitionResult(RoundEngine.end_round(toppled, now))

    @classmethod
    def end_round(cls, state: Game, now: datetime) -> TransitionResult:
        """End a round in progress; a round can only end once."""
        if state.status == GameStatus.ROUND_END:
            return cls._reject(state, EndRound(), Rejection.ROUND_ALREADY_ENDED)
        if state.status != GameStatus.PLAYING:
            return cls._reject(state, EndRound(), Rejection.WRONG_STATUS)
        return TransitionResult(RoundEngine.end_round(state, now))

    @classmethod
    def start_new_round(cls, state: Game, now: datetime) -> TransitionResult:
        if state.status != GameStatus.ROUND_END:
            return cls._reject(state, StartNewRound(), Rejection.WRONG_STATUS)
        return TransitionResult(RoundEngine.start_new_round(state, now))


def apply_action(
    state: Game | None,
    action: GameAction,
    roller: DiceRoller | None = None,
) -> TransitionResult:
    """Apply an action, reporting any rejection reason."""
    return GameStateEngine.apply(state, action, roller)


def game_reducer(
    state: Game | None,
    action: GameAction,
    roller: DiceRoller | None = None,
) -> Game | None:
    """Apply an action; invalid actions return the snapshot unchanged."""
    return GameStateEngine.apply(state, action, roller).game
