"""
Topple - Game Engine Base Classes

This module defines the foundational constants, enums and value types used
throughout the game engine. All classes are immutable (frozen dataclasses)
so that every transition produces a new snapshot instead of editing one.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable
from uuid import uuid4


BOARD_SIZE = 5
PIECES_PER_COLOR = 12
MIN_PLAYERS = 2
MAX_PLAYERS = 4

ROW_COMPLETION_BASE = 3
TALL_STACK_THRESHOLD = 3
TOPPLE_PENALTY = 10
TOPPLE_BONUS = 3
PIECES_EXHAUSTED_PENALTY = 3


class PlayerColor(Enum):
    """The four physical piece colors."""
    PINK = "pink"
    YELLOW = "yellow"
    ORANGE = "orange"
    PURPLE = "purple"


class GameStatus(Enum):
    """Lifecycle states of a game snapshot."""
    SETUP = "setup"
    PLAYING = "playing"
    ROUND_END = "roundEnd"
    GAME_END = "gameEnd"


class ScoreReason(Enum):
    """Why a score event was awarded."""
    ROW_COMPLETION = "row_completion"            # Completed one or more lines
    COMPLETED_ROW_BONUS = "completed_row_bonus"  # Added to an already complete line
    TALL_STACK = "tall_stack"                    # 4th-or-later piece on a stack
    TOPPLE_PENALTY = "topple_penalty"            # Caused a topple (-10)
    TOPPLE_BONUS = "topple_bonus"                # Preceding player's bonus (+3)
    PIECES_EXHAUSTED_PENALTY = "pieces_exhausted_penalty"  # Last piece of the round (-3)


class LogEntryType(Enum):
    """Kinds of entries in the game log."""
    SCORE = "score"
    PLACEMENT = "placement"
    TOPPLE = "topple"
    ROUND_START = "round_start"
    ROUND_END = "round_end"
    DICE_ROLL = "dice_roll"
    GAME_END = "game_end"


def utc_now() -> datetime:
    """Current time in UTC, truncated to whole milliseconds."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def new_id() -> str:
    """Generate a unique identifier."""
    return str(uuid4())


def row_label(row: int) -> str:
    """Board row label (A-E)."""
    return chr(ord("A") + row)


def column_label(col: int) -> str:
    """Board column label (1-5)."""
    return str(col + 1)


@dataclass(frozen=True)
class Position:
    """
    A board coordinate.

    Attributes:
        row: Row index, 0 (row A) to 4 (row E)
        col: Column index, 0 (column 1) to 4 (column 5)
    """
    row: int
    col: int

    @property
    def in_bounds(self) -> bool:
        """True if the position lies on the 5x5 board."""
        return 0 <= self.row < BOARD_SIZE and 0 <= self.col < BOARD_SIZE

    @property
    def label(self) -> str:
        """Human-readable label such as 'C3'."""
        return f"{row_label(self.row)}{column_label(self.col)}"


@dataclass(frozen=True)
class Piece:
    """
    A single placed piece.

    Attributes:
        id: Unique piece identifier
        player_id: Owner of the piece
        color: Color of the piece (may be the owner's second color)
        placed_at: When the piece was placed
        round_number: Round in which the piece was placed
    """
    id: str
    player_id: str
    color: PlayerColor
    placed_at: datetime
    round_number: int

    def matches(self, player_id: str, color: PlayerColor) -> bool:
        """True if the piece belongs to player_id and has the given color."""
        return self.player_id == player_id and self.color == color


@dataclass(frozen=True)
class ScoreEvent:
    """
    A single award or deduction of points.

    Attributes:
        id: Unique event identifier
        player_id: Player whose score changed
        points: Signed point delta
        reason: Why the points were awarded
        round_number: Round in which the event happened
        details: Human-readable description
        color: Color ledger the points were booked to
    """
    id: str
    player_id: str
    points: int
    reason: ScoreReason
    round_number: int
    details: str = ""
    color: PlayerColor | None = None


@dataclass(frozen=True)
class GameLogEntry:
    """
    One line of the append-only audit trail.

    Attributes:
        id: Unique entry identifier
        type: Kind of entry
        message: Human-readable message
        timestamp: When the entry was written (strictly increasing)
        round_number: Round the entry belongs to
        sequence: Position of the entry in the log
        player_id: Player the entry concerns, if any
        player_name: Name of that player, if any
        points: Point delta, for score and topple entries
        position: Board position, for placement entries
    """
    id: str
    type: LogEntryType
    message: str
    timestamp: datetime
    round_number: int
    sequence: int
    player_id: str | None = None
    player_name: str | None = None
    points: int | None = None
    position: Position | None = None


@dataclass(frozen=True)
class LogDraft:
    """A log entry before it has been given an id, timestamp and sequence."""
    type: LogEntryType
    message: str
    player_id: str | None = None
    player_name: str | None = None
    points: int | None = None
    position: Position | None = None


_TICK = timedelta(milliseconds=1)


def extend_log(
    log: tuple[GameLogEntry, ...],
    drafts: list[LogDraft],
    round_number: int,
    now: datetime | None = None,
    ids: Callable[[], str] = new_id,
) -> tuple[GameLogEntry, ...]:
    """
    Append drafts to a log, assigning ids, sequence numbers and timestamps.

    Timestamps are strictly increasing at millisecond granularity: every
    entry is at least one millisecond after the one before it, so entries
    written within the same clock tick keep their order.

    Args:
        log: Existing log
        drafts: Entries to append, in order
        round_number: Round the new entries belong to
        now: Current time (defaults to utc_now())
        ids: Zero-argument callable producing unique ids

    Returns:
        The new log
    """
    timestamp = now or utc_now()
    entries = list(log)
    for draft in drafts:
        if entries and timestamp <= entries[-1].timestamp:
            timestamp = entries[-1].timestamp + _TICK
        entries.append(GameLogEntry(
            id=ids(),
            type=draft.type,
            message=draft.message,
            timestamp=timestamp,
            round_number=round_number,
            sequence=len(entries),
            player_id=draft.player_id,
            player_name=draft.player_name,
            points=draft.points,
            position=draft.position,
        ))
    return tuple(entries)
