"""
Topple - Scoring Engine

Computes the score events triggered by a single placement.

Scoring rules:
- A line (any of the 5 rows, 5 columns or 2 diagonals) is complete when
  all five of its cells hold at least one piece, whatever the colors.
- Newly completed lines score 3 points each plus 1 point per cell whose
  top piece belongs to the acting player in the active color. Lines
  completed by the same placement are summed into one event.
- Placing onto a line that was already complete scores 1 point per
  matching top piece in that line, one event per line.
- Placing a 4th-or-later piece on a stack scores 1 point per matching
  piece anywhere in that stack.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from topple.engine.base import (
    BOARD_SIZE,
    ROW_COMPLETION_BASE,
    TALL_STACK_THRESHOLD,
    PlayerColor,
    Position,
    ScoreEvent,
    ScoreReason,
    column_label,
    new_id,
    row_label,
)
from topple.engine.board import Board
from topple.engine.players import Player


class LineDirection(Enum):
    """Orientation of a scoring line."""
    ROW = "row"
    COLUMN = "column"
    DIAGONAL = "diagonal"


@dataclass(frozen=True)
class Line:
    """
    One of the 12 candidate 5-cell lines.

    Attributes:
        identifier: Stable key, e.g. "row-0" or "diagonal-1"
        direction: Row, column or diagonal
        positions: The five cells of the line
        label: Human-readable name, e.g. "row A" or "column 3"
    """
    identifier: str
    direction: LineDirection
    positions: tuple[Position, ...]
    label: str

    def __contains__(self, position: object) -> bool:
        return position in self.positions


def _build_lines() -> tuple[Line, ...]:
    lines = [
        Line(
            identifier=f"row-{row}",
            direction=LineDirection.ROW,
            positions=tuple(Position(row, col) for col in range(BOARD_SIZE)),
            label=f"row {row_label(row)}",
        )
        for row in range(BOARD_SIZE)
    ]
    lines.extend(
        Line(
            identifier=f"column-{col}",
            direction=LineDirection.COLUMN,
            positions=tuple(Position(row, col) for row in range(BOARD_SIZE)),
            label=f"column {column_label(col)}",
        )
        for col in range(BOARD_SIZE)
    )
    lines.append(Line(
        identifier="diagonal-1",
        direction=LineDirection.DIAGONAL,
        positions=tuple(Position(i, i) for i in range(BOARD_SIZE)),
        label="diagonal (top-left to bottom-right)",
    ))
    lines.append(Line(
        identifier="diagonal-2",
        direction=LineDirection.DIAGONAL,
        positions=tuple(Position(i, BOARD_SIZE - 1 - i) for i in range(BOARD_SIZE)),
        label="diagonal (top-right to bottom-left)",
    ))
    return tuple(lines)


ALL_LINES: tuple[Line, ...] = _build_lines()


class ScoringEngine:
    """
    Stateless scoring engine.

    All methods are class methods operating on immutable boards.
    """

    LINES: ClassVar[tuple[Line, ...]] = ALL_LINES

    @classmethod
    def is_line_complete(cls, board: Board, line: Line) -> bool:
        return all(not board.cell(pos).is_empty for pos in line.positions)

    @classmethod
    def completed_lines(cls, board: Board) -> tuple[Line, ...]:
        """All lines that are complete on the board, in row/column/diagonal order."""
        return tuple(line for line in cls.LINES if cls.is_line_complete(board, line))

    @classmethod
    def count_top_pieces(
        cls,
        board: Board,
        line: Line,
        player_id: str,
        color: PlayerColor,
    ) -> int:
        """Count cells of the line whose top piece matches (player_id, color)."""
        count = 0
        for pos in line.positions:
            top = board.cell(pos).top_piece
            if top is not None and top.matches(player_id, color):
                count += 1
        return count

    @classmethod
    def calculate_score(
        cls,
        board: Board,
        position: Position,
        player: Player,
        previous_board: Board,
        active_color: PlayerColor | None = None,
        round_number: int = 0,
    ) -> tuple[ScoreEvent, ...]:
        """
        Score a single placement.

        Args:
            board: Board after the placement
            position: Where the piece was placed
            player: The acting player
            previous_board: Board before the placement
            active_color: Color of the placed piece (defaults to the
                player's primary color)
            round_number: Round the events belong to

        Returns:
            Score events in the order row completion, completed-row
            bonuses, tall stack. Empty if the placement scores nothing.
        """
        color = active_color or player.color
        events: list[ScoreEvent] = []

        current = cls.completed_lines(board)
        previous_ids = {line.identifier for line in cls.completed_lines(previous_board)}
        newly_completed = [line for line in current if line.identifier not in previous_ids]

        if newly_completed:
            total = 0
            for line in newly_completed:
                total += ROW_COMPLETION_BASE + cls.count_top_pieces(board, line, player.id, color)
            labels = ", ".join(line.label for line in newly_completed)
            events.append(ScoreEvent(
                id=new_id(),
                player_id=player.id,
                points=total,
                reason=ScoreReason.ROW_COMPLETION,
                round_number=round_number,
                details=f"Completed {labels}",
                color=color,
            ))

        for line in current:
            if line.identifier not in previous_ids or position not in line:
                continue
            points = cls.count_top_pieces(board, line, player.id, color)
            if points > 0:
                events.append(ScoreEvent(
                    id=new_id(),
                    player_id=player.id,
                    points=points,
                    reason=ScoreReason.COMPLETED_ROW_BONUS,
                    round_number=round_number,
                    details=f"Added to completed {line.label}",
                    color=color,
                ))

        if previous_board.cell(position).height >= TALL_STACK_THRESHOLD:
            stack = board.cell(position).stack
            points = sum(1 for piece in stack if piece.matches(player.id, color))
            if points > 0:
                events.append(ScoreEvent(
                    id=new_id(),
                    player_id=player.id,
                    points=points,
                    reason=ScoreReason.TALL_STACK,
                    round_number=round_number,
                    details=f"Stack has {len(stack)} pieces",
                    color=color,
                ))

        return tuple(events)
