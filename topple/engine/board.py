"""
Topple - Board Model

The 5x5 graduated board. Every cell has a fixed height tier ("level")
taken from a static layout, and holds a stack of pieces that only grows
during a round. Boards are immutable: placing a piece returns a new board.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Iterator

from topple.engine.base import BOARD_SIZE, Piece, PlayerColor, Position


LEVEL_LAYOUT: tuple[tuple[int, ...], ...] = (
    (5, 4, 3, 4, 5),
    (4, 3, 2, 3, 4),
    (3, 2, 1, 2, 3),
    (4, 3, 2, 3, 4),
    (5, 4, 3, 4, 5),
)

CENTER = Position(2, 2)


@dataclass(frozen=True)
class Cell:
    """
    One board cell.

    Attributes:
        row: Row index (0-4)
        col: Column index (0-4)
        level: Fixed height tier (1-5)
        stack: Pieces on the cell, bottom to top, in placement order
    """
    row: int
    col: int
    level: int
    stack: tuple[Piece, ...] = ()

    def __post_init__(self) -> None:
        if not (0 <= self.row < BOARD_SIZE and 0 <= self.col < BOARD_SIZE):
            raise ValueError(f"Cell ({self.row}, {self.col}) is off the board")
        if not (1 <= self.level <= 5):
            raise ValueError(f"Invalid level {self.level} for cell ({self.row}, {self.col})")

    @property
    def position(self) -> Position:
        return Position(self.row, self.col)

    @property
    def height(self) -> int:
        return len(self.stack)

    @property
    def is_empty(self) -> bool:
        return not self.stack

    @property
    def top_piece(self) -> Piece | None:
        """Most recently placed piece, or None for an empty cell."""
        return self.stack[-1] if self.stack else None


def _empty_cells() -> tuple[tuple[Cell, ...], ...]:
    return tuple(
        tuple(Cell(row=row, col=col, level=LEVEL_LAYOUT[row][col]) for col in range(BOARD_SIZE))
        for row in range(BOARD_SIZE)
    )


@dataclass(frozen=True)
class Board:
    """
    Immutable 5x5 board.

    Attributes:
        cells: 5 rows of 5 cells
        level_layout: The static level template (read access only)
    """
    cells: tuple[tuple[Cell, ...], ...] = field(default_factory=_empty_cells)
    level_layout: tuple[tuple[int, ...], ...] = LEVEL_LAYOUT

    def __post_init__(self) -> None:
        """Validate board structure."""
        if len(self.cells) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in self.cells):
            raise ValueError(f"Board must have {BOARD_SIZE}x{BOARD_SIZE} cells")

    def cell(self, position: Position) -> Cell:
        return self.cells[position.row][position.col]

    def __iter__(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def count_pieces(self, player_id: str, color: PlayerColor | None = None) -> int:
        """Count a player's pieces on the board, optionally of one color only."""
        return sum(
            1
            for cell in self
            for piece in cell.stack
            if piece.player_id == player_id and (color is None or piece.color == color)
        )

    @property
    def piece_count(self) -> int:
        return sum(cell.height for cell in self)


class BoardEngine:
    """Stateless board operations."""

    SIZE: ClassVar[int] = BOARD_SIZE

    @classmethod
    def create_empty_board(cls) -> Board:
        """Create a board with empty stacks and the fixed level layout."""
        return Board()

    @classmethod
    def level_layout(cls) -> tuple[tuple[int, ...], ...]:
        return LEVEL_LAYOUT

    @classmethod
    def place_piece(cls, board: Board, position: Position, piece: Piece) -> Board:
        """
        Append a piece to the stack at a position.

        No legality check is done here; callers validate the placement
        first. The input board is left untouched.

        Args:
            board: Board before the placement
            position: Target cell
            piece: Piece to place

        Returns:
            New board with the piece on top of the target stack

        Raises:
            ValueError: If the position is off the board
        """
        if not position.in_bounds:
            raise ValueError(f"Position ({position.row}, {position.col}) is off the board")

        target = board.cell(position)
        new_cell = Cell(
            row=target.row,
            col=target.col,
            level=target.level,
            stack=target.stack + (piece,),
        )
        new_row = list(board.cells[position.row])
        new_row[position.col] = new_cell
        new_cells = list(board.cells)
        new_cells[position.row] = tuple(new_row)
        return Board(cells=tuple(new_cells), level_layout=board.level_layout)
