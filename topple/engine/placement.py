"""
Topple - Placement Rules

Which cells a piece may go on for a given die value:

- 1: only the centre cell
- 2-5: every cell whose level equals the die value
- 6: any cell
"""

from topple.engine.base import BOARD_SIZE, Position
from topple.engine.board import CENTER, Board


class PlacementRules:
    """Stateless placement validation."""

    WILD_VALUE = 6
    CENTER_VALUE = 1

    @classmethod
    def get_valid_cells(cls, dice_value: int, board: Board) -> list[Position]:
        """
        List the legal target cells for a die value.

        Args:
            dice_value: Rolled value (1-6)
            board: Current board

        Returns:
            Legal positions in row-major order (empty for values outside 1-6)
        """
        if dice_value == cls.CENTER_VALUE:
            return [CENTER]

        if dice_value == cls.WILD_VALUE:
            return [Position(row, col) for row in range(BOARD_SIZE) for col in range(BOARD_SIZE)]

        if 2 <= dice_value <= 5:
            return [cell.position for cell in board if cell.level == dice_value]

        return []

    @classmethod
    def can_place_piece(cls, position: Position, dice_value: int, board: Board) -> bool:
        """True if the position is on the board and legal for the die value."""
        if not position.in_bounds:
            return False
        return position in cls.get_valid_cells(dice_value, board)
