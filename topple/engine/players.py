"""
Topple - Players

A player either controls one color (3-4 player games, or a 2-player game
without second colors) or two colors (the 2-player dual-color variant).
The two cases are separate mode types so that code branches on the mode
explicitly instead of checking optional fields.
"""

from dataclasses import dataclass, replace

from topple.engine.base import PIECES_PER_COLOR, PlayerColor


@dataclass(frozen=True)
class SingleColorMode:
    """
    One color, one score, one piece supply.

    Attributes:
        color: The player's color
        score: Cumulative game score
        pieces_remaining: Pieces left to place this round
    """
    color: PlayerColor
    score: int = 0
    pieces_remaining: int = PIECES_PER_COLOR


@dataclass(frozen=True)
class DualColorMode:
    """
    Two colors, each with its own score ledger and piece supply.

    Attributes:
        color_a: Primary color
        color_b: Second color
        score_a: Points booked to the primary color
        score_b: Points booked to the second color
        pieces_a: Primary-color pieces left this round
        pieces_b: Second-color pieces left this round
    """
    color_a: PlayerColor
    color_b: PlayerColor
    score_a: int = 0
    score_b: int = 0
    pieces_a: int = PIECES_PER_COLOR
    pieces_b: int = PIECES_PER_COLOR

    def __post_init__(self) -> None:
        if self.color_a == self.color_b:
            raise ValueError("Dual-color player needs two different colors.")


PlayerMode = SingleColorMode | DualColorMode


@dataclass(frozen=True)
class Player:
    """
    Immutable player record.

    Attributes:
        id: Unique player identifier
        name: Display name
        mode: Single- or dual-color ledger
        order: Seat in turn order (0-based)
        is_active: True for the player whose turn it is
    """
    id: str
    name: str
    mode: PlayerMode
    order: int = 0
    is_active: bool = False

    @classmethod
    def create(
        cls,
        player_id: str,
        name: str,
        color: PlayerColor,
        color2: PlayerColor | None = None,
        order: int = 0,
    ) -> "Player":
        """Create a player with a fresh ledger."""
        if color2 is None:
            mode: PlayerMode = SingleColorMode(color=color)
        else:
            mode = DualColorMode(color_a=color, color_b=color2)
        return cls(id=player_id, name=name, mode=mode, order=order)

    # -- Read access -------------------------------------------------------

    @property
    def is_dual_color(self) -> bool:
        return isinstance(self.mode, DualColorMode)

    @property
    def color(self) -> PlayerColor:
        """Primary color."""
        if isinstance(self.mode, DualColorMode):
            return self.mode.color_a
        return self.mode.color

    @property
    def color2(self) -> PlayerColor | None:
        """Second color, dual-color mode only."""
        if isinstance(self.mode, DualColorMode):
            return self.mode.color_b
        return None

    @property
    def colors(self) -> tuple[PlayerColor, ...]:
        if isinstance(self.mode, DualColorMode):
            return (self.mode.color_a, self.mode.color_b)
        return (self.mode.color,)

    @property
    def score(self) -> int:
        if isinstance(self.mode, DualColorMode):
            return self.mode.score_a + self.mode.score_b
        return self.mode.score

    @property
    def pieces_remaining(self) -> int:
        if isinstance(self.mode, DualColorMode):
            return self.mode.pieces_a + self.mode.pieces_b
        return self.mode.pieces_remaining

    @property
    def total_pieces(self) -> int:
        return PIECES_PER_COLOR * len(self.colors)

    @property
    def score_by_color(self) -> dict[PlayerColor, int] | None:
        """Per-color scores, or None in single-color mode."""
        if isinstance(self.mode, DualColorMode):
            return {self.mode.color_a: self.mode.score_a, self.mode.color_b: self.mode.score_b}
        return None

    @property
    def pieces_remaining_by_color(self) -> dict[PlayerColor, int] | None:
        """Per-color piece supply, or None in single-color mode."""
        if isinstance(self.mode, DualColorMode):
            return {self.mode.color_a: self.mode.pieces_a, self.mode.color_b: self.mode.pieces_b}
        return None

    def owns_color(self, color: PlayerColor) -> bool:
        return color in self.colors

    def pieces_left(self, color: PlayerColor) -> int:
        """Pieces of the given color still to be placed (0 for foreign colors)."""
        if isinstance(self.mode, DualColorMode):
            if color == self.mode.color_a:
                return self.mode.pieces_a
            if color == self.mode.color_b:
                return self.mode.pieces_b
            return 0
        return self.mode.pieces_remaining if color == self.mode.color else 0

    # -- Transitions -------------------------------------------------------

    def with_points(self, points: int, color: PlayerColor | None = None) -> "Player":
        """
        Book points to the player.

        Args:
            points: Signed point delta
            color: Ledger to book to (defaults to the primary color)

        Returns:
            Updated player

        Raises:
            ValueError: If the player does not own the color
        """
        color = color or self.color
        if not self.owns_color(color):
            raise ValueError(f"Player {self.id} does not own color {color.value}.")

        if isinstance(self.mode, DualColorMode):
            if color == self.mode.color_a:
                mode: PlayerMode = replace(self.mode, score_a=self.mode.score_a + points)
            else:
                mode = replace(self.mode, score_b=self.mode.score_b + points)
        else:
            mode = replace(self.mode, score=self.mode.score + points)
        return replace(self, mode=mode)

    def with_piece_used(self, color: PlayerColor) -> "Player":
        """
        Take one piece of the given color from the player's supply.

        Raises:
            ValueError: If no piece of that color is left
        """
        if self.pieces_left(color) <= 0:
            raise ValueError(f"Player {self.id} has no {color.value} pieces left.")

        if isinstance(self.mode, DualColorMode):
            if color == self.mode.color_a:
                mode: PlayerMode = replace(self.mode, pieces_a=self.mode.pieces_a - 1)
            else:
                mode = replace(self.mode, pieces_b=self.mode.pieces_b - 1)
        else:
            mode = replace(self.mode, pieces_remaining=self.mode.pieces_remaining - 1)
        return replace(self, mode=mode)

    def with_pieces_reset(self) -> "Player":
        """Refill every color's supply for a new round. Scores are kept."""
        if isinstance(self.mode, DualColorMode):
            mode: PlayerMode = replace(self.mode, pieces_a=PIECES_PER_COLOR, pieces_b=PIECES_PER_COLOR)
        else:
            mode = replace(self.mode, pieces_remaining=PIECES_PER_COLOR)
        return replace(self, mode=mode)

    def with_active(self, is_active: bool) -> "Player":
        if self.is_active == is_active:
            return self
        return replace(self, is_active=is_active)

    def with_order(self, order: int) -> "Player":
        if self.order == order:
            return self
        return replace(self, order=order)


def split_topple_penalty(player: Player, penalty: int) -> dict[PlayerColor, int]:
    """
    Distribute a topple penalty over the player's color ledgers.

    Single-color players take the whole penalty on their color. Dual-color
    players have it split in proportion to each color's current share of
    the (positive) score, rounding half up on the primary color; with no
    positive score on either color the primary color takes all of it.

    Args:
        player: The player who caused the topple
        penalty: Positive number of points to deduct

    Returns:
        Mapping of color to (negative) delta, omitting zero entries
    """
    if not isinstance(player.mode, DualColorMode):
        return {player.color: -penalty}

    mode = player.mode
    share_a = max(0, mode.score_a)
    share_b = max(0, mode.score_b)
    total = share_a + share_b
    if total == 0:
        return {mode.color_a: -penalty}

    penalty_a = (2 * share_a * penalty + total) // (2 * total)
    penalty_b = penalty - penalty_a
    deltas = {mode.color_a: -penalty_a, mode.color_b: -penalty_b}
    return {color: delta for color, delta in deltas.items() if delta != 0}


def bonus_color(player: Player) -> PlayerColor:
    """Color that receives a topple bonus: the higher-scoring one (primary on ties)."""
    if isinstance(player.mode, DualColorMode) and player.mode.score_b > player.mode.score_a:
        return player.mode.color_b
    return player.color
