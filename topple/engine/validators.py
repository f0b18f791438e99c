"""
Topple - Setup Validation

Validates a game configuration before any snapshot is created. The
individual validators either return normalized data or raise a
descriptive ValueError; validate_game_config() runs them all and
collects every message so the setup form can show them together.
"""

from dataclasses import dataclass, field

from topple.engine.base import MAX_PLAYERS, MIN_PLAYERS, PlayerColor


@dataclass(frozen=True)
class PlayerConfig:
    """
    Setup entry for one player.

    Attributes:
        name: Display name
        color: Primary color (enum or its string value)
        color2: Second color, 2-player games only
        order: Seat in turn order (0-3)
    """
    name: str
    color: PlayerColor | str
    color2: PlayerColor | str | None = None
    order: int = 0


@dataclass(frozen=True)
class GameConfig:
    """
    Setup configuration for a game.

    Attributes:
        player_count: Number of players (2-4)
        players: One entry per player
        victory_points: Score needed to win
    """
    player_count: int
    players: tuple[PlayerConfig, ...] = field(default_factory=tuple)
    victory_points: int = 100

    @property
    def is_two_player(self) -> bool:
        return self.player_count == 2


def validate_color(value: PlayerColor | str, label: str = "color") -> PlayerColor:
    """
    Validate and normalize a color.

    Raises:
        ValueError: If the value is not one of the four piece colors
    """
    if isinstance(value, PlayerColor):
        return value
    try:
        return PlayerColor(value)
    except ValueError:
        raise ValueError(f"Invalid {label} {value}") from None


def validate_player_count(count: int) -> int:
    """
    Validate number of players.

    Raises:
        ValueError: If count is not 2-4
    """
    if not isinstance(count, int) or isinstance(count, bool):
        raise ValueError(f"Player count must be an integer, got {type(count).__name__}")

    if not (MIN_PLAYERS <= count <= MAX_PLAYERS):
        raise ValueError(f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}")

    return count


def validate_victory_points(points: int) -> int:
    """
    Validate the victory point target.

    Raises:
        ValueError: If points is not a positive integer
    """
    if not isinstance(points, int) or isinstance(points, bool) or points <= 0:
        raise ValueError("Victory points must be a positive integer")

    return points


def validate_order(order: int) -> int:
    """
    Validate a turn-order seat.

    Raises:
        ValueError: If order is not 0-3
    """
    if not isinstance(order, int) or not (0 <= order < MAX_PLAYERS):
        raise ValueError(f"Order must be between 0 and {MAX_PLAYERS - 1}")

    return order


def validate_die_value(value: int) -> int:
    """
    Validate a single D6 value.

    Raises:
        ValueError: If value is not 1-6
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Die value must be an integer, got {type(value).__name__}")
    if not (1 <= value <= 6):
        raise ValueError(f"Die value must be between 1 and 6, got {value}")
    return value


def _player_errors(player: PlayerConfig, index: int, two_player: bool) -> list[str]:
    prefix = f"Player {index + 1}"
    errors: list[str] = []

    if not player.name or not player.name.strip():
        errors.append(f"{prefix}: Name is required")

    for check, args in (
        (validate_color, (player.color,)),
        (validate_order, (player.order,)),
    ):
        try:
            check(*args)
        except ValueError as exc:
            errors.append(f"{prefix}: {exc}")

    if player.color2 is not None:
        if not two_player:
            errors.append(f"{prefix}: Second color is only allowed in 2-player games")
        else:
            try:
                color2 = validate_color(player.color2, "second color")
            except ValueError as exc:
                errors.append(f"{prefix}: {exc}")
            else:
                if color2.value == getattr(player.color, "value", player.color):
                    errors.append(f"{prefix}: Primary and secondary colors must be different")

    return errors


def validate_game_config(config: GameConfig) -> list[str]:
    """
    Validate a full game configuration.

    Checks player count, that the player list matches it, the victory
    points, every player entry, and that colors and turn orders are not
    shared between players.

    Args:
        config: Configuration to check

    Returns:
        Human-readable errors; empty if the configuration is valid
    """
    errors: list[str] = []

    try:
        validate_player_count(config.player_count)
    except ValueError as exc:
        errors.append(str(exc))

    if len(config.players) != config.player_count:
        errors.append(
            f"Players list length ({len(config.players)}) must match "
            f"player count ({config.player_count})"
        )

    try:
        validate_victory_points(config.victory_points)
    except ValueError as exc:
        errors.append(str(exc))

    used_colors: set[str] = set()
    used_orders: set[int] = set()
    for i, player in enumerate(config.players):
        errors.extend(_player_errors(player, i, config.is_two_player))

        colors = [player.color]
        if config.is_two_player and player.color2 is not None:
            colors.append(player.color2)
        for color in colors:
            key = getattr(color, "value", color)
            if key in used_colors:
                errors.append(f"Player {i + 1}: Color {key} is already used")
            used_colors.add(key)

        if player.order in used_orders:
            errors.append(f"Player {i + 1}: Order {player.order} is already used")
        used_orders.add(player.order)

    return errors
