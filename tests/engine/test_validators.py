"""
Tests for setup validation.
"""

import pytest

from topple.engine.base import PlayerColor
from topple.engine.validators import (
    GameConfig,
    PlayerConfig,
    validate_color,
    validate_die_value,
    validate_game_config,
    validate_order,
    validate_player_count,
    validate_victory_points,
)


class TestValidators:
    """Tests for the individual validators."""

    def test_validate_color_accepts_enum_and_string(self):
        """Test validate color accepts enum and string."""
        assert validate_color(PlayerColor.PINK) is PlayerColor.PINK
        assert validate_color("purple") is PlayerColor.PURPLE

    def test_validate_color_invalid(self):
        """Test rejecting an unknown color."""
        with pytest.raises(ValueError, match="Invalid color green"):
            validate_color("green")

    @pytest.mark.parametrize("count", [2, 3, 4])
    def test_player_count_valid(self, count):
        """Test valid player counts."""
        assert validate_player_count(count) == count

    @pytest.mark.parametrize("count", [0, 1, 5])
    def test_player_count_range(self, count):
        """Test player count outside two to four."""
        with pytest.raises(ValueError, match="between 2 and 4"):
            validate_player_count(count)

    def test_player_count_type(self):
        """Test non-integer player count."""
        with pytest.raises(ValueError, match="must be an integer"):
            validate_player_count("2")

    @pytest.mark.parametrize("points", [0, -5, 1.5, True])
    def test_victory_points_invalid(self, points):
        """Test non-positive victory points."""
        with pytest.raises(ValueError, match="positive integer"):
            validate_victory_points(points)

    def test_order_range(self):
        """Test order outside the player range."""
        assert validate_order(3) == 3
        with pytest.raises(ValueError, match="between 0 and 3"):
            validate_order(4)

    def test_die_value(self):
        """Test die value bounds."""
        assert validate_die_value(6) == 6
        with pytest.raises(ValueError, match="between 1 and 6"):
            validate_die_value(0)
        with pytest.raises(ValueError, match="must be an integer"):
            validate_die_value(2.0)


class TestValidateGameConfig:
    """Tests for validate_game_config()."""

    def test_valid_configs(self, two_player_config, three_player_config, dual_color_config):
        """Test valid setup configurations."""
        assert validate_game_config(two_player_config) == []
        assert validate_game_config(three_player_config) == []
        assert validate_game_config(dual_color_config) == []

    def test_too_many_players(self):
        """Test too many players."""
        players = tuple(PlayerConfig(f"P{i}", color, order=i) for i, color in enumerate(PlayerColor))
        config = GameConfig(player_count=5, players=players + (PlayerConfig("P5", "pink", order=3),))
        errors = validate_game_config(config)
        assert "Player count must be between 2 and 4" in errors

    def test_list_length_mismatch(self, two_player_config):
        """Test list length mismatch."""
        config = GameConfig(player_count=3, players=two_player_config.players)
        assert "Players list length (2) must match player count (3)" in validate_game_config(config)

    def test_victory_points(self, two_player_config):
        """Test victory points validation."""
        config = GameConfig(player_count=2, players=two_player_config.players, victory_points=0)
        assert "Victory points must be a positive integer" in validate_game_config(config)

    def test_blank_name(self):
        """Test blank name."""
        config = GameConfig(player_count=2, players=(
            PlayerConfig("  ", "pink", order=0),
            PlayerConfig("Bob", "yellow", order=1),
        ))
        assert validate_game_config(config) == ["Player 1: Name is required"]

    def test_invalid_color(self):
        """Test invalid color."""
        config = GameConfig(player_count=2, players=(
            PlayerConfig("Alice", "green", order=0),
            PlayerConfig("Bob", "yellow", order=1),
        ))
        assert "Player 1: Invalid color green" in validate_game_config(config)

    def test_duplicate_color(self):
        """Test duplicate color."""
        config = GameConfig(player_count=2, players=(
            PlayerConfig("Alice", "pink", order=0),
            PlayerConfig("Bob", PlayerColor.PINK, order=1),
        ))
        assert validate_game_config(config) == ["Player 2: Color pink is already used"]

    def test_second_color_clashes_with_other_player(self):
        """Test second color clashes with other player."""
        config = GameConfig(player_count=2, players=(
            PlayerConfig("Alice", "pink", color2="yellow", order=0),
            PlayerConfig("Bob", "yellow", order=1),
        ))
        assert "Player 2: Color yellow is already used" in validate_game_config(config)

    def test_second_color_same_as_primary(self):
        """Test second color same as primary."""
        config = GameConfig(player_count=2, players=(
            PlayerConfig("Alice", "pink", color2=PlayerColor.PINK, order=0),
            PlayerConfig("Bob", "yellow", order=1),
        ))
        errors = validate_game_config(config)
        assert "Player 1: Primary and secondary colors must be different" in errors

    def test_second_color_outside_two_player(self, three_player_config):
        """Test second color outside two player."""
        players = list(three_player_config.players)
        players[0] = PlayerConfig("Alice", "pink", color2="purple", order=0)
        config = GameConfig(player_count=3, players=tuple(players))
        assert validate_game_config(config) == [
            "Player 1: Second color is only allowed in 2-player games",
        ]

    def test_invalid_second_color(self):
        """Test invalid second color."""
        config = GameConfig(player_count=2, players=(
            PlayerConfig("Alice", "pink", color2="teal", order=0),
            PlayerConfig("Bob", "yellow", order=1),
        ))
        assert "Player 1: Invalid second color teal" in validate_game_config(config)

    def test_duplicate_order(self):
        """Test duplicate order."""
        config = GameConfig(player_count=2, players=(
            PlayerConfig("Alice", "pink", order=1),
            PlayerConfig("Bob", "yellow", order=1),
        ))
        assert validate_game_config(config) == ["Player 2: Order 1 is already used"]

    def test_order_out_of_range(self):
        """Test order out of range."""
        config = GameConfig(player_count=2, players=(
            PlayerConfig("Alice", "pink", order=0),
            PlayerConfig("Bob", "yellow", order=7),
        ))
        assert "Player 2: Order must be between 0 and 3" in validate_game_config(config)

    def test_collects_all_errors(self):
        """Test every error is reported at once."""
        config = GameConfig(player_count=2, players=(
            PlayerConfig("", "green", order=0),
            PlayerConfig("", "yellow", order=0),
        ), victory_points=-1)
        assert len(validate_game_config(config)) == 5
