"""Tests for the models module."""

import pytest

from team_balancer.exceptions import ConfigurationError
from team_balancer.models import Constraints, Player, TeamResult


class TestPlayer:
    """Test cases for the Player record."""

    def test_tags_normalized(self):
        """Test that tags are lowercased, stripped and deduplicated."""
        player = Player("Ann", 5.0, position_tags=["GK", " df ", "gk", ""])

        assert player.position_tags == ("gk", "df")

    def test_has_tag(self):
        """Test case-insensitive tag lookup."""
        player = Player("Ann", 5.0, position_tags=["gk"])

        assert player.has_tag("gk")
        assert player.has_tag("GK")
        assert not player.has_tag("df")
        assert not Player("Ben", 5.0).has_tag("gk")

    def test_half_copy(self):
        """Test that a half copy is renamed and otherwise unchanged."""
        player = Player("Ann", 5.0, female=True, fixed_side=None, position_tags=["mid"])

        copy = player.half("1st")

        assert copy.name == "Ann (1st half)"
        assert copy.rating == 5.0
        assert copy.female is True
        assert copy.position_tags == ("mid",)
        assert player.name == "Ann"

    def test_players_are_immutable(self):
        """Test that players cannot be modified in place."""
        player = Player("Ann", 5.0)

        with pytest.raises(AttributeError):
            player.rating = 6.0


class TestConstraints:
    """Test cases for Constraints validation."""

    def test_tags_lowercased(self):
        """Test that minimum-count tags are lowercased."""
        assert Constraints(1.0, {"GK": 1}).min_position_counts == {"gk": 1}

    def test_valid(self):
        """Test that valid constraints pass validation."""
        Constraints(0.0, {"gk": 0}).validate()  # Should not raise

    @pytest.mark.parametrize("constraints", [
        Constraints(-0.5),
        Constraints(float("inf")),
        Constraints(float("nan")),
        Constraints(1.0, {"gk": 1.5}),
        Constraints(1.0, {"gk": -1}),
        Constraints(1.0, {"": 1}),
    ])
    def test_invalid(self, constraints):
        """Test that invalid constraints are rejected."""
        with pytest.raises(ConfigurationError):
            constraints.validate()


class TestTeamResult:
    """Test cases for TeamResult totals."""

    def test_totals(self):
        """Test rating totals, delta and display scores."""
        result = TeamResult(
            side_a=[Player("Ann", 7.0), Player("Ben", 6.0)],
            side_b=[Player("Cat", 6.5), Player("Dan", 5.0)],
        )

        assert result.rating_a == 13.0
        assert result.rating_b == 11.5
        assert result.delta == 1.5
        assert result.score_a == 3.0
        assert result.score_b == 1.5

    def test_sorted(self):
        """Test that sorting orders both teams and leaves the original alone."""
        result = TeamResult(
            side_a=[Player("zoe", 1.0), Player("Adam", 1.0)],
            side_b=[Player("Mia", 1.0), Player("bo", 1.0)],
            trials=4,
        )

        ordered = result.sorted()

        assert [p.name for p in ordered.side_a] == ["Adam", "zoe"]
        assert [p.name for p in ordered.side_b] == ["bo", "Mia"]
        assert ordered.trials == 4
        assert [p.name for p in result.side_a] == ["zoe", "Adam"]
