"""
Tests for roster rows, Player and Team depth chart queries.
"""

import pytest

from team_management.player import Player
from team_management.positions import Position, SideOfBall, normalize_position
from team_management.roster_builder import build_player, build_team
from team_management.team import Team


# ==================== Roster Builder Tests ====================

class TestBuildPlayer:
    """Tests for build_player."""

    def test_basic_row(self):
        """Identity keys map onto Player fields."""
        player = build_player({"player_id": 12, "name": "Sam Rivers", "position": "qb",
                               "depth": 1, "rating_overall": 81}, team_id="HOU")
        assert player.player_id == "12"
        assert player.name == "Sam Rivers"
        assert player.position == Position.QB
        assert player.team_id == "HOU"
        assert player.depth == 1
        assert player.rating_overall == 81

    def test_id_alias_and_name_fallback(self):
        """'id' works in place of 'player_id' and the id doubles as the name."""
        player = build_player({"id": "p9", "position": "WR"})
        assert player.player_id == "p9"
        assert player.name == "p9"

    def test_flat_numeric_keys_fold_into_raw_ratings(self):
        """Loose numeric columns become raw ratings; explicit raw_ratings win."""
        player = build_player({
            "player_id": "p1",
            "position": "RB",
            "top_speed": 91,
            "explosiveness": 80,
            "raw_ratings": {"explosiveness": 70},
            "college": "State",
        })
        assert player.raw_ratings == {"explosiveness": 70, "top_speed": 91}

    @pytest.mark.parametrize("row", [
        {"name": "No Id", "position": "QB"},
        {"player_id": "p1"},
        {"player_id": "p1", "position": ""},
    ])
    def test_missing_identity_raises(self, row):
        """Rows without an id or a position are rejected."""
        with pytest.raises(ValueError):
            build_player(row)

    def test_build_team(self):
        team = build_team("KC", "Kansas City", [
            {"player_id": "a", "position": "QB"},
            {"player_id": "b", "position": "K"},
        ])
        assert team.team_id == "KC"
        assert len(team.roster) == 2
        assert all(p.team_id == "KC" for p in team.roster)


# ==================== Player Tests ====================

class TestPlayer:
    """Tests for the Player model."""

    @pytest.mark.parametrize("raw, expected", [
        ("HB", Position.RB), ("de", Position.EDGE), ("FS", Position.S),
        ("SS", Position.S), ("PK", Position.K), (" wr ", Position.WR),
    ])
    def test_position_aliases(self, raw, expected):
        """Common roster spellings normalize onto position codes."""
        assert normalize_position(raw) == expected
        assert Player("x", "X", raw).position == expected

    def test_side_of_ball(self):
        assert Player("x", "X", "CB").side == SideOfBall.DEFENSE
        assert Player("x", "X", "P").side == SideOfBall.SPECIAL_TEAMS
        assert Player("x", "X", "TE").side == SideOfBall.OFFENSE

    def test_defaults(self):
        """Missing depth sorts last and a missing overall reads as 60."""
        player = Player("x", "X", "LB")
        assert player.depth_order == 999
        assert player.overall == 60.0


# ==================== Team Tests ====================

class TestTeamDepthChart:
    """Tests for depth chart ordering and starter lookups."""

    def _team(self):
        return Team("T", "Team", [
            Player("wr-b", "B", "WR", rating_overall=90),
            Player("wr-a", "A", "WR", depth=1, rating_overall=70),
            Player("wr-c", "C", "WR", rating_overall=80),
            Player("qb", "Q", "QB", depth=1),
        ])

    def test_explicit_depth_first_then_rating(self):
        """Depth slot beats rating; undepthed players sort by overall descending."""
        chart = self._team().get_depth_chart("WR")
        assert [p.player_id for p in chart] == ["wr-a", "wr-b", "wr-c"]

    def test_get_starters_and_starter(self):
        team = self._team()
        assert [p.player_id for p in team.get_starters("WR", 2)] == ["wr-a", "wr-b"]
        assert team.get_starter("QB").player_id == "qb"
        assert team.get_starter("K") is None

    def test_depth_chart_returns_copy(self):
        """Callers cannot reorder the team's depth chart through the returned list."""
        team = self._team()
        team.get_depth_chart("WR").clear()
        assert len(team.get_depth_chart("WR")) == 3

    def test_add_player_rebuilds(self):
        team = self._team()
        team.add_player(Player("k", "Kicker", "PK"))
        assert team.get_starter("K").player_id == "k"
        assert team.get_player("k").team_id == "T"

    def test_psyche_mean_defaults_without_profiles(self):
        """No latent profiles yet means the neutral default."""
        assert self._team().psyche_mean("discipline") == 0.5
