"""
Tests for team and player statistics built from the play log, and the final result.
"""

import pytest

from game_management.game_constants import TeamSide
from game_management.game_state import GameState
from game_management.play_log import PlayLogEntry
from game_management.result_aggregator import ResultAggregator, is_scrimmage_snap, play_yards
from game_management.team_game_stats import TeamGameStats


def entry(play_type="run", result="run", yards=0, offense="home", down=1, first_down=False,
          outcome=None, participants=None, runoff=30.0, is_turnover=False, play_id=1):
    defense = "away" if offense == "home" else "home"
    data = {"penalty": None}
    data.update(outcome or {})
    return PlayLogEntry(
        play_id=play_id, drive_id=1, quarter=1, clock_sec=600.0,
        offense_side=offense, defense_side=defense,
        offense_team_id="HOM" if offense == "home" else "AWY",
        defense_team_id="AWY" if offense == "home" else "HOM",
        offense_team_name="", defense_team_name="",
        down=down, distance=10, yard_line=30,
        down_after=1, distance_after=10, yard_line_after=30,
        play_type=play_type, result=result, text="", down_and_distance="",
        tags=[], is_scoring=False, is_turnover=is_turnover,
        yards=yards, clock_runoff=runoff, first_down=first_down,
        outcome=data, participants=participants or {},
    )


def live_penalty(yards, on_offense=False, automatic_first_down=False):
    return {"penalty_type": "defensive_holding", "yards": yards, "on_offense": on_offense,
            "automatic_first_down": automatic_first_down, "pre_snap": False}


@pytest.fixture
def aggregator(prepared_teams):
    home, away = prepared_teams
    return ResultAggregator(home, away)


# ==================== Helper Tests ====================

class TestPlayYards:
    """Tests for snap-yardage helpers."""

    def test_live_penalty_removed(self):
        assert play_yards(entry(yards=12, outcome={"penalty": live_penalty(5)})) == 7

    def test_pre_snap_penalty_kept(self):
        penalty = dict(live_penalty(-5, on_offense=True), pre_snap=True)
        assert play_yards(entry(result="penalty_only", yards=-5, outcome={"penalty": penalty})) == -5

    def test_scrimmage_snap(self):
        assert is_scrimmage_snap(entry())
        assert not is_scrimmage_snap(entry(result="penalty_only"))
        assert not is_scrimmage_snap(entry(play_type="punt", result="punt"))


# ==================== Team Stats Tests ====================

class TestTeamStats:
    """Tests for aggregate_team_stats."""

    def test_rushing_and_touchdowns(self, aggregator):
        plays = [
            entry(yards=4),
            entry(yards=11, first_down=True),
            entry(yards=9, outcome={"touchdown": True}),
        ]
        home = aggregator.aggregate_team_stats(plays)["home"]
        assert home.rushing_attempts == 3
        assert home.rushing_yards == 24
        assert home.total_yards == 24
        assert home.rushing_touchdowns == 1
        assert home.touchdowns == 1
        assert home.first_downs_rushing == 1
        assert home.time_of_possession_seconds == 90.0

    def test_passing_and_sacks(self, aggregator):
        plays = [
            entry("pass", "pass_complete", 15, outcome={"completed": True}),
            entry("pass", "pass_incomplete", 0),
            entry("pass", "sack", -8, outcome={"sack": True}),
        ]
        stats = aggregator.aggregate_team_stats(plays)
        home = stats["home"]
        assert home.passing_attempts == 2
        assert home.passing_completions == 1
        assert home.passing_yards == 7
        assert home.times_sacked == 1
        assert home.sack_yards_lost == 8
        assert stats["away"].sacks == 1

    def test_live_ball_penalty_yards_excluded(self, aggregator):
        plays = [entry(yards=9, outcome={"penalty": live_penalty(5)})]
        stats = aggregator.aggregate_team_stats(plays)
        assert stats["home"].rushing_yards == 4
        assert stats["away"].penalties == 1
        assert stats["away"].penalty_yards == 5

    def test_penalty_first_down(self, aggregator):
        plays = [entry(yards=7, first_down=True,
                       outcome={"penalty": live_penalty(5, automatic_first_down=True)})]
        home = aggregator.aggregate_team_stats(plays)["home"]
        assert home.first_downs == 1
        assert home.first_downs_penalty == 1
        assert home.first_downs_rushing == 0

    def test_pre_snap_penalty_is_not_a_play(self, aggregator):
        penalty = {"penalty_type": "false_start", "yards": -5, "on_offense": True,
                   "automatic_first_down": False, "pre_snap": True}
        plays = [entry(result="penalty_only", yards=-5, outcome={"penalty": penalty}, runoff=1.0)]
        home = aggregator.aggregate_team_stats(plays)["home"]
        assert home.plays == 0
        assert home.penalties == 1
        assert home.penalty_yards == 5

    def test_third_and_fourth_down_conversions(self, aggregator):
        plays = [
            entry(yards=6, down=3, first_down=True),
            entry(yards=2, down=3),
            entry(yards=1, down=4, first_down=True),
        ]
        home = aggregator.aggregate_team_stats(plays)["home"]
        assert (home.third_down_attempts, home.third_down_conversions) == (2, 1)
        assert (home.fourth_down_attempts, home.fourth_down_conversions) == (1, 1)

    def test_turnovers(self, aggregator):
        plays = [
            entry("pass", "interception", 0, is_turnover=True,
                  outcome={"turnover_type": "interception"}),
            entry("run", "fumble_lost", 3, is_turnover=True,
                  outcome={"turnover_type": "fumble", "fumble_lost": True}, offense="away"),
        ]
        stats = aggregator.aggregate_team_stats(plays)
        assert stats["home"].interceptions_thrown == 1
        assert stats["away"].interceptions == 1
        assert stats["away"].fumbles_lost == 1
        assert stats["home"].fumble_recoveries == 1
        assert stats["home"].turnovers == stats["away"].turnovers == 1

    def test_kicking(self, aggregator):
        plays = [
            entry("field_goal", "field_goal_good", outcome={"made": True, "distance": 40}),
            entry("field_goal", "field_goal_missed", outcome={"made": False, "distance": 55}),
            entry("punt", "punt", outcome={"distance": 44}),
        ]
        home = aggregator.aggregate_team_stats(plays)["home"]
        assert (home.field_goals_made, home.field_goals_attempted) == (1, 2)
        assert (home.punts, home.punt_yards) == (1, 44)
        assert home.plays == 0

    def test_points_from_state(self, aggregator):
        state = GameState(home_team_id="HOM", away_team_id="AWY", clock_sec=0.0)
        state.home_score, state.away_score = 10, 3
        stats = aggregator.aggregate_team_stats([], state)
        assert stats["home"].points_scored == 10
        assert stats["away"].points_scored == 3


class TestTeamGameStatsRates:
    """Tests for derived team rates."""

    def test_empty_rates_are_zero(self):
        stats = TeamGameStats(side="home", team_id="HOM")
        assert stats.completion_pct == 0.0
        assert stats.yards_per_play == 0.0
        assert stats.punt_average == 0.0
        assert stats.time_of_possession_str == "0:00"

    def test_rates(self):
        stats = TeamGameStats(side="home", team_id="HOM", plays=50, total_yards=350,
                              passing_attempts=30, passing_completions=21, passing_yards=240,
                              third_down_attempts=12, third_down_conversions=5,
                              field_goals_attempted=4, field_goals_made=3,
                              punts=2, punt_yards=91, interceptions=2, turnovers=1,
                              time_of_possession_seconds=1865.0)
        assert stats.completion_pct == pytest.approx(70.0)
        assert stats.third_down_pct == pytest.approx(41.666, rel=1e-3)
        assert stats.field_goal_pct == pytest.approx(75.0)
        assert stats.yards_per_play == pytest.approx(7.0)
        assert stats.yards_per_pass == pytest.approx(8.0)
        assert stats.punt_average == pytest.approx(45.5)
        assert stats.turnover_margin == 1
        assert stats.time_of_possession_str == "31:05"

    def test_to_dict_includes_rates(self):
        data = TeamGameStats(side="away", team_id="AWY", rushing_attempts=4, rushing_yards=18).to_dict()
        assert data["team_id"] == "AWY"
        assert data["yards_per_rush"] == pytest.approx(4.5)
        assert "DERIVED" not in data


# ==================== Player Stats Tests ====================

class TestPlayerStats:
    """Tests for aggregate_player_stats."""

    def test_rusher_row(self, aggregator):
        plays = [entry(yards=5, participants={"carrier": "HOM-RB1"}),
                 entry(yards=12, participants={"carrier": "HOM-RB1"}, outcome={"touchdown": True})]
        rows = {row.player_id: row for row in aggregator.aggregate_player_stats(plays)}
        rusher = rows["HOM-RB1"]
        assert rusher.position == "RB"
        assert rusher.team_id == "HOM"
        assert rusher.player_name == "HOM RB1"
        assert (rusher.rushing_attempts, rusher.rushing_yards, rusher.rushing_touchdowns) == (2, 17, 1)

    def test_passer_and_target(self, aggregator):
        people = {"passer": "HOM-QB1", "target": "HOM-WR1"}
        plays = [
            entry("pass", "pass_complete", 20, participants=people, outcome={"completed": True}),
            entry("pass", "pass_incomplete", 0, participants=people),
            entry("pass", "sack", -6, participants={"passer": "HOM-QB1"}, outcome={"sack": True}),
        ]
        rows = {row.player_id: row for row in aggregator.aggregate_player_stats(plays)}
        passer, target = rows["HOM-QB1"], rows["HOM-WR1"]
        assert (passer.passing_attempts, passer.passing_completions, passer.passing_yards) == (2, 1, 20)
        assert passer.sacks_taken == 1
        assert (target.targets, target.receptions, target.receiving_yards) == (2, 1, 20)

    def test_kicker_longest_field_goal(self, aggregator):
        people = {"kicker": "HOM-K1"}
        plays = [
            entry("field_goal", "field_goal_good", participants=people, outcome={"made": True, "distance": 38}),
            entry("field_goal", "field_goal_good", participants=people, outcome={"made": True, "distance": 51}),
        ]
        kicker = aggregator.aggregate_player_stats(plays)[0]
        assert kicker.field_goals_made == 2
        assert kicker.longest_field_goal == 51

    def test_stand_in_position(self, aggregator):
        plays = [entry(yards=3, participants={"carrier": "stand-in-HOM-RB"})]
        row = aggregator.aggregate_player_stats(plays)[0]
        assert row.position == "RB"
        assert row.team_id == "HOM"


# ==================== Result Tests ====================

class TestBuildResult:
    """Tests for build_result."""

    def _final_state(self, home_score, away_score):
        state = GameState(home_team_id="HOM", away_team_id="AWY", clock_sec=0.0, quarter=4)
        state.home_score, state.away_score = home_score, away_score
        state.plays.append(entry(yards=4))
        state.momentum[TeamSide.HOME] = 0.25
        state.mark_final()
        return state

    def test_requires_final_state(self, aggregator):
        state = GameState(home_team_id="HOM", away_team_id="AWY", clock_sec=0.0)
        with pytest.raises(ValueError):
            aggregator.build_result(state, seed=1, seeded=True, overtime_periods=0)

    def test_winner(self, aggregator):
        result = aggregator.build_result(self._final_state(21, 14), 5, True, 0)
        assert result.winner == "home"
        assert result.winner_team_id == "HOM"
        assert result.home_team_name == "Home"
        assert result.momentum["home"] == 0.25

    def test_tie(self, aggregator):
        result = aggregator.build_result(self._final_state(17, 17), 5, True, 1)
        assert result.is_tie
        assert result.overtime_played
        assert result.winner_team_id is None

    def test_play_by_play_dropped(self, aggregator):
        result = aggregator.build_result(self._final_state(3, 0), 5, True, 0, keep_play_by_play=False)
        assert result.plays == ()
        assert result.team_stats["home"].rushing_yards == 4

    def test_result_is_frozen(self, aggregator):
        result = aggregator.build_result(self._final_state(3, 0), 5, True, 0)
        with pytest.raises(AttributeError):
            result.home_score = 99
