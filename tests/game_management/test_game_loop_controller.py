"""
Full-game tests for GameLoopController and the simulate_game entry points.

Most games run with short quarters to keep the suite quick; the invariants do not
depend on quarter length.
"""

import pytest

from game_management.game_constants import LEGAL_SCORE_DELTAS, GameEventType
from game_management.game_loop_controller import (GameLoopController, format_game_summary,
                                                  simulate_game, simulate_game_series)
from game_management.rule_config import RuleConfig, RuleConfigError, SimulationOptions


SHORT_GAME = {"quarter_length_sec": 300}


def short_options(seed, **rules):
    config = dict(SHORT_GAME)
    config.update(rules)
    return {"seed": seed, "rule_config": config}


# ==================== Determinism Tests ====================

class TestDeterminism:
    """The same seed and teams always give an equal result."""

    def test_same_seed_same_result(self, home_team, away_team):
        first = simulate_game(home_team, away_team, seed=42)
        second = simulate_game(home_team, away_team, seed=42)
        assert first.to_dict() == second.to_dict()
        assert first.seed == 42
        assert first.seeded

    def test_seed_argument_overrides_options(self, home_team, away_team):
        first = simulate_game(home_team, away_team, options=short_options(1), seed=7)
        second = simulate_game(home_team, away_team, options=short_options(7))
        assert first.to_dict() == second.to_dict()

    def test_different_seeds_differ(self, home_team, away_team):
        first = simulate_game(home_team, away_team, options=short_options(1))
        second = simulate_game(home_team, away_team, options=short_options(2))
        assert first.to_dict()["plays"] != second.to_dict()["plays"]

    def test_unseeded_game_records_its_seed(self, home_team, away_team):
        result = simulate_game(home_team, away_team, options={"rule_config": SHORT_GAME})
        assert not result.seeded
        replay = simulate_game(home_team, away_team, options=short_options(result.seed))
        assert replay.final_score == result.final_score


# ==================== Invariant Tests ====================

class TestGameInvariants:
    """Scores, clock and play log hold together for every game."""

    @pytest.fixture
    def result(self, home_team, away_team):
        return simulate_game(home_team, away_team, seed=2024)

    def test_regulation_length(self, result):
        assert result.quarters_played >= 4
        assert result.final_clock_sec >= 0

    def test_scores_built_from_legal_deltas(self, result):
        totals = {"home": 0, "away": 0}
        for event in result.events:
            if event.event_type == GameEventType.SCORE:
                assert event.details["points"] in LEGAL_SCORE_DELTAS
                totals[event.side] += event.details["points"]
        assert totals == result.final_score

    def test_clock_never_negative(self, result):
        assert all(play.clock_sec >= 0 for play in result.plays)
        assert all(play.clock_runoff > 0 for play in result.plays)

    def test_play_ids_are_sequential(self, result):
        assert [play.play_id for play in result.plays] == list(range(1, len(result.plays) + 1))

    def test_drives_cover_every_play(self, result):
        assert result.total_plays == len(result.plays)
        play_ids = [pid for drive in result.drives for pid in drive.play_ids]
        assert play_ids == [play.play_id for play in result.plays]

    def test_downs_stay_legal(self, result):
        for play in result.plays:
            assert 1 <= play.down <= 4
            assert 1 <= play.yard_line <= 99
            assert play.distance >= 1

    def test_event_bookends(self, result):
        assert result.events[0].event_type == GameEventType.DRIVE_START
        assert result.events[-1].event_type == GameEventType.GAME_END
        quarter_ends = [e for e in result.events if e.event_type == GameEventType.QUARTER_END]
        assert len(quarter_ends) >= 4

    def test_winner_matches_score(self, result):
        if result.home_score > result.away_score:
            assert result.winner_team_id == "HOM"
        elif result.away_score > result.home_score:
            assert result.winner_team_id == "AWY"
        else:
            assert result.is_tie

    def test_team_stats_consistent(self, result):
        for side in ("home", "away"):
            stats = result.team_stats[side]
            assert stats.total_yards == stats.rushing_yards + stats.passing_yards
            assert stats.points_scored == result.final_score[side]
            assert stats.passing_completions <= stats.passing_attempts

    def test_time_of_possession_sums_to_game_clock(self, result):
        total = sum(stats.time_of_possession_seconds for stats in result.team_stats.values())
        if not result.overtime_played:
            assert total == pytest.approx(4 * 900)

    def test_rushing_yards_credited_to_players(self, result):
        for side, team_id in (("home", "HOM"), ("away", "AWY")):
            credited = sum(row.rushing_yards for row in result.get_player_stats(team_id))
            assert credited == result.team_stats[side].rushing_yards

    @pytest.mark.parametrize("seed", [3, 11, 29, 101, 4096])
    def test_many_short_games_terminate(self, home_team, away_team, seed):
        result = simulate_game(home_team, away_team, options=short_options(seed))
        assert result.final_clock_sec >= 0
        assert result.home_score >= 0 and result.away_score >= 0


# ==================== Overtime Tests ====================

class TestOvertimePolicies:
    """Tests for how games end under each overtime policy."""

    @pytest.mark.parametrize("seed", [5, 6, 7, 8])
    def test_no_ties_never_ends_tied(self, home_team, away_team, seed):
        rules = {"quarter_length_sec": 120, "allow_ties": False, "overtime_hard_cap": 20}
        result = simulate_game(home_team, away_team, options={"seed": seed, "rule_config": rules})
        if result.overtime_periods < 20:
            assert not result.is_tie

    def test_no_overtime_when_disabled(self, home_team, away_team):
        rules = {"quarter_length_sec": 60, "max_overtime_quarters": 0}
        for seed in range(6):
            result = simulate_game(home_team, away_team, options={"seed": seed, "rule_config": rules})
            assert result.overtime_periods == 0
            assert result.quarters_played == 4

    def test_overtime_periods_bounded_when_ties_allowed(self, home_team, away_team):
        rules = {"quarter_length_sec": 60, "max_overtime_quarters": 1}
        for seed in range(6):
            result = simulate_game(home_team, away_team, options={"seed": seed, "rule_config": rules})
            assert result.overtime_periods <= 1
            assert result.quarters_played == 4 + result.overtime_periods

    def test_guaranteed_possession_format_runs(self, home_team, away_team):
        rules = {"quarter_length_sec": 60, "allow_ties": False,
                 "overtime_format": "guaranteed_possession"}
        for seed in range(4):
            result = simulate_game(home_team, away_team, options={"seed": seed, "rule_config": rules})
            if result.overtime_periods < 20:
                assert not result.is_tie


# ==================== Options Tests ====================

class TestOptions:
    """Tests for option handling at the entry points."""

    def test_invalid_rule_config_raises(self, home_team, away_team):
        with pytest.raises(RuleConfigError):
            simulate_game(home_team, away_team, options={"seed": 1, "rule_config": {"quarterLengthSec": 0}})

    def test_unsupported_options_type(self, home_team, away_team):
        with pytest.raises(TypeError):
            simulate_game(home_team, away_team, options=42)

    def test_simulation_options_object(self, home_team, away_team):
        options = SimulationOptions(seed=9, rule_config=RuleConfig(quarter_length_sec=120))
        controller = GameLoopController(home_team, away_team, options)
        assert controller.state.clock_sec == 120.0
        result = controller.run_game()
        assert result.seed == 9

    def test_controller_runs_once(self, home_team, away_team):
        controller = GameLoopController(home_team, away_team, short_options(3))
        controller.run_game()
        with pytest.raises(RuntimeError):
            controller.run_game()

    def test_play_by_play_can_be_dropped(self, home_team, away_team):
        result = simulate_game(home_team, away_team, options=short_options(4, keep_play_by_play=False))
        assert result.plays == ()
        assert result.drives
        assert result.team_stats["home"].plays + result.team_stats["away"].plays > 0

    def test_camel_case_rules(self, home_team, away_team):
        options = {"seed": 4, "ruleConfig": {"quarterLengthSec": 300, "keepPlayByPlay": False}}
        assert simulate_game(home_team, away_team, options=options).plays == ()

    def test_teams_without_stand_ins_needed(self, make_team):
        """Thin rosters still finish a game using stand-ins."""
        home = make_team("THN", skip_positions=("WR", "TE", "K", "P"))
        away = make_team("FUL")
        result = simulate_game(home, away, options=short_options(12))
        assert result.final_clock_sec >= 0


# ==================== Series Tests ====================

class TestSeries:
    """Tests for simulate_game_series."""

    def test_series_uses_consecutive_seeds(self, home_team, away_team):
        results = simulate_game_series(home_team, away_team, 3, short_options(10))
        assert [r.seed for r in results] == [10, 11, 12]
        single = simulate_game(home_team, away_team, options=short_options(11))
        assert results[1].to_dict() == single.to_dict()

    def test_empty_series(self, home_team, away_team):
        assert simulate_game_series(home_team, away_team, 0) == []

    def test_negative_series(self, home_team, away_team):
        with pytest.raises(ValueError):
            simulate_game_series(home_team, away_team, -1)


# ==================== Summary Tests ====================

class TestGameSummary:
    """Tests for format_game_summary."""

    def test_summary_mentions_both_teams(self, home_team, away_team):
        result = simulate_game(home_team, away_team, options=short_options(21))
        summary = format_game_summary(result)
        assert summary.startswith(f"Away {result.away_score} @ Home {result.home_score}")
        if result.is_tie:
            assert summary.endswith("Tie game")
        else:
            assert summary.endswith("win")
