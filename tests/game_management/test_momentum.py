"""
Tests for the momentum tracker.
"""

from unittest.mock import MagicMock

import pytest

from game_management.game_constants import TeamSide
from game_management.momentum_tracker import (IMPACT_TOUCHDOWN, MAX_SWING, MIN_SWING,
                                              MomentumTracker, compute_play_impact, team_damping)
from play_type import PlayType
from plays.play_outcome import (FieldGoalOutcome, PassOutcome, PlayOutcomeType, RunOutcome,
                                TurnoverType)
from shared.rng import Rng


def psyche_team(value):
    team = MagicMock()
    team.psyche_mean.return_value = value
    return team


# ==================== Impact Tests ====================

class TestPlayImpact:
    """Tests for compute_play_impact."""

    def test_routine_play_has_no_impact(self):
        assert compute_play_impact(RunOutcome(PlayType.RUN, PlayOutcomeType.RUN, yards=4), 1) == 0.0

    def test_touchdown(self):
        outcome = RunOutcome(PlayType.RUN, PlayOutcomeType.RUN, yards=5)
        outcome.touchdown = True
        assert compute_play_impact(outcome, 1) == IMPACT_TOUCHDOWN

    def test_long_touchdown_is_capped(self):
        outcome = PassOutcome(PlayType.PASS, PlayOutcomeType.PASS_COMPLETE, yards=60, completed=True)
        outcome.touchdown = True
        assert compute_play_impact(outcome, 1) == 1.0

    def test_field_goal(self):
        outcome = FieldGoalOutcome(PlayType.FIELD_GOAL, PlayOutcomeType.FIELD_GOAL_GOOD, made=True)
        assert compute_play_impact(outcome, 4) == pytest.approx(0.6)

    def test_turnover(self):
        outcome = PassOutcome(PlayType.PASS, PlayOutcomeType.INTERCEPTION,
                              turnover_type=TurnoverType.INTERCEPTION)
        assert compute_play_impact(outcome, 2) == pytest.approx(-0.8)

    def test_drive_killing_sack_only_late_downs(self):
        outcome = PassOutcome(PlayType.PASS, PlayOutcomeType.SACK, yards=-9, sack=True)
        assert compute_play_impact(outcome, 3) == pytest.approx(-0.5)
        assert compute_play_impact(outcome, 1) == 0.0

    def test_big_play(self):
        outcome = RunOutcome(PlayType.RUN, PlayOutcomeType.RUN, yards=25)
        assert compute_play_impact(outcome, 1) == pytest.approx(0.4)


# ==================== Tracker Tests ====================

class TestMomentumTracker:
    """Tests for MomentumTracker updates."""

    def test_starts_neutral(self, prepared_teams):
        home, away = prepared_teams
        tracker = MomentumTracker(home, away, Rng(1))
        assert tracker.get_momentum(TeamSide.HOME) == 0.0
        assert tracker.get_momentum_level(TeamSide.AWAY) == "Neutral"

    def test_impact_moves_sides_apart(self, prepared_teams):
        home, away = prepared_teams
        tracker = MomentumTracker(home, away, Rng(1))
        tracker.apply_impact(TeamSide.HOME, 0.9)
        assert tracker.get_momentum(TeamSide.HOME) > 0
        assert tracker.get_momentum(TeamSide.AWAY) < 0

    def test_zero_impact_is_ignored(self, prepared_teams):
        home, away = prepared_teams
        tracker = MomentumTracker(home, away, Rng(1))
        tracker.apply_impact(TeamSide.HOME, 0.0)
        assert tracker.get_summary()["home_momentum"] == 0.0

    def test_momentum_stays_in_range(self, prepared_teams):
        home, away = prepared_teams
        tracker = MomentumTracker(home, away, Rng(3))
        for _ in range(50):
            tracker.apply_impact(TeamSide.AWAY, 1.0)
        assert -1.0 <= tracker.get_momentum(TeamSide.HOME) <= 1.0
        assert tracker.get_momentum(TeamSide.AWAY) <= 1.0
        assert tracker.get_momentum_level(TeamSide.AWAY) == "Hot"
        assert tracker.get_momentum_level(TeamSide.HOME) == "Cold"

    def test_record_play_returns_impact(self, prepared_teams):
        home, away = prepared_teams
        tracker = MomentumTracker(home, away, Rng(1))
        outcome = RunOutcome(PlayType.RUN, PlayOutcomeType.RUN, yards=30)
        assert tracker.record_play(TeamSide.HOME, outcome, 1) == pytest.approx(0.4)

    def test_reset(self, prepared_teams):
        home, away = prepared_teams
        tracker = MomentumTracker(home, away, Rng(1))
        tracker.apply_impact(TeamSide.HOME, 0.5)
        tracker.reset()
        assert tracker.home_momentum == tracker.away_momentum == 0.0


# ==================== Damping Tests ====================

class TestDamping:
    """Disciplined rosters swing less."""

    def test_team_damping(self):
        assert team_damping(psyche_team(1.0)) == pytest.approx(1.0)
        assert team_damping(psyche_team(0.0)) == 0.0

    def test_swing_range(self):
        calm = MomentumTracker(psyche_team(1.0), psyche_team(1.0), Rng(1))
        wild = MomentumTracker(psyche_team(0.0), psyche_team(0.0), Rng(1))
        assert calm.max_swing == pytest.approx(MIN_SWING)
        assert wild.max_swing == pytest.approx(MAX_SWING)
