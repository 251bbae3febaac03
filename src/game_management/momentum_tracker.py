"""
Momentum Tracker for game simulation.

Tracks game momentum for both sides based on what each play did (touchdowns,
turnovers, big plays, drive-killing sacks).

Momentum Range: -1 to +1
- Positive: side has momentum
- Negative: side is losing momentum
- Zero: Neutral

Every update regresses 10% toward zero, so recent plays matter most. Offense
momentum shortens or lengthens the pass rush clock and nudges play calling.
"""

from typing import Any, Dict

from play_type import PlayType
from plays.play_outcome import PlayOutcome
from shared.math_utils import clamp, clamp01, lerp
from shared.rng import Rng
from .game_constants import BIG_PLAY_THRESHOLD_YARDS, TeamSide


# Play impact values from the offense's point of view
IMPACT_TOUCHDOWN = 0.9
IMPACT_FIELD_GOAL = 0.6
IMPACT_SAFETY = -0.9
IMPACT_TURNOVER = -0.8
IMPACT_BIG_PLAY = 0.4
IMPACT_DRIVE_KILLING_SACK = -0.5

DRIVE_KILLING_SACK_YARDS = -7
REGRESSION_FACTOR = 0.9
MIN_SWING = 0.4
MAX_SWING = 1.4


def compute_play_impact(outcome: PlayOutcome, down_before: int) -> float:
    """
    Momentum impact of one applied play, offense point of view.

    Args:
        outcome: Outcome after the game loop applied it (touchdown/safety set)
        down_before: Down at the snap

    Returns:
        Impact clamped to [-1, 1]
    """
    impact = 0.0

    if outcome.touchdown:
        impact += IMPACT_TOUCHDOWN
    elif getattr(outcome, "made", False):
        impact += IMPACT_FIELD_GOAL
    elif outcome.safety:
        impact += IMPACT_SAFETY

    if outcome.turnover and not outcome.safety:
        impact += IMPACT_TURNOVER

    if outcome.play_type in (PlayType.RUN, PlayType.PASS) and outcome.yards >= BIG_PLAY_THRESHOLD_YARDS:
        impact += IMPACT_BIG_PLAY

    if outcome.sack and outcome.yards <= DRIVE_KILLING_SACK_YARDS and down_before >= 3:
        impact += IMPACT_DRIVE_KILLING_SACK

    return clamp(impact, -1.0, 1.0)


def team_damping(team) -> float:
    """How strongly a roster resists momentum swings"""
    return clamp01(0.4 * team.psyche_mean("discipline") + 0.6 * team.psyche_mean("emotional_stability"))


class MomentumTracker:
    """
    Tracks game momentum for both sides.

    Swing size shrinks as the two rosters' combined discipline and emotional
    stability rise; a small random jitter is drawn from the environment stream.
    """

    def __init__(self, home_team, away_team, rng: Rng):
        """
        Args:
            home_team: Home Team (roster psyche feeds the damping)
            away_team: Away Team
            rng: Environment stream used for jitter
        """
        self.home_momentum: float = 0.0
        self.away_momentum: float = 0.0
        self.rng = rng
        damping = (team_damping(home_team) + team_damping(away_team)) / 2.0
        self.max_swing = lerp(MIN_SWING, MAX_SWING, 1.0 - damping)

    def get_momentum(self, side: TeamSide) -> float:
        """
        Get current momentum for a side.

        Returns:
            Momentum value (-1.0 to +1.0)
        """
        if side == TeamSide.HOME:
            return self.home_momentum
        return self.away_momentum

    def _set(self, side: TeamSide, value: float) -> None:
        if side == TeamSide.HOME:
            self.home_momentum = value
        else:
            self.away_momentum = value

    def _updated(self, previous: float, impact: float) -> float:
        jitter = self.rng.normal(0.0, 0.1 * abs(impact))
        return clamp((previous + self.max_swing * impact + jitter) * REGRESSION_FACTOR, -1.0, 1.0)

    def apply_impact(self, offense_side: TeamSide, impact: float) -> None:
        """
        Push momentum toward the offense (positive impact) or the defense.

        Routine plays (impact 0) leave both values untouched.
        """
        if not impact:
            return
        defense_side = offense_side.opponent()
        self._set(offense_side, self._updated(self.get_momentum(offense_side), impact))
        self._set(defense_side, self._updated(self.get_momentum(defense_side), -impact))

    def record_play(self, offense_side: TeamSide, outcome: PlayOutcome, down_before: int) -> float:
        impact = compute_play_impact(outcome, down_before)
        self.apply_impact(offense_side, impact)
        return impact

    def get_momentum_level(self, side: TeamSide) -> str:
        """
        Get descriptive momentum level for display.

        Returns:
            Momentum level: 'Hot', 'Warm', 'Neutral', 'Cool', 'Cold'
        """
        momentum = self.get_momentum(side)

        if momentum >= 0.6:
            return 'Hot'
        elif momentum >= 0.3:
            return 'Warm'
        elif momentum > -0.3:
            return 'Neutral'
        elif momentum > -0.6:
            return 'Cool'
        else:
            return 'Cold'

    def get_summary(self) -> Dict[str, Any]:
        return {
            'home_momentum': round(self.home_momentum, 3),
            'away_momentum': round(self.away_momentum, 3),
            'home_level': self.get_momentum_level(TeamSide.HOME),
            'away_level': self.get_momentum_level(TeamSide.AWAY),
        }

    def reset(self) -> None:
        """Reset momentum to neutral."""
        self.home_momentum = 0.0
        self.away_momentum = 0.0
