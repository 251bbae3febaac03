"""
Special teams and clock-management snaps: field goals, punts, kneels and spikes.
"""

import logging

from play_type import PlayType
from shared.math_utils import clamp
from shared.rng import Rng
from team_management.positions import Position
from .play_outcome import (FieldGoalOutcome, KneelOutcome, PlayOutcomeType,
                           PuntOutcome, SpikeOutcome)
from .play_situation import PlaySituation


logger = logging.getLogger(__name__)


FG_SNAP_DISTANCE = 17
MIN_EFFECTIVE_FG_DISTANCE = 18.0
FG_PROBABILITY_RANGE = (0.10, 0.99)
FG_TIME_RANGE = (5.0, 9.0)

DEFAULT_PUNT_BASE_DISTANCE = 45.0
DEFAULT_PUNT_STD = 7.0
PUNT_DISTANCE_RANGE = (25.0, 70.0)
PUNT_TIME_RANGE = (5.0, 10.0)

CLOCK_SNAP_TIME_RANGE = (1.0, 2.0)


def field_goal_distance(yard_line: int) -> int:
    """Kick distance: yards to the goal line plus the snap and hold"""
    return (100 - yard_line) + FG_SNAP_DISTANCE


def base_make_rate(effective_distance: float) -> float:
    """Piecewise make rate by effective kick distance"""
    d = effective_distance
    if d <= 30:
        return 0.985
    if d <= 35:
        return 0.985 - 0.006 * (d - 30)
    if d <= 45:
        return 0.955 - 0.009 * (d - 35)
    if d <= 55:
        return 0.865 - 0.015 * (d - 45)
    return 0.715 - 0.02 * (d - 55)


def field_goal_probability(raw_distance: int, kick_accuracy: float, kick_power: float,
                           quarter: int, score_diff: int) -> float:
    effective = max(MIN_EFFECTIVE_FG_DISTANCE, raw_distance - 0.15 * (kick_power - 70))
    probability = base_make_rate(effective) + 0.0015 * (kick_accuracy - 70)
    # long kick, late, close game
    if quarter >= 4 and abs(score_diff) <= 3 and raw_distance >= 50:
        probability -= 0.03
    return clamp(probability, *FG_PROBABILITY_RANGE)


class SpecialTeamsSimulator:
    """Resolves kicking plays and kneel/spike snaps for the team in possession"""

    def __init__(self, offense, situation: PlaySituation, rng: Rng,
                 punt_base_distance: float = DEFAULT_PUNT_BASE_DISTANCE,
                 punt_std: float = DEFAULT_PUNT_STD):
        self.offense = offense
        self.situation = situation
        self.rng = rng
        self.special = offense.unit_profiles.special
        self.punt_base_distance = punt_base_distance
        self.punt_std = punt_std

    def simulate_field_goal(self) -> FieldGoalOutcome:
        raw = field_goal_distance(self.situation.yard_line)
        effective = max(MIN_EFFECTIVE_FG_DISTANCE, raw - 0.15 * (self.special.kick_power - 70))
        probability = field_goal_probability(
            raw, self.special.kick_accuracy, self.special.kick_power,
            self.situation.quarter, self.situation.score_diff)

        made = self.rng.next() < probability
        outcome = FieldGoalOutcome(
            play_type=PlayType.FIELD_GOAL,
            result=PlayOutcomeType.FIELD_GOAL_GOOD if made else PlayOutcomeType.FIELD_GOAL_MISSED,
            time_elapsed=self.rng.next_range(*FG_TIME_RANGE),
            distance=raw,
            effective_distance=effective,
            make_probability=probability,
            made=made,
        )
        kicker = self.offense.get_starter(Position.K)
        if kicker is not None:
            outcome.participants["kicker"] = kicker.player_id
        logger.debug("FG from %d yards (p=%.3f): %s", raw, probability, "good" if made else "no good")
        return outcome

    def simulate_punt(self) -> PuntOutcome:
        mean = self.punt_base_distance + (self.special.punt_control + self.special.punt_field_flip - 120) / 5.0
        distance = clamp(self.rng.normal(mean, self.punt_std), *PUNT_DISTANCE_RANGE)

        outcome = PuntOutcome(
            play_type=PlayType.PUNT,
            result=PlayOutcomeType.PUNT,
            time_elapsed=self.rng.next_range(*PUNT_TIME_RANGE),
            distance=int(round(distance)),
        )
        punter = self.offense.get_starter(Position.P) or self.offense.get_starter(Position.K)
        if punter is not None:
            outcome.participants["punter"] = punter.player_id
        return outcome

    def simulate_kneel(self) -> KneelOutcome:
        outcome = KneelOutcome(
            play_type=PlayType.KNEEL,
            result=PlayOutcomeType.KNEEL,
            yards=-1,
            time_elapsed=self.rng.next_range(*CLOCK_SNAP_TIME_RANGE),
        )
        qb = self.offense.get_starter(Position.QB)
        if qb is not None:
            outcome.participants["passer"] = qb.player_id
        return outcome

    def simulate_spike(self) -> SpikeOutcome:
        outcome = SpikeOutcome(
            play_type=PlayType.SPIKE,
            result=PlayOutcomeType.SPIKE,
            time_elapsed=self.rng.next_range(*CLOCK_SNAP_TIME_RANGE),
        )
        qb = self.offense.get_starter(Position.QB)
        if qb is not None:
            outcome.participants["passer"] = qb.player_id
        return outcome
