"""
Clock Manager

Game clock runoff for one snap, split into two parts:
- in-play time: snap to whistle, taken from the outcome or estimated
- between-play time: huddle/substitution runoff until the next snap, zero
  whenever the clock is stopped awaiting the next snap

The two-minute warning stops a running clock at exactly 2:00 in Q2 and Q4.
"""

import logging
from dataclasses import dataclass

from play_type import PlayType
from plays.play_outcome import PlayOutcome, PlayOutcomeType
from shared.math_utils import clamp
from shared.rng import Rng
from .game_constants import (FIRST_DOWN_CHAIN_TIME_RANGE, HURRY_UP_Q2_SECONDS,
                             HURRY_UP_Q4_SECONDS, LIVE_ACTION_TIME_RANGE,
                             TWO_MINUTES_SECONDS)
from .rule_config import RuleConfig


logger = logging.getLogger(__name__)


# In-play estimates (seconds) when the outcome supplies none
RUN_TIME_RANGE = (4.0, 8.0)
LONG_RUN_TIME_RANGE = (6.0, 10.0)
LONG_RUN_YARDS = 10
SACK_TIME_RANGE = (6.0, 9.0)
INCOMPLETE_TIME_RANGE = (4.0, 6.0)
COMPLETION_TIME_RANGE = (4.0, 8.0)
FIELD_GOAL_TIME_RANGE = (5.0, 8.0)
PUNT_TIME_RANGE = (8.0, 12.0)

TWO_MINUTE_WARNING_QUARTERS = (2, 4)


@dataclass
class ClockResult:
    """Clock accounting for one snap"""
    previous_clock: float
    in_play_time: float
    between_play_time: float
    new_clock: float
    two_minute_warning: bool = False
    quarter_break_setup_used: bool = False

    @property
    def runoff(self) -> float:
        return max(0.0, self.previous_clock - self.new_clock)

    @property
    def expired(self) -> bool:
        return self.new_clock <= 0


def is_two_minute(quarter: int, clock_sec: float) -> bool:
    return quarter in TWO_MINUTE_WARNING_QUARTERS and clock_sec <= TWO_MINUTES_SECONDS


def is_hurry_up(quarter: int, clock_sec: float, score_diff: int) -> bool:
    """Late in the first half, or late in the fourth while not leading"""
    return ((quarter == 2 and clock_sec <= HURRY_UP_Q2_SECONDS)
            or (quarter == 4 and clock_sec <= HURRY_UP_Q4_SECONDS and score_diff <= 0))


def stops_clock_until_snap(outcome: PlayOutcome) -> bool:
    """True when nothing runs off between this play and the next snap"""
    return (outcome.touchdown
            or outcome.safety
            or outcome.play_type in (PlayType.PUNT, PlayType.FIELD_GOAL)
            or outcome.turnover
            or outcome.result in (PlayOutcomeType.PASS_INCOMPLETE, PlayOutcomeType.SPIKE))


class ClockManager:
    """
    Computes clock runoff for each snap.

    In-play estimates draw on the play stream; between-play runoff draws on the
    environment stream.
    """

    def __init__(self, rule_config: RuleConfig, rng_play: Rng, rng_env: Rng):
        self.rules = rule_config
        self.rng_play = rng_play
        self.rng_env = rng_env

    def _draw(self, rng: Rng, bounds) -> float:
        return float(round(rng.next_range(*bounds)))

    def estimate_in_play_time(self, outcome: PlayOutcome) -> float:
        """Snap-to-whistle estimate for outcomes that carry no time of their own"""
        if outcome.play_type == PlayType.RUN:
            long_run = outcome.yards >= LONG_RUN_YARDS
            return self._draw(self.rng_play, LONG_RUN_TIME_RANGE if long_run else RUN_TIME_RANGE)
        if outcome.play_type == PlayType.PASS:
            if outcome.sack:
                return self._draw(self.rng_play, SACK_TIME_RANGE)
            if outcome.result == PlayOutcomeType.PASS_INCOMPLETE:
                return self._draw(self.rng_play, INCOMPLETE_TIME_RANGE)
            return self._draw(self.rng_play, COMPLETION_TIME_RANGE)
        if outcome.play_type == PlayType.FIELD_GOAL:
            return self._draw(self.rng_play, FIELD_GOAL_TIME_RANGE)
        if outcome.play_type == PlayType.PUNT:
            return self._draw(self.rng_play, PUNT_TIME_RANGE)
        return self.rules.default_play_time

    def in_play_time(self, outcome: PlayOutcome) -> float:
        if outcome.result == PlayOutcomeType.PENALTY_ONLY:
            return self.rules.pre_snap_admin_runoff
        seconds = outcome.time_elapsed
        if seconds is None:
            seconds = self.estimate_in_play_time(outcome)
        if outcome.play_type in (PlayType.KNEEL, PlayType.SPIKE):
            return seconds
        return clamp(seconds, *LIVE_ACTION_TIME_RANGE)

    def between_play_time(self, outcome: PlayOutcome, quarter: int, clock_sec: float,
                          score_diff: int, distance_before: int,
                          quarter_break_setup: bool = False):
        """
        Runoff between this play's whistle and the next snap.

        Args:
            outcome: Applied outcome (scoring and turnover flags set)
            quarter: Quarter of the snap
            clock_sec: Clock at the snap
            score_diff: Offense score minus defense score at the snap
            distance_before: Yards to go at the snap
            quarter_break_setup: First snap after a quarter break

        Returns:
            (seconds, quarter_break_setup_used)
        """
        if outcome.result == PlayOutcomeType.PENALTY_ONLY:
            return 0.0, False
        if stops_clock_until_snap(outcome) or clock_sec <= 0:
            return 0.0, False

        hurry = is_hurry_up(quarter, clock_sec, score_diff)
        seconds = self._draw(self.rng_env,
                             self.rules.between_play_hurry if hurry else self.rules.between_play_normal)

        if outcome.yards >= distance_before and not is_two_minute(quarter, clock_sec):
            seconds += self._draw(self.rng_env, FIRST_DOWN_CHAIN_TIME_RANGE)

        if quarter_break_setup:
            seconds += self.rules.quarter_break_setup_extra
        return seconds, quarter_break_setup

    def run_clock(self, outcome: PlayOutcome, quarter: int, clock_sec: float,
                  score_diff: int, distance_before: int,
                  quarter_break_setup: bool = False) -> ClockResult:
        """
        Apply one snap's runoff.

        Returns:
            ClockResult; new_clock never drops below zero and the clock strictly
            decreases on every snap
        """
        in_play = self.in_play_time(outcome)
        between, setup_used = self.between_play_time(
            outcome, quarter, clock_sec, score_diff, distance_before, quarter_break_setup)

        new_clock = max(0.0, clock_sec - (in_play + between))
        warning = False
        if quarter in TWO_MINUTE_WARNING_QUARTERS and clock_sec > TWO_MINUTES_SECONDS > new_clock:
            new_clock = float(TWO_MINUTES_SECONDS)
            warning = True
            logger.debug("Two-minute warning, Q%d", quarter)

        return ClockResult(
            previous_clock=clock_sec,
            in_play_time=in_play,
            between_play_time=between,
            new_clock=new_clock,
            two_minute_warning=warning,
            quarter_break_setup_used=setup_used,
        )
