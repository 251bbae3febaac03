"""
Play Caller

Offensive play calling for the game loop. Three decisions are made before every
snap, all on the drive stream:

1. Clock intent: victory-formation kneels and clock-stopping spikes
2. Play type: run/pass lean from the unit matchup, adjusted for down, distance,
   score and clock
3. Fourth down: go for it, kick the field goal or punt

The chosen play type is then dressed into a full PlayCall (pass depth and concept,
or run direction).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from play_type import PassConcept, PassDepth, PlayType, RunDirection
from playcall import PlayCall
from plays.play_situation import PlaySituation
from shared.math_utils import clamp, logistic
from shared.rng import Rng
from .game_constants import FIVE_MINUTES_SECONDS, FOURTH_DOWN, ONE_SCORE_MARGIN, TWO_MINUTES_SECONDS


logger = logging.getLogger(__name__)


# =============================================================================
# PLAY CALLING CONSTANTS
# =============================================================================

PASS_LEAN_SCALE = 15.0
PASS_PROBABILITY_RANGE = (0.25, 0.80)
OBVIOUS_PASS_FLOOR = 0.70
OBVIOUS_RUN_CEILING = 0.30
TRAILING_LATE_PASS_FLOOR = 0.80
MOMENTUM_PASS_WEIGHT = 0.05
GO_PASS_THRESHOLD = 0.55

FG_KICK_OFFSET = 17
FG_MAX_BASE = 50.0
FG_MAX_ACCURACY_WEIGHT = 0.12

SHORT_YARDAGE = 2
MEDIUM_YARDAGE = 5
DEEP_OWN_MAX_YARD_LINE = 35
PLUS_TERRITORY_MIN_YARD_LINE = 60

KNEEL_WINDOW_SECONDS = 90
KNEEL_ANY_LEAD_SECONDS = 40
KNEEL_SAFE_LEAD = 9
SPIKE_WINDOW = (8, 30)

# (short, intermediate) cumulative thresholds; the remainder is deep
PASS_DEPTH_TABLE = {
    "short_yardage": (0.55, 0.90),
    "standard": (0.35, 0.80),
    "long_yardage": (0.25, 0.65),
}
PLAY_ACTION_RATE = 0.15
SCREEN_RATE = 0.08
OUTSIDE_RUN_RATE = 0.40


class ClockIntent:
    """Clock-management calls that bypass normal play selection"""
    KNEEL = "kneel"
    SPIKE = "spike"


@dataclass
class PlayCallContext:
    """
    Snapshot of the game from the play caller's point of view.

    Attributes:
        down: Current down
        distance: Yards to go
        yard_line: Ball spot, offense-relative (0 own goal, 100 opponent goal)
        quarter: Current quarter (5+ for overtime)
        clock_sec: Seconds left in the quarter
        score_diff: Offense score minus defense score
        momentum: Offense momentum in [-1, 1]
    """
    down: int
    distance: int
    yard_line: int
    quarter: int
    clock_sec: float
    score_diff: int
    momentum: float = 0.0

    @classmethod
    def from_situation(cls, situation: PlaySituation) -> "PlayCallContext":
        return cls(
            down=situation.down,
            distance=situation.distance,
            yard_line=situation.yard_line,
            quarter=situation.quarter,
            clock_sec=situation.clock_sec,
            score_diff=situation.score_diff,
            momentum=situation.momentum,
        )

    @property
    def yards_to_goal(self) -> int:
        return 100 - self.yard_line

    @property
    def is_red_zone(self) -> bool:
        return self.yards_to_goal <= 20

    @property
    def is_short(self) -> bool:
        return self.distance <= SHORT_YARDAGE

    @property
    def is_long(self) -> bool:
        return self.distance > MEDIUM_YARDAGE

    @property
    def within_one_score(self) -> bool:
        return abs(self.score_diff) <= ONE_SCORE_MARGIN

    @property
    def trailing(self) -> bool:
        return self.score_diff < 0

    @property
    def punt_bias(self) -> float:
        """Positive when momentum is sliding away; subtracted from every go probability"""
        return clamp(-0.2 * self.momentum, -0.4, 0.4)


def in_field_goal_range(context: PlayCallContext, kick_accuracy: float) -> bool:
    kick_distance = context.yards_to_goal + FG_KICK_OFFSET
    return kick_distance <= FG_MAX_BASE + FG_MAX_ACCURACY_WEIGHT * (kick_accuracy - 60)


def _situational_bumps(context: PlayCallContext) -> float:
    bump = 0.0
    if context.quarter >= 2:
        bump += 0.10
    if context.trailing:
        bump += 0.15
    final_five = context.quarter >= 4 and context.clock_sec <= FIVE_MINUTES_SECONDS
    if final_five and context.within_one_score and context.trailing:
        bump += 0.20
    return bump


class PlayCaller:
    """
    Calls plays for whichever team has the ball.

    Every random decision is drawn from the drive stream handed in at construction,
    so play calling never shifts the micro-simulation's draws.
    """

    def __init__(self, rng: Rng):
        self.rng = rng

    # ==================== Clock Intent ====================

    def decide_clock_intent(self, context: PlayCallContext) -> Optional[str]:
        """
        Victory formation or spike, if the clock calls for one.

        Returns:
            ClockIntent.KNEEL, ClockIntent.SPIKE or None
        """
        t = context.clock_sec
        diff = context.score_diff

        if context.quarter == 4 and diff > 0 and t <= KNEEL_WINDOW_SECONDS:
            if diff >= KNEEL_SAFE_LEAD or t <= KNEEL_ANY_LEAD_SECONDS:
                return ClockIntent.KNEEL

        low, high = SPIKE_WINDOW
        if (context.quarter in (2, 4) and diff <= 0 and low <= t <= high
                and context.down <= 3):
            urgency = (high - t) / float(high)
            probability = clamp(0.45 + 0.35 * urgency + 0.05 * context.momentum, 0.3, 0.9)
            if self.rng.next() < probability:
                return ClockIntent.SPIKE

        return None

    # ==================== Play Type ====================

    def pass_probability(self, context: PlayCallContext, passing: float, coverage: float) -> float:
        """
        Probability of calling a pass on a normal down.

        Args:
            context: Current situation
            passing: Offense pass rating (0-100)
            coverage: Defense coverage rating (0-100)
        """
        base = logistic((passing - coverage) / PASS_LEAN_SCALE)

        if (context.down == 3 and context.distance >= 6) or (context.down == 4 and context.distance >= 3):
            base = max(base, OBVIOUS_PASS_FLOOR)
        if context.distance <= 2 and context.down <= 3 and context.yard_line <= 80:
            base = min(base, OBVIOUS_RUN_CEILING)
        if context.quarter >= 4 and context.clock_sec <= TWO_MINUTES_SECONDS and context.trailing:
            base = max(base, TRAILING_LATE_PASS_FLOOR)

        base += MOMENTUM_PASS_WEIGHT * context.momentum
        return clamp(base, *PASS_PROBABILITY_RANGE)

    def choose_play_type(self, context: PlayCallContext, offense, defense) -> PlayType:
        """
        Pick the play family for this snap (clock intent aside).

        Args:
            context: Current situation
            offense: Team in possession (unit profiles prepared)
            defense: Team on defense (unit profiles prepared)
        """
        base = self.pass_probability(context,
                                     offense.unit_profiles.offense.passing,
                                     defense.unit_profiles.defense.coverage)

        if context.down == FOURTH_DOWN:
            return self.decide_fourth_down(context, base, offense.unit_profiles.special.kick_accuracy)

        return PlayType.PASS if self.rng.next() < base else PlayType.RUN

    def decide_fourth_down(self, context: PlayCallContext, base_pass: float,
                           kick_accuracy: float) -> PlayType:
        """
        Go for it, kick or punt on fourth down.

        Args:
            context: Fourth-down situation
            base_pass: Pass probability for this snap
            kick_accuracy: Kicker accuracy rating (0-100), sets field goal range

        Returns:
            RUN or PASS when going for it, otherwise FIELD_GOAL or PUNT
        """
        decision = self._fourth_down(context, base_pass, kick_accuracy)
        logger.debug("4th & %d at %d (Q%d %.0fs, diff %d): %s",
                     context.distance, context.yard_line, context.quarter,
                     context.clock_sec, context.score_diff, decision.value)
        return decision

    def _go(self, base_pass: float) -> PlayType:
        return PlayType.PASS if base_pass > GO_PASS_THRESHOLD else PlayType.RUN

    def _short_run_else_pass(self, context: PlayCallContext) -> PlayType:
        return PlayType.RUN if context.is_short else PlayType.PASS

    def _long_pass_else_run(self, context: PlayCallContext) -> PlayType:
        return PlayType.PASS if context.is_long else PlayType.RUN

    def _fourth_down(self, context: PlayCallContext, base_pass: float, kick_accuracy: float) -> PlayType:
        t = context.clock_sec
        diff = context.score_diff
        short = context.is_short
        in_range = in_field_goal_range(context, kick_accuracy)
        punt_bias = context.punt_bias

        # must-go overrides
        if context.quarter == 4:
            if context.within_one_score and diff <= 0 and t <= 90:
                return self._short_run_else_pass(context)
            if diff < 0 and t <= 40:
                return self._long_pass_else_run(context)
            if diff <= -9 and t <= TWO_MINUTES_SECONDS:
                if not (context.yard_line < 20 and context.distance >= 25):
                    return self._long_pass_else_run(context)

        if context.quarter >= 4 and context.within_one_score and diff <= 0 and context.is_red_zone:
            go = clamp((0.8 if short else 0.6) - punt_bias * 0.2, 0.4, 0.9)
            if self.rng.next() < go:
                return self._short_run_else_pass(context)
            return PlayType.FIELD_GOAL if in_range else self._short_run_else_pass(context)

        if context.yard_line <= DEEP_OWN_MAX_YARD_LINE:
            desperate = context.quarter >= 3 and diff < -14 and short
            go = clamp((0.25 if desperate else 0.02) - punt_bias * (0.15 if desperate else 0.08), 0.0, 0.6)
            if self.rng.next() < go:
                return self._short_run_else_pass(context)
            return PlayType.PUNT

        if context.yard_line < PLUS_TERRITORY_MIN_YARD_LINE:
            if in_range and not short:
                go = clamp((0.25 if context.trailing else 0.10) - punt_bias * 0.15, 0.05, 0.5)
                if self.rng.next() < go:
                    return self._long_pass_else_run(context)
                return PlayType.FIELD_GOAL
            if short:
                go = clamp(0.25 + _situational_bumps(context) - punt_bias * 0.25, 0.2, 0.7)
                if self.rng.next() < go:
                    return self._go(base_pass)
                return PlayType.PUNT
            go = clamp(-punt_bias * 0.15, 0.0, 0.25)
            if go > 0 and self.rng.next() < go:
                return self._go(base_pass)
            return PlayType.PUNT

        if in_range:
            if short:
                go = clamp(0.35 + _situational_bumps(context) - punt_bias * 0.2, 0.25, 0.75)
                if self.rng.next() < go:
                    return self._go(base_pass)
            return PlayType.FIELD_GOAL

        if context.distance <= MEDIUM_YARDAGE:
            go = 0.6
            if context.trailing:
                go += 0.1
            if context.quarter >= 3:
                go += 0.1
            go = clamp(go - punt_bias * 0.2, 0.5, 0.85)
            if self.rng.next() < go:
                return self._go(base_pass)
            return PlayType.PUNT

        go = clamp(-punt_bias * 0.2, 0.0, 0.3)
        if go > 0 and self.rng.next() < go:
            return self._go(base_pass)
        return PlayType.PUNT

    # ==================== Play Call ====================

    def _pass_depth(self, context: PlayCallContext) -> PassDepth:
        if context.distance <= 3:
            short_until, intermediate_until = PASS_DEPTH_TABLE["short_yardage"]
        elif context.distance >= 10:
            short_until, intermediate_until = PASS_DEPTH_TABLE["long_yardage"]
        else:
            short_until, intermediate_until = PASS_DEPTH_TABLE["standard"]
        draw = self.rng.next()
        if draw < short_until:
            return PassDepth.SHORT
        if draw < intermediate_until:
            return PassDepth.INTERMEDIATE
        return PassDepth.DEEP

    def _pass_concept(self, context: PlayCallContext, depth: PassDepth) -> PassConcept:
        draw = self.rng.next()
        if context.down <= 2 and draw < PLAY_ACTION_RATE:
            return PassConcept.PLAY_ACTION
        if depth == PassDepth.SHORT and draw > 1.0 - SCREEN_RATE:
            return PassConcept.SCREEN
        return PassConcept.STANDARD

    def call_play(self, context: PlayCallContext, offense, defense) -> PlayCall:
        """
        Full play call for the next snap.

        Returns:
            PlayCall with depth/concept for passes and direction for runs
        """
        intent = self.decide_clock_intent(context)
        if intent == ClockIntent.KNEEL:
            return PlayCall.of(PlayType.KNEEL)
        if intent == ClockIntent.SPIKE:
            return PlayCall.of(PlayType.SPIKE)

        play_type = self.choose_play_type(context, offense, defense)
        if play_type == PlayType.PASS:
            depth = self._pass_depth(context)
            return PlayCall.pass_play(depth, self._pass_concept(context, depth))
        if play_type == PlayType.RUN:
            direction = RunDirection.OUTSIDE if self.rng.next() < OUTSIDE_RUN_RATE else RunDirection.INSIDE
            return PlayCall.run(direction)
        return PlayCall.of(play_type)
