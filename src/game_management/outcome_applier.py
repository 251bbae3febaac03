"""
Outcome Applier

Moves the ball, the chains and the score for one simulated play. The applier is
the only code that turns a PlayOutcome into field consequences:

- sets outcome.touchdown / outcome.safety / outcome.end_of_drive
- updates score, possession, spot, down and distance on the GameState
- returns the drive result label (when the play ended the drive) and the events
  the play produced

Next-possession spots are set immediately: after a score the other team is put at
its 25 (the 35 after a safety), and after any other change of possession the ball
is spotted where the play left it, mirrored.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from play_type import PlayType
from plays.play_outcome import PlayOutcome, PlayOutcomeType, TurnoverType
from shared.math_utils import clamp
from .game_constants import (DRIVE_START_YARD_LINE, FG_HOLD_OFFSET, FG_MISS_MIN_SPOT,
                             FIELD_GOAL_POINTS, FIRST_DOWN_DISTANCE, FOURTH_DOWN,
                             MAX_BALL_SPOT, MIN_BALL_SPOT, MIN_PUNT_RETURN_SPOT,
                             OPPONENT_GOAL_LINE, OWN_GOAL_LINE, SAFETY_FREE_KICK_YARD_LINE,
                             SAFETY_POINTS, TOUCHBACK_YARD_LINE, TOUCHDOWN_POINTS,
                             DriveResult, GameEventType, ScoreType)
from .game_state import GameState
from .play_log import GameEvent


logger = logging.getLogger(__name__)


@dataclass
class AppliedOutcome:
    """
    Field consequences of one applied play.

    Attributes:
        drive_result: DriveResult label when the play ended the drive, else None
        first_down: Offense kept the ball with a fresh set of downs
        score_type: Type of score, if any
        points: Points scored on the play
        events: Events produced by the play, in order
    """
    drive_result: Optional[str] = None
    first_down: bool = False
    score_type: Optional[ScoreType] = None
    points: int = 0
    events: List[GameEvent] = field(default_factory=list)

    @property
    def ended_drive(self) -> bool:
        return self.drive_result is not None


def mirror_spot(yard_line: int) -> int:
    """Same spot on the field, seen from the other team's goal line"""
    return OPPONENT_GOAL_LINE - int(clamp(yard_line, MIN_BALL_SPOT, MAX_BALL_SPOT))


def punt_receiving_spot(line_of_scrimmage: int, punt_distance: int) -> int:
    landing = line_of_scrimmage + punt_distance
    if landing >= OPPONENT_GOAL_LINE:
        return TOUCHBACK_YARD_LINE
    return max(MIN_PUNT_RETURN_SPOT, OPPONENT_GOAL_LINE - landing)


def missed_field_goal_spot(line_of_scrimmage: int) -> int:
    """Defense takes over at the spot of the kick, mirrored, never inside its 20"""
    return max(FG_MISS_MIN_SPOT, OPPONENT_GOAL_LINE - (line_of_scrimmage - FG_HOLD_OFFSET))


class _Applier:
    def __init__(self, state: GameState, outcome: PlayOutcome):
        self.state = state
        self.outcome = outcome
        self.offense = state.offense_side
        self.defense = state.defense_side
        self.down = state.down
        self.distance = state.distance
        self.line_of_scrimmage = state.yard_line
        self.applied = AppliedOutcome()

    def event(self, event_type: GameEventType, side, **details) -> None:
        self.applied.events.append(GameEvent(
            event_type=event_type,
            quarter=self.state.quarter,
            clock_sec=self.state.clock_sec,
            side=side.value,
            team_id=self.state.team_id_for(side),
            drive_id=self.state.drive_id,
            play_id=self.state.play_id,
            details=details,
        ))

    def end_drive(self, label: str) -> None:
        self.outcome.end_of_drive = True
        self.applied.drive_result = label

    def score(self, side, score_type: ScoreType, points: int) -> None:
        self.state.add_score(side, points)
        self.applied.score_type = score_type
        self.applied.points = points
        self.event(GameEventType.SCORE, side, subtype=score_type.value, points=points,
                   score=self.state.score)

    # ==================== Play families ====================

    def pre_snap_penalty(self) -> None:
        yards = self.outcome.yards
        self.state.yard_line = int(clamp(self.line_of_scrimmage + yards, MIN_BALL_SPOT, MAX_BALL_SPOT))
        if self.outcome.automatic_first_down or yards >= self.distance:
            self.state.first_and_ten()
            self.applied.first_down = True
        else:
            self.state.distance = max(1, self.distance - yards)

    def field_goal(self) -> None:
        if getattr(self.outcome, "made", False):
            self.score(self.offense, ScoreType.FIELD_GOAL, FIELD_GOAL_POINTS)
            self.state.set_possession(self.defense, DRIVE_START_YARD_LINE)
            self.end_drive(DriveResult.FIELD_GOAL_GOOD)
        else:
            self.state.flip_possession(missed_field_goal_spot(self.line_of_scrimmage))
            self.end_drive(DriveResult.FIELD_GOAL_MISSED)

    def punt(self) -> None:
        spot = punt_receiving_spot(self.line_of_scrimmage, getattr(self.outcome, "distance", 0))
        self.state.flip_possession(spot)
        self.end_drive(DriveResult.PUNT)

    def dead_ball_no_gain(self) -> None:
        """Incomplete pass or spike: next down at the same spot"""
        if self.down == FOURTH_DOWN:
            self.turnover_on_downs(self.line_of_scrimmage)
        else:
            self.state.down += 1

    def turnover_on_downs(self, spot: int) -> None:
        self.state.flip_possession(mirror_spot(spot))
        self.event(GameEventType.TURNOVER_ON_DOWNS, self.offense)
        self.end_drive(DriveResult.TURNOVER_ON_DOWNS)

    def void_turnover(self) -> None:
        """The ball crossed the goal line before it came loose; the score stands"""
        outcome = self.outcome
        outcome.turnover_type = TurnoverType.NONE
        if outcome.result == PlayOutcomeType.FUMBLE_LOST:
            outcome.result = PlayOutcomeType.FUMBLE_RECOVERED
        if getattr(outcome, "fumble_lost", False):
            outcome.fumble_lost = False
        if getattr(outcome, "intercepted", False):
            outcome.intercepted = False

    def scrimmage(self) -> None:
        outcome = self.outcome
        new_yard = self.line_of_scrimmage + outcome.yards

        if new_yard <= OWN_GOAL_LINE:
            outcome.safety = True
            self.score(self.defense, ScoreType.SAFETY, SAFETY_POINTS)
            self.state.set_possession(self.defense, SAFETY_FREE_KICK_YARD_LINE)
            self.end_drive(DriveResult.SAFETY)
            return

        if new_yard >= OPPONENT_GOAL_LINE:
            if outcome.turnover:
                self.void_turnover()
            outcome.touchdown = True
            self.score(self.offense, ScoreType.TOUCHDOWN, TOUCHDOWN_POINTS)
            self.state.set_possession(self.defense, DRIVE_START_YARD_LINE)
            self.end_drive(DriveResult.TOUCHDOWN)
            return

        if outcome.turnover:
            self.state.flip_possession(mirror_spot(new_yard))
            self.event(GameEventType.TURNOVER, self.offense, turnover_type=outcome.turnover_type.value)
            self.end_drive(DriveResult.TURNOVER)
            return

        self.state.yard_line = int(clamp(new_yard, MIN_BALL_SPOT, MAX_BALL_SPOT))
        if outcome.yards >= self.distance or outcome.automatic_first_down:
            self.state.first_and_ten()
            self.applied.first_down = True
        elif self.down == FOURTH_DOWN:
            self.turnover_on_downs(self.state.yard_line)
        else:
            self.state.down += 1
            self.state.distance = self.distance - outcome.yards

    def apply(self) -> AppliedOutcome:
        outcome = self.outcome
        if outcome.result == PlayOutcomeType.PENALTY_ONLY:
            self.pre_snap_penalty()
        elif outcome.play_type == PlayType.FIELD_GOAL:
            self.field_goal()
        elif outcome.play_type == PlayType.PUNT:
            self.punt()
        elif outcome.stops_clock and outcome.yards == 0:
            self.dead_ball_no_gain()
        else:
            self.scrimmage()

        if outcome.has_penalty:
            self.event(GameEventType.PENALTY, self.offense,
                       penalty_type=outcome.penalty.penalty_type.value,
                       yards=outcome.penalty.yards,
                       on_offense=outcome.penalty.on_offense)
        return self.applied


def apply_play_outcome(state: GameState, outcome: PlayOutcome) -> AppliedOutcome:
    """
    Apply one play's outcome to the game state.

    Args:
        state: Game state at the snap (mutated in place)
        outcome: Outcome from the play micro-simulator (flags mutated in place)

    Returns:
        AppliedOutcome describing drive end, first down, score and events
    """
    applied = _Applier(state, outcome).apply()
    if applied.drive_result:
        logger.debug("Drive %d ends: %s (score %d-%d)", state.drive_id, applied.drive_result,
                     state.home_score, state.away_score)
    return applied
