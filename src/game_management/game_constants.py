"""
Game Constants for the simulation engine

Central location for the magic numbers and strings used by the game loop.
Tunable rule values (quarter length, overtime policy, runoff ranges) live in
RuleConfig instead.
"""
from enum import Enum


# =============================================================================
# SCORING CONSTANTS
# =============================================================================

TOUCHDOWN_POINTS = 6
FIELD_GOAL_POINTS = 3
SAFETY_POINTS = 2
LEGAL_SCORE_DELTAS = (SAFETY_POINTS, FIELD_GOAL_POINTS, TOUCHDOWN_POINTS)


# =============================================================================
# FIELD POSITION CONSTANTS
# =============================================================================

OWN_GOAL_LINE = 0
OPPONENT_GOAL_LINE = 100
MIN_BALL_SPOT = 1
MAX_BALL_SPOT = 99
MIDFIELD = 50
DRIVE_START_YARD_LINE = 25  # no kickoffs: possessions after scores start here
TOUCHBACK_YARD_LINE = 20  # punt into the end zone
MIN_PUNT_RETURN_SPOT = 10
SAFETY_FREE_KICK_YARD_LINE = 35
FG_MISS_MIN_SPOT = 20
FG_HOLD_OFFSET = 7  # spot of the kick behind the line of scrimmage
FIRST_DOWN_DISTANCE = 10
FOURTH_DOWN = 4
RED_ZONE_YARDS = 20


# =============================================================================
# TIME CONSTANTS
# =============================================================================

QUARTER_DURATION_SECONDS = 900
REGULATION_QUARTERS = 4
HALFTIME_AFTER_QUARTER = 2
TWO_MINUTES_SECONDS = 120
FIVE_MINUTES_SECONDS = 300
HURRY_UP_Q2_SECONDS = 90
HURRY_UP_Q4_SECONDS = 240
LIVE_ACTION_TIME_RANGE = (3.5, 8.5)
FIRST_DOWN_CHAIN_TIME_RANGE = (2.0, 4.0)


# =============================================================================
# PLAY THRESHOLD CONSTANTS
# =============================================================================

BIG_PLAY_THRESHOLD_YARDS = 20
ONE_SCORE_MARGIN = 8


# =============================================================================
# DRIVE RESULT CONSTANTS
# =============================================================================

class DriveResult:
    """Labels recorded on finished drives"""
    TOUCHDOWN = "TD"
    FIELD_GOAL_GOOD = "FG Good"
    FIELD_GOAL_MISSED = "FG Miss"
    SAFETY = "Safety"
    PUNT = "Punt"
    TURNOVER = "Turnover"
    TURNOVER_ON_DOWNS = "Turnover on downs"
    END_OF_QUARTER = "End of quarter"
    END_OF_HALF = "End of half"
    END_OF_GAME = "End of game"


# =============================================================================
# GAME EVENT CONSTANTS
# =============================================================================

class GameEventType(Enum):
    DRIVE_START = "drive_start"
    SCORE = "score"
    TURNOVER = "turnover"
    TURNOVER_ON_DOWNS = "turnover_on_downs"
    PENALTY = "penalty"
    QUARTER_END = "quarter_end"
    OVERTIME_START = "overtime_start"
    GAME_END = "game_end"


class ScoreType(Enum):
    TOUCHDOWN = "touchdown"
    FIELD_GOAL = "field_goal"
    SAFETY = "safety"


# =============================================================================
# TEAM SIDE CONSTANTS
# =============================================================================

class TeamSide(Enum):
    """Identifies home vs away team."""
    HOME = "home"
    AWAY = "away"

    def opponent(self) -> "TeamSide":
        return TeamSide.AWAY if self == TeamSide.HOME else TeamSide.HOME
