"""
Overtime Manager System

Decides whether a tied game goes to overtime, how each overtime period is set up,
and (for the guaranteed-possession format) when a period ends early.

Policies come from RuleConfig:
- allow_ties=True: at most max_overtime_quarters periods; still tied after that
  is a tie
- allow_ties=False: periods continue until someone wins, bounded by the
  overtime_hard_cap safety limit (the game then ends tied with a warning)

Every overtime period is half a regulation quarter long, starts at the 25 and
opens with a coin toss for possession.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from shared.rng import Rng
from .game_constants import DriveResult, TeamSide
from .rule_config import OvertimeFormat, RuleConfig


logger = logging.getLogger(__name__)


class OvertimePhase(Enum):
    """
    Phase within a guaranteed-possession overtime period.

    1. GUARANTEED - Both teams must get at least one possession
    2. SUDDEN_DEATH - After both possess, any lead wins
    """
    GUARANTEED = "guaranteed"
    SUDDEN_DEATH = "sudden_death"


@dataclass
class OvertimeSetup:
    """
    Configuration for one overtime period

    Attributes:
        quarter_number: 5 for the first overtime period, then 6, 7, ...
        clock_time_seconds: Period length (half a regulation quarter)
        possession: Side that won the overtime coin toss
        guaranteed_possession: True when the possession tracker may end the period early
        description: For logging
    """
    quarter_number: int
    clock_time_seconds: float
    possession: TeamSide
    guaranteed_possession: bool
    description: str


class OvertimePossessionTracker:
    """
    Tracks possessions in a guaranteed-possession overtime period.

    1. A touchdown or safety on the first possession ends the game
    2. Otherwise both teams get at least one possession
    3. After both possess, any lead ends the game (sudden death)
    """

    def __init__(self, first_side: TeamSide):
        """
        Args:
            first_side: Side that possesses first (winner of the coin toss)
        """
        self.first_side = first_side
        self.possessions: List[Dict] = []
        self.phase = OvertimePhase.GUARANTEED
        self.points: Dict[TeamSide, int] = {TeamSide.HOME: 0, TeamSide.AWAY: 0}

    def record_possession(self, side: TeamSide, result: str, points: int, defense_points: int = 0) -> None:
        """
        Record one finished overtime drive.

        Args:
            side: Side that had the ball
            result: DriveResult label
            points: Points the possessing side scored
            defense_points: Points the other side scored (safety)
        """
        self.possessions.append({"side": side, "result": result, "points": points})
        self.points[side] += points
        self.points[side.opponent()] += defense_points

        if self.phase == OvertimePhase.GUARANTEED and len({p["side"] for p in self.possessions}) == 2:
            self.phase = OvertimePhase.SUDDEN_DEATH

    def should_game_end(self) -> bool:
        if not self.possessions:
            return False

        first = self.possessions[0]
        if len(self.possessions) == 1 and first["result"] in (DriveResult.TOUCHDOWN, DriveResult.SAFETY):
            return True

        if self.phase == OvertimePhase.SUDDEN_DEATH:
            return self.points[TeamSide.HOME] != self.points[TeamSide.AWAY]
        return False

    def get_current_phase(self) -> OvertimePhase:
        return self.phase

    def get_winning_side(self) -> Optional[TeamSide]:
        if not self.should_game_end():
            return None
        if self.points[TeamSide.HOME] > self.points[TeamSide.AWAY]:
            return TeamSide.HOME
        if self.points[TeamSide.AWAY] > self.points[TeamSide.HOME]:
            return TeamSide.AWAY
        return None

    def reset(self) -> None:
        self.possessions = []
        self.phase = OvertimePhase.GUARANTEED
        self.points = {TeamSide.HOME: 0, TeamSide.AWAY: 0}


class IOvertimeManager(ABC):
    """
    Interface for overtime rule management

    Keeps the overtime policy out of the game loop: the loop only asks whether
    another period is needed and how to set it up.
    """

    def __init__(self, rule_config: RuleConfig):
        self.rules = rule_config
        self.periods_completed = 0

    @property
    @abstractmethod
    def period_limit(self) -> int:
        """Overtime periods this policy allows"""

    def _is_tied(self, game_state) -> bool:
        return game_state.home_score == game_state.away_score

    def should_enter_overtime(self, game_state) -> bool:
        """
        True when regulation ended tied and the policy allows at least one period
        """
        return (game_state.quarter >= self.rules.num_quarters
                and self._is_tied(game_state)
                and self.periods_completed == 0
                and self.period_limit > 0)

    def should_continue_overtime(self, game_state) -> bool:
        """True when the game is still tied and another period is allowed"""
        if not self._is_tied(game_state):
            return False
        return self.periods_completed < self.period_limit

    def setup_overtime_period(self, rng: Rng) -> OvertimeSetup:
        """
        Set up the next overtime period.

        Args:
            rng: Game-context stream for the possession coin toss
        """
        if self.periods_completed >= self.period_limit:
            raise ValueError(f"Overtime limit of {self.period_limit} periods reached")
        self.periods_completed += 1

        possession = TeamSide.HOME if rng.next() < 0.5 else TeamSide.AWAY
        return OvertimeSetup(
            quarter_number=self.rules.num_quarters + self.periods_completed,
            clock_time_seconds=self.rules.overtime_period_length,
            possession=possession,
            guaranteed_possession=self.rules.overtime_format == OvertimeFormat.GUARANTEED_POSSESSION,
            description=f"Overtime Period {self.periods_completed}",
        )

    def create_possession_tracker(self, setup: OvertimeSetup) -> Optional[OvertimePossessionTracker]:
        if not setup.guaranteed_possession:
            return None
        return OvertimePossessionTracker(setup.possession)

    def reset(self) -> None:
        self.periods_completed = 0


class TiesAllowedOvertimeManager(IOvertimeManager):
    """At most max_overtime_quarters periods; a game still tied after them is a tie"""

    @property
    def period_limit(self) -> int:
        return min(self.rules.max_overtime_quarters, self.rules.overtime_hard_cap)


class NoTiesOvertimeManager(IOvertimeManager):
    """
    Overtime continues until someone wins.

    max_overtime_quarters periods are played first; more follow while the game is
    tied, up to overtime_hard_cap.
    """

    @property
    def period_limit(self) -> int:
        return self.rules.overtime_hard_cap

    def should_enter_overtime(self, game_state) -> bool:
        return (game_state.quarter >= self.rules.num_quarters
                and self._is_tied(game_state)
                and self.periods_completed == 0)

    def should_continue_overtime(self, game_state) -> bool:
        if not self._is_tied(game_state):
            return False
        if self.periods_completed >= self.period_limit:
            logger.warning("Overtime safety cap of %d periods reached; game ends tied", self.period_limit)
            return False
        return True


def create_overtime_manager(rule_config: RuleConfig) -> IOvertimeManager:
    """
    Factory function to create the overtime manager for a rule set

    Args:
        rule_config: Validated RuleConfig

    Returns:
        Overtime manager honoring allow_ties
    """
    if rule_config.allow_ties:
        return TiesAllowedOvertimeManager(rule_config)
    return NoTiesOvertimeManager(rule_config)
