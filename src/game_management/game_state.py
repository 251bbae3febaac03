"""
Game State

The single mutable aggregate for one simulated game. Created once per game, mutated
play by play by the game loop, marked final exactly once, then folded into an
immutable GameResult.

Field position is always offense-relative: 0 is the possessing team's own goal
line, 100 the opponent's.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .game_constants import DRIVE_START_YARD_LINE, FIRST_DOWN_DISTANCE, TeamSide


@dataclass
class GameState:
    home_team_id: str
    away_team_id: str
    clock_sec: float
    quarter: int = 1
    home_score: int = 0
    away_score: int = 0
    possession: TeamSide = TeamSide.HOME
    opening_possession: TeamSide = TeamSide.HOME
    yard_line: int = DRIVE_START_YARD_LINE
    down: int = 1
    distance: int = FIRST_DOWN_DISTANCE
    drive_id: int = 0
    play_id: int = 0
    drives: List[Any] = field(default_factory=list)
    plays: List[Any] = field(default_factory=list)
    events: List[Any] = field(default_factory=list)
    momentum: Dict[TeamSide, float] = field(
        default_factory=lambda: {TeamSide.HOME: 0.0, TeamSide.AWAY: 0.0})
    quarter_break_setup: bool = False
    is_final: bool = False

    # ==================== Possession ====================

    @property
    def offense_side(self) -> TeamSide:
        return self.possession

    @property
    def defense_side(self) -> TeamSide:
        return self.possession.opponent()

    def team_id_for(self, side: TeamSide) -> str:
        return self.home_team_id if side == TeamSide.HOME else self.away_team_id

    def flip_possession(self, yard_line: int) -> None:
        """Hand the ball to the other side at yard_line (its own perspective), 1st and 10"""
        self.possession = self.possession.opponent()
        self.yard_line = yard_line
        self.first_and_ten()

    def set_possession(self, side: TeamSide, yard_line: int = DRIVE_START_YARD_LINE) -> None:
        self.possession = side
        self.yard_line = yard_line
        self.first_and_ten()

    def first_and_ten(self) -> None:
        self.down = 1
        self.distance = FIRST_DOWN_DISTANCE

    # ==================== Score ====================

    def score_for(self, side: TeamSide) -> int:
        return self.home_score if side == TeamSide.HOME else self.away_score

    def add_score(self, side: TeamSide, points: int) -> None:
        if side == TeamSide.HOME:
            self.home_score += points
        else:
            self.away_score += points

    def score_diff(self, side: TeamSide) -> int:
        """Score margin from side's point of view"""
        return self.score_for(side) - self.score_for(side.opponent())

    @property
    def score(self) -> Dict[str, int]:
        return {"home": self.home_score, "away": self.away_score}

    @property
    def is_tied(self) -> bool:
        return self.home_score == self.away_score

    def mark_final(self) -> None:
        if self.is_final:
            raise RuntimeError("Game state already marked final")
        self.is_final = True
