from dataclasses import dataclass, field
from typing import Dict


@dataclass
class PlaySituation:
    """
    Game situation handed to the play micro-simulator, from the offense's view.

    Attributes:
        down: Current down (1-4)
        distance: Yards to gain for a first down
        yard_line: Ball position, 0 = own goal line, 100 = opponent goal line
        quarter: Current quarter (5+ for overtime)
        clock_sec: Seconds left in the quarter
        score_diff: Offense score minus defense score
        momentum: Offense momentum in [-1, 1]
        player_form: player_id -> game-day form multiplier
    """
    down: int = 1
    distance: int = 10
    yard_line: int = 25
    quarter: int = 1
    clock_sec: float = 900.0
    score_diff: int = 0
    momentum: float = 0.0
    player_form: Dict[str, float] = field(default_factory=dict)

    @property
    def yards_to_goal(self) -> int:
        return 100 - self.yard_line

    @property
    def is_red_zone(self) -> bool:
        return self.yards_to_goal <= 20
