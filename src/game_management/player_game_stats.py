"""
Player Game Statistics

Per-player box score rows: passing, rushing, receiving, kicking and punting.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class PlayerGameStats:
    player_id: str
    player_name: str
    team_id: str
    side: str
    position: str = ""

    # Passing
    passing_attempts: int = 0
    passing_completions: int = 0
    passing_yards: int = 0
    passing_touchdowns: int = 0
    interceptions_thrown: int = 0
    sacks_taken: int = 0

    # Rushing
    rushing_attempts: int = 0
    rushing_yards: int = 0
    rushing_touchdowns: int = 0
    fumbles_lost: int = 0

    # Receiving
    targets: int = 0
    receptions: int = 0
    receiving_yards: int = 0
    receiving_touchdowns: int = 0

    # Kicking / punting
    field_goals_attempted: int = 0
    field_goals_made: int = 0
    longest_field_goal: int = 0
    punts: int = 0
    punt_yards: int = 0

    @property
    def has_passing(self) -> bool:
        return self.passing_attempts > 0 or self.sacks_taken > 0

    @property
    def total_touchdowns(self) -> int:
        return self.passing_touchdowns + self.rushing_touchdowns + self.receiving_touchdowns

    @property
    def yards_per_carry(self) -> float:
        if self.rushing_attempts == 0:
            return 0.0
        return self.rushing_yards / self.rushing_attempts

    @property
    def yards_per_reception(self) -> float:
        if self.receptions == 0:
            return 0.0
        return self.receiving_yards / self.receptions

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['yards_per_carry'] = self.yards_per_carry
        result['yards_per_reception'] = self.yards_per_reception
        return result
