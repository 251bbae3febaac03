"""
Team Game Statistics

Per-side box score for one game, filled in by the result aggregator from the
finished play log. Offensive figures count run and pass snaps only; live-ball
penalty yardage stays out of the rushing/passing totals and is tracked under
penalties instead.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any


def ratio(numerator: float, denominator: float, scale: float = 1.0) -> float:
    """numerator / denominator * scale, 0.0 when there is nothing to divide by"""
    if not denominator:
        return 0.0
    return numerator / denominator * scale


@dataclass
class TeamGameStats:
    """
    Team-level statistics for one side of one game.

    Giveaways, sacks taken and penalties are what this side committed on offense;
    sacks, interceptions and fumble recoveries are what its defense produced.
    """
    side: str
    team_id: str

    # offense
    plays: int = 0
    total_yards: int = 0
    passing_yards: int = 0
    rushing_yards: int = 0
    passing_attempts: int = 0
    passing_completions: int = 0
    rushing_attempts: int = 0
    touchdowns: int = 0
    passing_touchdowns: int = 0
    rushing_touchdowns: int = 0
    times_sacked: int = 0
    sack_yards_lost: int = 0

    # chains and downs
    first_downs: int = 0
    first_downs_passing: int = 0
    first_downs_rushing: int = 0
    first_downs_penalty: int = 0
    third_down_attempts: int = 0
    third_down_conversions: int = 0
    fourth_down_attempts: int = 0
    fourth_down_conversions: int = 0
    time_of_possession_seconds: float = 0.0

    # defense
    sacks: int = 0
    interceptions: int = 0
    fumble_recoveries: int = 0

    # giveaways
    interceptions_thrown: int = 0
    fumbles_lost: int = 0
    turnovers: int = 0

    # kicking
    field_goals_attempted: int = 0
    field_goals_made: int = 0
    punts: int = 0
    punt_yards: int = 0

    penalties: int = 0
    penalty_yards: int = 0
    points_scored: int = 0

    # ==================== Derived ====================

    @property
    def completion_pct(self) -> float:
        return ratio(self.passing_completions, self.passing_attempts, 100)

    @property
    def third_down_pct(self) -> float:
        return ratio(self.third_down_conversions, self.third_down_attempts, 100)

    @property
    def fourth_down_pct(self) -> float:
        return ratio(self.fourth_down_conversions, self.fourth_down_attempts, 100)

    @property
    def field_goal_pct(self) -> float:
        return ratio(self.field_goals_made, self.field_goals_attempted, 100)

    @property
    def yards_per_play(self) -> float:
        return ratio(self.total_yards, self.plays)

    @property
    def yards_per_pass(self) -> float:
        return ratio(self.passing_yards, self.passing_attempts)

    @property
    def yards_per_rush(self) -> float:
        return ratio(self.rushing_yards, self.rushing_attempts)

    @property
    def punt_average(self) -> float:
        return ratio(self.punt_yards, self.punts)

    @property
    def turnover_margin(self) -> int:
        """Takeaways minus giveaways"""
        return self.interceptions + self.fumble_recoveries - self.turnovers

    @property
    def time_of_possession_str(self) -> str:
        whole = int(self.time_of_possession_seconds)
        return f"{whole // 60}:{whole % 60:02d}"

    DERIVED = ('completion_pct', 'third_down_pct', 'fourth_down_pct', 'field_goal_pct',
               'yards_per_play', 'yards_per_pass', 'yards_per_rush', 'punt_average',
               'turnover_margin', 'time_of_possession_str')

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        for name in self.DERIVED:
            result[name] = getattr(self, name)
        return result
