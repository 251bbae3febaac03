"""
Shared Game Result

The immutable record a finished game simulation hands back to its caller. It can
be imported anywhere without pulling in the game loop.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# Use strings for type annotations to avoid circular imports
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from game_management.drive_manager import DriveRecord
    from game_management.play_log import GameEvent, PlayLogEntry
    from game_management.player_game_stats import PlayerGameStats
    from game_management.team_game_stats import TeamGameStats


HOME = "home"
AWAY = "away"


@dataclass(frozen=True)
class GameResult:
    """
    Complete game result.

    Attributes:
        winner: "home", "away" or None for a tie
        quarters_played: Regulation quarters plus overtime periods played
        plays: Play-by-play log (empty when keep_play_by_play is off)
        team_stats: "home"/"away" -> TeamGameStats
        player_stats: One row per player who recorded a stat
        final_quarter / final_clock_sec: End-of-game clock snapshot
        seed: Seed the game ran with; replaying it reproduces this result
        seeded: False when the seed was drawn from OS entropy
    """
    home_team_id: str
    away_team_id: str
    home_team_name: str
    away_team_name: str
    home_score: int
    away_score: int
    winner: Optional[str]
    quarters_played: int
    overtime_periods: int
    final_quarter: int
    final_clock_sec: float
    seed: int
    seeded: bool
    drives: Tuple['DriveRecord', ...] = ()
    plays: Tuple['PlayLogEntry', ...] = ()
    events: Tuple['GameEvent', ...] = ()
    team_stats: Dict[str, 'TeamGameStats'] = field(default_factory=dict)
    player_stats: Tuple['PlayerGameStats', ...] = ()
    momentum: Dict[str, float] = field(default_factory=dict)

    @property
    def is_tie(self) -> bool:
        return self.winner is None

    @property
    def overtime_played(self) -> bool:
        return self.overtime_periods > 0

    @property
    def total_plays(self) -> int:
        return sum(drive.plays for drive in self.drives)

    @property
    def final_score(self) -> Dict[str, int]:
        return {HOME: self.home_score, AWAY: self.away_score}

    @property
    def winner_team_id(self) -> Optional[str]:
        if self.winner == HOME:
            return self.home_team_id
        if self.winner == AWAY:
            return self.away_team_id
        return None

    def get_player_stats(self, team_id: str) -> List['PlayerGameStats']:
        return [row for row in self.player_stats if row.team_id == team_id]

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict rendering for persistence and JSON export"""
        return {
            'home_team_id': self.home_team_id,
            'away_team_id': self.away_team_id,
            'home_team_name': self.home_team_name,
            'away_team_name': self.away_team_name,
            'home_score': self.home_score,
            'away_score': self.away_score,
            'winner': self.winner,
            'quarters_played': self.quarters_played,
            'overtime_periods': self.overtime_periods,
            'final_quarter': self.final_quarter,
            'final_clock_sec': self.final_clock_sec,
            'seed': self.seed,
            'seeded': self.seeded,
            'drives': [drive.to_dict() for drive in self.drives],
            'plays': [play.to_dict() for play in self.plays],
            'events': [event.to_dict() for event in self.events],
            'team_stats': {side: stats.to_dict() for side, stats in self.team_stats.items()},
            'player_stats': [row.to_dict() for row in self.player_stats],
            'momentum': dict(self.momentum),
        }
