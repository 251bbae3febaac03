"""
Drive Manager

Tracks the drive in progress and finalizes it into an immutable DriveRecord when
possession changes, a period ends or the game ends.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from plays.play_outcome import PlayOutcome
from .game_constants import TeamSide
from .game_state import GameState


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DriveRecord:
    """
    Summary of one finished drive.

    net_yards counts run and pass snaps only; duration is the game-clock time
    the drive consumed.
    """
    drive_id: int
    offense_side: str
    team_id: str
    result: str
    plays: int
    net_yards: int
    duration: float
    start_score: Tuple[int, int]
    end_score: Tuple[int, int]
    start_quarter: int
    end_quarter: int
    start_clock: float
    end_clock: float
    start_yard_line: int
    play_ids: Tuple[int, ...] = ()

    @property
    def points(self) -> int:
        home_delta = self.end_score[0] - self.start_score[0]
        away_delta = self.end_score[1] - self.start_score[1]
        return home_delta if self.offense_side == TeamSide.HOME.value else away_delta

    def to_dict(self) -> Dict[str, Any]:
        return {
            "drive_id": self.drive_id,
            "offense_side": self.offense_side,
            "team_id": self.team_id,
            "result": self.result,
            "plays": self.plays,
            "net_yards": self.net_yards,
            "duration": self.duration,
            "start_score": {"home": self.start_score[0], "away": self.start_score[1]},
            "end_score": {"home": self.end_score[0], "away": self.end_score[1]},
            "start_quarter": self.start_quarter,
            "end_quarter": self.end_quarter,
            "start_clock": self.start_clock,
            "end_clock": self.end_clock,
            "start_yard_line": self.start_yard_line,
            "play_ids": list(self.play_ids),
        }


@dataclass
class DriveInProgress:
    drive_id: int
    offense_side: TeamSide
    team_id: str
    start_score: Tuple[int, int]
    start_quarter: int
    start_clock: float
    start_yard_line: int
    plays: int = 0
    net_yards: int = 0
    duration: float = 0.0
    play_ids: List[int] = field(default_factory=list)


class DriveManager:
    """
    Owns the drive in progress for one game.

    Usage:
        drives = DriveManager(state)
        drives.start_drive()
        drives.record_play(outcome, runoff, play_id)
        record = drives.finish_drive(DriveResult.PUNT)
    """

    def __init__(self, state: GameState):
        self.state = state
        self.current: Optional[DriveInProgress] = None

    @property
    def in_progress(self) -> bool:
        return self.current is not None

    def start_drive(self) -> DriveInProgress:
        state = self.state
        state.drive_id += 1
        self.current = DriveInProgress(
            drive_id=state.drive_id,
            offense_side=state.possession,
            team_id=state.team_id_for(state.possession),
            start_score=(state.home_score, state.away_score),
            start_quarter=state.quarter,
            start_clock=state.clock_sec,
            start_yard_line=state.yard_line,
        )
        return self.current

    def record_play(self, outcome: PlayOutcome, runoff: float, play_id: int) -> None:
        drive = self.current
        if drive is None:
            raise RuntimeError("No drive in progress")
        drive.plays += 1
        drive.duration += runoff
        drive.play_ids.append(play_id)
        if outcome.is_scrimmage_play:
            drive.net_yards += outcome.yards

    def finish_drive(self, result: str) -> DriveRecord:
        """Finalize the drive in progress and append it to the game state"""
        drive = self.current
        if drive is None:
            raise RuntimeError("No drive in progress")
        state = self.state
        record = DriveRecord(
            drive_id=drive.drive_id,
            offense_side=drive.offense_side.value,
            team_id=drive.team_id,
            result=result,
            plays=drive.plays,
            net_yards=drive.net_yards,
            duration=drive.duration,
            start_score=drive.start_score,
            end_score=(state.home_score, state.away_score),
            start_quarter=drive.start_quarter,
            end_quarter=state.quarter,
            start_clock=drive.start_clock,
            end_clock=state.clock_sec,
            start_yard_line=drive.start_yard_line,
            play_ids=tuple(drive.play_ids),
        )
        state.drives.append(record)
        self.current = None
        logger.debug("Drive %d (%s): %s, %d plays, %d yards",
                     record.drive_id, record.team_id, record.result, record.plays, record.net_yards)
        return record
