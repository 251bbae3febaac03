"""
Tests for drive bookkeeping and the mutable GameState.
"""

import pytest

from game_management.drive_manager import DriveManager
from game_management.game_constants import DriveResult, TeamSide
from game_management.game_state import GameState
from penalties.penalty_data_structures import PenaltyResult, PenaltyType
from play_type import PlayType
from plays.play_outcome import PenaltyOutcome, PlayOutcomeType, PuntOutcome, RunOutcome


def new_state():
    return GameState(home_team_id="HOM", away_team_id="AWY", clock_sec=900.0)


def run(yards):
    return RunOutcome(PlayType.RUN, PlayOutcomeType.RUN, yards=yards)


# ==================== GameState Tests ====================

class TestGameState:
    """Tests for possession and score helpers."""

    def test_flip_possession(self):
        state = new_state()
        state.down, state.distance = 3, 7
        state.flip_possession(60)
        assert state.possession == TeamSide.AWAY
        assert (state.down, state.distance, state.yard_line) == (1, 10, 60)

    def test_set_possession(self):
        state = new_state()
        state.set_possession(TeamSide.AWAY)
        assert state.offense_side == TeamSide.AWAY
        assert state.defense_side == TeamSide.HOME
        assert state.yard_line == 25

    def test_score_diff(self):
        state = new_state()
        state.add_score(TeamSide.HOME, 7)
        state.add_score(TeamSide.AWAY, 3)
        assert state.score_diff(TeamSide.HOME) == 4
        assert state.score_diff(TeamSide.AWAY) == -4
        assert state.score == {"home": 7, "away": 3}
        assert not state.is_tied

    def test_mark_final_once(self):
        state = new_state()
        state.mark_final()
        assert state.is_final
        with pytest.raises(RuntimeError):
            state.mark_final()


# ==================== DriveManager Tests ====================

class TestDriveManager:
    """Tests for DriveManager."""

    def test_start_drive(self):
        state = new_state()
        drives = DriveManager(state)
        drive = drives.start_drive()
        assert drive.drive_id == 1
        assert drive.team_id == "HOM"
        assert drive.start_yard_line == 25
        assert drives.in_progress

    def test_record_requires_drive(self):
        with pytest.raises(RuntimeError):
            DriveManager(new_state()).record_play(run(3), 30.0, 1)

    def test_finish_requires_drive(self):
        with pytest.raises(RuntimeError):
            DriveManager(new_state()).finish_drive(DriveResult.PUNT)

    def test_finish_drive_record(self):
        state = new_state()
        drives = DriveManager(state)
        drives.start_drive()
        drives.record_play(run(6), 35.0, 1)
        drives.record_play(run(5), 32.0, 2)
        drives.record_play(PuntOutcome(PlayType.PUNT, PlayOutcomeType.PUNT, distance=44), 10.0, 3)
        state.clock_sec = 823.0
        record = drives.finish_drive(DriveResult.PUNT)

        assert record.result == DriveResult.PUNT
        assert record.plays == 3
        assert record.net_yards == 11
        assert record.duration == 77.0
        assert record.play_ids == (1, 2, 3)
        assert record.end_clock == 823.0
        assert state.drives == [record]
        assert not drives.in_progress

    def test_net_yards_include_live_ball_penalties(self):
        state = new_state()
        drives = DriveManager(state)
        drives.start_drive()
        penalty = PenaltyResult(PenaltyType.DEFENSIVE_HOLDING, 5, on_offense=False)
        drives.record_play(run(9), 30.0, 1)
        drives.record_play(RunOutcome(PlayType.RUN, PlayOutcomeType.RUN, yards=7, penalty=penalty), 30.0, 2)
        pre_snap = PenaltyOutcome(PlayType.RUN, PlayOutcomeType.PENALTY_ONLY, yards=-5,
                                  penalty=PenaltyResult(PenaltyType.FALSE_START, -5, True, pre_snap=True))
        drives.record_play(pre_snap, 1.0, 3)
        assert drives.finish_drive(DriveResult.END_OF_QUARTER).net_yards == 16

    def test_drive_points(self):
        state = new_state()
        drives = DriveManager(state)
        drives.start_drive()
        state.add_score(TeamSide.HOME, 6)
        record = drives.finish_drive(DriveResult.TOUCHDOWN)
        assert record.points == 6
        assert record.to_dict()["end_score"] == {"home": 6, "away": 0}

    def test_drive_ids_increase(self):
        state = new_state()
        drives = DriveManager(state)
        drives.start_drive()
        drives.finish_drive(DriveResult.PUNT)
        state.flip_possession(30)
        second = drives.start_drive()
        assert second.drive_id == 2
        assert second.offense_side == TeamSide.AWAY
