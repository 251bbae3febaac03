"""
Result Aggregator

Walks the finished play log once to build team and player statistics, then folds
the game state into the immutable GameResult.
"""

import logging
from typing import Dict, List, Optional

from plays.personnel import STAND_IN_PREFIX, participant_name
from shared.game_result import AWAY, HOME, GameResult
from .drive_manager import DriveRecord
from .game_constants import TeamSide
from .game_state import GameState
from .play_log import PlayLogEntry
from .player_game_stats import PlayerGameStats
from .team_game_stats import TeamGameStats


logger = logging.getLogger(__name__)


def _live_penalty_yards(entry: PlayLogEntry) -> int:
    penalty = entry.outcome.get("penalty")
    if penalty is None or penalty.get("pre_snap"):
        return 0
    return penalty["yards"]


def play_yards(entry: PlayLogEntry) -> int:
    """Yards the snap itself produced, live-ball penalty yardage removed"""
    return entry.yards - _live_penalty_yards(entry)


def is_scrimmage_snap(entry: PlayLogEntry) -> bool:
    return entry.play_type in ("run", "pass") and entry.result != "penalty_only"


class ResultAggregator:
    """
    Builds statistics and the final GameResult for one game.

    Usage:
        aggregator = ResultAggregator(home_team, away_team)
        result = aggregator.build_result(state, seed, seeded, overtime_periods)
    """

    def __init__(self, home_team, away_team):
        self.teams = {HOME: home_team, AWAY: away_team}

    # ==================== Team Stats ====================

    def aggregate_team_stats(self, plays: List[PlayLogEntry], state: Optional[GameState] = None) -> Dict[str, TeamGameStats]:
        stats = {side: TeamGameStats(side=side, team_id=team.team_id) for side, team in self.teams.items()}

        for entry in plays:
            offense = stats[entry.offense_side]
            defense = stats[entry.defense_side]
            outcome = entry.outcome
            offense.time_of_possession_seconds += entry.clock_runoff

            penalty = outcome.get("penalty")
            if penalty is not None:
                penalized = offense if penalty["on_offense"] else defense
                penalized.penalties += 1
                penalized.penalty_yards += abs(penalty["yards"])

            if entry.first_down:
                offense.first_downs += 1
                if entry.result == "penalty_only" or (penalty is not None and penalty["automatic_first_down"]):
                    offense.first_downs_penalty += 1
                elif entry.play_type == "pass":
                    offense.first_downs_passing += 1
                elif entry.play_type == "run":
                    offense.first_downs_rushing += 1

            if entry.play_type == "field_goal":
                offense.field_goals_attempted += 1
                if outcome.get("made"):
                    offense.field_goals_made += 1
                continue
            if entry.play_type == "punt":
                offense.punts += 1
                offense.punt_yards += outcome.get("distance", 0)
                continue
            if not is_scrimmage_snap(entry):
                continue

            yards = play_yards(entry)
            converted = entry.first_down or outcome.get("touchdown", False)
            offense.plays += 1
            offense.total_yards += yards
            if entry.down == 3:
                offense.third_down_attempts += 1
                offense.third_down_conversions += int(converted)
            elif entry.down == 4:
                offense.fourth_down_attempts += 1
                offense.fourth_down_conversions += int(converted)

            if entry.play_type == "run":
                offense.rushing_attempts += 1
                offense.rushing_yards += yards
                if outcome.get("touchdown"):
                    offense.touchdowns += 1
                    offense.rushing_touchdowns += 1
            else:
                offense.passing_yards += yards
                if outcome.get("sack"):
                    offense.times_sacked += 1
                    offense.sack_yards_lost += -yards
                    defense.sacks += 1
                else:
                    offense.passing_attempts += 1
                    offense.passing_completions += int(bool(outcome.get("completed")))
                if outcome.get("touchdown"):
                    offense.touchdowns += 1
                    offense.passing_touchdowns += 1

            if entry.is_turnover:
                offense.turnovers += 1
                if outcome.get("turnover_type") == "interception":
                    offense.interceptions_thrown += 1
                    defense.interceptions += 1
                else:
                    offense.fumbles_lost += 1
                    defense.fumble_recoveries += 1

        if state is not None:
            stats[HOME].points_scored = state.home_score
            stats[AWAY].points_scored = state.away_score
        return stats

    # ==================== Player Stats ====================

    def _row(self, rows: Dict[str, PlayerGameStats], side: str, player_id: Optional[str]) -> Optional[PlayerGameStats]:
        if not player_id:
            return None
        row = rows.get(player_id)
        if row is None:
            team = self.teams[side]
            player = team.get_player(player_id)
            if player is not None:
                position = player.position
            elif player_id.startswith(STAND_IN_PREFIX):
                position = player_id.rsplit("-", 1)[-1]
            else:
                position = ""
            row = PlayerGameStats(
                player_id=player_id,
                player_name=participant_name(team, player_id, player_id),
                team_id=team.team_id,
                side=side,
                position=position,
            )
            rows[player_id] = row
        return row

    def aggregate_player_stats(self, plays: List[PlayLogEntry]) -> List[PlayerGameStats]:
        rows: Dict[str, PlayerGameStats] = {}

        for entry in plays:
            side = entry.offense_side
            outcome = entry.outcome
            people = entry.participants
            touchdown = bool(outcome.get("touchdown"))

            if entry.play_type == "field_goal":
                kicker = self._row(rows, side, people.get("kicker"))
                if kicker is not None:
                    kicker.field_goals_attempted += 1
                    if outcome.get("made"):
                        kicker.field_goals_made += 1
                        kicker.longest_field_goal = max(kicker.longest_field_goal, outcome.get("distance", 0))
                continue
            if entry.play_type == "punt":
                punter = self._row(rows, side, people.get("punter"))
                if punter is not None:
                    punter.punts += 1
                    punter.punt_yards += outcome.get("distance", 0)
                continue
            if not is_scrimmage_snap(entry):
                continue

            yards = play_yards(entry)
            fumble_lost = bool(outcome.get("fumble_lost"))

            if entry.play_type == "run":
                carrier = self._row(rows, side, people.get("carrier"))
                if carrier is not None:
                    carrier.rushing_attempts += 1
                    carrier.rushing_yards += yards
                    carrier.rushing_touchdowns += int(touchdown)
                    carrier.fumbles_lost += int(fumble_lost)
                continue

            passer = self._row(rows, side, people.get("passer"))
            if outcome.get("sack"):
                if passer is not None:
                    passer.sacks_taken += 1
                continue

            completed = bool(outcome.get("completed"))
            if passer is not None:
                passer.passing_attempts += 1
                if completed:
                    passer.passing_completions += 1
                    passer.passing_yards += yards
                    passer.passing_touchdowns += int(touchdown)
                if outcome.get("turnover_type") == "interception":
                    passer.interceptions_thrown += 1

            target = self._row(rows, side, people.get("target"))
            if target is not None:
                target.targets += 1
                if completed:
                    target.receptions += 1
                    target.receiving_yards += yards
                    target.receiving_touchdowns += int(touchdown)
                    target.fumbles_lost += int(fumble_lost)

        return list(rows.values())

    # ==================== Final Result ====================

    def build_result(self, state: GameState, seed: int, seeded: bool, overtime_periods: int,
                     keep_play_by_play: bool = True) -> GameResult:
        """
        Fold a final game state into the immutable GameResult.

        Raises:
            ValueError: If the game state has not been marked final
        """
        if not state.is_final:
            raise ValueError("Cannot build a result from a game that is not final")

        if state.home_score > state.away_score:
            winner = HOME
        elif state.away_score > state.home_score:
            winner = AWAY
        else:
            winner = None

        plays = list(state.plays)
        drives: List[DriveRecord] = list(state.drives)
        home, away = self.teams[HOME], self.teams[AWAY]

        result = GameResult(
            home_team_id=home.team_id,
            away_team_id=away.team_id,
            home_team_name=home.team_name,
            away_team_name=away.team_name,
            home_score=state.home_score,
            away_score=state.away_score,
            winner=winner,
            quarters_played=state.quarter,
            overtime_periods=overtime_periods,
            final_quarter=state.quarter,
            final_clock_sec=state.clock_sec,
            seed=seed,
            seeded=seeded,
            drives=tuple(drives),
            plays=tuple(plays) if keep_play_by_play else (),
            events=tuple(state.events),
            team_stats=self.aggregate_team_stats(plays, state),
            player_stats=tuple(self.aggregate_player_stats(plays)),
            momentum={
                HOME: round(state.momentum[TeamSide.HOME], 6),
                AWAY: round(state.momentum[TeamSide.AWAY], 6),
            },
        )
        logger.debug("Result built: %s %d - %s %d (winner=%s)",
                     home.team_id, state.home_score, away.team_id, state.away_score, winner)
        return result
