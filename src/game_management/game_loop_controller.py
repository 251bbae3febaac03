"""
Game Loop Controller

Orchestrates a complete game simulation by coordinating the game-level components:
- PlayCaller for clock intent, play type and fourth-down decisions
- play_engine.simulate_play for play resolution
- apply_play_outcome for ball, chains and score
- ClockManager for runoff and the two-minute warning
- DriveManager for drive records
- Overtime manager for the end-of-regulation policy
- ResultAggregator for statistics and the final GameResult

One controller runs exactly one game and owns its GameState for the whole call.
"""

import logging
from typing import Dict, List, Optional

from play_engine import simulate_play
from plays.play_outcome import PlayOutcome
from plays.play_situation import PlaySituation
from shared.game_result import GameResult
from shared.rng import UINT32_MASK, build_rng_streams
from team_management.latent_deriver import ensure_latent_profile, sample_player_game_form
from team_management.unit_profiles import game_day_starters, prepare_team_for_simulation
from .clock_manager import ClockManager, ClockResult
from .drive_manager import DriveManager
from .game_constants import (DRIVE_START_YARD_LINE, HALFTIME_AFTER_QUARTER, DriveResult,
                             GameEventType, TeamSide)
from .game_state import GameState
from .momentum_tracker import MomentumTracker
from .outcome_applier import AppliedOutcome, apply_play_outcome
from .overtime_manager import OvertimePossessionTracker, create_overtime_manager
from .play_caller import PlayCallContext, PlayCaller
from .play_log import (GameEvent, PlayLogEntry, build_tags, describe_play,
                       format_down_and_distance, is_scoring_play, is_turnover_play)
from .result_aggregator import ResultAggregator
from .rule_config import SimulationOptions


# Configure module logger
logger = logging.getLogger(__name__)

# Every snap runs at least one second off, so a game can never need this many
MAX_SNAPS_PER_GAME = 25000


class GameLoopController:
    """
    Main game simulation orchestrator.

    Usage:
        controller = GameLoopController(home_team, away_team, SimulationOptions(seed=42))
        result = controller.run_game()
    """

    def __init__(self, home_team, away_team, options=None):
        """
        Initialize the game loop with both teams and the simulation options

        Args:
            home_team: Home Team
            away_team: Away Team
            options: SimulationOptions, a dict with 'seed' / 'rule_config', or None

        Raises:
            RuleConfigError: If the rule configuration is invalid
        """
        self.options = SimulationOptions.from_value(options)
        self.rules = self.options.rule_config.validate()
        self.home_team = home_team
        self.away_team = away_team
        self.teams = {TeamSide.HOME: home_team, TeamSide.AWAY: away_team}

        prepare_team_for_simulation(home_team)
        prepare_team_for_simulation(away_team)

        self.streams = build_rng_streams(self.options.seed)
        self.state = GameState(
            home_team_id=home_team.team_id,
            away_team_id=away_team.team_id,
            clock_sec=float(self.rules.quarter_length_sec),
        )

        self.player_form = self._sample_player_form()
        self.play_caller = PlayCaller(self.streams.drive)
        self.clock_manager = ClockManager(self.rules, self.streams.play, self.streams.env)
        self.momentum_tracker = MomentumTracker(home_team, away_team, self.streams.env)
        self.drive_manager = DriveManager(self.state)
        self.overtime_manager = create_overtime_manager(self.rules)
        self.ot_tracker: Optional[OvertimePossessionTracker] = None
        self.result_aggregator = ResultAggregator(home_team, away_team)
        self.total_snaps = 0

    def _sample_player_form(self) -> Dict[str, float]:
        """One game-day form multiplier per starter, home roster first"""
        form = {}
        for team in (self.home_team, self.away_team):
            for player in game_day_starters(team):
                if player.player_id not in form:
                    profile = ensure_latent_profile(player)
                    form[player.player_id] = sample_player_game_form(profile, self.streams.player_form)
        return form

    # ==================== Game Flow ====================

    def run_game(self) -> GameResult:
        """
        Main game simulation method

        Returns:
            Immutable GameResult for the finished game
        """
        logger.info("Starting game: %s @ %s (seed=%d%s)",
                    self.away_team.team_id, self.home_team.team_id, self.streams.seed,
                    "" if self.streams.seeded else ", unseeded")

        self._start_game()

        for quarter in range(1, self.rules.num_quarters + 1):
            self._start_quarter(quarter)
            self._run_quarter()

        if self._needs_overtime():
            self._run_overtime()

        return self._generate_final_result()

    def _start_game(self) -> None:
        """Coin toss; no kickoff, so the winner starts at its own 25"""
        state = self.state
        side = TeamSide.HOME if self.streams.game_context.next() < 0.5 else TeamSide.AWAY
        state.opening_possession = side
        state.set_possession(side, DRIVE_START_YARD_LINE)
        logger.debug("Coin toss: %s receives", state.team_id_for(side))

    def _start_quarter(self, quarter: int) -> None:
        state = self.state
        if quarter == 1:
            return
        state.quarter = quarter
        state.clock_sec = float(self.rules.quarter_length_sec)
        if quarter == HALFTIME_AFTER_QUARTER + 1:
            state.set_possession(state.opening_possession.opponent(), DRIVE_START_YARD_LINE)
            state.quarter_break_setup = False
        else:
            # same offense, spot, down and distance; new drive
            state.quarter_break_setup = True

    def _run_quarter(self) -> bool:
        """
        Run drives until the period clock expires or overtime decides the game

        Returns:
            True when the overtime possession rules ended the game mid-period
        """
        state = self.state
        while state.clock_sec > 0:
            if self._run_drive():
                return True

        self._emit(GameEventType.QUARTER_END, None, score=state.score)
        logger.debug("End of Q%d: %d-%d", state.quarter, state.home_score, state.away_score)
        return False

    def _run_drive(self) -> bool:
        """
        Run one drive until it ends or the clock expires

        Returns:
            True when the overtime possession tracker says the game is over
        """
        state = self.state
        drive = self.drive_manager.start_drive()
        self._emit(GameEventType.DRIVE_START, drive.offense_side,
                   yard_line=state.yard_line, down=state.down, distance=state.distance)

        while True:
            offense_side = state.possession
            score_before = state.score_for(offense_side)
            defense_score_before = state.score_for(offense_side.opponent())

            applied = self._run_play()

            if applied.ended_drive:
                self.drive_manager.finish_drive(applied.drive_result)
                if self.ot_tracker is not None:
                    self.ot_tracker.record_possession(
                        offense_side, applied.drive_result,
                        state.score_for(offense_side) - score_before,
                        state.score_for(offense_side.opponent()) - defense_score_before)
                    if self.ot_tracker.should_game_end():
                        return True
                return False

            if state.clock_sec <= 0:
                self.drive_manager.finish_drive(self._clock_expiry_label())
                return False

    def _run_play(self) -> AppliedOutcome:
        """Call, simulate and apply one snap, then run the clock and log it"""
        self.total_snaps += 1
        if self.total_snaps > MAX_SNAPS_PER_GAME:
            raise RuntimeError(f"Game exceeded {MAX_SNAPS_PER_GAME} snaps without finishing")

        state = self.state
        offense_side = state.possession
        offense = self.teams[offense_side]
        defense = self.teams[offense_side.opponent()]

        quarter = state.quarter
        clock_before = state.clock_sec
        down_before = state.down
        distance_before = state.distance
        yard_line_before = state.yard_line
        score_diff = state.score_diff(offense_side)

        situation = PlaySituation(
            down=down_before,
            distance=distance_before,
            yard_line=yard_line_before,
            quarter=quarter,
            clock_sec=clock_before,
            score_diff=score_diff,
            momentum=self.momentum_tracker.get_momentum(offense_side),
            player_form=self.player_form,
        )
        play_call = self.play_caller.call_play(PlayCallContext.from_situation(situation), offense, defense)
        outcome = simulate_play(situation, play_call, offense, defense,
                                self.streams.play, self.streams.env,
                                punt_base_distance=self.rules.punt_base_distance,
                                punt_std=self.rules.punt_std)

        state.play_id += 1
        applied = apply_play_outcome(state, outcome)

        clock = self.clock_manager.run_clock(outcome, quarter, clock_before, score_diff,
                                             distance_before, state.quarter_break_setup)
        if clock.quarter_break_setup_used:
            state.quarter_break_setup = False
        state.clock_sec = clock.new_clock

        self.momentum_tracker.record_play(offense_side, outcome, down_before)
        state.momentum[TeamSide.HOME] = self.momentum_tracker.get_momentum(TeamSide.HOME)
        state.momentum[TeamSide.AWAY] = self.momentum_tracker.get_momentum(TeamSide.AWAY)

        self.drive_manager.record_play(outcome, clock.runoff, state.play_id)
        state.events.extend(applied.events)
        state.plays.append(self._build_log_entry(
            outcome, applied, clock, offense_side, quarter, clock_before,
            down_before, distance_before, yard_line_before))
        return applied

    def _build_log_entry(self, outcome: PlayOutcome, applied: AppliedOutcome, clock: ClockResult,
                         offense_side: TeamSide, quarter: int, clock_before: float,
                         down: int, distance: int, yard_line: int) -> PlayLogEntry:
        state = self.state
        defense_side = offense_side.opponent()
        offense = self.teams[offense_side]
        defense = self.teams[defense_side]
        return PlayLogEntry(
            play_id=state.play_id,
            drive_id=state.drive_id,
            quarter=quarter,
            clock_sec=clock_before,
            offense_side=offense_side.value,
            defense_side=defense_side.value,
            offense_team_id=offense.team_id,
            defense_team_id=defense.team_id,
            offense_team_name=offense.team_name,
            defense_team_name=defense.team_name,
            down=down,
            distance=distance,
            yard_line=yard_line,
            down_after=state.down,
            distance_after=state.distance,
            yard_line_after=state.yard_line,
            play_type=outcome.play_type.value,
            result=outcome.result.value,
            text=describe_play(outcome, offense),
            down_and_distance=format_down_and_distance(down, distance, yard_line),
            tags=build_tags(outcome),
            is_scoring=is_scoring_play(outcome),
            is_turnover=is_turnover_play(outcome),
            yards=outcome.yards,
            clock_runoff=clock.runoff,
            first_down=applied.first_down,
            outcome=outcome.to_dict(),
            participants=dict(outcome.participants),
        )

    def _emit(self, event_type: GameEventType, side: Optional[TeamSide], **details) -> None:
        state = self.state
        self.state.events.append(GameEvent(
            event_type=event_type,
            quarter=state.quarter,
            clock_sec=state.clock_sec,
            side=side.value if side is not None else None,
            team_id=state.team_id_for(side) if side is not None else None,
            drive_id=state.drive_id,
            play_id=state.play_id,
            details=details,
        ))

    def _clock_expiry_label(self) -> str:
        quarter = self.state.quarter
        if quarter == HALFTIME_AFTER_QUARTER and self.rules.num_quarters > HALFTIME_AFTER_QUARTER:
            return DriveResult.END_OF_HALF
        if quarter >= self.rules.num_quarters and not self._more_periods_possible():
            return DriveResult.END_OF_GAME
        return DriveResult.END_OF_QUARTER

    def _more_periods_possible(self) -> bool:
        """Tied with overtime periods left under the active policy"""
        manager = self.overtime_manager
        return self.state.is_tied and manager.periods_completed < manager.period_limit

    # ==================== Overtime ====================

    def _needs_overtime(self) -> bool:
        """Check if regulation ended tied and the policy allows overtime"""
        return self.overtime_manager.should_enter_overtime(self.state)

    def _run_overtime(self) -> None:
        """
        Handle overtime periods until the game is decided or the policy ends it tied.

        Each period is half a regulation quarter; the possession coin toss is drawn
        from the game-context stream and the ball starts at the 25.
        """
        logger.info("OVERTIME!")
        state = self.state

        while True:
            if not self.overtime_manager.should_enter_overtime(state) and \
               not self.overtime_manager.should_continue_overtime(state):
                break

            setup = self.overtime_manager.setup_overtime_period(self.streams.game_context)
            logger.info("Overtime period: %s, %s ball", setup.description,
                        state.team_id_for(setup.possession))

            state.quarter = setup.quarter_number
            state.clock_sec = float(setup.clock_time_seconds)
            state.quarter_break_setup = False
            state.set_possession(setup.possession, DRIVE_START_YARD_LINE)
            self.ot_tracker = self.overtime_manager.create_possession_tracker(setup)
            self._emit(GameEventType.OVERTIME_START, setup.possession,
                       period=self.overtime_manager.periods_completed,
                       guaranteed_possession=setup.guaranteed_possession)

            if self._run_quarter():
                logger.info("Overtime ended by possession rules after %d period(s)",
                            self.overtime_manager.periods_completed)
                break

        self.ot_tracker = None

    # ==================== Final Result ====================

    def _generate_final_result(self) -> GameResult:
        """Mark the state final and fold it into the immutable result"""
        state = self.state
        state.mark_final()
        self._emit(GameEventType.GAME_END, None, score=state.score)

        result = self.result_aggregator.build_result(
            state,
            seed=self.streams.seed,
            seeded=self.streams.seeded,
            overtime_periods=self.overtime_manager.periods_completed,
            keep_play_by_play=self.rules.keep_play_by_play,
        )
        logger.info("Final: %s", format_game_summary(result))
        return result


def simulate_game(home_team, away_team, options=None, seed: Optional[int] = None) -> GameResult:
    """
    Simulate one game between two teams.

    Args:
        home_team: Home Team
        away_team: Away Team
        options: SimulationOptions, or a dict with 'seed' and 'rule_config' keys
        seed: Shortcut for options.seed; overrides it when given

    Returns:
        GameResult; the same seed and teams always give an equal result
    """
    options = SimulationOptions.from_value(options)
    if seed is not None:
        options = SimulationOptions(seed=seed, rule_config=options.rule_config)
    return GameLoopController(home_team, away_team, options).run_game()


def simulate_game_series(home_team, away_team, num_games: int, options=None) -> List[GameResult]:
    """
    Simulate num_games games between the same two teams.

    Game i runs with seed + i when options carry a seed; otherwise every game is
    unseeded.
    """
    if num_games < 0:
        raise ValueError(f"num_games cannot be negative, got {num_games}")
    options = SimulationOptions.from_value(options)
    results = []
    for index in range(num_games):
        seed = None if options.seed is None else (options.seed + index) & UINT32_MASK
        game_options = SimulationOptions(seed=seed, rule_config=options.rule_config)
        results.append(GameLoopController(home_team, away_team, game_options).run_game())
    return results


def format_game_summary(result: GameResult) -> str:
    """One-line summary, e.g. "Away 17 @ Home 20 (4 quarters) - Home win" """
    line = (f"{result.away_team_name} {result.away_score} @ "
            f"{result.home_team_name} {result.home_score} "
            f"({result.quarters_played} quarters)")
    if result.is_tie:
        return f"{line} - Tie game"
    winner = result.home_team_name if result.winner == "home" else result.away_team_name
    return f"{line} - {winner} win"
