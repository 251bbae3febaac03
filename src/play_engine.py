# play_engine.py - single play micro-simulation entry point

import logging
from typing import Optional

from penalties.penalty_model import PenaltyModel
from play_type import PlayType
from playcall import PlayCall, validate_play_call
from plays.play_outcome import PenaltyOutcome, PlayOutcome, PlayOutcomeType
from plays.play_situation import PlaySituation
from plays.pass_play import PassPlaySimulator
from plays.run_play import RunPlaySimulator
from plays.special_teams import (DEFAULT_PUNT_BASE_DISTANCE, DEFAULT_PUNT_STD,
                                 SpecialTeamsSimulator)
from shared.rng import Rng
from team_management.unit_profiles import prepare_team_for_simulation


logger = logging.getLogger(__name__)

_penalty_model = None


def get_penalty_model() -> PenaltyModel:
    global _penalty_model
    if _penalty_model is None:
        _penalty_model = PenaltyModel()
    return _penalty_model


def simulate_play(situation: PlaySituation, play_call: PlayCall, offense, defense,
                  rng_play: Rng, rng_env: Optional[Rng] = None,
                  punt_base_distance: float = DEFAULT_PUNT_BASE_DISTANCE,
                  punt_std: float = DEFAULT_PUNT_STD,
                  penalty_model: Optional[PenaltyModel] = None) -> PlayOutcome:
    """
    Simulate a single play between two teams

    Args:
        situation: PlaySituation from the offense's point of view
        play_call: PlayCall for the offense
        offense: Team in possession
        defense: Team on defense
        rng_play: Stream for the play itself
        rng_env: Stream for penalties (defaults to rng_play)
        punt_base_distance: Mean punt distance before punter adjustments
        punt_std: Punt distance standard deviation
        penalty_model: Override for the shared PenaltyModel

    Returns:
        PlayOutcome variant for the play family that was run

    Raises:
        InvalidPlayCallError: If play_call is missing or has no valid play type
    """
    play_call = validate_play_call(play_call)
    play_type = play_call.play_type

    # idempotent; only derives profiles the first time a team is seen
    prepare_team_for_simulation(offense)
    prepare_team_for_simulation(defense)

    if play_type in (PlayType.FIELD_GOAL, PlayType.PUNT, PlayType.KNEEL, PlayType.SPIKE):
        special = SpecialTeamsSimulator(offense, situation, rng_play, punt_base_distance, punt_std)
        if play_type == PlayType.FIELD_GOAL:
            return special.simulate_field_goal()
        if play_type == PlayType.PUNT:
            return special.simulate_punt()
        if play_type == PlayType.KNEEL:
            return special.simulate_kneel()
        return special.simulate_spike()

    model = penalty_model or get_penalty_model()
    penalty = model.check_penalty(play_type, offense, defense, rng_env or rng_play)

    if penalty is not None and penalty.pre_snap:
        return PenaltyOutcome(
            play_type=play_type,
            result=PlayOutcomeType.PENALTY_ONLY,
            yards=penalty.yards,
            time_elapsed=0.0,
            penalty=penalty,
        )

    if play_type == PlayType.PASS:
        outcome = PassPlaySimulator(offense, defense, play_call, situation, rng_play).simulate_pass_play()
    else:
        outcome = RunPlaySimulator(offense, defense, play_call, situation, rng_play).simulate_run_play()

    if penalty is not None:
        # live-ball fouls stack on the play result
        outcome.penalty = penalty
        outcome.yards += penalty.yards

    return outcome
