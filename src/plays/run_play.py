"""
Run play simulation

Two-stage resolution:
1. Yardage from the ball carrier plus the offense's run unit against the
   defense's run fit, tackling and chaos
2. Fumble check on the carrier
"""

import logging

from play_type import PlayType, RunDirection
from playcall import PlayCall
from shared.math_utils import clamp, clamp01
from shared.rng import Rng
from team_management.player import Player
from .ball_carrier import check_fumble, defense_chaos, defense_tackling
from .personnel import SkillReader, get_ball_carrier
from .play_outcome import PlayOutcomeType, RunOutcome, TurnoverType
from .play_situation import PlaySituation


logger = logging.getLogger(__name__)


RAW_RUN_RANGE = (-5.0, 80.0)
FINAL_RUN_RANGE = (-10, 80)

# direction -> (mean bonus, sigma bonus)
DIRECTION_ADJUSTMENTS = {
    RunDirection.INSIDE: (0.0, 0.0),
    RunDirection.OUTSIDE: (0.2, 0.3),
}


class RunPlaySimulator:
    """Simulates run plays from unit profiles and the ball carrier's latent skills"""

    def __init__(self, offense, defense, play_call: PlayCall, situation: PlaySituation, rng: Rng):
        """
        Initialize run play simulator

        Args:
            offense: Offensive Team with unit profiles prepared
            defense: Defensive Team with unit profiles prepared
            play_call: PlayCall carrying the run direction
            situation: Current PlaySituation (player form is read)
            rng: Play stream
        """
        self.offense = offense
        self.defense = defense
        self.play_call = play_call
        self.situation = situation
        self.rng = rng
        self.skills = SkillReader(situation.player_form)

        self.offense_profile = offense.unit_profiles.offense
        self.defense_profile = defense.unit_profiles.defense

    def simulate_run_play(self) -> RunOutcome:
        carrier = get_ball_carrier(self.offense)
        yards = self._model_run_yardage(carrier)

        outcome = RunOutcome(
            play_type=PlayType.RUN,
            result=PlayOutcomeType.RUN,
            direction=self.play_call.run_direction,
        )
        outcome.participants["carrier"] = carrier.player_id

        fumble = check_fumble(carrier, self.defense_profile, self.skills, self.rng)
        if fumble.fumbled:
            yards += fumble.extra_yards
            outcome.fumble = True
            outcome.fumble_lost = fumble.lost
            if fumble.lost:
                outcome.result = PlayOutcomeType.FUMBLE_LOST
                outcome.turnover_type = TurnoverType.FUMBLE
            else:
                outcome.result = PlayOutcomeType.FUMBLE_RECOVERED

        outcome.yards = int(round(clamp(yards, *FINAL_RUN_RANGE)))
        return outcome

    def _model_run_yardage(self, carrier: Player) -> float:
        """Sample raw run yards, clamped to [-5, 80] before the fumble check"""
        chaos = defense_chaos(self.defense_profile)
        run_skill = (0.5 * self.offense_profile.running / 100.0
                     + 0.25 * self.skills.read(carrier, "A", "agility")
                     + 0.25 * self.skills.read(carrier, "A", "power"))
        def_skill = (0.45 * self.defense_profile.run_fit / 100.0
                     + 0.3 * defense_tackling(self.defense_profile)
                     + 0.25 * (1.0 - chaos))

        diff = clamp01(run_skill - def_skill + 0.5) - 0.5
        mean = 2.8 + 4.0 * diff
        sigma = 2.1 + 1.2 * abs(diff)

        mean_bonus, sigma_bonus = DIRECTION_ADJUSTMENTS[self.play_call.run_direction]
        mean += mean_bonus
        sigma += sigma_bonus
        sigma *= 1 + 0.6 * (chaos - 0.5)

        return clamp(self.rng.normal(mean, sigma), *RAW_RUN_RANGE)
