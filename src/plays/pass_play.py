"""
Pass play simulation

Resolves one dropback in causal order:
1. Pass rush: when does pressure arrive and how intense is it
2. QB decision: when is the ball thrown, is the QB under pressure
3. Separation: how open is the target against the coverage defender
4. Ball placement: radial error of the throw
5. Catch point: completion / interception / incompletion
6. Sack check: a fast rush plus a badly placed ball can become a sack instead
7. Completions: air yards, yards after catch and the fumble check
"""

import logging
from dataclasses import dataclass
from typing import Optional

from play_type import PassConcept, PassDepth, PlayType
from playcall import PlayCall
from shared.math_utils import clamp, clamp01, lerp, logistic
from shared.rng import Rng
from team_management.player import Player
from .ball_carrier import check_fumble, defense_chaos, model_yards_after_catch
from .personnel import SkillReader, choose_coverage_defender, choose_target, get_passer
from .play_outcome import PassOutcome, PlayOutcomeType, TurnoverType
from .play_situation import PlaySituation


logger = logging.getLogger(__name__)


BASE_THROW_TIME = {
    PassDepth.SHORT: 2.1,
    PassDepth.INTERMEDIATE: 2.6,
    PassDepth.DEEP: 3.0,
}

AIR_YARDS_DISTRIBUTION = {
    PassDepth.SHORT: (4.0, 3.0),
    PassDepth.INTERMEDIATE: (10.0, 4.0),
    PassDepth.DEEP: (18.0, 6.0),
}

PLACEMENT_DEPTH_MULTIPLIER = {
    PassDepth.SHORT: 1.0,
    PassDepth.INTERMEDIATE: 1.2,
    PassDepth.DEEP: 1.5,
}

MAX_CATCH_PLUS_INT = 0.95
MAX_BALL_ERROR = 8.0
PASS_YARDS_RANGE = (-15, 80)


@dataclass
class PassRush:
    time_to_pressure: float
    pressure_level: float


@dataclass
class QBDecision:
    time_to_throw: float
    under_pressure: bool
    severity: float


@dataclass
class CatchPoint:
    result: PlayOutcomeType
    catch_probability: float
    interception_probability: float


class PassPlaySimulator:
    """Simulates a single pass play from the two teams' profiles and personnel"""

    def __init__(self, offense, defense, play_call: PlayCall, situation: PlaySituation, rng: Rng):
        """
        Initialize pass play simulator

        Args:
            offense: Offensive Team with unit profiles prepared
            defense: Defensive Team with unit profiles prepared
            play_call: PlayCall with pass depth and concept
            situation: Current PlaySituation (momentum and player form are read)
            rng: Play stream
        """
        self.offense = offense
        self.defense = defense
        self.play_call = play_call
        self.situation = situation
        self.rng = rng
        self.depth = play_call.pass_depth
        self.skills = SkillReader(situation.player_form)

        self.offense_profile = offense.unit_profiles.offense
        self.defense_profile = defense.unit_profiles.defense

    def simulate_pass_play(self) -> PassOutcome:
        qb = get_passer(self.offense)
        target = choose_target(self.offense, self.depth, self.rng)
        defender = choose_coverage_defender(self.defense, target, self.rng)

        rush = self._model_pass_rush()
        decision = self._model_qb_decision(qb, rush)
        separation = self._model_separation(target, defender)
        ball_error = self._model_ball_placement(qb, decision)
        catch = self._resolve_catch_point(target, defender, separation, ball_error)

        outcome = PassOutcome(
            play_type=PlayType.PASS,
            result=catch.result,
            depth=self.depth,
            concept=self.play_call.concept,
            separation=separation,
            ball_error=ball_error,
            time_to_pressure=rush.time_to_pressure,
            time_to_throw=decision.time_to_throw,
            under_pressure=decision.under_pressure,
            pressure_severity=decision.severity,
            catch_probability=catch.catch_probability,
            interception_probability=catch.interception_probability,
        )
        outcome.participants["passer"] = qb.player_id
        if target is not None:
            outcome.participants["target"] = target.player_id
        if defender is not None:
            outcome.participants["defender"] = defender.player_id

        if self._is_sack(rush, decision, ball_error):
            outcome.result = PlayOutcomeType.SACK
            outcome.sack = True
            outcome.yards = max(-15, round(-abs(self.rng.normal(5, 3))))
            return outcome

        if catch.result == PlayOutcomeType.INTERCEPTION:
            outcome.intercepted = True
            outcome.turnover_type = TurnoverType.INTERCEPTION
            return outcome

        if catch.result == PlayOutcomeType.PASS_INCOMPLETE:
            return outcome

        outcome.completed = True
        outcome.air_yards = self._air_yards(separation, ball_error)
        outcome.yards_after_catch = model_yards_after_catch(
            target, self.defense_profile, self.skills, self.rng)
        total = outcome.air_yards + outcome.yards_after_catch

        fumble = check_fumble(target, self.defense_profile, self.skills, self.rng)
        if fumble.fumbled:
            total += fumble.extra_yards
            outcome.fumble = True
            outcome.fumble_lost = fumble.lost
            if fumble.lost:
                outcome.result = PlayOutcomeType.FUMBLE_LOST
                outcome.turnover_type = TurnoverType.FUMBLE
            else:
                outcome.result = PlayOutcomeType.FUMBLE_RECOVERED

        outcome.yards = int(round(clamp(total, *PASS_YARDS_RANGE)))
        return outcome

    # ==================== Sub-models ====================

    def _model_pass_rush(self) -> PassRush:
        protection = self.offense_profile.protection / 100.0
        pass_rush = self.defense_profile.pass_rush / 100.0
        blitz = self.defense_profile.blitz_aggression

        mu = 2.6 + 0.7 * (protection - pass_rush) - 0.25 * blitz
        sigma = 0.4 + 0.25 * blitz
        # a hot defense gets home faster
        mu -= 0.25 * clamp01(-self.situation.momentum)

        if self.play_call.concept == PassConcept.PLAY_ACTION:
            mu += 0.15
        elif self.play_call.concept == PassConcept.SCREEN or self.depth == PassDepth.SHORT:
            mu -= 0.2

        t_pressure = clamp(self.rng.normal(mu, sigma), 0.7, 5.0)
        return PassRush(t_pressure, clamp01(1.2 - t_pressure / 3.0))

    def _model_qb_decision(self, qb: Player, rush: PassRush) -> QBDecision:
        base = BASE_THROW_TIME[self.depth]
        base -= 0.5 * (self.skills.read(qb, "C", "qb_processing") - 0.5)
        base += 0.4 * (self.skills.raw(qb, "P", "risk_tolerance") - 0.5)
        t_throw = clamp(self.rng.normal(base, 0.25), 1.0, 4.5)

        t_pressure = rush.time_to_pressure
        under_pressure = False
        if t_pressure < 0.6:
            under_pressure = True
        elif t_pressure < t_throw:
            under_pressure = True
            hurry = clamp01((t_throw - t_pressure) / 1.5)
            t_throw = lerp(t_throw, t_pressure, hurry)

        if under_pressure:
            severity = clamp01(0.5 + 0.5 * rush.pressure_level)
        else:
            severity = 0.4 * rush.pressure_level
        return QBDecision(t_throw, under_pressure, severity)

    def _model_separation(self, target: Optional[Player], defender: Optional[Player]) -> float:
        if target is None:
            return 0.0

        read = self.skills.read
        agility = read(target, "A", "agility")
        speed_long = read(target, "A", "speed_long")
        sep_off = (read(target, "T", "route_craft") + agility + speed_long + read(target, "T", "hands")) / 4.0
        if self.depth == PassDepth.DEEP:
            sep_off = clamp01(sep_off + 0.15 * (speed_long - 0.5))
        elif self.depth == PassDepth.SHORT:
            sep_off = clamp01(sep_off + 0.12 * (agility - 0.5))

        team_coverage = self.defense_profile.coverage / 100.0
        if defender is not None:
            cov_def = (0.35 * read(defender, "C", "coverage_awareness")
                       + 0.25 * read(defender, "C", "pattern_iq")
                       + 0.2 * read(defender, "A", "change_of_direction")
                       + 0.2 * read(defender, "A", "speed_long"))
        else:
            cov_def = team_coverage

        team_pass = self.offense_profile.passing / 100.0
        separation = 1.5 + 1.3 * 0.5 * (sep_off + team_pass - (cov_def + team_coverage))
        if self.depth == PassDepth.DEEP:
            separation += 0.2
        elif self.depth == PassDepth.SHORT:
            separation -= 0.1

        return clamp(separation + self.rng.normal(0.0, 0.7), -2.0, 5.0)

    def _model_ball_placement(self, qb: Player, decision: QBDecision) -> float:
        accuracy = (0.4 * self.skills.read(qb, "C", "qb_processing")
                    + 0.25 * self.skills.read(qb, "T", "qb_under_pressure")
                    + 0.25 * self.skills.read(qb, "T", "qb_pocket")
                    + 0.1 * self.skills.raw(qb, "P", "emotional_stability"))
        effective = clamp01(accuracy - 0.3 * decision.severity)

        multiplier = PLACEMENT_DEPTH_MULTIPLIER[self.depth]
        mean_error = (2.5 - 2.0 * effective) * multiplier
        sigma = (0.7 - 0.3 * effective) * multiplier
        return min(abs(self.rng.normal(mean_error, sigma)), MAX_BALL_ERROR)

    def _resolve_catch_point(self, target: Optional[Player], defender: Optional[Player],
                             separation: float, ball_error: float) -> CatchPoint:
        if target is None:
            return CatchPoint(PlayOutcomeType.PASS_INCOMPLETE, 0.0, 0.0)

        effective_sep = separation - 0.6 * ball_error
        reliability = (self.skills.read(target, "T", "hands") + self.skills.read(target, "T", "ball_security")) / 2.0
        p_catch = logistic(-0.2 + 0.9 * effective_sep) * (0.7 + 0.6 * (reliability - 0.5))

        ball_skills = self.skills.read(defender, "C", "coverage_awareness")
        p_int = (logistic(-1.4 - 0.9 * effective_sep)
                 * (0.6 + 0.8 * (ball_skills - 0.5))
                 * (0.7 + 0.6 * defense_chaos(self.defense_profile)))

        p_catch = clamp01(p_catch)
        p_int = clamp01(p_int)
        total = p_catch + p_int
        if total > MAX_CATCH_PLUS_INT:
            p_catch *= MAX_CATCH_PLUS_INT / total
            p_int *= MAX_CATCH_PLUS_INT / total

        r = self.rng.next()
        if r < p_int:
            result = PlayOutcomeType.INTERCEPTION
        elif r < p_int + p_catch:
            result = PlayOutcomeType.PASS_COMPLETE
        else:
            result = PlayOutcomeType.PASS_INCOMPLETE
        return CatchPoint(result, p_catch, p_int)

    def _is_sack(self, rush: PassRush, decision: QBDecision, ball_error: float) -> bool:
        if not (decision.under_pressure
                and rush.time_to_pressure < 0.8 * decision.time_to_throw
                and ball_error > 3.0):
            return False
        return self.rng.next() < 0.5

    def _air_yards(self, separation: float, ball_error: float) -> int:
        mu, sigma = AIR_YARDS_DISTRIBUTION[self.depth]
        air = self.rng.normal(mu, sigma) - 0.5 * ball_error + 0.5 * separation
        return int(round(clamp(air, -5.0, 35.0)))
