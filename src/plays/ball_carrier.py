"""
Ball carrier models shared by run and pass plays: yards after catch and fumbles.
"""

import math
from dataclasses import dataclass
from typing import Optional

from shared.math_utils import clamp, clamp01
from shared.rng import Rng
from team_management.player import Player
from team_management.unit_profiles import DefenseProfile
from .personnel import SkillReader


YAC_RANGE = (-2.0, 80.0)
FUMBLE_EXTRA_RANGE = (-15, 60)
BASE_FUMBLE_RATE = 0.015


@dataclass
class FumbleResult:
    fumbled: bool = False
    lost: bool = False
    extra_yards: int = 0


def defense_chaos(defense: DefenseProfile) -> float:
    return defense.chaos_plays / 100.0


def defense_tackling(defense: DefenseProfile) -> float:
    return defense.tackling / 100.0


def model_yards_after_catch(carrier: Optional[Player], defense: DefenseProfile,
                            skills: SkillReader, rng: Rng) -> float:
    """
    Log-normal style YAC draw.

    Better tackling defenses lower the mean and more often stop the receiver on
    the spot; defensive chaos fattens both tails.
    """
    if carrier is None:
        return 0.0

    tackling = defense_tackling(defense)
    chaos = defense_chaos(defense)
    elusiveness = (skills.read(carrier, "A", "agility") + skills.read(carrier, "A", "speed_short")) / 2.0
    power = skills.read(carrier, "A", "power")

    mean_yac = 3.0 + 5.0 * (0.6 * elusiveness + 0.4 * power - tackling)
    mu = math.log(max(0.5, 0.6 * mean_yac))
    sigma = 0.6 * (1 + 0.4 * (chaos - 0.5))

    yac = math.exp(rng.normal(mu, sigma)) - 0.5
    if not math.isfinite(yac):
        yac = 0.0

    # immediate tackle at the catch point
    if rng.next() < clamp01(0.7 * tackling):
        yac *= 0.2

    return clamp(yac, *YAC_RANGE)


def fumble_rate(carrier: Player, defense: DefenseProfile, skills: SkillReader) -> float:
    security = 0.6 * skills.read(carrier, "T", "ball_security") + 0.4 * skills.raw(carrier, "P", "emotional_stability")
    rate = BASE_FUMBLE_RATE * (1 + 1.2 * (defense_chaos(defense) - security)
                               + 0.6 * (defense_tackling(defense) - 0.5))
    return clamp01(rate)


def check_fumble(carrier: Optional[Player], defense: DefenseProfile,
                 skills: SkillReader, rng: Rng) -> FumbleResult:
    """
    Roll for a fumble by the ball carrier.

    A lost fumble returns extra yards from N(5, 10) for the defense's return;
    a recovered one costs a little ground, N(-2, 4). Both are clamped to [-15, 60].
    """
    if carrier is None:
        return FumbleResult()

    if rng.next() >= fumble_rate(carrier, defense, skills):
        return FumbleResult()

    lost = rng.next() < clamp01(0.5 + 0.15 * (defense_chaos(defense) - 0.5))
    extra = round(rng.normal(5, 10)) if lost else round(rng.normal(-2, 4))
    return FumbleResult(fumbled=True, lost=lost, extra_yards=int(clamp(extra, *FUMBLE_EXTRA_RANGE)))
