"""
Latent Attribute Deriver

Converts a player's raw factor/trait ratings into a LatentProfile. Raw inputs are
scaled to [0, 1] (values above 1000 are treated as 0-10000 scale, everything else
as 0-100), then combined into named base components and derived composites.

Every composite has an explicit 0.5 fallback for absent inputs, so the unit
aggregator and play models never special-case missing data. Players without any
raw data get a fallback profile built from their overall rating.
"""

import logging
from typing import Dict, Mapping, Optional

from shared.math_utils import clamp, clamp01, is_finite_number, mean_or_default
from shared.rng import Rng
from .latent_profile import DEFAULT_LATENT_VALUE, LatentProfile
from .player import DEFAULT_OVERALL_RATING, Player


logger = logging.getLogger(__name__)


# =============================================================================
# RAW INPUT MAPPING (latent component -> raw rating key)
# =============================================================================

ATHLETIC_INPUTS = {
    "explosiveness": "explosiveness",
    "top_speed": "top_speed",
    "change_of_direction": "change_of_direction",
    "strength": "play_strength",
    "functional_strength_run": "functional_strength_run",
    "functional_strength_pass": "functional_strength_pass",
    "durability": "durability",
    "speed_short": "speed_5y",
    "long_speed_reserve": "long_speed_reserve",
    "short_area_quickness": "short_area_quickness",
    "balance": "balance_control",
}

COGNITIVE_INPUTS = {
    "decision_speed": "decision_speed",
    "pattern_iq": "pattern_iq",
    "discipline": "discipline",
    "read_progression_speed": "read_progression_speed",
    "run_fit_discipline": "run_fit_discipline",
    "zone_coverage": "zone_coverage",
    "man_coverage": "man_coverage",
    "ball_skills_db": "ball_skills_db",
}

TECHNICAL_INPUTS = {
    "route_deception": "route_deception",
    "release_vs_press": "release_vs_press",
    "catch_reliability": "catch_hand_reliability",
    "contested_catch": "contested_catch_skill",
    "sideline_wizardry": "sideline_wizardry",
    "pocket_navigation": "pocket_navigation",
    "throwing_under_duress": "throwing_under_duress",
    "off_script_playmaking": "off_script_playmaking",
    "open_field_tackling": "open_field_tackling",
    "blocking_point_of_attack": "blocking_run_point_of_attack",
    "pass_pro_technique": "pass_pro_technique",
    "ball_security_trait": "ball_security",
}

PSYCHE_INPUTS = {
    "aggression": "aggression",
    "emotional_stability": "emotional_stability",
    "risk_tolerance": "risk_tolerance",
    "creativity": "creativity",
    "discipline": "discipline",
}

VARIANCE_INPUTS = {
    "chaos": "chaos_seed",
    "stability": "stability_seed",
}

RAW_SCALE_THRESHOLD = 1000.0

# Fallback profile defaults (no raw data at all)
FALLBACK_STABILITY = 0.55
FALLBACK_CHAOS = 0.45

# Per-game form bounds
GAME_FORM_RANGE = (0.75, 1.35)


def scale_raw_rating(value) -> Optional[float]:
    """
    Scale one raw rating into [0, 1].

    Values above 1000 are divided by 10000, everything else by 100.
    None and non-finite values are treated as absent.
    """
    if not is_finite_number(value):
        return None
    divisor = 10000.0 if value > RAW_SCALE_THRESHOLD else 100.0
    return clamp01(value / divisor)


def _collect(raw: Mapping[str, float], inputs: Mapping[str, str]) -> Dict[str, float]:
    values = {}
    for component, raw_key in inputs.items():
        scaled = scale_raw_rating(raw.get(raw_key))
        if scaled is not None:
            values[component] = scaled
    return values


def _pick(values: Mapping[str, float], key: str, fallback: float = DEFAULT_LATENT_VALUE) -> float:
    value = values.get(key)
    return fallback if value is None else value


def _volatility_terms(chaos: float, stability: float) -> Dict[str, float]:
    volatility = clamp01(0.6 * chaos + 0.4 * (1.0 - stability))
    return {
        "chaos": chaos,
        "stability": stability,
        "volatility": volatility,
        "game_sigma": 0.04 + 0.08 * volatility,
        "play_sigma": 0.12 + 0.12 * volatility,
    }


def _athletic_composites(a: Dict[str, float]) -> None:
    strength = _pick(a, "strength")
    a["agility"] = mean_or_default(
        [_pick(a, "change_of_direction"), _pick(a, "short_area_quickness")])
    a["power"] = mean_or_default([
        strength,
        _pick(a, "functional_strength_run", strength),
        _pick(a, "functional_strength_pass", strength),
    ])
    a["speed_long"] = mean_or_default([_pick(a, "long_speed_reserve"), _pick(a, "top_speed")])
    a.setdefault("speed_short", DEFAULT_LATENT_VALUE)


def _cognitive_composites(c: Dict[str, float]) -> None:
    if "read_progression_speed" in c:
        c["qb_processing"] = c["read_progression_speed"]
    else:
        c["qb_processing"] = _pick(c, "decision_speed")
    c["run_fit_iq"] = _pick(c, "run_fit_discipline")
    c["coverage_awareness"] = mean_or_default([
        _pick(c, "zone_coverage"), _pick(c, "man_coverage"), _pick(c, "ball_skills_db")])


def _technical_composites(t: Dict[str, float]) -> None:
    t["route_craft"] = mean_or_default([_pick(t, "route_deception"), _pick(t, "release_vs_press")])
    t["hands"] = mean_or_default([
        _pick(t, "catch_reliability"), _pick(t, "contested_catch"), _pick(t, "sideline_wizardry")])
    t["blocking_run"] = _pick(t, "blocking_point_of_attack")
    t["blocking_pass"] = _pick(t, "pass_pro_technique")
    t["qb_under_pressure"] = _pick(t, "throwing_under_duress")
    t["qb_pocket"] = _pick(t, "pocket_navigation")
    t["tackling"] = _pick(t, "open_field_tackling")
    t["ball_security"] = _pick(t, "ball_security_trait")


def _psyche_defaults(p: Dict[str, float]) -> None:
    for key in PSYCHE_INPUTS:
        p.setdefault(key, DEFAULT_LATENT_VALUE)


def build_fallback_profile(player: Player) -> LatentProfile:
    """
    Profile for a player with no raw data.

    Every athletic, cognitive and technical component equals rating_overall / 100
    (60 when the overall is missing too).
    """
    base = clamp01(
        (player.rating_overall if player.rating_overall is not None else DEFAULT_OVERALL_RATING) / 100.0)

    athletic = {key: base for key in ATHLETIC_INPUTS}
    cognitive = {key: base for key in COGNITIVE_INPUTS}
    technical = {key: base for key in TECHNICAL_INPUTS}
    _athletic_composites(athletic)
    _cognitive_composites(cognitive)
    _technical_composites(technical)

    psyche = {
        "discipline": FALLBACK_STABILITY,
        "emotional_stability": FALLBACK_STABILITY,
        "aggression": DEFAULT_LATENT_VALUE,
        "creativity": DEFAULT_LATENT_VALUE,
        "risk_tolerance": DEFAULT_LATENT_VALUE,
    }
    variance = _volatility_terms(FALLBACK_CHAOS, FALLBACK_STABILITY)
    return LatentProfile(athletic, cognitive, technical, psyche, variance)


def derive_latent_profile(player: Player) -> LatentProfile:
    """
    Build a player's LatentProfile from raw ratings.

    Args:
        player: Player with raw_ratings (may be empty)

    Returns:
        New LatentProfile; the player is not modified
    """
    raw = player.raw_ratings or {}
    if not any(is_finite_number(v) for v in raw.values()):
        logger.debug("No raw ratings for %s; using overall-rating fallback profile", player.player_id)
        return build_fallback_profile(player)

    athletic = _collect(raw, ATHLETIC_INPUTS)
    cognitive = _collect(raw, COGNITIVE_INPUTS)
    technical = _collect(raw, TECHNICAL_INPUTS)
    psyche = _collect(raw, PSYCHE_INPUTS)
    seeds = _collect(raw, VARIANCE_INPUTS)

    _athletic_composites(athletic)
    _cognitive_composites(cognitive)
    _technical_composites(technical)
    _psyche_defaults(psyche)
    variance = _volatility_terms(_pick(seeds, "chaos"), _pick(seeds, "stability"))

    return LatentProfile(athletic, cognitive, technical, psyche, variance)


def assign_latent_profile(player: Player) -> LatentProfile:
    """Attach a freshly derived profile, replacing any previous one."""
    profile = derive_latent_profile(player)
    player.latent = profile
    return profile


def ensure_latent_profile(player: Player) -> LatentProfile:
    if player.latent is None:
        return assign_latent_profile(player)
    return player.latent


def sample_player_game_form(profile: LatentProfile, rng: Rng) -> float:
    """Game-day form multiplier: N(1, game_sigma) clamped to [0.75, 1.35]."""
    sigma = profile.V.get("game_sigma", 0.08)
    return clamp(rng.normal(1.0, sigma), *GAME_FORM_RANGE)

