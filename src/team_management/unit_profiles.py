"""
Team Unit Aggregator

Reduces starters' latent profiles into three team-level unit profiles:
- OffenseProfile: pass, run, protection, explosiveness, consistency (0-100) plus
  the qb_reliance slider (0-1)
- DefenseProfile: coverage, pass_rush, run_fit, tackling, chaos_plays (0-100) plus
  the blitz_aggression slider (0-1)
- SpecialTeamsProfile: kicking, coverage, volatility and the kick-model ratings

Starters are the top-N at each position by explicit depth, then rating. A position
with no eligible players contributes 0.5 to every composite, so aggregation never
fails or yields NaN.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, List, Optional

from shared.math_utils import clamp01, mean_or_default
from .latent_deriver import ensure_latent_profile
from .latent_profile import DEFAULT_LATENT_VALUE
from .player import Player
from .positions import Position
from .team import Team


logger = logging.getLogger(__name__)


# =============================================================================
# STARTER COUNTS
# =============================================================================

OFFENSE_STARTERS = {
    Position.QB: 1,
    Position.RB: 1,
    Position.WR: 3,
    Position.TE: 1,
    Position.FB: 1,
    Position.LT: 1,
    Position.LG: 1,
    Position.C: 1,
    Position.RG: 1,
    Position.RT: 1,
}

DEFENSE_STARTERS = {
    Position.DT: 2,
    Position.EDGE: 2,
    Position.LB: 3,
    Position.CB: 3,
    Position.S: 2,
}

SPECIAL_TEAMS_STARTERS = {
    Position.K: 1,
    Position.P: 1,
}

MISSING_STARTER_RATING = 60
DEFAULT_SKILL_OVERALL = 0.6


@dataclass
class OffenseProfile:
    passing: int = MISSING_STARTER_RATING
    running: int = MISSING_STARTER_RATING
    protection: int = MISSING_STARTER_RATING
    explosiveness: int = MISSING_STARTER_RATING
    consistency: int = MISSING_STARTER_RATING
    qb_reliance: float = 0.5


@dataclass
class DefenseProfile:
    coverage: int = MISSING_STARTER_RATING
    pass_rush: int = MISSING_STARTER_RATING
    run_fit: int = MISSING_STARTER_RATING
    tackling: int = MISSING_STARTER_RATING
    chaos_plays: int = MISSING_STARTER_RATING
    blitz_aggression: float = 0.5


@dataclass
class SpecialTeamsProfile:
    kicking: int = MISSING_STARTER_RATING
    coverage: int = MISSING_STARTER_RATING
    volatility: int = MISSING_STARTER_RATING
    kick_accuracy: int = MISSING_STARTER_RATING
    kick_power: int = MISSING_STARTER_RATING
    punt_control: int = MISSING_STARTER_RATING
    punt_field_flip: int = MISSING_STARTER_RATING


@dataclass
class UnitProfiles:
    """Offense/defense/special-teams triple owned by a Team."""
    offense: OffenseProfile = field(default_factory=OffenseProfile)
    defense: DefenseProfile = field(default_factory=DefenseProfile)
    special: SpecialTeamsProfile = field(default_factory=SpecialTeamsProfile)

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            "offense": asdict(self.offense),
            "defense": asdict(self.defense),
            "special": asdict(self.special),
        }


def to100(value: float) -> int:
    return int(round(clamp01(value) * 100))


def pick_starters(team: Team, position: str, count: int) -> List[Player]:
    return team.get_starters(position, count)


def _avg(players: List[Player], reader: Callable[[Player], float]) -> float:
    """Average a latent reading over players; empty groups fall back to 0.5."""
    return mean_or_default((reader(p) for p in players), DEFAULT_LATENT_VALUE)


def _starters(team: Team, counts: Dict[str, int]) -> Dict[str, List[Player]]:
    groups = {}
    for position, count in counts.items():
        players = pick_starters(team, position, count)
        for player in players:
            ensure_latent_profile(player)
        groups[position] = players
    return groups


def _overall01(players: List[Player]) -> float:
    ratings = [p.rating_overall / 100.0 for p in players if p.rating_overall is not None]
    return mean_or_default(ratings, DEFAULT_SKILL_OVERALL)


def compute_offense_profile(team: Team) -> OffenseProfile:
    g = _starters(team, OFFENSE_STARTERS)
    qbs, rbs, wrs, tes, fbs = g[Position.QB], g[Position.RB], g[Position.WR], g[Position.TE], g[Position.FB]
    line = [p for pos in Position.get_offensive_line_positions() for p in g[pos]]
    skill = qbs + rbs + wrs + tes
    everyone = skill + fbs + line

    qb_pass = (0.55 * _avg(qbs, lambda p: p.latent.C.get("qb_processing"))
               + 0.45 * _avg(qbs, lambda p: p.latent.T.get("qb_under_pressure")))
    wr_craft = (_avg(wrs, lambda p: p.latent.T.get("route_craft"))
                + _avg(wrs, lambda p: p.latent.T.get("hands"))) / 2.0
    te_craft = (_avg(tes, lambda p: p.latent.T.get("route_craft"))
                + _avg(tes, lambda p: p.latent.T.get("hands"))) / 2.0
    craft = 0.6 * wr_craft + 0.4 * te_craft
    protection = _avg(line, lambda p: p.latent.T.get("blocking_pass"))
    passing = 0.55 * qb_pass + 0.30 * craft + 0.15 * protection

    rb_agility = _avg(rbs, lambda p: p.latent.A.get("agility"))
    rb_security = _avg(rbs, lambda p: p.latent.T.get("ball_security"))
    rb_power = _avg(rbs, lambda p: p.latent.A.get("power"))
    line_run = _avg(line, lambda p: p.latent.T.get("blocking_run"))
    lead_block = (_avg(fbs, lambda p: p.latent.T.get("blocking_run"))
                  + _avg(tes, lambda p: p.latent.T.get("blocking_run"))) / 2.0
    running = (0.40 * (rb_agility + rb_security) / 2.0 + 0.20 * rb_power
               + 0.30 * line_run + 0.10 * lead_block)

    explosiveness = (0.55 * _avg(skill, lambda p: p.latent.A.get("explosiveness"))
                     + 0.45 * _avg(skill, lambda p: p.latent.A.get("speed_long")))
    consistency = (0.5 * _avg(everyone, lambda p: p.latent.P.get("discipline"))
                   + 0.5 * _avg(everyone, lambda p: p.latent.P.get("emotional_stability")))

    qb_overall = _overall01(qbs)
    skill_overall = _overall01(rbs + wrs + tes)
    qb_reliance = clamp01(0.5 + 0.5 * (qb_overall - skill_overall))

    return OffenseProfile(
        passing=to100(passing),
        running=to100(running),
        protection=to100(protection),
        explosiveness=to100(explosiveness),
        consistency=to100(consistency),
        qb_reliance=qb_reliance,
    )


def compute_defense_profile(team: Team) -> DefenseProfile:
    g = _starters(team, DEFENSE_STARTERS)
    dts, edges, lbs = g[Position.DT], g[Position.EDGE], g[Position.LB]
    secondary = g[Position.CB] + g[Position.S]
    front_seven = dts + edges + lbs
    everyone = front_seven + secondary

    coverage = (0.6 * _avg(secondary, lambda p: p.latent.C.get("coverage_awareness"))
                + 0.4 * _avg(secondary, lambda p: p.latent.C.get("pattern_iq")))
    pass_rush = (0.35 * _avg(edges, lambda p: p.latent.A.get("explosiveness"))
                 + 0.25 * _avg(edges, lambda p: p.latent.A.get("power"))
                 + 0.20 * _avg(dts, lambda p: p.latent.A.get("explosiveness"))
                 + 0.20 * _avg(dts, lambda p: p.latent.A.get("power")))
    run_fit = (0.40 * _avg(front_seven, lambda p: p.latent.C.get("run_fit_iq"))
               + 0.35 * _avg(front_seven, lambda p: p.latent.T.get("tackling"))
               + 0.25 * _avg(front_seven, lambda p: p.latent.A.get("power")))
    tackling = _avg(everyone, lambda p: p.latent.T.get("tackling"))

    aggression = _avg(everyone, lambda p: p.latent.P.get("aggression"))
    volatility = _avg(everyone, lambda p: p.latent.V.get("volatility"))
    discipline = _avg(everyone, lambda p: p.latent.P.get("discipline"))

    return DefenseProfile(
        coverage=to100(coverage),
        pass_rush=to100(pass_rush),
        run_fit=to100(run_fit),
        tackling=to100(tackling),
        chaos_plays=to100(0.6 * aggression + 0.4 * volatility),
        blitz_aggression=clamp01(0.5 * aggression + 0.2 * volatility + 0.3 * (1.0 - discipline)),
    )


def _specialist_quality(players: List[Player]) -> float:
    return (0.4 * _avg(players, lambda p: p.latent.T.get("ball_security"))
            + 0.6 * _avg(players, lambda p: p.latent.A.get("power")))


def compute_special_teams_profile(team: Team) -> SpecialTeamsProfile:
    g = _starters(team, SPECIAL_TEAMS_STARTERS)
    kickers, punters = g[Position.K], g[Position.P]
    specialists = kickers + punters

    discipline = _avg(specialists, lambda p: p.latent.P.get("discipline"))
    volatility = _avg(specialists, lambda p: p.latent.V.get("volatility"))

    profile = SpecialTeamsProfile(
        kicking=to100((_specialist_quality(kickers) + _specialist_quality(punters)) / 2.0),
        coverage=to100(discipline * (1.0 - 0.5 * volatility)),
        volatility=to100(volatility),
    )

    if kickers:
        profile.kick_accuracy = to100(0.6 * _avg(kickers, lambda p: p.latent.T.get("ball_security"))
                                      + 0.4 * _avg(kickers, lambda p: p.latent.P.get("emotional_stability")))
        profile.kick_power = to100(_avg(kickers, lambda p: p.latent.A.get("power")))
    else:
        logger.debug("%s has no kicker; kick ratings default to %d", team.team_id, MISSING_STARTER_RATING)

    if punters:
        profile.punt_control = to100(0.6 * _avg(punters, lambda p: p.latent.T.get("ball_security"))
                                     + 0.4 * _avg(punters, lambda p: p.latent.P.get("discipline")))
        profile.punt_field_flip = to100(_avg(punters, lambda p: p.latent.A.get("power")))
    else:
        logger.debug("%s has no punter; punt ratings default to %d", team.team_id, MISSING_STARTER_RATING)

    return profile


def game_day_starters(team: Team) -> List[Player]:
    """Every starter across the three units, in a fixed position order"""
    starters = []
    for counts in (OFFENSE_STARTERS, DEFENSE_STARTERS, SPECIAL_TEAMS_STARTERS):
        for position, count in counts.items():
            starters.extend(pick_starters(team, position, count))
    return starters


def compute_unit_profiles(team: Team) -> UnitProfiles:
    return UnitProfiles(
        offense=compute_offense_profile(team),
        defense=compute_defense_profile(team),
        special=compute_special_teams_profile(team),
    )


def prepare_team_for_simulation(team: Team, force: bool = False) -> UnitProfiles:
    """
    Attach latent profiles to every rostered player and compute unit profiles.

    Args:
        team: Team to prepare
        force: Recompute unit profiles even when the team already has them

    Returns:
        The team's UnitProfiles
    """
    for player in team.roster:
        ensure_latent_profile(player)
    if team.unit_profiles is None or force:
        team.unit_profiles = compute_unit_profiles(team)
        logger.debug("Unit profiles for %s: %s", team.team_id, team.unit_profiles.to_dict())
    return team.unit_profiles
