"""
Play personnel

Who is on the field for a given play call: passer, ball carrier, targeted
receiver, primary coverage defender and specialists. Missing starters are
replaced by a stand-in player so the play models never have to special-case an
empty depth chart.
"""

import logging
from typing import List, Mapping, Optional

from play_type import PassDepth
from shared.math_utils import clamp01
from shared.rng import Rng
from team_management.latent_deriver import ensure_latent_profile
from team_management.player import Player
from team_management.positions import Position
from team_management.unit_profiles import MISSING_STARTER_RATING


logger = logging.getLogger(__name__)


STAND_IN_PREFIX = "stand-in"
COVERAGE_POOL_SIZE = 3


def make_stand_in(team, position: str) -> Player:
    """Neutral replacement-level player used when a team has nobody at a position"""
    player = Player(
        player_id=f"{STAND_IN_PREFIX}-{team.team_id}-{position}",
        name=f"{team.team_name} {position}",
        position=position,
        team_id=team.team_id,
        rating_overall=MISSING_STARTER_RATING,
    )
    ensure_latent_profile(player)
    return player


def is_stand_in(player: Optional[Player]) -> bool:
    return player is not None and player.player_id.startswith(STAND_IN_PREFIX)


def participant_name(team, player_id: Optional[str], fallback: str = "") -> str:
    """Display name for a participant id, stand-ins included"""
    if not player_id or team is None:
        return fallback
    player = team.get_player(player_id)
    if player is not None:
        return player.name
    if player_id.startswith(STAND_IN_PREFIX):
        return f"{team.team_name} {player_id.rsplit('-', 1)[-1]}"
    return fallback


def starter_or_stand_in(team, position: str) -> Player:
    player = team.get_starter(position)
    if player is None:
        logger.debug("%s has no %s; using a stand-in", team.team_id, position)
        return make_stand_in(team, position)
    ensure_latent_profile(player)
    return player


def get_passer(team) -> Player:
    return starter_or_stand_in(team, Position.QB)


def get_ball_carrier(team) -> Player:
    """RB1, then FB1, then a stand-in back"""
    carrier = team.get_starter(Position.RB) or team.get_starter(Position.FB)
    if carrier is None:
        logger.debug("%s has no RB or FB; using a stand-in", team.team_id)
        return make_stand_in(team, Position.RB)
    ensure_latent_profile(carrier)
    return carrier


def choose_target(team, depth: PassDepth, rng: Rng) -> Optional[Player]:
    """
    Pick the targeted receiver for a pass of the given depth.

    Candidates are drawn uniformly; with no candidates fall back to WR1, then the
    first rostered player, then nobody.
    """
    wrs = team.get_depth_chart(Position.WR)
    tes = team.get_depth_chart(Position.TE)
    rbs = team.get_depth_chart(Position.RB)

    if depth == PassDepth.SHORT:
        bucket = rbs[:1] + tes[:1] + wrs[:2]
    elif depth == PassDepth.DEEP:
        bucket = wrs[:3]
    else:
        bucket = wrs[:2] + tes[:1]

    if bucket:
        target = bucket[rng.next_int(len(bucket))]
    elif wrs:
        target = wrs[0]
    elif team.roster:
        target = team.roster[0]
    else:
        return None

    ensure_latent_profile(target)
    return target


def coverage_pool(team, target: Player) -> List[Player]:
    if target.position == Position.WR:
        return team.get_depth_chart(Position.CB)
    if target.position == Position.TE:
        return team.get_depth_chart(Position.S) + team.get_depth_chart(Position.LB)
    if target.position in (Position.RB, Position.FB):
        return team.get_depth_chart(Position.LB)
    return team.get_depth_chart(Position.CB) + team.get_depth_chart(Position.S)


def choose_coverage_defender(team, target: Optional[Player], rng: Rng) -> Optional[Player]:
    """Primary coverage defender, uniformly among the top three of the matching pool"""
    if target is None:
        return None
    pool = coverage_pool(team, target)
    if not pool:
        return None
    defender = pool[rng.next_int(min(COVERAGE_POOL_SIZE, len(pool)))]
    ensure_latent_profile(defender)
    return defender


class SkillReader:
    """
    Reads latent components for the players in one play, scaled by each player's
    game-day form (1.0 when no form was sampled).
    """

    def __init__(self, player_form: Optional[Mapping[str, float]] = None):
        self.player_form = player_form or {}

    def form(self, player: Optional[Player]) -> float:
        if player is None:
            return 1.0
        return self.player_form.get(player.player_id, 1.0)

    def read(self, player: Optional[Player], group: str, key: str, fallback: float = 0.5) -> float:
        if player is None or player.latent is None:
            return fallback
        return clamp01(player.latent.get(group, key, fallback) * self.form(player))

    def raw(self, player: Optional[Player], group: str, key: str, fallback: float = 0.5) -> float:
        """Unscaled read, for psyche traits that game form does not touch"""
        if player is None or player.latent is None:
            return fallback
        return player.latent.get(group, key, fallback)
