"""
Team Management Module

Roster, depth chart, latent ability derivation and team unit profiles consumed
by the play engine.
"""

from .player import Player
from .positions import Position, SideOfBall
from .team import Team
from .latent_profile import LatentProfile, LatentSubVector
from .latent_deriver import assign_latent_profile, derive_latent_profile
from .unit_profiles import UnitProfiles, compute_unit_profiles, prepare_team_for_simulation
from .roster_builder import build_team

__all__ = [
    'Player',
    'Position',
    'SideOfBall',
    'Team',
    'LatentProfile',
    'LatentSubVector',
    'assign_latent_profile',
    'derive_latent_profile',
    'UnitProfiles',
    'compute_unit_profiles',
    'prepare_team_for_simulation',
    'build_team',
]
