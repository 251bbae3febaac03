"""Player model consumed by the latent deriver and the play simulators."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .latent_profile import LatentProfile
from .positions import SideOfBall, normalize_position, side_of_ball


MISSING_DEPTH = 999
DEFAULT_OVERALL_RATING = 60.0


@dataclass(eq=False)
class Player:
    """
    One rostered player.

    Attributes:
        player_id: Stable identifier used as the key for player stat rows
        name: Display name used in play-by-play text
        position: Position code (see positions.Position)
        team_id: Owning team identifier
        raw_ratings: Raw factor/trait inputs on a 0-100 or 0-10000 scale
        rating_overall: Overall rating (0-100), used for depth ordering and fallbacks
        rating_pos: Position-specific rating (0-100)
        depth: Explicit depth chart slot (1 = starter); None sorts last
        latent: Derived LatentProfile, attached by the latent deriver
    """
    player_id: str
    name: str
    position: str
    team_id: Optional[str] = None
    raw_ratings: Dict[str, float] = field(default_factory=dict)
    rating_overall: Optional[float] = None
    rating_pos: Optional[float] = None
    depth: Optional[int] = None
    latent: Optional[LatentProfile] = None

    def __post_init__(self):
        self.position = normalize_position(self.position)

    @property
    def side(self) -> SideOfBall:
        return side_of_ball(self.position)

    @property
    def depth_order(self) -> int:
        return self.depth if self.depth is not None else MISSING_DEPTH

    @property
    def overall(self) -> float:
        return self.rating_overall if self.rating_overall is not None else DEFAULT_OVERALL_RATING

    def depth_sort_key(self):
        """Explicit depth first, then overall rating descending."""
        return (self.depth_order, -(self.rating_overall or 0.0))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "position": self.position,
            "team_id": self.team_id,
            "rating_overall": self.rating_overall,
            "rating_pos": self.rating_pos,
            "depth": self.depth,
        }

    def __str__(self):
        return f"{self.name} ({self.position})"
