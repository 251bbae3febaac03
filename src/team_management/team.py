"""Team model: roster, depth chart queries and attached unit profiles."""

import logging
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

from .player import Player
from .positions import normalize_position

if TYPE_CHECKING:
    from .unit_profiles import UnitProfiles


logger = logging.getLogger(__name__)


class Team:
    """
    A team as seen by the simulation engine.

    The depth chart is rebuilt from the roster on construction: players are grouped
    by position and ordered by explicit depth, then overall rating descending.
    """

    def __init__(self, team_id: str, team_name: str, roster: Optional[Iterable[Player]] = None):
        self.team_id = team_id
        self.team_name = team_name
        self.roster: List[Player] = list(roster or [])
        self.unit_profiles: Optional["UnitProfiles"] = None
        self.depth_chart: Dict[str, List[Player]] = {}
        self._players_by_id: Dict[str, Player] = {}
        self.rebuild_depth_chart()

    def rebuild_depth_chart(self) -> None:
        depth_chart: Dict[str, List[Player]] = {}
        for player in self.roster:
            depth_chart.setdefault(player.position, []).append(player)
        for players in depth_chart.values():
            # sort() is stable, so identical keys keep roster order
            players.sort(key=lambda p: p.depth_sort_key())
        self.depth_chart = depth_chart
        self._players_by_id = {p.player_id: p for p in self.roster}

    def add_player(self, player: Player) -> None:
        player.team_id = self.team_id
        self.roster.append(player)
        self.rebuild_depth_chart()

    def get_depth_chart(self, position: str) -> List[Player]:
        return list(self.depth_chart.get(normalize_position(position), []))

    def get_starters(self, position: str, count: int) -> List[Player]:
        return self.get_depth_chart(position)[:count]

    def get_starter(self, position: str) -> Optional[Player]:
        players = self.depth_chart.get(normalize_position(position))
        return players[0] if players else None

    def get_player(self, player_id: str) -> Optional[Player]:
        return self._players_by_id.get(player_id)

    def psyche_mean(self, key: str, default: float = 0.5) -> float:
        """Roster mean of one psyche component (players without a profile are skipped)."""
        values = [p.latent.P.get(key) for p in self.roster if p.latent is not None]
        if not values:
            return default
        return sum(values) / len(values)

    def __repr__(self):
        return f"Team({self.team_id!r}, {self.team_name!r}, roster={len(self.roster)})"
