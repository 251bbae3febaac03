"""
Roster builder

Turns plain dict rows (as handed over by a league data loader) into Player and
Team objects. Recognised row keys:

    player_id / id, name, position, depth, rating_overall, rating_pos, raw_ratings

Any other numeric keys on the row are folded into raw_ratings, so flat tabular rows
work without reshaping.
"""

from typing import Any, Dict, Iterable, Mapping

from shared.math_utils import is_finite_number
from .player import Player
from .team import Team


IDENTITY_KEYS = {"player_id", "id", "name", "position", "depth", "rating_overall",
                 "rating_pos", "raw_ratings", "team_id"}


def build_player(row: Mapping[str, Any], team_id: str = None) -> Player:
    """
    Build a Player from one roster row.

    Raises:
        ValueError: If the row has no player id or position
    """
    player_id = row.get("player_id", row.get("id"))
    position = row.get("position")
    if player_id is None or not position:
        raise ValueError(f"Roster row needs an id and a position: {dict(row)}")

    raw: Dict[str, float] = dict(row.get("raw_ratings") or {})
    for key, value in row.items():
        if key not in IDENTITY_KEYS and is_finite_number(value):
            raw.setdefault(key, value)

    return Player(
        player_id=str(player_id),
        name=row.get("name") or str(player_id),
        position=position,
        team_id=team_id or row.get("team_id"),
        raw_ratings=raw,
        rating_overall=row.get("rating_overall"),
        rating_pos=row.get("rating_pos"),
        depth=row.get("depth"),
    )


def build_team(team_id: str, team_name: str, rows: Iterable[Mapping[str, Any]]) -> Team:
    players = [build_player(row, team_id) for row in rows]
    return Team(team_id, team_name, players)
