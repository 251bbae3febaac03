"""
Play Log

Play-by-play entries and game events recorded by the game loop, plus the text
helpers that render them:

- format_clock: "M:SS"
- format_down_and_distance: "3rd & 4 at OPP 35"
- describe_play: "Smith to Jones for 12 yards - TOUCHDOWN"
- build_tags: RUN/PASS/FG/PUNT/TD/SCORE/SAFETY/TURNOVER/INT/SACK/PENALTY/KNEEL/SPIKE
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from play_type import PlayType
from plays.personnel import participant_name
from plays.play_outcome import PlayOutcome, PlayOutcomeType, TurnoverType
from shared.math_utils import clamp
from .game_constants import GameEventType


ORDINALS = {1: "1st", 2: "2nd", 3: "3rd", 4: "4th"}


def format_clock(seconds: float) -> str:
    """Format seconds remaining as M:SS"""
    if seconds is None or seconds < 0:
        return "0:00"
    whole = int(seconds)
    return f"{whole // 60}:{whole % 60:02d}"


def format_field_position(yard_line: int) -> str:
    y = int(clamp(round(yard_line), 0, 100))
    if y == 50:
        return "50"
    if y < 50:
        return f"OWN {y}"
    return f"OPP {100 - y}"


def format_down_and_distance(down: int, distance: int, yard_line: int) -> str:
    ordinal = ORDINALS.get(down, f"{down}th")
    dist = max(1, int(round(distance or 1)))
    return f"{ordinal} & {dist} at {format_field_position(yard_line)}"


_name = participant_name


def describe_play(outcome: PlayOutcome, offense_team=None) -> str:
    """
    One-line description of an applied outcome.

    Args:
        outcome: Outcome after the game loop applied it (touchdown flag set)
        offense_team: Team in possession, used to resolve participant names
    """
    team = getattr(offense_team, "team_name", None) or "Offense"
    yards = outcome.yards
    suffix_td = " - TOUCHDOWN" if outcome.touchdown else ""
    people = outcome.participants

    if outcome.result == PlayOutcomeType.PENALTY_ONLY:
        return f"{team} {outcome.penalty}" if outcome.penalty else f"{team} penalty"

    if outcome.play_type == PlayType.FIELD_GOAL:
        kicker = _name(offense_team, people.get("kicker"), team)
        dist = getattr(outcome, "distance", 0)
        if getattr(outcome, "made", False):
            return f"{kicker} field goal from {dist} yards is good"
        return f"{kicker} misses field goal from {dist} yards"

    if outcome.play_type == PlayType.PUNT:
        punter = _name(offense_team, people.get("punter"), team)
        return f"{punter} punts {getattr(outcome, 'distance', 0)} yards"

    if outcome.play_type == PlayType.KNEEL:
        return f"{_name(offense_team, people.get('passer'), team)} kneels"

    if outcome.play_type == PlayType.SPIKE:
        return f"{_name(offense_team, people.get('passer'), team)} spikes the ball"

    if outcome.play_type == PlayType.PASS:
        passer = _name(offense_team, people.get("passer"), team)
        receiver = _name(offense_team, people.get("target"), "")
        if outcome.sack:
            return f"{passer} sacked for a loss of {abs(yards)} yards"
        if outcome.turnover_type == TurnoverType.INTERCEPTION:
            return f"{passer} pass intercepted"
        if not getattr(outcome, "completed", False):
            return f"{passer} incomplete pass"
        if yards > 0:
            if receiver:
                return f"{passer} to {receiver} for {yards} yards{suffix_td}"
            return f"{passer} pass complete for {yards} yards{suffix_td}"
        if yards < 0:
            if receiver:
                return f"{passer} to {receiver} for -{abs(yards)} yards"
            return f"{passer} pass complete for -{abs(yards)} yards"
        if receiver:
            return f"{passer} to {receiver} for no gain"
        return f"{passer} pass for no gain"

    rusher = _name(offense_team, people.get("carrier"), team)
    if yards > 0:
        return f"{rusher} run for {yards} yards{suffix_td}"
    if yards < 0:
        return f"{rusher} run for a loss of {abs(yards)} yards"
    return f"{rusher} run for no gain"


PLAY_TYPE_TAGS = {
    PlayType.RUN: "RUN",
    PlayType.PASS: "PASS",
    PlayType.FIELD_GOAL: "FG",
    PlayType.PUNT: "PUNT",
    PlayType.KNEEL: "KNEEL",
    PlayType.SPIKE: "SPIKE",
}


def build_tags(outcome: PlayOutcome) -> List[str]:
    tags = [PLAY_TYPE_TAGS[outcome.play_type]]
    if outcome.touchdown:
        tags += ["TD", "SCORE"]
    if outcome.safety:
        tags += ["SAFETY", "SCORE"]
    if getattr(outcome, "made", False):
        tags.append("SCORE")
    if outcome.turnover:
        tags.append("TURNOVER")
    if outcome.turnover_type == TurnoverType.INTERCEPTION:
        tags.append("INT")
    if outcome.sack:
        tags.append("SACK")
    if outcome.has_penalty:
        tags.append("PENALTY")
    return tags


def is_scoring_play(outcome: PlayOutcome) -> bool:
    return bool(outcome.touchdown or outcome.safety or getattr(outcome, "made", False))


def is_turnover_play(outcome: PlayOutcome) -> bool:
    """Interceptions and lost fumbles; kicks and safeties never count"""
    return (outcome.turnover
            and outcome.play_type not in (PlayType.FIELD_GOAL, PlayType.PUNT)
            and not outcome.safety)


@dataclass
class GameEvent:
    """
    A game-level event: drive start, score, turnover, quarter end, ...

    side is the team the event belongs to (scoring side for scores, the offense
    that lost the ball for turnovers).
    """
    event_type: GameEventType
    quarter: int
    clock_sec: float
    side: Optional[str] = None
    team_id: Optional[str] = None
    drive_id: int = 0
    play_id: int = 0
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.event_type.value,
            "quarter": self.quarter,
            "clock_sec": self.clock_sec,
            "side": self.side,
            "team_id": self.team_id,
            "drive_id": self.drive_id,
            "play_id": self.play_id,
            "details": dict(self.details),
        }


@dataclass
class PlayLogEntry:
    """One snap as it appears in the play-by-play (snap-time down, clock and spot)"""
    play_id: int
    drive_id: int
    quarter: int
    clock_sec: float
    offense_side: str
    defense_side: str
    offense_team_id: str
    defense_team_id: str
    offense_team_name: str
    defense_team_name: str
    down: int
    distance: int
    yard_line: int
    down_after: int
    distance_after: int
    yard_line_after: int
    play_type: str
    result: str
    text: str
    down_and_distance: str
    tags: List[str]
    is_scoring: bool
    is_turnover: bool
    yards: int
    clock_runoff: float
    first_down: bool = False
    outcome: Dict[str, Any] = field(default_factory=dict)
    participants: Dict[str, str] = field(default_factory=dict)

    @property
    def clock(self) -> str:
        return format_clock(self.clock_sec)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "play_id": self.play_id,
            "drive_id": self.drive_id,
            "quarter": self.quarter,
            "clock_sec": self.clock_sec,
            "clock": self.clock,
            "offense_side": self.offense_side,
            "defense_side": self.defense_side,
            "offense_team_id": self.offense_team_id,
            "defense_team_id": self.defense_team_id,
            "offense_team_name": self.offense_team_name,
            "defense_team_name": self.defense_team_name,
            "down": self.down,
            "distance": self.distance,
            "yard_line": self.yard_line,
            "down_after": self.down_after,
            "distance_after": self.distance_after,
            "yard_line_after": self.yard_line_after,
            "play_type": self.play_type,
            "result": self.result,
            "text": self.text,
            "down_and_distance": self.down_and_distance,
            "tags": list(self.tags),
            "is_scoring": self.is_scoring,
            "is_turnover": self.is_turnover,
            "yards": self.yards,
            "clock_runoff": self.clock_runoff,
            "first_down": self.first_down,
            "outcome": dict(self.outcome),
            "participants": dict(self.participants),
        }
