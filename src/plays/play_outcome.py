"""
Play outcomes

One dataclass per play family. All share the PlayOutcome base fields (play type,
result, yards, in-play time and the scoring/turnover flags); each variant adds only
its own details. The touchdown, safety and end_of_drive flags are filled in by the
game loop when the outcome is applied to the field.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from penalties.penalty_data_structures import PenaltyResult
from play_type import PassConcept, PassDepth, PlayType, RunDirection


DEFAULT_PLAY_TIME = 5.0


class PlayOutcomeType(Enum):
    RUN = "run"
    PASS_COMPLETE = "pass_complete"
    PASS_INCOMPLETE = "pass_incomplete"
    INTERCEPTION = "interception"
    SACK = "sack"
    FUMBLE_LOST = "fumble_lost"
    FUMBLE_RECOVERED = "fumble_recovered"
    FIELD_GOAL_GOOD = "field_goal_good"
    FIELD_GOAL_MISSED = "field_goal_missed"
    PUNT = "punt"
    KNEEL = "kneel"
    SPIKE = "spike"
    PENALTY_ONLY = "penalty_only"


class TurnoverType(Enum):
    NONE = "none"
    INTERCEPTION = "interception"
    FUMBLE = "fumble"


@dataclass
class PlayOutcome:
    play_type: PlayType
    result: PlayOutcomeType
    yards: int = 0
    time_elapsed: Optional[float] = None
    turnover_type: TurnoverType = TurnoverType.NONE
    sack: bool = False
    penalty: Optional[PenaltyResult] = None
    touchdown: bool = False
    safety: bool = False
    end_of_drive: bool = False
    participants: Dict[str, str] = field(default_factory=dict)

    @property
    def play_time(self) -> float:
        """In-play seconds, DEFAULT_PLAY_TIME when the variant supplied none"""
        return self.time_elapsed if self.time_elapsed is not None else DEFAULT_PLAY_TIME

    @property
    def turnover(self) -> bool:
        return self.turnover_type != TurnoverType.NONE

    @property
    def has_penalty(self) -> bool:
        return self.penalty is not None

    @property
    def automatic_first_down(self) -> bool:
        return self.penalty is not None and self.penalty.automatic_first_down

    @property
    def penalty_yards(self) -> int:
        return self.penalty.yards if self.penalty is not None else 0

    @property
    def is_scrimmage_play(self) -> bool:
        """Run and pass snaps that actually happened (pre-snap fouls excluded)"""
        return (self.play_type in PlayType.get_scrimmage_types()
                and self.result != PlayOutcomeType.PENALTY_ONLY)

    @property
    def stops_clock(self) -> bool:
        return self.result in (PlayOutcomeType.PASS_INCOMPLETE, PlayOutcomeType.SPIKE)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Enum):
                data[key] = value.value
        data["penalty"] = self.penalty.to_dict() if self.penalty is not None else None
        data["turnover"] = self.turnover
        data["outcome_class"] = type(self).__name__
        return data


@dataclass
class RunOutcome(PlayOutcome):
    direction: RunDirection = RunDirection.INSIDE
    fumble: bool = False
    fumble_lost: bool = False


@dataclass
class PassOutcome(PlayOutcome):
    depth: PassDepth = PassDepth.INTERMEDIATE
    concept: PassConcept = PassConcept.STANDARD
    completed: bool = False
    intercepted: bool = False
    air_yards: int = 0
    yards_after_catch: float = 0.0
    separation: float = 0.0
    ball_error: float = 0.0
    time_to_pressure: float = 0.0
    time_to_throw: float = 0.0
    under_pressure: bool = False
    pressure_severity: float = 0.0
    catch_probability: float = 0.0
    interception_probability: float = 0.0
    fumble: bool = False
    fumble_lost: bool = False


@dataclass
class PuntOutcome(PlayOutcome):
    distance: int = 0


@dataclass
class FieldGoalOutcome(PlayOutcome):
    distance: int = 0
    effective_distance: float = 0.0
    make_probability: float = 0.0
    made: bool = False


@dataclass
class PenaltyOutcome(PlayOutcome):
    """A pre-snap foul: no snap happened, only the penalty yardage applies"""


@dataclass
class KneelOutcome(PlayOutcome):
    pass


@dataclass
class SpikeOutcome(PlayOutcome):
    pass
