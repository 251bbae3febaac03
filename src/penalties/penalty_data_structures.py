"""
Penalty Data Structures

Types shared by the penalty model, the play engine and the game loop:
- PenaltyType: the fouls the engine can call
- PenaltyResult: one called foul with its signed yardage and enforcement flags
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class PenaltyType(Enum):
    OFFSIDE = "offside"
    FALSE_START = "false_start"
    OFFENSIVE_HOLDING = "offensive_holding"
    DEFENSIVE_HOLDING = "defensive_holding"
    DEFENSIVE_PASS_INTERFERENCE = "defensive_pass_interference"
    PERSONAL_FOUL = "personal_foul"


class PenaltyTiming:
    """Constants for when a foul occurs"""
    PRE_SNAP = "pre_snap"
    DURING_PLAY = "during_play"


@dataclass(frozen=True)
class PenaltyResult:
    """
    A single called foul.

    yards is signed from the offense's point of view: fouls against the offense
    carry negative yards, fouls against the defense positive yards.
    """
    penalty_type: PenaltyType
    yards: int
    on_offense: bool
    automatic_first_down: bool = False
    spot_foul: bool = False
    pre_snap: bool = False
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "penalty_type": self.penalty_type.value,
            "yards": self.yards,
            "on_offense": self.on_offense,
            "automatic_first_down": self.automatic_first_down,
            "spot_foul": self.spot_foul,
            "pre_snap": self.pre_snap,
            "description": self.description,
        }

    def __str__(self):
        return f"PENALTY: {self.description} ({self.yards:+d})"
