"""
Play call

The offense's instruction to the micro-simulator: which play family to run plus
the depth / direction / concept details that the pass and run models read.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from play_type import PassConcept, PassDepth, PlayType, RunDirection


class InvalidPlayCallError(ValueError):
    """Raised when a play call has a missing or unknown play type"""


def _coerce(enum_cls, value, label: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.lower())
        except ValueError:
            pass
    raise InvalidPlayCallError(f"Invalid {label}: {value!r}")


@dataclass
class PlayCall:
    """
    A single offensive play call.

    Strings are accepted for every field ("pass", "deep", ...) and converted to
    the matching enum on construction.
    """
    play_type: PlayType
    pass_depth: PassDepth = PassDepth.INTERMEDIATE
    run_direction: RunDirection = RunDirection.INSIDE
    concept: PassConcept = PassConcept.STANDARD

    def __post_init__(self):
        if self.play_type is None:
            raise InvalidPlayCallError("Play call has no play type")
        self.play_type = _coerce(PlayType, self.play_type, "play type")
        self.pass_depth = _coerce(PassDepth, self.pass_depth, "pass depth")
        self.run_direction = _coerce(RunDirection, self.run_direction, "run direction")
        self.concept = _coerce(PassConcept, self.concept, "pass concept")

    @classmethod
    def run(cls, direction: RunDirection = RunDirection.INSIDE) -> "PlayCall":
        return cls(PlayType.RUN, run_direction=direction)

    @classmethod
    def pass_play(cls, depth: PassDepth = PassDepth.INTERMEDIATE,
                  concept: PassConcept = PassConcept.STANDARD) -> "PlayCall":
        return cls(PlayType.PASS, pass_depth=depth, concept=concept)

    @classmethod
    def of(cls, play_type: PlayType) -> "PlayCall":
        return cls(play_type)

    def get_play_type(self) -> PlayType:
        return self.play_type

    def to_dict(self) -> Dict[str, Any]:
        return {
            "play_type": self.play_type.value,
            "pass_depth": self.pass_depth.value,
            "run_direction": self.run_direction.value,
            "concept": self.concept.value,
        }

    def __str__(self):
        if self.play_type == PlayType.PASS:
            return f"pass ({self.pass_depth.value}, {self.concept.value})"
        if self.play_type == PlayType.RUN:
            return f"run ({self.run_direction.value})"
        return self.play_type.value


def validate_play_call(play_call: Optional[PlayCall]) -> PlayCall:
    """
    Ensure a caller handed over a usable PlayCall.

    Raises:
        InvalidPlayCallError: If play_call is None or not a PlayCall
    """
    if play_call is None:
        raise InvalidPlayCallError("No play call supplied")
    if not isinstance(play_call, PlayCall):
        raise InvalidPlayCallError(f"Expected a PlayCall, got {type(play_call).__name__}")
    if not isinstance(play_call.play_type, PlayType):
        raise InvalidPlayCallError(f"Invalid play type: {play_call.play_type!r}")
    return play_call
