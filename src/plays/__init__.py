"""Per-play micro-simulators and their outcome types."""

from .play_outcome import (
    DEFAULT_PLAY_TIME,
    FieldGoalOutcome,
    KneelOutcome,
    PassOutcome,
    PenaltyOutcome,
    PlayOutcome,
    PlayOutcomeType,
    PuntOutcome,
    RunOutcome,
    SpikeOutcome,
    TurnoverType,
)
from .play_situation import PlaySituation
from .pass_play import PassPlaySimulator
from .run_play import RunPlaySimulator
from .special_teams import SpecialTeamsSimulator

__all__ = [
    'DEFAULT_PLAY_TIME',
    'FieldGoalOutcome',
    'KneelOutcome',
    'PassOutcome',
    'PenaltyOutcome',
    'PlayOutcome',
    'PlayOutcomeType',
    'PuntOutcome',
    'RunOutcome',
    'SpikeOutcome',
    'TurnoverType',
    'PlaySituation',
    'PassPlaySimulator',
    'RunPlaySimulator',
    'SpecialTeamsSimulator',
]
