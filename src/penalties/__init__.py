"""Penalty model, rules loader and penalty types."""

from .penalty_config_loader import PenaltyConfig, PenaltyConfigLoader, get_penalty_config
from .penalty_data_structures import PenaltyResult, PenaltyTiming, PenaltyType
from .penalty_model import PenaltyModel

__all__ = [
    'PenaltyConfig',
    'PenaltyConfigLoader',
    'get_penalty_config',
    'PenaltyResult',
    'PenaltyTiming',
    'PenaltyType',
    'PenaltyModel',
]
