"""
Game Management Module

Game-level orchestration above the play engine: the game loop, play calling,
clock and drive bookkeeping, overtime policy and result aggregation.

This module coordinates the play micro-simulator without modifying the underlying
play resolution logic.
"""

from .game_constants import DriveResult, GameEventType, ScoreType, TeamSide
from .game_loop_controller import (GameLoopController, format_game_summary, simulate_game,
                                   simulate_game_series)
from .game_state import GameState
from .rule_config import RuleConfig, RuleConfigError, SimulationOptions

__all__ = [
    'GameLoopController',
    'simulate_game',
    'simulate_game_series',
    'format_game_summary',
    'GameState',
    'RuleConfig',
    'RuleConfigError',
    'SimulationOptions',
    'DriveResult',
    'GameEventType',
    'ScoreType',
    'TeamSide',
]
