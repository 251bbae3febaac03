"""
Penalty Configuration Loader

Loads the JSON penalty rules shipped with the package so designers can tune foul
rates, yardages and enforcement flags without touching code.
"""

import json
import os
from typing import Dict, Any, List, Optional
from dataclasses import dataclass


RULES_FILE = 'penalty_rules.json'


@dataclass
class PenaltyConfig:
    """Container for all penalty configuration data"""
    rates: Dict[str, float]
    pre_snap: List[Dict[str, Any]]
    live_ball: Dict[str, List[Dict[str, Any]]]
    penalties: Dict[str, Dict[str, Any]]


class PenaltyConfigLoader:
    """Loads and caches penalty configuration from JSON"""

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize penalty configuration loader

        Args:
            config_dir: Directory containing penalty_rules.json.
                       Defaults to the config/ directory next to this module
        """
        if config_dir is None:
            current_dir = os.path.dirname(os.path.abspath(__file__))
            config_dir = os.path.join(current_dir, 'config')

        self.config_dir = os.path.abspath(config_dir)
        self._config_cache = None
        self._validate_config_directory()

    def _validate_config_directory(self):
        """Ensure configuration directory and rules file exist"""
        if not os.path.exists(self.config_dir):
            raise FileNotFoundError(f"Penalty configuration directory not found: {self.config_dir}")

        filepath = os.path.join(self.config_dir, RULES_FILE)
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Required penalty config file not found: {filepath}")

    def _load_json_file(self, filename: str) -> Dict[str, Any]:
        filepath = os.path.join(self.config_dir, filename)
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {filename}: {e}")

    def load_config(self, force_reload: bool = False) -> PenaltyConfig:
        """
        Load the penalty rules

        Args:
            force_reload: If True, reload from disk even if cached

        Returns:
            PenaltyConfig object containing all configuration data
        """
        if self._config_cache is not None and not force_reload:
            return self._config_cache

        data = self._load_json_file(RULES_FILE)
        config = PenaltyConfig(
            rates=data.get('rates', {}),
            pre_snap=data.get('pre_snap', []),
            live_ball=data.get('live_ball', {}),
            penalties=data.get('penalties', {}),
        )

        self._config_cache = config
        return config

    def _penalty_info(self, penalty_type: str) -> Dict[str, Any]:
        config = self.load_config()
        info = config.penalties.get(penalty_type)
        if info is None:
            raise ValueError(f"Unknown penalty type: {penalty_type}")
        return info

    def get_rate(self, key: str, default: float = 0.0) -> float:
        return float(self.load_config().rates.get(key, default))

    def get_penalty_yardage(self, penalty_type: str) -> int:
        """Signed yardage from the offense's point of view"""
        info = self._penalty_info(penalty_type)
        yards = int(info.get('yards', 0))
        return -yards if info.get('against') == 'offense' else yards

    def is_against_offense(self, penalty_type: str) -> bool:
        return self._penalty_info(penalty_type).get('against') == 'offense'

    def is_automatic_first_down(self, penalty_type: str) -> bool:
        return bool(self._penalty_info(penalty_type).get('automatic_first_down', False))

    def is_spot_foul(self, penalty_type: str) -> bool:
        return bool(self._penalty_info(penalty_type).get('spot_foul', False))

    def get_penalty_timing(self, penalty_type: str) -> str:
        """Get when the penalty occurs (pre_snap, during_play)"""
        return self._penalty_info(penalty_type).get('timing', 'during_play')

    def get_description(self, penalty_type: str) -> str:
        return self._penalty_info(penalty_type).get('description', penalty_type)

    def get_pre_snap_table(self) -> List[Dict[str, Any]]:
        return self.load_config().pre_snap

    def get_live_ball_table(self, play_family: str) -> List[Dict[str, Any]]:
        """
        Cumulative draw table for live-ball fouls.

        Args:
            play_family: 'pass' or 'run'
        """
        table = self.load_config().live_ball.get(play_family)
        if table is None:
            raise ValueError(f"No live-ball penalty table for: {play_family}")
        return table

    def get_available_penalty_types(self) -> list:
        """Get list of all configured penalty types"""
        return list(self.load_config().penalties.keys())

    def reload_config(self):
        """Force reload configuration from disk (useful for testing/development)"""
        self._config_cache = None
        return self.load_config()


# Global configuration loader instance
_config_loader = None

def get_penalty_config() -> PenaltyConfigLoader:
    """Get global penalty configuration loader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = PenaltyConfigLoader()
    return _config_loader
