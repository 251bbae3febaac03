"""
Rule configuration for a simulated game.

Every tunable rule has exactly one default, resolved once when the RuleConfig is
built. Callers may hand over a plain dict; snake_case keys and the camelCase
aliases used by league data files are both accepted.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional, Tuple


class RuleConfigError(ValueError):
    """Raised when a RuleConfig holds values the game loop cannot run with"""


class OvertimeFormat:
    """Constants for overtime period formats"""
    FULL_PERIOD = "full_period"
    GUARANTEED_POSSESSION = "guaranteed_possession"

    @classmethod
    def get_all_formats(cls):
        return [cls.FULL_PERIOD, cls.GUARANTEED_POSSESSION]


CAMEL_CASE_ALIASES = {
    "quarterLengthSec": "quarter_length_sec",
    "numQuarters": "num_quarters",
    "maxOvertimeQuarters": "max_overtime_quarters",
    "allowTies": "allow_ties",
    "overtimeFormat": "overtime_format",
    "puntBaseDistance": "punt_base_distance",
    "puntStd": "punt_std",
    "keepPlayByPlay": "keep_play_by_play",
}


@dataclass
class RuleConfig:
    """
    Attributes:
        quarter_length_sec: Regulation quarter length in seconds
        num_quarters: Regulation quarters
        max_overtime_quarters: Overtime periods before a tie is final (when ties are allowed)
        allow_ties: False keeps adding overtime periods until someone wins
        overtime_format: 'full_period' or 'guaranteed_possession'
        punt_base_distance: Mean punt distance before punter adjustments
        punt_std: Punt distance standard deviation
        between_play_normal: Between-play runoff range (seconds), normal tempo
        between_play_hurry: Between-play runoff range (seconds), hurry-up
        quarter_break_setup_extra: Extra seconds on the first snap after a quarter break
        pre_snap_admin_runoff: Seconds run off for a pre-snap foul
        keep_play_by_play: Keep the per-play log on the result
        overtime_hard_cap: Overtime periods after which the game ends regardless
        default_play_time: In-play seconds when an outcome supplies none
    """
    quarter_length_sec: int = 900
    num_quarters: int = 4
    max_overtime_quarters: int = 1
    allow_ties: bool = True
    overtime_format: str = OvertimeFormat.FULL_PERIOD
    punt_base_distance: float = 45.0
    punt_std: float = 7.0
    between_play_normal: Tuple[float, float] = (28.0, 40.0)
    between_play_hurry: Tuple[float, float] = (6.0, 15.0)
    quarter_break_setup_extra: float = 6.0
    pre_snap_admin_runoff: float = 1.0
    keep_play_by_play: bool = True
    overtime_hard_cap: int = 20
    default_play_time: float = 5.0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "RuleConfig":
        """
        Build a RuleConfig from a plain mapping.

        Unknown keys are ignored; missing keys take their defaults.
        """
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = CAMEL_CASE_ALIASES.get(key, key)
            if name in known and value is not None:
                values[name] = value
        for name in ("between_play_normal", "between_play_hurry"):
            if name in values:
                values[name] = tuple(values[name])
        return cls(**values)

    @property
    def overtime_period_length(self) -> float:
        return self.quarter_length_sec / 2.0

    @property
    def last_quarter_allowed(self) -> int:
        return self.num_quarters + self.max_overtime_quarters

    def validate(self) -> "RuleConfig":
        """
        Raises:
            RuleConfigError: On any value the game loop cannot run with
        """
        if self.quarter_length_sec <= 0:
            raise RuleConfigError(f"quarter_length_sec must be positive, got {self.quarter_length_sec}")
        if self.num_quarters < 1:
            raise RuleConfigError(f"num_quarters must be at least 1, got {self.num_quarters}")
        if self.max_overtime_quarters < 0:
            raise RuleConfigError(f"max_overtime_quarters cannot be negative, got {self.max_overtime_quarters}")
        if self.overtime_hard_cap < 1:
            raise RuleConfigError(f"overtime_hard_cap must be at least 1, got {self.overtime_hard_cap}")
        if self.overtime_format not in OvertimeFormat.get_all_formats():
            raise RuleConfigError(f"Unknown overtime_format: {self.overtime_format!r}")
        for name in ("between_play_normal", "between_play_hurry"):
            low, high = getattr(self, name)
            if low < 0 or low > high:
                raise RuleConfigError(f"{name} must be a (min, max) range with 0 <= min <= max, got {(low, high)}")
        if self.pre_snap_admin_runoff <= 0:
            raise RuleConfigError("pre_snap_admin_runoff must be positive so the clock always advances")
        if self.punt_std < 0:
            raise RuleConfigError(f"punt_std cannot be negative, got {self.punt_std}")
        if self.default_play_time <= 0:
            raise RuleConfigError(f"default_play_time must be positive, got {self.default_play_time}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_RULE_CONFIG = RuleConfig()


@dataclass
class SimulationOptions:
    """
    Options for one simulate_game call.

    Attributes:
        seed: 32-bit seed; None runs unseeded from OS entropy
        rule_config: RuleConfig (or a plain dict); None uses the defaults
    """
    seed: Optional[int] = None
    rule_config: Optional[RuleConfig] = None

    def __post_init__(self):
        if self.rule_config is None:
            self.rule_config = RuleConfig()
        elif isinstance(self.rule_config, Mapping):
            self.rule_config = RuleConfig.from_dict(self.rule_config)

    @classmethod
    def from_value(cls, value) -> "SimulationOptions":
        """Accept None, a SimulationOptions or a dict with 'seed' / 'rule_config' keys"""
        if value is None:
            return cls()
        if isinstance(value, SimulationOptions):
            return value
        if isinstance(value, Mapping):
            rules = value.get("rule_config", value.get("ruleConfig"))
            return cls(seed=value.get("seed"), rule_config=rules)
        raise TypeError(f"Unsupported simulation options: {type(value).__name__}")
