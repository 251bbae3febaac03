"""
Penalty model

Decides whether a snap draws a flag and, if so, which one. The per-snap rate is
modulated by the two rosters' average aggression and discipline; the foul itself
is picked from the cumulative tables in penalty_rules.json.

All draws come from the environment stream so toggling penalties never shifts
the play stream.
"""

import logging
from typing import Any, Dict, List, Optional

from play_type import PlayType
from shared.math_utils import clamp01
from shared.rng import Rng
from .penalty_config_loader import PenaltyConfigLoader, get_penalty_config
from .penalty_data_structures import PenaltyResult, PenaltyTiming, PenaltyType


logger = logging.getLogger(__name__)


class PenaltyModel:
    """Draws pre-snap and live-ball fouls for run and pass plays"""

    def __init__(self, config_loader: Optional[PenaltyConfigLoader] = None):
        self.config = config_loader or get_penalty_config()

    def penalty_rate(self, offense, defense) -> float:
        """
        Per-snap foul probability.

        Args:
            offense: Offensive Team
            defense: Defensive Team
        """
        avg_aggression = (offense.psyche_mean("aggression") + defense.psyche_mean("aggression")) / 2.0
        avg_discipline = (offense.psyche_mean("discipline") + defense.psyche_mean("discipline")) / 2.0
        base = self.config.get_rate("base_rate", 0.03)
        agg_w = self.config.get_rate("aggression_weight", 0.8)
        disc_w = self.config.get_rate("discipline_weight", 0.7)
        return clamp01(base * (1 + agg_w * (avg_aggression - 0.5) - disc_w * (avg_discipline - 0.5)))

    def check_penalty(self, play_type: PlayType, offense, defense, rng: Rng) -> Optional[PenaltyResult]:
        """
        Roll for a foul on this snap.

        Returns:
            PenaltyResult, or None when the snap is clean
        """
        if rng.next() >= self.penalty_rate(offense, defense):
            return None

        if rng.next() < self.config.get_rate("pre_snap_share", 0.3):
            entry = self._pick(self.config.get_pre_snap_table(), rng.next())
            return self._build(entry, pre_snap=True)

        family = "pass" if play_type == PlayType.PASS else "run"
        entry = self._pick(self.config.get_live_ball_table(family), rng.next())
        return self._build(entry, pre_snap=False)

    @staticmethod
    def _pick(table: List[Dict[str, Any]], draw: float) -> Dict[str, Any]:
        for entry in table:
            if draw < entry.get("until", 1.0):
                return entry
        return table[-1]

    def _build(self, entry: Dict[str, Any], pre_snap: bool) -> PenaltyResult:
        key = entry["penalty_type"]
        timing = self.config.get_penalty_timing(key)
        if pre_snap and timing != PenaltyTiming.PRE_SNAP:
            logger.debug("Penalty %s drawn pre-snap but configured as %s", key, timing)

        automatic_first = entry.get("automatic_first_down", self.config.is_automatic_first_down(key))
        result = PenaltyResult(
            penalty_type=PenaltyType(key),
            yards=self.config.get_penalty_yardage(key),
            on_offense=self.config.is_against_offense(key),
            automatic_first_down=bool(automatic_first) and not pre_snap,
            spot_foul=self.config.is_spot_foul(key),
            pre_snap=pre_snap,
            description=self.config.get_description(key),
        )
        logger.debug("Flag: %s", result)
        return result
