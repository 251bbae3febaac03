"""
Latent ability profile owned by each player.

Five named groups, each an immutable mapping of component name to a value in [0, 1]:
- A: athletic (explosiveness, agility, power, speed)
- C: cognitive (processing, pattern recognition, coverage awareness)
- T: technical (route craft, hands, blocking, tackling, ball security)
- P: psyche (aggression, discipline, emotional stability, risk tolerance)
- V: variance (chaos, stability, volatility and the derived form sigmas)

Lookups never fail: a missing component returns the fallback (0.5 by default).
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional


DEFAULT_LATENT_VALUE = 0.5


class LatentGroup(Enum):
    ATHLETIC = "A"
    COGNITIVE = "C"
    TECHNICAL = "T"
    PSYCHE = "P"
    VARIANCE = "V"


class LatentSubVector:
    """Read-only component mapping with a defined fallback on every lookup."""

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, float]] = None):
        self._values = MappingProxyType(dict(values or {}))

    def get(self, key: str, fallback: float = DEFAULT_LATENT_VALUE) -> float:
        value = self._values.get(key)
        return fallback if value is None else value

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other) -> bool:
        return isinstance(other, LatentSubVector) and dict(self._values) == dict(other._values)

    def to_dict(self) -> Dict[str, float]:
        return dict(self._values)

    def __repr__(self):
        return f"LatentSubVector({dict(self._values)})"


class LatentProfile:
    """The five latent groups for one player."""

    def __init__(self, athletic: Mapping[str, float], cognitive: Mapping[str, float],
                 technical: Mapping[str, float], psyche: Mapping[str, float],
                 variance: Mapping[str, float]):
        self._groups = {
            LatentGroup.ATHLETIC: LatentSubVector(athletic),
            LatentGroup.COGNITIVE: LatentSubVector(cognitive),
            LatentGroup.TECHNICAL: LatentSubVector(technical),
            LatentGroup.PSYCHE: LatentSubVector(psyche),
            LatentGroup.VARIANCE: LatentSubVector(variance),
        }

    @property
    def A(self) -> LatentSubVector:
        return self._groups[LatentGroup.ATHLETIC]

    @property
    def C(self) -> LatentSubVector:
        return self._groups[LatentGroup.COGNITIVE]

    @property
    def T(self) -> LatentSubVector:
        return self._groups[LatentGroup.TECHNICAL]

    @property
    def P(self) -> LatentSubVector:
        return self._groups[LatentGroup.PSYCHE]

    @property
    def V(self) -> LatentSubVector:
        return self._groups[LatentGroup.VARIANCE]

    def group(self, group) -> LatentSubVector:
        """Accepts a LatentGroup or its one-letter code."""
        if not isinstance(group, LatentGroup):
            group = LatentGroup(group)
        return self._groups[group]

    def get(self, group, key: str, fallback: float = DEFAULT_LATENT_VALUE) -> float:
        return self.group(group).get(key, fallback)

    def __eq__(self, other) -> bool:
        return isinstance(other, LatentProfile) and self.to_dict() == other.to_dict()

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {g.value: vec.to_dict() for g, vec in self._groups.items()}

    def __repr__(self):
        return f"LatentProfile({self.to_dict()})"
