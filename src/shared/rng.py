"""
Deterministic Random Number Streams

Seedable xorshift32 generator used for every random decision in a simulated game.
Only integer and float arithmetic is involved, so the same seed produces the same
sequence on every run and platform.

Independent randomness domains (player form, coin tosses, play calling, per-play
resolution, environmental events) each get their own child stream via fork(), so
adding a draw in one domain never shifts the draws of another.

Usage:
    streams = build_rng_streams(42)
    yards = streams.play.normal(4.0, 2.5)
    coin = streams.game_context.next() < 0.5
"""

import logging
import math
import secrets
from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

UINT32_MASK = 0xFFFFFFFF
DEFAULT_SEED = 0x12345678
UINT32_RANGE = 4294967296.0

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619

STREAM_TAGS = ("playerForm", "gameContext", "drive", "play", "env")


def fnv1a32(text: str) -> int:
    """32-bit FNV-1a hash of a string (one round per character code)."""
    h = FNV_OFFSET_BASIS
    for ch in text:
        h ^= ord(ch)
        h = (h * FNV_PRIME) & UINT32_MASK
    return h


class Rng:
    """
    xorshift32 pseudo-random generator.

    A seed of 0 or None maps to DEFAULT_SEED so the state can never be zero.
    """

    def __init__(self, seed: Optional[int] = None):
        state = (int(seed) & UINT32_MASK) if seed is not None else 0
        if state == 0:
            state = DEFAULT_SEED
        self.seed = state
        self._state = state

    def next_u32(self) -> int:
        """Advance the generator and return the raw 32-bit output."""
        x = self._state
        x ^= (x << 13) & UINT32_MASK
        x ^= x >> 17
        x ^= (x << 5) & UINT32_MASK
        self._state = x
        return x

    def next(self) -> float:
        """Uniform float in [0, 1)."""
        return self.next_u32() / UINT32_RANGE

    def next_int(self, max_value: int) -> int:
        """Uniform integer in [0, max_value)."""
        if max_value <= 0:
            raise ValueError(f"next_int requires a positive bound, got {max_value}")
        return int(self.next() * max_value)

    def next_range(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        return low + (high - low) * self.next()

    def normal(self, mu: float = 0.0, sigma: float = 1.0) -> float:
        """Gaussian sample via Box-Muller."""
        u = 0.0
        v = 0.0
        while u == 0.0:
            u = self.next()
        while v == 0.0:
            v = self.next()
        z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
        return mu + sigma * z

    def choice(self, items: Sequence[T]) -> Optional[T]:
        if not items:
            return None
        return items[self.next_int(len(items))]

    def fork(self, tag) -> "Rng":
        """
        Derive an independent child stream.

        The child's seed is the parent's next raw output XORed with the FNV-1a
        hash of the tag. Forking advances the parent by exactly one draw.
        """
        child_seed = (self.next_u32() ^ fnv1a32(str(tag))) & UINT32_MASK
        return Rng(child_seed or 1)

    def __repr__(self):
        return f"Rng(seed={self.seed:#010x})"


def generate_entropy_seed() -> int:
    """Non-zero 32-bit seed drawn from OS entropy."""
    return secrets.randbits(32) or DEFAULT_SEED


@dataclass
class RngStreams:
    """
    Named sub-streams for one simulated game.

    Attributes:
        seed: Seed the streams were built from (recorded on the game result)
        seeded: False when the seed came from OS entropy
        core: Parent stream the others were forked from
        player_form: Per-game player form multipliers
        game_context: Coin tosses and overtime possession
        drive: Play calling and clock intent
        play: Micro-simulation, special teams and in-play time
        env: Penalties, between-play runoff and momentum jitter
    """
    seed: int
    seeded: bool
    core: Rng
    player_form: Rng
    game_context: Rng
    drive: Rng
    play: Rng
    env: Rng

    @classmethod
    def from_seed(cls, seed: int, seeded: bool = True) -> "RngStreams":
        core = Rng(seed)
        forks = [core.fork(tag) for tag in STREAM_TAGS]
        return cls(seed, seeded, core, *forks)

    @classmethod
    def unseeded(cls) -> "RngStreams":
        """
        Streams seeded from OS entropy.

        The drawn seed is still recorded so an unseeded game can be replayed.
        """
        seed = generate_entropy_seed()
        logger.warning("No seed supplied; running unseeded with entropy seed %d", seed)
        return cls.from_seed(seed, seeded=False)


def build_rng_streams(seed: Optional[int]) -> RngStreams:
    """
    Build the named streams for one game.

    Args:
        seed: 32-bit seed, or None for an explicitly unseeded run

    Returns:
        RngStreams with deterministic forks when a seed is given
    """
    if seed is None:
        return RngStreams.unseeded()
    return RngStreams.from_seed(seed)
