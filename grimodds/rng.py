import random
from dataclasses import dataclass
from typing import Optional, Protocol


class RandomSource(Protocol):
    def roll_int(self, lo: int, hi: int) -> int: ...


@dataclass
class RNG:
    """Injectable random source; unseeded unless ``seed`` is given."""

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self._r = random.Random(self.seed)

    def roll_int(self, lo: int, hi: int) -> int:
        return self._r.randint(lo, hi)


def d20(rng: RandomSource) -> int:
    return rng.roll_int(1, 20)


def roll_dice(rng: RandomSource, count: int, sides: int) -> int:
    """Sum ``count`` independent draws in ``[1, sides]``."""
    total = 0
    for _ in range(count):
        total += rng.roll_int(1, sides)
    return total
