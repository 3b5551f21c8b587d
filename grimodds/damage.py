"""Damage expression parsing: ``8`` (flat) or ``XdY+Z`` (dice)."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .logging import get_logger

log = get_logger(__name__)

DICE_RE = re.compile(
    r"^\s*(?P<num>\d+)\s*d\s*(?P<sides>\d+)\s*(?:(?P<sign>[+-])\s*(?P<mod>\d+))?\s*$",
    re.IGNORECASE,
)
FIXED_RE = re.compile(r"^\s*(?P<value>\d+)\s*$")


@dataclass(frozen=True)
class DamageSpec:
    """Damage dealt by one hit.

    Either ``fixed`` is set (flat damage) or ``num_dice``/``dice_sides``
    describe the random part, with ``modifier`` added once per hit.
    """

    num_dice: int = 0
    dice_sides: int = 0
    modifier: int = 0
    fixed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.fixed is not None:
            if self.fixed < 0:
                raise ValueError("fixed damage must be >= 0")
            if self.num_dice or self.dice_sides or self.modifier:
                raise ValueError("fixed damage cannot be combined with dice or a modifier")
        elif self.num_dice < 1 or self.dice_sides < 1:
            raise ValueError("dice damage needs at least one die with at least one side")

    @classmethod
    def flat(cls, value: int) -> "DamageSpec":
        return cls(fixed=value)

    @property
    def is_fixed(self) -> bool:
        return self.fixed is not None

    # Crit doubles dice only; the modifier is never doubled.
    def _dice_count(self, crit: bool) -> int:
        return self.num_dice * 2 if crit else self.num_dice

    def _bound(self, per_die: float, crit: bool, clamp: bool = True) -> float:
        if self.fixed is not None:
            return self.fixed * 2 if crit else self.fixed
        value = self._dice_count(crit) * per_die + self.modifier
        return max(0, value) if clamp else value

    @property
    def minimum(self) -> int:
        return int(self._bound(1, False))

    @property
    def maximum(self) -> int:
        return int(self._bound(self.dice_sides, False))

    @property
    def average(self) -> float:
        # Unclamped so it always matches N*(M+1)/2 + K.
        return self._bound((self.dice_sides + 1) / 2, False, clamp=False)

    @property
    def critical_min(self) -> int:
        return int(self._bound(1, True))

    @property
    def critical_max(self) -> int:
        return int(self._bound(self.dice_sides, True))

    @property
    def critical_average(self) -> float:
        return self._bound((self.dice_sides + 1) / 2, True)

    def __str__(self) -> str:
        if self.fixed is not None:
            return str(self.fixed)
        base = f"{self.num_dice}d{self.dice_sides}"
        if self.modifier > 0:
            return f"{base}+{self.modifier}"
        if self.modifier < 0:
            return f"{base}{self.modifier}"
        return base


FALLBACK_DAMAGE = DamageSpec.flat(1)


def parse_damage(text: object) -> DamageSpec | None:
    """Parse ``text`` into a :class:`DamageSpec`.

    Returns ``None`` when ``text`` is neither a non-negative integer nor a
    ``XdY[+/-Z]`` expression. Never raises.
    """
    if not isinstance(text, str):
        return None

    m = FIXED_RE.match(text)
    if m:
        return DamageSpec.flat(int(m.group("value")))

    m = DICE_RE.match(text)
    if not m:
        return None
    num = int(m.group("num"))
    sides = int(m.group("sides"))
    if num < 1 or sides < 1:
        return None
    mod = int(m.group("mod") or 0)
    if m.group("sign") == "-":
        mod = -mod
    return DamageSpec(num_dice=num, dice_sides=sides, modifier=mod)


def is_valid_damage(text: object) -> bool:
    return parse_damage(text) is not None


def parse_damage_or_default(text: object) -> DamageSpec:
    """Best-effort parse: fall back to 1 flat damage for invalid input."""
    spec = parse_damage(text)
    if spec is None:
        log.warning("invalid damage expression %r; using %s", text, FALLBACK_DAMAGE)
        return FALLBACK_DAMAGE
    return spec
