"""Monte Carlo time-to-kill with dice damage and critical hits."""
from __future__ import annotations

import math
from collections import Counter
from typing import Optional

from . import config
from .attack_math import d20_hit_prob, roll_outcome
from .damage import DamageSpec
from .logging import get_logger
from .models import SimulationResult
from .rng import RNG, RandomSource, d20, roll_dice
from .stats import summarize

log = get_logger(__name__)

CRIT_CHANCE = 0.05


def roll_damage(damage: DamageSpec, rng: RandomSource, crit: bool = False) -> int:
    """Roll one hit's damage. On crit, doubles *dice only* (not the modifier)."""
    if damage.fixed is not None:
        return damage.fixed * 2 if crit else damage.fixed
    count = damage.num_dice * 2 if crit else damage.num_dice
    return max(0, roll_dice(rng, count, damage.dice_sides) + damage.modifier)


def attacks_to_kill(
    attack_bonus: int,
    armor_class: int,
    damage: DamageSpec,
    health: int,
    use_critical_mechanics: bool,
    rng: RandomSource,
    max_attacks: int,
) -> Optional[int]:
    """Run one trial. Returns the attack that dropped the target, or None at the cap."""
    remaining = health
    attacks = 0
    while remaining > 0 and attacks < max_attacks:
        attacks += 1
        is_hit, is_crit = roll_outcome(d20(rng), attack_bonus, armor_class, use_critical_mechanics)
        if is_hit:
            remaining -= roll_damage(damage, rng, crit=is_crit)
    return attacks if remaining <= 0 else None


def effective_hits_needed(damage: DamageSpec, health: int, use_critical_mechanics: bool) -> float:
    """Hits needed at the crit-weighted average damage per hit."""
    per_hit = damage.average
    if use_critical_mechanics:
        per_hit += CRIT_CHANCE * (damage.critical_average - damage.average)
    return health / per_hit if per_hit > 0 else math.inf


def time_to_kill_simulation(
    attack_bonus: int,
    armor_class: int,
    damage: DamageSpec,
    health: int,
    use_critical_mechanics: bool = True,
    rng: Optional[RandomSource] = None,
    trials: Optional[int] = None,
    max_attacks: Optional[int] = None,
) -> SimulationResult:
    """Estimate the attacks-to-kill distribution by repeated simulation.

    Trials that reach ``max_attacks`` without dropping the target are
    discarded, and the PMF is normalized over the trials that remain.
    """
    if health <= 0:
        raise ValueError("health must be > 0")

    if trials is None:
        trials = config.simulation_trials()
    if max_attacks is None:
        max_attacks = config.max_attacks()
    if trials < 1:
        raise ValueError("trials must be >= 1")
    if max_attacks < 1:
        raise ValueError("max_attacks must be >= 1")

    rng = rng or RNG()
    hit_probability = d20_hit_prob(attack_bonus, armor_class, use_critical_mechanics)

    best_hit = damage.critical_max if use_critical_mechanics else damage.maximum
    counts: Counter = Counter()
    # even max damage on every capped attack falls short: every trial would be discarded
    if hit_probability > 0 and best_hit > 0 and best_hit * max_attacks >= health:
        for _ in range(trials):
            attacks = attacks_to_kill(
                attack_bonus, armor_class, damage, health, use_critical_mechanics, rng, max_attacks
            )
            if attacks is not None:
                counts[attacks] += 1
    else:
        log.debug(
            "+%d vs AC %d with %s can never drop %d hp within %d attacks",
            attack_bonus, armor_class, damage, health, max_attacks,
        )

    discarded = trials - sum(counts.values())
    if discarded:
        log.debug("discarded %d of %d trials at the %d-attack cap", discarded, trials, max_attacks)

    return summarize(
        counts,
        hit_probability=hit_probability,
        hits_needed=effective_hits_needed(damage, health, use_critical_mechanics),
        trials=trials,
    )
