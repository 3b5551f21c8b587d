"""Closed-form time-to-kill using the negative binomial distribution.

Every hit is assumed to deal exactly ``damage``; criticals only matter
through the natural-20 auto-hit in the hit probability.
"""
from __future__ import annotations

import math
from typing import List

from .attack_math import d20_hit_prob, neg_binom_pmf, normal_pdf
from .logging import get_logger
from .models import ProbabilityPoint, StatisticalResult
from .stats import build_analytic_result, window_mass

log = get_logger(__name__)

MAX_TAIL_PROB = 1e-6
MAX_TERMS = 1000
APPROX_WIDTH = 4


def exact_pmf(hits_needed: int, p: float) -> List[ProbabilityPoint]:
    """Enumerate P(N = n) from ``n = hits_needed`` until the tail is negligible."""
    pmf: List[ProbabilityPoint] = []
    n = hits_needed
    tail = 1.0
    while tail > MAX_TAIL_PROB and n - hits_needed < MAX_TERMS:
        prob = neg_binom_pmf(n, hits_needed, p)
        pmf.append(ProbabilityPoint(attacks=n, prob=prob))
        tail -= prob
        n += 1
    return pmf


def normal_approximation(
    pmf: List[ProbabilityPoint], hits_needed: int, mean: float, stdev: float
) -> List[ProbabilityPoint]:
    """Normal curve sampled at integers within mean +/- 4 stdev.

    Rescaled so its sum matches the exact PMF's mass over the same window.
    """
    n_min = max(hits_needed, math.floor(mean - APPROX_WIDTH * stdev))
    n_max = max(n_min, math.ceil(mean + APPROX_WIDTH * stdev))
    exact = window_mass(pmf, n_min, n_max)
    target = exact if exact > 0 else 1.0

    if stdev == 0:
        # every attack hits: the curve collapses onto the mean
        return [ProbabilityPoint(attacks=n_min, prob=target)]

    densities = [(k, normal_pdf((k - mean) / stdev) / stdev) for k in range(n_min, n_max + 1)]
    approx_sum = sum(d for _, d in densities)
    scale = target / approx_sum if approx_sum > 0 else 1.0
    return [ProbabilityPoint(attacks=k, prob=d * scale) for k, d in densities]


def time_to_kill_distribution(
    attack_bonus: int,
    armor_class: int,
    damage: float,
    health: int,
    use_critical_mechanics: bool = True,
) -> StatisticalResult:
    """Exact distribution of attacks needed with fixed damage per hit.

    Raises ``ValueError`` for non-positive ``damage`` or ``health``. A hit
    probability of 0 is not an error: the result has infinite moments and
    an empty PMF.
    """
    if damage <= 0:
        raise ValueError("damage must be > 0")
    if health <= 0:
        raise ValueError("health must be > 0")

    p = d20_hit_prob(attack_bonus, armor_class, use_critical_mechanics)
    if p == 0:
        log.debug("+%d vs AC %d can never hit", attack_bonus, armor_class)
        return StatisticalResult(
            hit_probability=p,
            hits_needed=math.inf,
            mean=math.inf,
            variance=math.inf,
            stdev=math.inf,
        )

    hits_needed = math.ceil(health / damage)
    pmf = exact_pmf(hits_needed, p)
    mean = hits_needed / p
    variance = hits_needed * (1 - p) / (p * p)
    approx = normal_approximation(pmf, hits_needed, mean, math.sqrt(variance))
    log.debug("negative binomial r=%d p=%.3f: %d terms", hits_needed, p, len(pmf))
    return build_analytic_result(p, hits_needed, pmf, mean, variance, approx)
