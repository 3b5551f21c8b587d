"""Summary statistics over attack-count PMFs.

Everything here is pure aggregation over an already computed PMF; no
randomness, no I/O.
"""
from __future__ import annotations

import math
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .models import Percentiles, ProbabilityPoint, SimulationResult, StatisticalResult

QUANTILES: Tuple[Tuple[str, float], ...] = (
    ("p25", 0.25),
    ("median", 0.5),
    ("p75", 0.75),
    ("p90", 0.90),
    ("p95", 0.95),
)


def empirical_pmf(counts: Mapping[int, int]) -> List[ProbabilityPoint]:
    """Normalize a frequency table over its own total (ascending attacks)."""
    total = sum(c for c in counts.values() if c > 0)
    if total == 0:
        return []
    return [
        ProbabilityPoint(attacks=n, prob=counts[n] / total)
        for n in sorted(counts)
        if counts[n] > 0
    ]


def moments(pmf: Sequence[ProbabilityPoint]) -> Tuple[float, float, float]:
    """Return (mean, variance, stdev); all infinite for an empty PMF."""
    if not pmf:
        return math.inf, math.inf, math.inf
    mean = sum(pt.attacks * pt.prob for pt in pmf)
    second = sum(pt.attacks * pt.attacks * pt.prob for pt in pmf)
    variance = max(0.0, second - mean * mean)
    return mean, variance, math.sqrt(variance)


def mode(pmf: Iterable[ProbabilityPoint]) -> int:
    """Most probable attack count; the smallest one wins ties."""
    best, best_prob = 1, 0.0
    for pt in pmf:
        if pt.prob > best_prob:
            best, best_prob = pt.attacks, pt.prob
    return best


def quantile_markers(pmf: Iterable[ProbabilityPoint]) -> Dict[str, int]:
    """First attack count at which cumulative mass reaches each threshold.

    Markers whose threshold is never reached stay at 1.
    """
    markers = {name: 1 for name, _ in QUANTILES}
    pending = list(QUANTILES)
    cumulative = 0.0
    for pt in pmf:
        cumulative += pt.prob
        while pending and cumulative >= pending[0][1]:
            markers[pending.pop(0)[0]] = pt.attacks
    return markers


def window_mass(pmf: Iterable[ProbabilityPoint], lo: int, hi: int) -> float:
    return sum(pt.prob for pt in pmf if lo <= pt.attacks <= hi)


def build_analytic_result(
    hit_probability: float,
    hits_needed: float,
    pmf: List[ProbabilityPoint],
    mean: float,
    variance: float,
    normal_approx: List[ProbabilityPoint],
) -> StatisticalResult:
    return StatisticalResult(
        hit_probability=hit_probability,
        hits_needed=hits_needed,
        pmf=pmf,
        mean=mean,
        variance=variance,
        stdev=math.sqrt(variance),
        normal_approx=normal_approx,
        rounds_distribution=[pt.prob * 100 for pt in pmf],
    )


def summarize(
    counts: Mapping[int, int],
    *,
    hit_probability: float,
    hits_needed: float,
    trials: int,
) -> SimulationResult:
    """Assemble a :class:`SimulationResult` from attack-count frequencies."""
    pmf = empirical_pmf(counts)
    mean, variance, stdev = moments(pmf)
    markers = quantile_markers(pmf)
    return SimulationResult(
        hit_probability=hit_probability,
        hits_needed=hits_needed,
        pmf=pmf,
        mean=mean,
        variance=variance,
        stdev=stdev,
        median=markers["median"],
        mode=mode(pmf),
        percentiles=Percentiles(
            p25=markers["p25"], p75=markers["p75"], p90=markers["p90"], p95=markers["p95"]
        ),
        trials=trials,
        retained_trials=sum(c for c in counts.values() if c > 0),
    )
