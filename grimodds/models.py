from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class CombatParameters(BaseModel):
    """Attacker and target numbers for one estimation call."""

    attack_bonus: int = Field(ge=0)
    armor_class: int
    hit_points: int = Field(gt=0)
    use_critical_mechanics: bool = True


class ProbabilityPoint(BaseModel):
    attacks: int = Field(ge=1)
    prob: float = Field(ge=0)


class Percentiles(BaseModel):
    p25: int = 1
    p75: int = 1
    p90: int = 1
    p95: int = 1


class StatisticalResult(BaseModel):
    """Distribution of attacks needed to drop the target.

    ``hits_needed`` and the moments are ``inf`` when a hit can never land.
    """

    hit_probability: float
    hits_needed: float
    pmf: List[ProbabilityPoint] = Field(default_factory=list)
    mean: float
    variance: float
    stdev: float
    normal_approx: List[ProbabilityPoint] = Field(default_factory=list)
    rounds_distribution: List[float] = Field(default_factory=list)

    @property
    def never_succeeds(self) -> bool:
        return not self.pmf

    def total_mass(self) -> float:
        return sum(pt.prob for pt in self.pmf)


class SimulationResult(StatisticalResult):
    """Empirical result of the Monte Carlo engine."""

    median: int = 1
    mode: int = 1
    percentiles: Percentiles = Field(default_factory=Percentiles)
    trials: int = 0
    retained_trials: int = 0
