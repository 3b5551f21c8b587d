"""Analytic and simulated estimators behind one interface."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Literal, Optional, Union

from .analytic import time_to_kill_distribution
from .damage import DamageSpec
from .models import CombatParameters, StatisticalResult
from .rng import RandomSource
from .simulation import time_to_kill_simulation

Damage = Union[DamageSpec, int, float]
Method = Literal["analytic", "simulation"]


class CombatEstimator(ABC):
    """Estimate how many attacks it takes to drop a target."""

    name: str = ""

    @abstractmethod
    def estimate(self, params: CombatParameters, damage: Damage) -> StatisticalResult:
        ...


class AnalyticEstimator(CombatEstimator):
    """Negative binomial model. Needs a flat damage value per hit."""

    name = "analytic"

    def estimate(self, params: CombatParameters, damage: Damage) -> StatisticalResult:
        if isinstance(damage, DamageSpec):
            if damage.fixed is None:
                raise ValueError(
                    f"analytic model needs fixed damage per hit, got {damage}; "
                    "pass a flat value such as its average"
                )
            damage = damage.fixed
        return time_to_kill_distribution(
            params.attack_bonus,
            params.armor_class,
            damage,
            params.hit_points,
            params.use_critical_mechanics,
        )


class MonteCarloEstimator(CombatEstimator):
    name = "simulation"

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        trials: Optional[int] = None,
        max_attacks: Optional[int] = None,
    ) -> None:
        self.rng = rng
        self.trials = trials
        self.max_attacks = max_attacks

    def estimate(self, params: CombatParameters, damage: Damage) -> StatisticalResult:
        if not isinstance(damage, DamageSpec):
            if damage < 0 or not float(damage).is_integer():
                raise ValueError(f"simulation needs whole, non-negative flat damage, got {damage}")
            damage = DamageSpec.flat(int(damage))
        return time_to_kill_simulation(
            params.attack_bonus,
            params.armor_class,
            damage,
            params.hit_points,
            params.use_critical_mechanics,
            rng=self.rng,
            trials=self.trials,
            max_attacks=self.max_attacks,
        )


ESTIMATORS = {
    AnalyticEstimator.name: AnalyticEstimator,
    MonteCarloEstimator.name: MonteCarloEstimator,
}


def get_estimator(method: Method, **kwargs) -> CombatEstimator:
    try:
        cls = ESTIMATORS[method]
    except KeyError:
        raise ValueError(f"Unknown estimation method: {method}") from None
    return cls(**kwargs)


def compute(
    params: CombatParameters,
    damage: Damage,
    method: Method = "simulation",
    **kwargs,
) -> StatisticalResult:
    """One-shot estimate; ``kwargs`` go to the estimator constructor."""
    return get_estimator(method, **kwargs).estimate(params, damage)
