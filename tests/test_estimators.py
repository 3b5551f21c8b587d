import pytest
from pydantic import ValidationError

from grimodds.damage import DamageSpec, parse_damage
from grimodds.estimators import (
    AnalyticEstimator,
    CombatEstimator,
    MonteCarloEstimator,
    compute,
    get_estimator,
)
from grimodds.models import CombatParameters, SimulationResult, StatisticalResult
from grimodds.rng import RNG


def params(**kw):
    base = dict(attack_bonus=5, armor_class=15, hit_points=25, use_critical_mechanics=False)
    base.update(kw)
    return CombatParameters(**base)


def test_both_estimators_share_the_interface():
    for est in (AnalyticEstimator(), MonteCarloEstimator(rng=RNG(1), trials=500)):
        assert isinstance(est, CombatEstimator)
        assert isinstance(est.estimate(params(), DamageSpec.flat(8)), StatisticalResult)


def test_analytic_and_simulation_converge_on_fixed_damage():
    p = params()
    exact = compute(p, 8, method="analytic")
    sim = compute(p, DamageSpec.flat(8), method="simulation", rng=RNG(2024), trials=20000)
    assert isinstance(sim, SimulationResult)
    assert sim.hit_probability == exact.hit_probability
    assert sim.mean == pytest.approx(exact.mean, abs=0.15)
    assert sim.stdev == pytest.approx(exact.stdev, abs=0.15)
    assert sim.pmf[0].attacks >= exact.hits_needed


def test_analytic_refuses_dice_damage():
    with pytest.raises(ValueError, match="fixed damage"):
        AnalyticEstimator().estimate(params(), parse_damage("1d8+3"))
    res = AnalyticEstimator().estimate(params(), parse_damage("1d8+3").average)
    assert res.hits_needed == 4


def test_simulation_accepts_plain_numbers():
    res = MonteCarloEstimator(rng=RNG(5), trials=200).estimate(params(), 100)
    assert res.pmf[0].attacks >= 1


def test_unknown_method():
    with pytest.raises(ValueError):
        get_estimator("psychic")


def test_parameter_validation():
    with pytest.raises(ValidationError):
        params(hit_points=0)
    with pytest.raises(ValidationError):
        params(attack_bonus=-1)
    assert params().use_critical_mechanics is False
    assert CombatParameters(attack_bonus=1, armor_class=10, hit_points=5).use_critical_mechanics


def test_simulation_rejects_fractional_or_negative_flat_damage():
    est = MonteCarloEstimator(rng=RNG(1), trials=100)
    for bad in (7.5, -3, float("inf")):
        with pytest.raises(ValueError, match="flat damage"):
            est.estimate(params(hit_points=15), bad)
    res = est.estimate(params(hit_points=15), 8.0)
    assert res.pmf[0].attacks >= 2
