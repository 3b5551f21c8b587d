from __future__ import annotations

import math
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.table import Table

from grimodds.config_env import load_env
from grimodds.damage import DamageSpec, parse_damage
from grimodds.estimators import AnalyticEstimator, MonteCarloEstimator
from grimodds.logging_utils import NDJSONWriter
from grimodds.models import CombatParameters, ProbabilityPoint, SimulationResult, StatisticalResult
from grimodds.rng import RNG

app = typer.Typer(no_args_is_help=True, help="Time-to-kill odds for d20 combat.")
console = Console()

CHART_WIDTH = 40
METHODS = ("simulation", "analytic", "both")


def _fmt(x: float, digits: int = 2) -> str:
    return "never" if math.isinf(x) else f"{x:.{digits}f}"


def _summary_table(res: StatisticalResult) -> Table:
    table = Table(box=box.ASCII, show_header=False)
    table.add_column("stat")
    table.add_column("value", justify="right")
    table.add_row("hit chance", f"{res.hit_probability:.0%}")
    table.add_row("hits needed", _fmt(res.hits_needed))
    table.add_row("mean attacks", _fmt(res.mean))
    table.add_row("std dev", _fmt(res.stdev))
    if isinstance(res, SimulationResult):
        table.add_row("median", str(res.median))
        table.add_row("mode", str(res.mode))
        pct = res.percentiles
        table.add_row("p25 / p75", f"{pct.p25} / {pct.p75}")
        table.add_row("p90 / p95", f"{pct.p90} / {pct.p95}")
        table.add_row("trials kept", f"{res.retained_trials}/{res.trials}")
    return table


def bar_chart(pmf: List[ProbabilityPoint], min_prob: float = 0.001) -> List[str]:
    """Render the PMF as text bars, skipping points under ``min_prob``."""
    shown = [pt for pt in pmf if pt.prob >= min_prob]
    if not shown:
        return []
    peak = max(pt.prob for pt in shown)
    lines = []
    for pt in shown:
        width = max(1, round(pt.prob / peak * CHART_WIDTH))
        lines.append(f"{pt.attacks:>4} | {'#' * width} {pt.prob:.1%}")
    return lines


def _render(title: str, res: StatisticalResult, chart: bool) -> None:
    typer.echo(title)
    console.print(_summary_table(res))
    if res.never_succeeds:
        typer.echo("The target can never be dropped with these numbers.")
        return
    if chart:
        for line in bar_chart(res.pmf):
            typer.echo(line)


@app.callback()
def main() -> None:
    """Time-to-kill odds for d20 combat."""
    load_env()


@app.command()
def estimate(
    bonus: int = typer.Option(..., "--bonus", help="Attack bonus"),
    ac: int = typer.Option(..., "--ac", help="Target armor class"),
    damage: str = typer.Option(..., "--damage", help="Damage per hit, e.g. 8 or 1d8+3"),
    hp: int = typer.Option(..., "--hp", help="Target hit points"),
    crits: bool = typer.Option(True, "--crits/--no-crits", help="Natural 1/20 rules"),
    method: str = typer.Option("simulation", help="simulation, analytic or both"),
    seed: Optional[int] = typer.Option(None, help="Seed for the simulation RNG"),
    trials: Optional[int] = typer.Option(None, help="Override the simulation batch size"),
    chart: bool = typer.Option(True, "--chart/--no-chart", help="Print a bar chart"),
    json_out: Optional[Path] = typer.Option(None, help="Append results as NDJSON"),
) -> None:
    """Estimate how many attacks it takes to drop a target."""
    if method not in METHODS:
        typer.secho(f"ERR: unknown method '{method}'", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    spec = parse_damage(damage)
    if spec is None:
        typer.secho(f"ERR: invalid damage expression '{damage}'", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    try:
        params = CombatParameters(
            attack_bonus=bonus, armor_class=ac, hit_points=hp, use_critical_mechanics=crits
        )
    except ValidationError as e:
        typer.secho(f"ERR: {e.errors(include_url=False)}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    results: List[tuple] = []
    try:
        if method in ("analytic", "both"):
            flat = spec.fixed if spec.is_fixed else spec.average
            res = AnalyticEstimator().estimate(params, flat)
            results.append((f"analytic ({_fmt(flat, 1)} dmg/hit)", res))
        if method in ("simulation", "both"):
            est = MonteCarloEstimator(rng=RNG(seed), trials=trials)
            results.append((f"simulation ({spec})", est.estimate(params, spec)))
    except ValueError as e:
        typer.secho(f"ERR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    for title, res in results:
        _render(title, res, chart)

    if json_out is not None:
        with NDJSONWriter(json_out) as w:
            for title, res in results:
                w.write({"method": title.split()[0], "damage": str(spec), **res.model_dump(mode="json")})


@app.command("damage")
def damage_info(text: str = typer.Argument(..., help="Damage expression")) -> None:
    """Show min/max/average damage for an expression."""
    spec: DamageSpec | None = parse_damage(text)
    if spec is None:
        typer.secho(f"ERR: invalid damage expression '{text}'", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    table = Table(title=str(spec), box=box.ASCII)
    table.add_column("")
    table.add_column("normal", justify="right")
    table.add_column("critical", justify="right")
    table.add_row("min", str(spec.minimum), str(spec.critical_min))
    table.add_row("max", str(spec.maximum), str(spec.critical_max))
    table.add_row("average", f"{spec.average:g}", f"{spec.critical_average:g}")
    console.print(table)


if __name__ == "__main__":
    app()
