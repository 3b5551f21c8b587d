import json

from typer.testing import CliRunner

from grimodds.cli import app, bar_chart
from grimodds.models import ProbabilityPoint

runner = CliRunner()


def test_estimate_analytic():
    result = runner.invoke(
        app, ["estimate", "--bonus", "5", "--ac", "15", "--damage", "8", "--hp", "25", "--method", "analytic"]
    )
    assert result.exit_code == 0, result.output
    assert "analytic" in result.output
    assert "55%" in result.output
    assert "7.27" in result.output


def test_estimate_simulation_with_json_out(tmp_path):
    out = tmp_path / "runs" / "ttk.ndjson"
    result = runner.invoke(
        app,
        [
            "estimate", "--bonus", "5", "--ac", "15", "--damage", "1d8+3", "--hp", "25",
            "--method", "both", "--seed", "1", "--trials", "500", "--json-out", str(out),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "simulation (1d8+3)" in result.output
    assert "trials kept" in result.output
    lines = [json.loads(line) for line in out.read_text(encoding="utf-8").splitlines()]
    assert [row["method"] for row in lines] == ["analytic", "simulation"]
    assert all(row["damage"] == "1d8+3" and "ts" in row for row in lines)
    assert lines[1]["trials"] == 500


def test_estimate_never_hits():
    result = runner.invoke(
        app,
        ["estimate", "--bonus", "0", "--ac", "40", "--damage", "8", "--hp", "10",
         "--no-crits", "--method", "analytic"],
    )
    assert result.exit_code == 0, result.output
    assert "never" in result.output


def test_estimate_rejects_bad_input():
    bad_damage = runner.invoke(
        app, ["estimate", "--bonus", "5", "--ac", "15", "--damage", "d8", "--hp", "25"]
    )
    assert bad_damage.exit_code == 1
    bad_hp = runner.invoke(
        app, ["estimate", "--bonus", "5", "--ac", "15", "--damage", "8", "--hp", "0"]
    )
    assert bad_hp.exit_code == 1
    bad_method = runner.invoke(
        app, ["estimate", "--bonus", "5", "--ac", "15", "--damage", "8", "--hp", "5", "--method", "oracle"]
    )
    assert bad_method.exit_code == 1


def test_damage_command():
    result = runner.invoke(app, ["damage", "1d8+3"])
    assert result.exit_code == 0, result.output
    assert "7.5" in result.output
    assert "19" in result.output
    assert runner.invoke(app, ["damage", "abc"]).exit_code == 1


def test_bar_chart_scales_to_peak():
    lines = bar_chart(
        [ProbabilityPoint(attacks=1, prob=0.5), ProbabilityPoint(attacks=2, prob=0.25),
         ProbabilityPoint(attacks=3, prob=0.0001)]
    )
    assert len(lines) == 2
    assert lines[0].count("#") == 40
    assert lines[1].count("#") == 20
