import os

from grimodds import config
from grimodds.config_env import load_env


def test_env_loads_dotenv(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("GRIMODDS_TRIALS=5000\nGRIMODDS_MAX_ATTACKS=50\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GRIMODDS_MAX_ATTACKS", "75")
    # set then delete so monkeypatch restores the original value afterwards
    monkeypatch.setenv("GRIMODDS_TRIALS", "1")
    monkeypatch.delenv("GRIMODDS_TRIALS")

    load_env()

    assert os.getenv("GRIMODDS_TRIALS") == "5000"
    assert config.simulation_trials() == 5000
    assert config.max_attacks() == 75


def test_defaults_and_bad_values(monkeypatch):
    monkeypatch.delenv("GRIMODDS_TRIALS", raising=False)
    monkeypatch.delenv("GRIMODDS_MAX_ATTACKS", raising=False)
    assert config.simulation_trials() == 100_000
    assert config.max_attacks() == 200

    monkeypatch.setenv("GRIMODDS_TRIALS", "lots")
    monkeypatch.setenv("GRIMODDS_MAX_ATTACKS", "-3")
    assert config.simulation_trials() == config.DEFAULT_TRIALS
    assert config.max_attacks() == config.DEFAULT_MAX_ATTACKS
