import os

DEFAULT_TRIALS = 100_000
DEFAULT_MAX_ATTACKS = 200


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        val = int(raw.strip())
    except ValueError:
        return default
    return val if val > 0 else default


def simulation_trials() -> int:
    """Monte Carlo batch size (``GRIMODDS_TRIALS``)."""
    return _positive_int("GRIMODDS_TRIALS", DEFAULT_TRIALS)


def max_attacks() -> int:
    """Per-trial attack cap (``GRIMODDS_MAX_ATTACKS``)."""
    return _positive_int("GRIMODDS_MAX_ATTACKS", DEFAULT_MAX_ATTACKS)
