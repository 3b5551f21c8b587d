# tests/conftest.py
import pathlib
import sys

import pytest

# Make sure tests can import the local package without an install
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class ScriptedRNG:
    """Random source that replays a fixed list of rolls."""

    def __init__(self, rolls):
        self.rolls = list(rolls)
        self.calls = []

    def roll_int(self, lo, hi):
        if not self.rolls:
            raise AssertionError(f"ran out of scripted rolls (asked for {lo}..{hi})")
        val = self.rolls.pop(0)
        assert lo <= val <= hi, f"scripted roll {val} outside {lo}..{hi}"
        self.calls.append((lo, hi))
        return val


@pytest.fixture
def scripted():
    return ScriptedRNG
