# grimodds/__init__.py
__all__ = [
    "__version__",
    "DamageSpec",
    "parse_damage",
    "is_valid_damage",
    "d20_hit_prob",
    "time_to_kill_distribution",
    "time_to_kill_simulation",
    "compute",
]

__version__ = "0.1.0"

from .attack_math import d20_hit_prob
from .damage import DamageSpec, is_valid_damage, parse_damage
from .analytic import time_to_kill_distribution
from .simulation import time_to_kill_simulation
from .estimators import compute
