from __future__ import annotations

import math
from typing import Dict, Tuple


def d20_hit_prob(attack_bonus: int, armor_class: int, enforce_nat_rules: bool = True) -> float:
    """Probability that ``1d20 + attack_bonus`` meets or beats ``armor_class``.

    With natural rules a 1 always misses and a 20 always hits, so the result
    is clamped into ``[1/20, 19/20]``.
    """
    p = min(1.0, max(0.0, (21 + attack_bonus - armor_class) / 20))
    if enforce_nat_rules:
        p = min(19 / 20, max(1 / 20, p))
    return p


def roll_outcome(
    face: int, attack_bonus: int, armor_class: int, enforce_nat_rules: bool = True
) -> Tuple[bool, bool]:
    """
    Single d20 face -> (is_hit, is_crit):
      - nat 1 always misses, nat 20 always hits & crits (natural rules only)
      - otherwise hit if face + attack_bonus >= armor_class
    """
    if enforce_nat_rules:
        if face == 1:
            return (False, False)
        if face == 20:
            return (True, True)
    return (face + attack_bonus >= armor_class, False)


def hit_probabilities(
    attack_bonus: int, armor_class: int, enforce_nat_rules: bool = True
) -> Dict[str, float]:
    """
    Exact probabilities by enumerating the 20 faces.
    Returns {'hit': p_any_hit, 'crit': p_crit, 'normal': p_noncrit_hit}.
    """
    hits = crits = 0
    for face in range(1, 21):
        is_hit, is_crit = roll_outcome(face, attack_bonus, armor_class, enforce_nat_rules)
        hits += 1 if is_hit else 0
        crits += 1 if is_crit else 0
    p_hit = hits / 20
    p_crit = crits / 20
    return {"hit": p_hit, "crit": p_crit, "normal": p_hit - p_crit}


def comb(n: int, k: int) -> int:
    """Binomial coefficient via a gcd-reduced running numerator/denominator."""
    if k < 0 or k > n:
        return 0
    k = min(k, n - k)
    num = den = 1
    for i in range(1, k + 1):
        num *= n - (k - i)
        den *= i
        g = math.gcd(num, den)
        num //= g
        den //= g
    return num // den


def neg_binom_pmf(n: int, r: int, p: float) -> float:
    """P(N = n) where N is the number of trials to reach ``r`` successes."""
    if n < r or p <= 0:
        return 0.0
    if p >= 1:
        return 1.0 if n == r else 0.0
    # log space: the coefficient can exceed float range long before the term underflows
    log_term = math.log(comb(n - 1, r - 1)) + r * math.log(p) + (n - r) * math.log1p(-p)
    return math.exp(log_term)


def normal_pdf(z: float) -> float:
    return math.exp(-0.5 * z * z) / math.sqrt(2 * math.pi)
