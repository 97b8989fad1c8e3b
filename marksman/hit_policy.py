from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Dict


DIE_SIDES = 20


class HitPolicy(str, Enum):
    """
    How a d20 attack turns (bonus, threshold) into a hit chance.

    SIMPLE:  hit iff roll + bonus >= threshold, clamped to 0..100%.
    NATURAL: same, except a natural 1 always misses and a natural 20 always
             hits, so the chance never leaves 5..95%.
    """
    SIMPLE = "simple"
    NATURAL = "natural"


def parse_policy(text: str) -> HitPolicy:
    s = str(text).strip().lower()
    for p in HitPolicy:
        if s == p.value or s == p.name.lower():
            return p
    names = ", ".join(p.value for p in HitPolicy)
    raise ValueError(f"unknown hit policy {text!r} (expected one of: {names})")


def clamp_int(x: int, lo: int, hi: int) -> int:
    if x < lo:
        return lo
    if x > hi:
        return hi
    return x


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 toward +inf, like a browser's Math.round."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def needed_roll(final_attack_bonus: int, hit_threshold: int) -> int:
    """Lowest natural d20 face that reaches the threshold."""
    return hit_threshold - final_attack_bonus


def _faces_to_percent(faces: int) -> int:
    return int(round_half_up(faces / DIE_SIDES * 100))


def simple_hit_probability(final_attack_bonus: int, hit_threshold: int) -> int:
    need = needed_roll(final_attack_bonus, hit_threshold)
    if need <= 1:
        return 100
    if need > DIE_SIDES:
        return 0
    return _faces_to_percent(DIE_SIDES + 1 - need)


def natural_hit_probability(final_attack_bonus: int, hit_threshold: int) -> int:
    if final_attack_bonus + DIE_SIDES < hit_threshold:
        # only a natural 20
        return _faces_to_percent(1)
    if final_attack_bonus + 1 >= hit_threshold:
        # everything but a natural 1
        return _faces_to_percent(DIE_SIDES - 1)
    need = needed_roll(final_attack_bonus, hit_threshold)
    return _faces_to_percent(DIE_SIDES - need + 1)


HIT_POLICIES: Dict[HitPolicy, Callable[[int, int], int]] = {
    HitPolicy.SIMPLE: simple_hit_probability,
    HitPolicy.NATURAL: natural_hit_probability,
}


def hit_probability(policy: HitPolicy, final_attack_bonus: int, hit_threshold: int) -> int:
    """Percentage chance (0..100) that one attack hits under the given policy."""
    fn = HIT_POLICIES[HitPolicy(policy)]
    return clamp_int(fn(final_attack_bonus, hit_threshold), 0, 100)
