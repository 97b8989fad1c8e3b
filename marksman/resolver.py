from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from marksman.attack_input import AttackInput
from marksman.hit_policy import HitPolicy, hit_probability, needed_roll, round_half_up


PENALTY_PER_AMMO = 2


def format_bonus(n: int) -> str:
    return f"{n:+d}"


@dataclass(frozen=True, slots=True)
class AttackResult:
    """
    Everything the calculator shows for one AttackInput.

    attack_penalty = raw_penalty - penalty_reduction, never negative.
    hit_probability is an integer percentage in 0..100.
    expected_damage is rounded half up to one decimal.
    """
    total_attacks: int
    raw_penalty: int
    penalty_reduction: int
    attack_penalty: int
    final_attack_bonus: int
    needed_roll: int
    hit_probability: int
    expected_damage: float
    policy: HitPolicy

    def as_dict(self) -> dict[str, Any]:
        return {
            "total_attacks": self.total_attacks,
            "raw_penalty": self.raw_penalty,
            "penalty_reduction": self.penalty_reduction,
            "attack_penalty": self.attack_penalty,
            "final_attack_bonus": self.final_attack_bonus,
            "needed_roll": self.needed_roll,
            "hit_probability": self.hit_probability,
            "expected_damage": self.expected_damage,
            "policy": self.policy.value,
        }


def expected_damage(total_attacks: int, hit_pct: int, damage: int) -> float:
    if not damage:
        return 0.0
    return round_half_up(total_attacks * (hit_pct / 100) * damage, 1)


def resolve(inp: AttackInput, policy: HitPolicy = HitPolicy.SIMPLE) -> AttackResult:
    """
    Pure calculator step: AttackInput -> AttackResult.

    Each ammo spent adds one attack and -2 to every attack this turn;
    each precise shot cancels one point of that penalty, up to the total.
    """
    total_attacks = 1 + inp.ammo_spent
    raw_penalty = inp.ammo_spent * PENALTY_PER_AMMO
    penalty_reduction = min(inp.extra_ammo, raw_penalty)
    attack_penalty = raw_penalty - penalty_reduction

    final_bonus = inp.base_attack_roll + inp.additional_modifier - attack_penalty
    pct = hit_probability(policy, final_bonus, inp.hit_threshold)

    return AttackResult(
        total_attacks=total_attacks,
        raw_penalty=raw_penalty,
        penalty_reduction=penalty_reduction,
        attack_penalty=attack_penalty,
        final_attack_bonus=final_bonus,
        needed_roll=needed_roll(final_bonus, inp.hit_threshold),
        hit_probability=pct,
        expected_damage=expected_damage(total_attacks, pct, inp.damage),
        policy=HitPolicy(policy),
    )


def resolve_raw(
    fields: Mapping[str, Any],
    policy: HitPolicy = HitPolicy.SIMPLE,
    *,
    threshold_default: int = 0,
) -> AttackResult:
    """Coerce untrusted field values and resolve them. Never raises for bad numbers."""
    return resolve(AttackInput.from_raw(fields, threshold_default=threshold_default), policy)


def compare_policies(inp: AttackInput) -> Dict[HitPolicy, AttackResult]:
    return {p: resolve(inp, p) for p in HitPolicy}


def explain(inp: AttackInput, res: AttackResult) -> List[str]:
    """Step-by-step breakdown lines, suitable for a log pane."""
    lines = [
        f"Attacks: 1 + {inp.ammo_spent} ammo = {res.total_attacks}",
        f"Penalty: {inp.ammo_spent} ammo x {PENALTY_PER_AMMO} = {res.raw_penalty}",
    ]
    if inp.extra_ammo > res.penalty_reduction:
        lines.append(
            f"Precise shots: {inp.extra_ammo} (capped at {res.penalty_reduction}) "
            f"-> penalty {res.attack_penalty}"
        )
    else:
        lines.append(f"Precise shots: {inp.extra_ammo} -> penalty {res.attack_penalty}")
    lines.append(
        f"Attack bonus: {format_bonus(inp.base_attack_roll)} base "
        f"{format_bonus(inp.additional_modifier)} mod "
        f"-{res.attack_penalty} penalty = {format_bonus(res.final_attack_bonus)}"
    )
    lines.append(
        f"Need d20 >= {res.needed_roll} vs threshold {inp.hit_threshold} "
        f"({res.policy.value}): {res.hit_probability}%"
    )
    lines.append(
        f"Expected damage: {res.total_attacks} x {res.hit_probability}% x {inp.damage} "
        f"= {res.expected_damage}"
    )
    return lines


def format_result(res: AttackResult) -> str:
    return (
        f"attacks={res.total_attacks} bonus={format_bonus(res.final_attack_bonus)} "
        f"hit={res.hit_probability}% dmg={res.expected_damage}"
    )
