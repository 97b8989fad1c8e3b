from marksman.attack_input import AttackInput
from marksman.hit_policy import HitPolicy
from marksman.resolver import compare_policies, explain, format_bonus, format_result, resolve, resolve_raw

from conftest import mk_input


def test_opening_values_single_attack(opening_input):
    res = resolve(opening_input, HitPolicy.SIMPLE)
    assert res.total_attacks == 1
    assert res.attack_penalty == 0
    assert res.final_attack_bonus == 6
    assert res.needed_roll == 8
    assert res.hit_probability == 65
    assert res.expected_damage == 3.3


def test_ammo_and_precise_shots_penalty():
    res = resolve(mk_input(ammo_spent=3, extra_ammo=2))
    assert res.raw_penalty == 6
    assert res.penalty_reduction == 2
    assert res.attack_penalty == 4
    assert res.total_attacks == 4
    assert res.final_attack_bonus == 2


def test_simple_policy_caps_at_100():
    res = resolve(mk_input(base_attack_roll=20, additional_modifier=5, hit_threshold=10))
    assert res.needed_roll <= 1
    assert res.hit_probability == 100


def test_natural_policy_floor_is_five():
    inp = mk_input(base_attack_roll=0, additional_modifier=-5, hit_threshold=20, ammo_spent=4)
    res = resolve(inp, HitPolicy.NATURAL)
    assert res.final_attack_bonus + 20 < inp.hit_threshold
    assert res.hit_probability == 5
    assert resolve(inp, HitPolicy.SIMPLE).hit_probability == 0


def test_max_ammo_boundary():
    res = resolve(mk_input(ammo_spent=10, extra_ammo=10))
    assert res.raw_penalty == 20
    assert res.attack_penalty == 10
    assert res.total_attacks == 11


def test_excess_precise_shots_are_capped():
    a = resolve(mk_input(ammo_spent=2, extra_ammo=4))
    b = resolve(mk_input(ammo_spent=2, extra_ammo=10))
    assert a.penalty_reduction == 4
    assert a.attack_penalty == 0
    assert b == a
    # Precise shots without ammo do nothing.
    assert resolve(mk_input(extra_ammo=5)).final_attack_bonus == 6


def test_invariants_over_input_grid():
    for policy in HitPolicy:
        for ammo in range(0, 11):
            for extra in range(0, 11):
                for threshold in (0, 10, 14, 20, 30):
                    inp = mk_input(ammo_spent=ammo, extra_ammo=extra, hit_threshold=threshold)
                    res = resolve(inp, policy)
                    assert res.total_attacks == 1 + ammo
                    assert res.attack_penalty == max(0, 2 * ammo - extra)
                    assert 0 <= res.hit_probability <= 100
                    assert res.expected_damage >= 0


def test_resolve_is_idempotent(opening_input):
    assert resolve(opening_input) == resolve(opening_input)


def test_zero_damage_means_zero_expected():
    assert resolve(mk_input(damage=0)).expected_damage == 0


def test_expected_damage_scales_with_attacks():
    # bonus 6 - 4 = 2 vs 14 -> need 12 -> 45%; 3 attacks x 0.45 x 5 = 6.75 -> 6.8
    res = resolve(mk_input(ammo_spent=2))
    assert res.hit_probability == 45
    assert res.expected_damage == 6.8


def test_resolve_raw_coerces_and_never_raises():
    res = resolve_raw({"baseAttackRoll": "6", "hitThreshold": "abc", "damage": "", "ammoSpent": "x"})
    assert res.total_attacks == 1
    assert res.final_attack_bonus == 6
    # threshold 0 -> always hits under simple
    assert res.hit_probability == 100
    assert res.expected_damage == 0


def test_resolve_raw_threshold_default():
    res = resolve_raw({"base_attack_roll": 6}, threshold_default=12)
    assert res.needed_roll == 6
    assert res.hit_probability == 75


def test_compare_policies_keys_every_policy(opening_input):
    out = compare_policies(opening_input)
    assert set(out) == set(HitPolicy)
    assert out[HitPolicy.SIMPLE].policy is HitPolicy.SIMPLE
    assert out[HitPolicy.NATURAL].hit_probability == 65


def test_explain_mentions_cap_and_result():
    inp = mk_input(ammo_spent=1, extra_ammo=5)
    lines = explain(inp, resolve(inp))
    joined = "\n".join(lines)
    assert "capped at 2" in joined
    assert "Attacks: 1 + 1 ammo = 2" in joined
    assert lines[-1].endswith(f"= {resolve(inp).expected_damage}")


def test_format_helpers(opening_input):
    assert format_bonus(6) == "+6"
    assert format_bonus(0) == "+0"
    assert format_bonus(-2) == "-2"
    assert format_result(resolve(opening_input)) == "attacks=1 bonus=+6 hit=65% dmg=3.3"


def test_as_dict_is_json_friendly(opening_input):
    d = resolve(opening_input, HitPolicy.NATURAL).as_dict()
    assert d["policy"] == "natural"
    assert d["total_attacks"] == 1
    assert AttackInput().as_dict()["hit_threshold"] == 0
