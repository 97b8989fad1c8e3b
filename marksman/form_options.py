from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from marksman.resolver import format_bonus


Choice = Tuple[int, str]

BASE_ATTACK_CHOICES: List[Choice] = [(n, f"+{n}") for n in range(0, 21)]
MODIFIER_CHOICES: List[Choice] = [(n, format_bonus(n)) for n in range(-5, 6)]
THRESHOLD_CHOICES: List[Choice] = [(n, str(n)) for n in (10, 12, 14, 16, 18, 20)]
AMMO_CHOICES: List[Choice] = [(n, str(n)) for n in range(0, 11)]
PRECISE_SHOT_CHOICES: List[Choice] = [(n, str(n)) for n in range(0, 11)]

MIN_FORM_DAMAGE = 1

# Values the form opens with.
INITIAL_FORM: Dict[str, int] = {
    "base_attack_roll": 6,
    "additional_modifier": 0,
    "hit_threshold": 14,
    "damage": 5,
    "ammo_spent": 0,
    "extra_ammo": 0,
}

FIELD_LABELS: Dict[str, str] = {
    "base_attack_roll": "Base Attack Roll",
    "additional_modifier": "Ext. Modifier",
    "hit_threshold": "Hit Threshold",
    "damage": "Damage",
    "ammo_spent": "Ammo Spent",
    "extra_ammo": "Precise Shots",
}


_SIGNED_FIELDS = ("base_attack_roll", "additional_modifier")


def _with_current(field: str, choices: List[Choice], current: Optional[int]) -> List[Choice]:
    # A value typed into the URL or JSON may sit outside the dropdown range;
    # keep it selectable so the next submit doesn't silently replace it.
    if current is None or any(v == current for v, _ in choices):
        return choices
    label = format_bonus(current) if field in _SIGNED_FIELDS else str(current)
    return sorted(choices + [(current, label)])


def select_fields(values: Optional[Mapping[str, int]] = None) -> List[Tuple[str, List[Choice]]]:
    """
    (field, choices) for every field rendered as a dropdown, in form order.

    When values are given, any value missing from its choice list is added.
    """
    base = [
        ("base_attack_roll", BASE_ATTACK_CHOICES),
        ("additional_modifier", MODIFIER_CHOICES),
        ("hit_threshold", THRESHOLD_CHOICES),
        ("ammo_spent", AMMO_CHOICES),
        ("extra_ammo", PRECISE_SHOT_CHOICES),
    ]
    if values is None:
        return base
    return [(field, _with_current(field, choices, values.get(field))) for field, choices in base]


def options_payload() -> Dict[str, Any]:
    out: Dict[str, Any] = {
        field: [{"value": v, "label": label} for v, label in choices]
        for field, choices in select_fields()
    }
    out["damage"] = {"min": MIN_FORM_DAMAGE, "initial": INITIAL_FORM["damage"]}
    out["initial"] = dict(INITIAL_FORM)
    out["labels"] = dict(FIELD_LABELS)
    return out
