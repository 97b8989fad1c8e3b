from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional


FIELDS = (
    "base_attack_roll",
    "additional_modifier",
    "hit_threshold",
    "damage",
    "ammo_spent",
    "extra_ammo",
)

# camelCase names the web form and JSON clients may send.
CAMEL_ALIASES = {
    "baseAttackRoll": "base_attack_roll",
    "additionalModifier": "additional_modifier",
    "hitThreshold": "hit_threshold",
    "damage": "damage",
    "ammoSpent": "ammo_spent",
    "extraAmmo": "extra_ammo",
}

# ASCII digits only; fullwidth and other Unicode digits are not numbers here.
_LEADING_INT = re.compile(r"\s*([+-]?)([0-9]+)")

# Largest integer a browser number field holds exactly (2**53 - 1).
MAX_SAFE_INT = 9007199254740991
_MAX_SAFE_DIGITS = len(str(MAX_SAFE_INT))


def _bounded(n: int, default: int) -> int:
    if -MAX_SAFE_INT <= n <= MAX_SAFE_INT:
        return n
    return default


def coerce_int(value: Any, default: int = 0) -> int:
    """
    Parse a raw field value the way a form parses free text.

    - ints pass through (bool is not an int here)
    - finite floats truncate toward zero
    - strings: leading whitespace, optional sign, then the leading ASCII
      digit run ("12abc" -> 12, "3.7" -> 3, " -2" -> -2)
    - anything else, or anything beyond +/-MAX_SAFE_INT, returns default
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return _bounded(value, default)
    if isinstance(value, float):
        if not math.isfinite(value):
            return default
        return _bounded(int(value), default)
    if isinstance(value, (str, bytes)):
        s = value.decode(errors="ignore") if isinstance(value, bytes) else value
        m = _LEADING_INT.match(s)
        if m is None:
            return default
        sign, digits = m.groups()
        digits = digits.lstrip("0") or "0"
        if len(digits) > _MAX_SAFE_DIGITS:
            return default
        return _bounded(int(sign + digits), default)
    return default


def canonical_field(name: str) -> Optional[str]:
    """Map a snake_case or camelCase field name to its canonical name."""
    if name in FIELDS:
        return name
    return CAMEL_ALIASES.get(name)


@dataclass(frozen=True, slots=True)
class AttackInput:
    """
    One calculator request.

    All fields are plain ints. Only the resource counts and damage are
    clamped at zero; everything else is taken as given.
    """
    base_attack_roll: int = 0
    additional_modifier: int = 0
    hit_threshold: int = 0
    damage: int = 0
    ammo_spent: int = 0
    extra_ammo: int = 0

    def __post_init__(self) -> None:
        # Negative resources would break total_attacks >= 1 and the penalty cap.
        for name in ("damage", "ammo_spent", "extra_ammo"):
            if getattr(self, name) < 0:
                object.__setattr__(self, name, 0)

    @staticmethod
    def from_raw(fields: Mapping[str, Any], *, threshold_default: int = 0) -> AttackInput:
        """Build an AttackInput from untrusted raw values. Never raises."""
        raw: dict[str, Any] = {}
        for key, value in fields.items():
            name = canonical_field(str(key))
            if name is not None:
                raw[name] = value

        return AttackInput(
            base_attack_roll=coerce_int(raw.get("base_attack_roll")),
            additional_modifier=coerce_int(raw.get("additional_modifier")),
            hit_threshold=coerce_int(raw.get("hit_threshold"), threshold_default),
            damage=coerce_int(raw.get("damage")),
            ammo_spent=coerce_int(raw.get("ammo_spent")),
            extra_ammo=coerce_int(raw.get("extra_ammo")),
        )

    def as_dict(self) -> dict[str, int]:
        return asdict(self)
