from __future__ import annotations

import os

from marksman.attack_input import coerce_int
from marksman.hit_policy import HitPolicy, parse_policy

DEFAULT_HIT_POLICY = HitPolicy.SIMPLE.value
DEFAULT_THRESHOLD = 0


def hit_policy() -> HitPolicy:
    # Read per call so tests can flip it with monkeypatch.setenv.
    return parse_policy(os.environ.get("MARKSMAN_HIT_POLICY", DEFAULT_HIT_POLICY))


def threshold_default() -> int:
    return coerce_int(os.environ.get("MARKSMAN_THRESHOLD_DEFAULT"), DEFAULT_THRESHOLD)
