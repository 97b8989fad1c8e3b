import pytest

from marksman.attack_input import AttackInput
from marksman.form_options import INITIAL_FORM


def mk_input(**overrides) -> AttackInput:
    data = dict(INITIAL_FORM)
    data.update(overrides)
    return AttackInput(**data)


@pytest.fixture
def opening_input():
    """Base +6 vs 14, 5 damage, no ammo: the form's opening values."""
    return mk_input()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("MARKSMAN_HIT_POLICY", raising=False)
    monkeypatch.delenv("MARKSMAN_THRESHOLD_DEFAULT", raising=False)
