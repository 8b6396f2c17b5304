import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from sboxlab.attack import AttackParams
from sboxlab.config import Settings, load_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


def test_defaults():
    params = Settings().attack_params()
    assert params.attempt_budget == 2000
    assert params.sufficiency_threshold == 247
    assert params.search_limit == 100_000


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ATTEMPT_BUDGET", "500")
    monkeypatch.setenv("SUFFICIENCY_THRESHOLD", "240")
    monkeypatch.setenv("PERMUTATION_SEARCH_LIMIT", "unbounded")
    monkeypatch.setenv("GLOBAL_SEED", "7")
    settings = load_settings()
    assert settings.global_seed == 7
    params = settings.attack_params()
    assert params.attempt_budget == 500
    assert params.sufficiency_threshold == 240
    assert params.search_limit is None


def test_params_are_validated():
    with pytest.raises(ValidationError):
        AttackParams(sufficiency_threshold=257)
    with pytest.raises(ValidationError):
        AttackParams(attempt_budget=0)
