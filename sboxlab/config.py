from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from sboxlab.attack.params import AttackParams


class Settings(BaseModel):
    # Attack
    attempt_budget: int = Field(default=2000, ge=1)
    sufficiency_threshold: int = Field(default=247, ge=1, le=256)
    permutation_search_limit: Optional[int] = Field(default=100_000, ge=1)

    # Reproducibility
    global_seed: int = Field(default=1337)

    # Paths
    project_root: str = Field(default=os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir)))
    runs_dir: str = Field(default="runs")

    def attack_params(self) -> AttackParams:
        return AttackParams(
            attempt_budget=self.attempt_budget,
            sufficiency_threshold=self.sufficiency_threshold,
            search_limit=self.permutation_search_limit,
        )


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    def _optional_int(name: str, default: Optional[int]) -> Optional[int]:
        v = os.getenv(name)
        if v is None:
            return default
        if v.strip().lower() in {"", "none", "unbounded"}:
            return None
        return int(v)

    return Settings(
        attempt_budget=int(os.getenv("ATTEMPT_BUDGET", "2000")),
        sufficiency_threshold=int(os.getenv("SUFFICIENCY_THRESHOLD", "247")),
        permutation_search_limit=_optional_int("PERMUTATION_SEARCH_LIMIT", 100_000),
        global_seed=int(os.getenv("GLOBAL_SEED", "1337")),
        runs_dir=os.getenv("RUNS_DIR", "runs"),
    )
