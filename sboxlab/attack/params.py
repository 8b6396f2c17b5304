from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class AttackParams(BaseModel):
    """Tunable constants of the S-box layer recovery."""

    attempt_budget: int = Field(default=2000, ge=1, description="Generator batches to try before giving up")
    sufficiency_threshold: int = Field(
        default=247,
        ge=1,
        le=256,
        description="Rank every position must reach; 247 leaves a null space of at most 9 dimensions",
    )
    search_limit: Optional[int] = Field(
        default=100_000,
        ge=1,
        description="Random combinations tried per position; None searches without bound",
    )
