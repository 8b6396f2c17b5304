from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

RANDOM_SBOX = "sbox.random"


def _default_components() -> Dict[str, str]:
    return {
        "sbox": "sbox.identity",
        "perm": "perm.aes_shiftrows",
        "linear": "linear.aes_mixcolumns",
        "key_schedule": "ks.sha256_kdf",
    }


class TargetSpec(BaseModel):
    """A target cipher: keyed SPN rounds followed by an unknown S-box layer.

    With the default identity inner S-box the rounds are affine over GF(2),
    so affine cubes stay balanced up to the final layer.
    """

    name: str = Field(default="target", min_length=1, max_length=80)
    rounds: int = Field(default=2, ge=1, le=16)

    # Map stage -> component_id (registered in ComponentRegistry)
    components: Dict[str, str] = Field(default_factory=_default_components)

    # One S-box component id per output byte; "sbox.random" draws a table from ``seed``
    outer_sboxes: List[str] = Field(default_factory=lambda: ["sbox.aes"] * 16)

    seed: int = Field(default=1337, description="Seeds the key schedule and random S-boxes")

    @field_validator("outer_sboxes")
    @classmethod
    def _sixteen(cls, v: List[str]) -> List[str]:
        if len(v) != 16:
            raise ValueError("outer_sboxes must name exactly 16 S-boxes")
        return v

    @classmethod
    def uniform(cls, outer_sbox: str, **kwargs) -> "TargetSpec":
        return cls(outer_sboxes=[outer_sbox] * 16, **kwargs)
