from __future__ import annotations

from typing import List, Tuple

from .registry import ComponentRegistry
from .spec import RANDOM_SBOX, TargetSpec

_STAGE_KINDS = {
    "sbox": "SBOX",
    "perm": "PERM",
    "linear": "LINEAR",
    "key_schedule": "KEY_SCHEDULE",
}


def validate_spec(spec: TargetSpec, registry: ComponentRegistry | None = None) -> Tuple[bool, List[str]]:
    reg = registry or ComponentRegistry()
    errs: List[str] = []

    for stage, kind in _STAGE_KINDS.items():
        if stage not in spec.components:
            errs.append(f"Missing component: {stage}")
            continue
        cid = spec.components[stage]
        if not reg.exists(cid):
            errs.append(f"Unknown component {stage}: {cid}")
        elif reg.get(cid).kind != kind:
            errs.append(f"Component {cid} is not a {kind}")

    for pos, cid in enumerate(spec.outer_sboxes):
        if cid == RANDOM_SBOX:
            continue
        if not reg.exists(cid):
            errs.append(f"Unknown outer S-box at position {pos}: {cid}")
        elif reg.get(cid).table is None:
            errs.append(f"Outer S-box at position {pos} has no byte table: {cid}")

    return (len(errs) == 0), errs
