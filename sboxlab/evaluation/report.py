"""Structured recovery report.

Aggregates the attack outcome, the verification result and the per-S-box
analysis into a single serializable report.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sboxlab.attack.recover import SBoxRecovery

from .recovery_check import RecoveryCheckResult
from .sbox_analysis import SBoxAnalysisResult


def layer_tables(recovery: SBoxRecovery) -> List[Dict[str, str]]:
    """Hex-encoded forward/backward tables, one entry per position."""
    return [{"enc_key": s.enc_key.hex(), "dec_key": s.dec_key.hex()} for s in recovery.layer]


@dataclass
class RecoveryReport:
    recovery: SBoxRecovery
    check: Optional[RecoveryCheckResult] = None
    sbox_results: List[SBoxAnalysisResult] = field(default_factory=list)
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize full report for JSON export."""
        return {
            "timestamp": self.timestamp,
            "attempts": self.recovery.attempts,
            "dimensions": self.recovery.dimensions,
            "elapsed_seconds": self.recovery.elapsed_seconds,
            "layer": layer_tables(self.recovery),
            "check": self.check.to_dict() if self.check else None,
            "sbox": [s.to_dict() for s in self.sbox_results],
        }

    def to_summary(self) -> str:
        lines = [f"Recovery Report - {self.timestamp}", "=" * 50, self.recovery.summary()]
        if self.check:
            lines.append(f"\nVerification: {self.check.summary()}")
        if self.sbox_results:
            lines.append(f"\nS-box Analysis: {len(self.sbox_results)} positions")
            for s in self.sbox_results:
                lines.append(f"  {s.summary()}")
        return "\n".join(lines)
