"""Verification and analysis of recovered S-box layers.

Research / education only. Do NOT use in production.
"""

from .recovery_check import (
    RecoveryCheckResult,
    RoundtripMismatch,
    affine_equivalent,
    is_affine,
    verify_recovery,
)
from .report import RecoveryReport, layer_tables
from .sbox_analysis import SBoxAnalysisResult, analyze_layer, analyze_sbox, sbox_ddt_max, sbox_lat_max_abs

__all__ = [
    "RecoveryCheckResult",
    "RoundtripMismatch",
    "affine_equivalent",
    "is_affine",
    "verify_recovery",
    "RecoveryReport",
    "layer_tables",
    "SBoxAnalysisResult",
    "analyze_layer",
    "analyze_sbox",
    "sbox_ddt_max",
    "sbox_lat_max_abs",
]
