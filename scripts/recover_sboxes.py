"""CLI entry point: recover the last S-box layer of a demo target cipher.

Usage:
    python scripts/recover_sboxes.py                                  # AES S-boxes after 2 affine rounds
    python scripts/recover_sboxes.py --outer sbox.random --rounds 4   # random S-boxes
    python scripts/recover_sboxes.py --generator integral --active-bytes 2

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

# Ensure project root is on path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from sboxlab.attack import RecoveryError, cube_generator, integral_generator, recover_sboxes
from sboxlab.cipher.builder import build_target
from sboxlab.cipher.spec import TargetSpec
from sboxlab.config import load_settings
from sboxlab.evaluation import RecoveryReport, analyze_layer, layer_tables, verify_recovery
from sboxlab.utils.repro import make_run_dir, set_global_seed, write_json


def main() -> int:
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Cube attack on a trailing S-box layer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--rounds", type=int, default=2, help="SPN rounds before the S-box layer (default: 2)")
    parser.add_argument("--inner", default="sbox.identity", help="S-box used inside the rounds (default: sbox.identity)")
    parser.add_argument("--outer", default="sbox.aes", help="S-box of the final layer, or sbox.random (default: sbox.aes)")
    parser.add_argument("--generator", choices=["cube", "integral"], default="cube")
    parser.add_argument("--cube-dim", type=int, default=2, help="Dimension of affine cubes, at least 2 (default: 2)")
    parser.add_argument("--active-bytes", type=int, default=2, help="Active bytes of integral structures (default: 2)")
    parser.add_argument("--key", type=str, default=None, help="16-byte key as hex (default: random from seed)")
    parser.add_argument("--seed", type=int, default=settings.global_seed)
    parser.add_argument("--vectors", type=int, default=200, help="Roundtrip vectors to verify (default: 200)")
    parser.add_argument("--skip-analysis", action="store_true", help="Skip DDT/LAT analysis")
    parser.add_argument("--output-dir", type=str, default=settings.runs_dir)
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    set_global_seed(args.seed)
    rng = random.Random(args.seed)
    key = bytes.fromhex(args.key) if args.key else bytes(rng.randrange(256) for _ in range(16))

    spec = TargetSpec(
        name=f"{args.outer}-after-{args.rounds}r",
        rounds=args.rounds,
        outer_sboxes=[args.outer] * 16,
        seed=args.seed,
    )
    spec.components["sbox"] = args.inner
    oracle, true_layer = build_target(spec, key)

    if args.generator == "cube":
        generator = cube_generator(args.cube_dim, rng)
    else:
        generator = integral_generator(args.active_bytes, rng)

    try:
        recovery = recover_sboxes(oracle, generator, settings.attack_params())
    except RecoveryError as e:
        print(f"Recovery failed: {e}", file=sys.stderr)
        return 1

    check = verify_recovery(oracle, recovery, num_vectors=args.vectors, seed=args.seed, reference_layer=true_layer)
    sbox_results = [] if args.skip_analysis else analyze_layer(recovery.layer)
    report = RecoveryReport(recovery=recovery, check=check, sbox_results=sbox_results)
    print(report.to_summary())

    paths = make_run_dir(args.output_dir, spec.name)
    write_json(paths.target_json, spec.model_dump())
    write_json(paths.report_json, report.to_dict())
    write_json(paths.layer_json, layer_tables(recovery))
    print(f"\nAll results saved to: {paths.run_dir}")
    return 0 if check.is_perfect else 2


if __name__ == "__main__":
    raise SystemExit(main())
