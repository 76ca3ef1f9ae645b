#!/usr/bin/env python3
"""
Run a YAML pool scenario and print per-step outcomes plus the final state.

Usage:
  python3 tools/run_scenario.py scenarios/basic_pool.yaml
  python3 tools/run_scenario.py scenarios/basic_pool.yaml --json --log-level DEBUG
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pairpool.core.errors import PoolError
from pairpool.integration.scenario import ScenarioError, load_scenario, run_scenario


def _print_human(result) -> None:
    for o in result.outcomes:
        if o.ok:
            print(f"[scenario] step {o.index:>3} {o.op:<17} OK     result={o.result}")
        else:
            print(f"[scenario] step {o.index:>3} {o.op:<17} REJECT code={o.error_code} ({o.error})")
    snap = result.snapshot
    print(f"[scenario] reserves=({snap['reserve_a']}, {snap['reserve_b']}) total_shares={snap['total_shares']}")
    for holder, holdings in result.balances.items():
        print(f"[scenario] balance {holder}: {holdings}")
    print(f"[scenario] state_root={result.state_root}")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Run a constant-product pool scenario")
    ap.add_argument("scenario", type=Path, help="path to a scenario YAML file")
    ap.add_argument("--json", action="store_true", help="emit canonical JSON instead of text")
    ap.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    ap.add_argument("--strict", action="store_true", help="exit non-zero if any step was rejected")
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        scenario = load_scenario(args.scenario)
        result = run_scenario(scenario)
    except (OSError, ScenarioError, PoolError) as exc:
        print(f"[scenario] FAIL: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), sort_keys=True, separators=(",", ":")))
    else:
        _print_human(result)

    if args.strict and not result.ok:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
