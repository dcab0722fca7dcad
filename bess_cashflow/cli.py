# bess_cashflow/cli.py
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

# Only imports the thin runner; heavy math stays behind scenario_runner
from .finance.metrics import headline
from .scenario_runner import run_dir  # run_dir(Path|str|None, Path, mode="report", fmt="csv", save_annual=False)


def parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="bess_cashflow",
        description="Battery energy-storage cash-flow and investment metrics CLI",
    )
    p.add_argument(
        "--mode",
        default="report",
        choices=["report", "sensitivity"],
        help="Execution mode (default: report).",
    )
    p.add_argument(
        "--config",
        required=False,
        default=None,
        help="Path to a single YAML, or a directory of scenarios. If omitted, the built-in defaults are used.",
    )
    p.add_argument(
        "--outputs-dir",
        default="outputs",
        help="Directory to write result files (default: outputs). Will be created if missing.",
    )
    p.add_argument(
        "--format",
        dest="fmt",
        default="csv",
        choices=["csv", "jsonl"],
        help="Output format for cash-flow / sensitivity tables (default: csv).",
    )
    p.add_argument(
        "--save-annual",
        action="store_true",
        help="If set, write the per-year cash-flow table alongside the summary.",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    v = p.add_mutually_exclusive_group()
    v.add_argument(
        "--strict",
        action="store_true",
        help="Enable strict validation (unknown keys raise, core inputs required).",
    )
    v.add_argument(
        "--relaxed",
        action="store_true",
        help="Enable relaxed validation (missing inputs take defaults).",
    )
    return p.parse_args(argv)


def _apply_validation_mode(ns: argparse.Namespace) -> None:
    # Default: leave env as-is; flags override explicitly.
    if ns.strict:
        os.environ["VALIDATION_MODE"] = "strict"
    elif ns.relaxed:
        os.environ["VALIDATION_MODE"] = "relaxed"
    # else: respect existing environment


def main(argv: list[str] | None = None) -> int:
    try:
        ns = parse_args(argv)
    except SystemExit as e:
        return int(e.code) if isinstance(e.code, int) else 2
    _apply_validation_mode(ns)
    logging.basicConfig(level=getattr(logging, ns.log_level), format="%(levelname)s %(name)s: %(message)s")

    # Resolve paths
    outputs_dir = Path(ns.outputs_dir).resolve()
    cfg_path: Path | None = Path(ns.config).resolve() if ns.config else None

    # Ensure outputs directory exists
    outputs_dir.mkdir(parents=True, exist_ok=True)

    # Delegate to the scenario runner. It accepts either a YAML file or a directory.
    try:
        res = run_dir(cfg_path, outputs_dir, mode=ns.mode, fmt=ns.fmt, save_annual=ns.save_annual)
    except SystemExit as e:
        # Validation failures surface as SystemExit; keep the message, exit 2
        if e.code not in (None, 0) and not isinstance(e.code, int):
            print(f"ERROR: {e.code}", file=sys.stderr)
        return int(e.code) if isinstance(e.code, int) else 2
    except Exception as e:
        # Fail noisily with non-zero; keep traceback for debugging
        logging.getLogger(__name__).debug("run failed", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if res.projection is not None:
        print(headline(res.projection))
    else:
        print(f"Ran {res.summary.get('scenarios', 0)} scenarios.")
    print(f"Summary: {res.summary_path}")
    return 0


__all__ = ["main", "parse_args"]
