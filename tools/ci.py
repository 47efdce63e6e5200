#!/usr/bin/env python3
# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the CI checks locally.

Every step runs even if an earlier one fails; a summary is printed at the
end. Use ``--only`` or ``--skip`` with step keys to run a subset.
"""

import argparse
import subprocess
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

SMOKE_TEMPLATE = "<ul>{#items}<li>{name}</li>{/items}</ul>"


@dataclass(frozen=True)
class Step:
    """A single CI step."""

    key: str
    title: str
    cmd: list[str]
    stdin: str | None = None


STEPS: list[Step] = [
    Step("format", "Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    Step("lint", "Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    Step("types", "Type check", ["uv", "run", "ty", "check", "src/"]),
    Step("tests", "Tests", ["uv", "run", "pytest", "--cov=restache", "--cov-report=term-missing"]),
    Step("smoke", "CLI smoke test", ["uv", "run", "restache", "build", "-"], stdin=SMOKE_TEMPLATE),
    Step("build", "Build", ["uv", "build"]),
]


def main() -> int:
    """Run the selected CI steps and report results."""
    args = _parse_args()
    steps = _select(args.only, args.skip)
    if not steps:
        print(chalk.red("No steps selected."), file=sys.stderr)
        return 2

    results = [_run_step(step) for step in steps]
    return _print_summary(results)


# ################
# Implementation
# ################

_RULE = "=" * 60


def _parse_args() -> argparse.Namespace:
    keys = [step.key for step in STEPS]
    parser = argparse.ArgumentParser(description="Run restache CI checks.")
    parser.add_argument("--only", nargs="+", choices=keys, default=None, help="Run only these steps")
    parser.add_argument("--skip", nargs="+", choices=keys, default=[], help="Skip these steps")
    return parser.parse_args()


def _select(only: list[str] | None, skip: list[str]) -> list[Step]:
    return [step for step in STEPS if (only is None or step.key in only) and step.key not in skip]


def _run_step(step: Step) -> tuple[Step, bool, float]:
    print(f"\n{chalk.blue(_RULE)}")
    print(chalk.blue(step.title))
    print(chalk.blue(_RULE))
    start = time.monotonic()
    proc = subprocess.run(step.cmd, cwd=_repo_root(), input=step.stdin, text=step.stdin is not None)
    return step, proc.returncode == 0, time.monotonic() - start


def _print_summary(results: list[tuple[Step, bool, float]]) -> int:
    print(f"\n{chalk.blue(_RULE)}")
    print(chalk.blue("  Summary"))
    print(chalk.blue(_RULE))
    failed = 0
    for step, passed, elapsed in results:
        color = chalk.green if passed else chalk.red
        status = "PASS" if passed else "FAIL"
        print(color(f"  {status}  {step.title} ({elapsed:.1f}s)"))
        failed += not passed

    print()
    if failed:
        print(chalk.red(f"{failed} of {len(results)} step(s) failed."))
        return 1
    print(chalk.green(f"All {len(results)} step(s) passed."))
    return 0


def _repo_root() -> Path:
    return Path(__file__).resolve().parent.parent


if __name__ == "__main__":
    sys.exit(main())
