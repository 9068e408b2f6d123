#!/usr/bin/env python3
"""
zodgen command line.

Usage:
    python -m zodgen <command> [options]

Commands:
    generate    Generate every configured output of one document
    batch       Generate several configurations in one worker pool

Examples:
    python -m zodgen generate
    python -m zodgen generate --config api/zodgen.yaml --no-format
    python -m zodgen batch services/*/zodgen.yaml --workers 4
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import DEFAULT_CONFIG, load_config
from .formatter import IdentityFormatter
from .orchestrator import BatchReport, plan_tasks, run_batch
from .shared.errors import SchemaError
from .writer import FileWriter, MemoryWriter


def _add_run_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--no-parallel",
        action="store_true",
        help="Run tasks one after another",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Maximum number of parallel workers (default: CPU count)",
    )
    parser.add_argument(
        "--no-format",
        action="store_true",
        help="Skip the configured formatter",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compile and format without writing files",
    )


def print_report(report: BatchReport, *, dry_run: bool = False) -> None:
    """Print per-task results, compiler warnings and the batch summary."""
    warned: set[str] = set()
    for run in report.runs:
        for diagnostic in run.diagnostics:
            message = str(diagnostic)
            if message not in warned:
                warned.add(message)
                print(f"Warning: {message}", file=sys.stderr)

    for run in report.runs:
        name = run.task.name
        if not run.ok:
            print(f"[FAIL] {name}: {run.error}")
        elif run.note:
            print(f"[SKIP] {name}: {run.note}")
        else:
            verb = "Would write" if dry_run else "Generated"
            print(f"[OK] {name}: {verb} {len(run.files)} file(s)")
            for generated in run.files:
                print(f"  -> {generated.path}")

    print(f"\n{report.succeeded}/{report.total} task(s) succeeded")


def _run(config_paths: list[Path], parsed: argparse.Namespace) -> int:
    try:
        configs = [load_config(path) for path in config_paths]
        tasks = plan_tasks(configs)
    except SchemaError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    report = run_batch(
        tasks,
        writer=MemoryWriter() if parsed.dry_run else FileWriter(),
        formatter=IdentityFormatter() if parsed.no_format else None,
        parallel=not parsed.no_parallel,
        max_workers=parsed.workers,
    )
    print_report(report, dry_run=parsed.dry_run)
    return 0 if report.ok else 1


def cmd_generate(args: list[str]) -> int:
    """Generate every configured output of one document."""
    parser = argparse.ArgumentParser(prog="zodgen generate", description=cmd_generate.__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Configuration file (default: {DEFAULT_CONFIG})",
    )
    _add_run_options(parser)
    parsed = parser.parse_args(args)
    return _run([parsed.config], parsed)


def cmd_batch(args: list[str]) -> int:
    """Generate several configurations in one worker pool."""
    parser = argparse.ArgumentParser(prog="zodgen batch", description=cmd_batch.__doc__)
    parser.add_argument(
        "configs",
        type=Path,
        nargs="+",
        help="Configuration files",
    )
    _add_run_options(parser)
    parsed = parser.parse_args(args)
    return _run(parsed.configs, parsed)


COMMANDS = {
    "generate": (cmd_generate, "Generate every configured output of one document"),
    "batch": (cmd_batch, "Generate several configurations in one worker pool"),
}


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] in ("-h", "--help"):
        print(__doc__)
        print("Available commands:")
        for name, (_, desc) in COMMANDS.items():
            print(f"  {name:12} {desc}")
        print("\nUse '<command> --help' for command-specific options.")
        return 0

    command = argv[0]
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print(f"Available commands: {', '.join(COMMANDS.keys())}")
        return 1

    handler, _ = COMMANDS[command]
    return handler(argv[1:])


if __name__ == "__main__":
    sys.exit(main())
