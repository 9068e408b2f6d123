#!/usr/bin/env python3
"""
Wrapper for zodgen.

This is a convenience wrapper that forwards to the zodgen module.
Run with --help to see available commands.

Usage:
    python build.py <command> [options]
    ./build.py <command> [options]  (on Unix with execute permission)

Commands:
    generate    Generate every configured output of one document
    batch       Generate several configurations in one worker pool

Examples:
    python build.py generate --config zodgen.yaml
    python build.py generate --no-format --dry-run
    python build.py batch api/zodgen.yaml admin/zodgen.yaml
"""

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent


def main() -> int:
    """Forward all arguments to the zodgen module."""
    return subprocess.call(
        [sys.executable, "-m", "zodgen"] + sys.argv[1:],
        cwd=ROOT,
    )


if __name__ == "__main__":
    sys.exit(main())
