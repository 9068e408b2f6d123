"""Formatting collaborators applied to generated text before it is written."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .shared.result import FORMAT_ERROR, IO_ERROR, Result


class Formatter(Protocol):
    def format(self, text: str, path: Path) -> Result[str]:
        """Return formatted text, or a failure describing why it could not be formatted."""
        ...


class IdentityFormatter:
    """Leaves generated text untouched."""

    def format(self, text: str, path: Path) -> Result[str]:
        return Result.success(text)


@dataclass(frozen=True, slots=True)
class CommandFormatter:
    """Pipes text through an external formatter such as prettier.

    The target path is appended to ``command`` so the tool can infer the
    parser, e.g. ``npx prettier --stdin-filepath <path>``. Formatted text is
    read from stdout.
    """

    command: tuple[str, ...]
    cwd: Path | None = None

    def format(self, text: str, path: Path) -> Result[str]:
        if not text:
            return Result.success(text)
        try:
            completed = subprocess.run(
                [*self.command, str(path)],
                input=text,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError:
            return Result.failure(f"Formatter not found: {self.command[0]}", IO_ERROR)
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
            return Result.failure(f"Formatter failed for {path}: {detail}", FORMAT_ERROR)
        return Result.success(completed.stdout)
