"""Batch orchestration of generation tasks over a worker pool."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from .config import GeneratorConfig
from .emitters import GeneratorContext
from .formatter import CommandFormatter, Formatter, IdentityFormatter
from .pipeline import Task, TaskRun, TaskState, commit_task, prepare_task, task_targets, withhold
from .shared.errors import SchemaValidationError
from .shared.result import Result, capture
from .shared.schema_loader import DocumentCache
from .writer import FileWriter, Writer


@dataclass(frozen=True, slots=True)
class BatchReport:
    """Outcome of a batch, in planned task order."""

    runs: tuple[TaskRun, ...]

    @property
    def total(self) -> int:
        return len(self.runs)

    @property
    def succeeded(self) -> int:
        return sum(1 for run in self.runs if run.ok)

    @property
    def failures(self) -> list[TaskRun]:
        return [run for run in self.runs if not run.ok]

    @property
    def ok(self) -> bool:
        return self.succeeded == self.total


def plan_tasks(configs: Sequence[GeneratorConfig]) -> list[Task]:
    """Expand configurations into tasks.

    Raises:
        SchemaValidationError: If two tasks would write the same output path.
    """
    tasks: list[Task] = []
    owners: dict[Path, str] = {}
    for config in configs:
        for target, path in config.outputs():
            owner = owners.get(path)
            if owner is not None:
                raise SchemaValidationError(
                    f"output '{path}' is also written by '{owner}'",
                    str(config.source) if config.source else None,
                    field=target,
                )
            owners[path] = f"{config.source or config.input}:{target}"
        tasks.extend(Task(config, target) for target in task_targets(config))
    return tasks


def formatter_for(config: GeneratorConfig) -> Formatter:
    if config.format_command is None:
        return IdentityFormatter()
    cwd = config.source.parent if config.source else None
    return CommandFormatter(config.format_command, cwd=cwd)


def _crashed(task: Task, error: Exception) -> TaskRun:
    run = TaskRun(task)
    return run.fail(Result.failure(f"Unexpected error: {error}"))


def run_batch(
    tasks: Sequence[Task],
    *,
    writer: Writer | None = None,
    formatter: Formatter | None = None,
    parallel: bool = True,
    max_workers: int | None = None,
    cache: DocumentCache | None = None,
) -> BatchReport:
    """Run tasks to completion, isolating failures.

    One task failing never stops the others. Every task is compiled and
    formatted before anything is written; when a task fails, the other
    tasks of the same configuration are withheld so no partial output of
    that configuration reaches the writer. ``formatter`` overrides the
    formatter each configuration asks for.

    Args:
        tasks: Tasks in report order.
        writer: Destination for generated files; defaults to the file system.
        formatter: Formatter applied to every task instead of the configured one.
        parallel: Whether to run tasks in a thread pool.
        max_workers: Pool size; defaults to the CPU count.
        cache: Shared document cache; a fresh one is used when omitted.
    """
    writer = writer if writer is not None else FileWriter()
    cache = cache if cache is not None else DocumentCache()
    generator = GeneratorContext()

    def execute(task: Task) -> TaskRun:
        document: Result[dict[str, Any]] = capture(cache.get, task.config.input)
        return prepare_task(task, document, generator, formatter or formatter_for(task.config))

    runs: list[TaskRun | None] = [None] * len(tasks)

    if parallel and len(tasks) > 1:
        with ThreadPoolExecutor(max_workers=max_workers or os.cpu_count()) as executor:
            futures = {executor.submit(execute, task): index for index, task in enumerate(tasks)}
            for future in as_completed(futures):
                index = futures[future]
                try:
                    runs[index] = future.result()
                except Exception as e:
                    runs[index] = _crashed(tasks[index], e)
    else:
        for index, task in enumerate(tasks):
            try:
                runs[index] = execute(task)
            except Exception as e:
                runs[index] = _crashed(task, e)

    prepared = [run for run in runs if run is not None]
    for group in _by_config(prepared):
        failed = next((run for run in group if run.state is TaskState.ERROR), None)
        for run in group:
            if failed is not None:
                withhold(run, f"Not written: {failed.task.name} failed")
                continue
            try:
                commit_task(run, writer)
            except Exception as e:
                run.fail(Result.failure(f"Unexpected error: {e}"))

    return BatchReport(tuple(prepared))


def _by_config(runs: Sequence[TaskRun]) -> list[list[TaskRun]]:
    """Group runs by the configuration they belong to, keeping task order."""
    groups: dict[int, list[TaskRun]] = {}
    for run in runs:
        groups.setdefault(id(run.task.config), []).append(run)
    return list(groups.values())
