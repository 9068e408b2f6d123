"""
Generation tasks.

A task compiles one configured target (a component kind, the routes file,
the handlers or a client library) of one document and moves through
``pending -> compiling -> formatting -> writing -> done``. Any failing step
moves it to ``error``; nothing is retried. Every file of a task is
formatted before the first one is written, so a failing task leaves no
partial output behind. The orchestrator prepares all tasks of a
configuration before committing any of them, so one failing target
withholds the files of its siblings too.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import CLIENT_TARGETS, COMPONENT_SECTIONS, GeneratorConfig
from .emitters import (
    ComponentLayout,
    GeneratedFile,
    GeneratorContext,
    emit_client,
    emit_components,
    emit_handlers,
    emit_routes,
)
from .expression import CompileContext, Diagnostic
from .formatter import Formatter
from .schema_ir.refs import ReferenceTable
from .shared.errors import MissingInputError
from .shared.result import MISSING_INPUT, WITHHELD, Result, capture
from .writer import Writer

COMPONENT_PREFIX = "components:"


class TaskState(str, Enum):
    PENDING = "pending"
    COMPILING = "compiling"
    FORMATTING = "formatting"
    WRITING = "writing"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Task:
    config: GeneratorConfig
    target: str

    @property
    def name(self) -> str:
        source = self.config.source.name if self.config.source else self.config.input.name
        return f"{source}:{self.target}"


@dataclass(frozen=True, slots=True)
class CompiledTarget:
    files: list[GeneratedFile]
    diagnostics: list[Diagnostic]


@dataclass(slots=True)
class TaskRun:
    """Progress and outcome of one task."""

    task: Task
    state: TaskState = TaskState.PENDING
    history: list[TaskState] = field(default_factory=lambda: [TaskState.PENDING])
    files: list[GeneratedFile] = field(default_factory=list)
    pending: list[GeneratedFile] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: str | None = None
    kind: str | None = None
    note: str | None = None

    @property
    def ok(self) -> bool:
        return self.state is TaskState.DONE

    def advance(self, state: TaskState) -> None:
        self.state = state
        self.history.append(state)

    def fail(self, result: Result[Any]) -> TaskRun:
        self.error = result.error
        self.kind = result.kind
        self.advance(TaskState.ERROR)
        return self


def compile_target(
    task: Task,
    document: dict[str, Any],
    generator: GeneratorContext,
) -> CompiledTarget:
    """Compile one target into unformatted files.

    Raises:
        MissingInputError: If the document holds nothing for this target.
        SchemaError: On unresolvable references or malformed content.
    """
    config = task.config
    refs = ReferenceTable(document, config.naming)
    ctx = CompileContext(refs)
    target = task.target

    if target.startswith(COMPONENT_PREFIX):
        kind = target[len(COMPONENT_PREFIX):]
        if not refs.names(kind):
            raise MissingInputError(f"Document contains no {kind} to generate")
        layout = ComponentLayout(config, refs)
        files = emit_components(kind, config.components[kind], ctx, layout, generator)
    elif target == "routes":
        files = emit_routes(config, ctx, ComponentLayout(config, refs), generator)
    elif target == "handlers":
        files = emit_handlers(config, ctx, generator)
    elif target in CLIENT_TARGETS:
        files = emit_client(target, config.clients.targets[target], config, ctx, generator)
    else:
        raise ValueError(f"Unknown target: {target}")

    return CompiledTarget(files, list(ctx.diagnostics))


def task_targets(config: GeneratorConfig) -> list[str]:
    """Targets of one configuration, in a fixed order."""
    targets = [f"{COMPONENT_PREFIX}{kind}" for kind in COMPONENT_SECTIONS if kind in config.components]
    if config.routes is not None:
        targets.append("routes")
    if config.handlers is not None:
        targets.append("handlers")
    if config.clients is not None:
        targets.extend(t for t in CLIENT_TARGETS if t in config.clients.targets)
    return targets


def prepare_task(
    task: Task,
    document: Result[dict[str, Any]],
    generator: GeneratorContext,
    formatter: Formatter,
) -> TaskRun:
    """Compile and format one task, holding its files until it is committed.

    A prepared run is left in ``formatting`` with its files in ``pending``;
    runs with nothing to write end in ``done`` or ``error`` right away.
    """
    run = TaskRun(task)
    run.advance(TaskState.COMPILING)
    if not document.ok:
        return run.fail(document)

    compiled = capture(compile_target, task, document.value, generator)
    if not compiled.ok:
        if compiled.kind == MISSING_INPUT:
            # Nothing to do is not a failure
            run.note = compiled.error
            run.advance(TaskState.DONE)
            return run
        return run.fail(compiled)
    run.diagnostics = compiled.value.diagnostics

    run.advance(TaskState.FORMATTING)
    for generated in compiled.value.files:
        result = formatter.format(generated.content, generated.path)
        if not result.ok:
            run.pending = []
            return run.fail(result)
        run.pending.append(GeneratedFile(generated.path, result.value))
    return run


def commit_task(run: TaskRun, writer: Writer) -> TaskRun:
    """Write the files of a prepared run; other runs are returned as is."""
    if run.state is not TaskState.FORMATTING:
        return run

    run.advance(TaskState.WRITING)
    pending, run.pending = run.pending, []
    for generated in pending:
        result = writer.write(generated.path, generated.content)
        if not result.ok:
            return run.fail(result)
        run.files.append(generated)

    run.advance(TaskState.DONE)
    return run


def withhold(run: TaskRun, reason: str) -> TaskRun:
    """Drop the files of a prepared run without writing them."""
    if run.state is not TaskState.FORMATTING:
        return run
    run.pending = []
    return run.fail(Result.failure(reason, WITHHELD))


def run_task(
    task: Task,
    document: Result[dict[str, Any]],
    generator: GeneratorContext,
    formatter: Formatter,
    writer: Writer,
) -> TaskRun:
    """Drive one task through its states and return the outcome."""
    return commit_task(prepare_task(task, document, generator, formatter), writer)
