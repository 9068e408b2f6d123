"""zodgen: compile OpenAPI documents into Zod schemas and Hono routes."""

from .config import GeneratorConfig, load_config, parse_config
from .orchestrator import BatchReport, plan_tasks, run_batch
from .pipeline import Task, TaskRun, TaskState

__version__ = "0.1.0"

__all__ = [
    "GeneratorConfig",
    "load_config",
    "parse_config",
    "BatchReport",
    "plan_tasks",
    "run_batch",
    "Task",
    "TaskRun",
    "TaskState",
]
