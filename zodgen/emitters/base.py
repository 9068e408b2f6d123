"""Shared emitter resources: templates, output files and import paths."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Iterable

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from ..expression import render

TEMPLATE_DIR: Final = Path(__file__).resolve().parent.parent / "templates"

GENERATED_HEADER: Final = "// Generated by zodgen. Do not edit manually."

TEMPLATES: Final[tuple[str, ...]] = (
    "components.ts.jinja",
    "index.ts.jinja",
    "routes.ts.jinja",
    "handler.ts.jinja",
    "tanstack-query.ts.jinja",
    "svelte-query.ts.jinja",
    "vue-query.ts.jinja",
    "swr.ts.jinja",
    "rpc.ts.jinja",
)

_USES_ZOD_RE: Final = re.compile(r"(?<![\w$.])z\.")


@dataclass(frozen=True, slots=True)
class GeneratedFile:
    path: Path
    content: str


@dataclass(frozen=True, slots=True)
class ImportLine:
    specifier: str
    names: tuple[str, ...]
    type_only: bool = False


@dataclass
class GeneratorContext:
    """Context for code generation with cached resources.

    The Jinja environment and every template are loaded once and shared by
    all tasks of a batch; rendering does not mutate them.
    """

    template_env: Environment = field(init=False)
    _templates: dict[str, Template] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            auto_reload=False,  # Disable auto-reload for performance
        )
        self.template_env.filters["js_string"] = render.js_string
        self.template_env.filters["js_value"] = render.js_value
        self.template_env.globals["header"] = GENERATED_HEADER
        # Pre-compile templates
        self._templates = {name: self.template_env.get_template(name) for name in TEMPLATES}

    def render(self, template_name: str, **context: Any) -> str:
        return self._templates[template_name].render(**context)


def module_specifier(from_file: Path, to_file: Path) -> str:
    """Relative import specifier from one emitted file to another.

    Examples:
        >>> module_specifier(Path("/p/src/routes.ts"), Path("/p/src/schemas/index.ts"))
        './schemas'
        >>> module_specifier(Path("/p/src/handlers/todoHandler.ts"), Path("/p/src/routes.ts"))
        '../routes'
    """
    target = to_file.with_suffix("")
    if target.name == "index":
        target = target.parent
    relative = posixpath.relpath(target.as_posix(), from_file.parent.as_posix())
    return relative if relative.startswith(".") else f"./{relative}"


def uses_zod(codes: Iterable[str]) -> bool:
    return any(_USES_ZOD_RE.search(code) for code in codes)
