"""
Generator configuration.

Configuration lives in a YAML file (``zodgen.yaml`` by default). Relative
paths are resolved against the directory holding the configuration file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

from .shared.errors import SchemaValidationError
from .shared.naming import NamingPolicy
from .shared.schema_loader import load_document

DEFAULT_CONFIG: Final = Path("zodgen.yaml")

# Configuration key -> document kind, in emission order
COMPONENT_SECTIONS: Final[tuple[str, ...]] = (
    "schemas",
    "parameters",
    "media_types",
    "request_bodies",
    "responses",
)

CLIENT_TARGETS: Final[tuple[str, ...]] = (
    "tanstack-query",
    "svelte-query",
    "vue-query",
    "swr",
    "rpc",
)


@dataclass(frozen=True, slots=True)
class ComponentOutput:
    """Where one component kind is emitted.

    In split mode ``output`` is a directory receiving one file per component
    plus an ``index.ts`` barrel; otherwise it is a single ``.ts`` file.
    """

    output: Path
    split: bool = False
    export: bool = True
    export_types: bool = False


@dataclass(frozen=True, slots=True)
class RoutesConfig:
    output: Path
    path_prefix: str = ""


@dataclass(frozen=True, slots=True)
class HandlersConfig:
    output: Path
    test: bool = False


@dataclass(frozen=True, slots=True)
class ClientsConfig:
    targets: dict[str, Path] = field(default_factory=dict)
    client_import: str = "./client"


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    input: Path
    naming: NamingPolicy = field(default_factory=NamingPolicy)
    components: dict[str, ComponentOutput] = field(default_factory=dict)
    routes: RoutesConfig | None = None
    handlers: HandlersConfig | None = None
    clients: ClientsConfig | None = None
    format_command: tuple[str, ...] | None = None
    source: Path | None = None

    @property
    def inline_kinds(self) -> tuple[str, ...]:
        """Component kinds without their own output, emitted into the routes file."""
        if self.routes is None:
            return ()
        return tuple(kind for kind in COMPONENT_SECTIONS if kind not in self.components)

    def outputs(self) -> list[tuple[str, Path]]:
        """Every (target, output path) pair this configuration writes to."""
        outputs = [(f"components:{kind}", out.output) for kind, out in self.components.items()]
        if self.routes is not None:
            outputs.append(("routes", self.routes.output))
        if self.handlers is not None:
            outputs.append(("handlers", self.handlers.output))
        if self.clients is not None:
            outputs.extend(self.clients.targets.items())
        return outputs


def _mapping(data: Any, field_name: str, source: str | None) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SchemaValidationError("must be a mapping", source, field=field_name)
    return data


def _path(value: Any, base_dir: Path, field_name: str, source: str | None) -> Path:
    if not isinstance(value, str) or not value:
        raise SchemaValidationError("must be a non-empty path", source, field=field_name)
    return (base_dir / value).resolve()


def _flag(data: dict[str, Any], key: str, default: bool, field_name: str, source: str | None) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise SchemaValidationError("must be true or false", source, field=f"{field_name}.{key}")
    return value


def _parse_component(data: Any, kind: str, base_dir: Path, source: str | None) -> ComponentOutput:
    field_name = f"components.{kind}"
    section = _mapping(data, field_name, source)
    output = _path(section.get("output"), base_dir, f"{field_name}.output", source)
    split = _flag(section, "split", False, field_name, source)
    if split and output.suffix == ".ts":
        raise SchemaValidationError("split mode needs a directory, not a .ts file", source, field=f"{field_name}.output")
    if not split and output.suffix != ".ts":
        raise SchemaValidationError("single-file mode needs a .ts file", source, field=f"{field_name}.output")
    export = _flag(section, "export", True, field_name, source)
    if split and not export:
        raise SchemaValidationError("split mode needs exported declarations", source, field=f"{field_name}.export")
    return ComponentOutput(
        output=output,
        split=split,
        export=export,
        export_types=_flag(section, "export_types", False, field_name, source),
    )


def parse_config(data: dict[str, Any], base_dir: Path, source: Path | None = None) -> GeneratorConfig:
    """Validate raw configuration data.

    Raises:
        SchemaValidationError: If any field is missing or invalid.
    """
    where = str(source) if source else None

    naming_data = _mapping(data.get("naming"), "naming", where)
    naming = NamingPolicy(
        schema=naming_data.get("schema", "PascalCase"),
        type=naming_data.get("type", "PascalCase"),
    )

    components: dict[str, ComponentOutput] = {}
    components_data = _mapping(data.get("components"), "components", where)
    for kind, section in components_data.items():
        if kind not in COMPONENT_SECTIONS:
            raise SchemaValidationError(
                f"unknown component kind, expected one of {list(COMPONENT_SECTIONS)}",
                where,
                field=f"components.{kind}",
            )
        components[kind] = _parse_component(section, kind, base_dir, where)

    routes = None
    if data.get("routes") is not None:
        routes_data = _mapping(data["routes"], "routes", where)
        prefix = routes_data.get("path_prefix", "")
        if not isinstance(prefix, str) or (prefix and not prefix.startswith("/")):
            raise SchemaValidationError("must start with '/'", where, field="routes.path_prefix")
        routes = RoutesConfig(
            output=_path(routes_data.get("output"), base_dir, "routes.output", where),
            path_prefix=prefix,
        )

    handlers = None
    if data.get("handlers") is not None:
        handlers_data = _mapping(data["handlers"], "handlers", where)
        if routes is None:
            raise SchemaValidationError("handlers need a routes output to import from", where, field="handlers")
        handlers = HandlersConfig(
            output=_path(handlers_data.get("output"), base_dir, "handlers.output", where),
            test=_flag(handlers_data, "test", False, "handlers", where),
        )

    clients = None
    if data.get("clients") is not None:
        clients_data = _mapping(data["clients"], "clients", where)
        targets: dict[str, Path] = {}
        for target, output in _mapping(clients_data.get("targets"), "clients.targets", where).items():
            if target not in CLIENT_TARGETS:
                raise SchemaValidationError(
                    f"unknown client target, expected one of {list(CLIENT_TARGETS)}",
                    where,
                    field=f"clients.targets.{target}",
                )
            targets[target] = _path(output, base_dir, f"clients.targets.{target}", where)
        client_import = clients_data.get("client_import", "./client")
        if not isinstance(client_import, str) or not client_import:
            raise SchemaValidationError("must be a module specifier", where, field="clients.client_import")
        clients = ClientsConfig(targets=targets, client_import=client_import)

    format_command = None
    format_data = _mapping(data.get("format"), "format", where)
    if format_data.get("command") is not None:
        command = format_data["command"]
        if isinstance(command, str):
            command = command.split()
        if not isinstance(command, list) or not command or not all(isinstance(c, str) for c in command):
            raise SchemaValidationError("must be a command string or list", where, field="format.command")
        format_command = tuple(command)

    config = GeneratorConfig(
        input=_path(data.get("input"), base_dir, "input", where),
        naming=naming,
        components=components,
        routes=routes,
        handlers=handlers,
        clients=clients,
        format_command=format_command,
        source=source,
    )
    _check_outputs(config, where)
    return config


def _check_outputs(config: GeneratorConfig, where: str | None) -> None:
    outputs = config.outputs()
    if not outputs:
        raise SchemaValidationError("no outputs configured", where)
    seen: dict[Path, str] = {}
    for target, path in outputs:
        if path in seen:
            raise SchemaValidationError(
                f"output '{path}' is shared with '{seen[path]}'",
                where,
                field=target,
            )
        seen[path] = target


def load_config(path: Path = DEFAULT_CONFIG) -> GeneratorConfig:
    """Load and validate a configuration file.

    Raises:
        SchemaError: If the file cannot be read or is invalid.
    """
    resolved = path.resolve()
    data = load_document(resolved)
    return parse_config(data, resolved.parent, resolved)
