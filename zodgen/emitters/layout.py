"""Map components to the files they are emitted into."""

from __future__ import annotations

from pathlib import Path

from ..config import GeneratorConfig
from ..schema_ir.refs import KIND_ORDER, ReferenceTable
from ..shared.naming import IdentifierScope, to_camel_case
from .base import ImportLine, module_specifier


class ComponentLayout:
    """Knows the final path of every component declaration.

    Split kinds give each component its own file inside the configured
    directory. Kinds without an output are placed in the routes file.
    """

    def __init__(self, config: GeneratorConfig, refs: ReferenceTable) -> None:
        self.config = config
        self.refs = refs
        self._files: dict[tuple[str, str], Path] = {}
        for kind in KIND_ORDER:
            output = config.components.get(kind)
            if output is None:
                if config.routes is not None:
                    for name in refs.names(kind):
                        self._files[(kind, name)] = config.routes.output
                continue
            if not output.split:
                for name in refs.names(kind):
                    self._files[(kind, name)] = output.output
                continue
            stems = IdentifierScope()
            for name in refs.names(kind):
                stem = stems.claim(name, to_camel_case(name) or "component")
                self._files[(kind, name)] = output.output / f"{stem}.ts"

    def file_for(self, key: tuple[str, str]) -> Path | None:
        return self._files.get(key)

    def import_target(self, key: tuple[str, str], from_file: Path) -> Path | None:
        """File to import a component from, preferring the barrel of a split directory."""
        target = self._files.get(key)
        if target is None:
            return None
        output = self.config.components.get(key[0])
        if output is not None and output.split and from_file.parent != output.output:
            return output.output / "index.ts"
        return target

    def imports_for(self, from_file: Path, keys: frozenset[tuple[str, str]] | set[tuple[str, str]]) -> list[ImportLine]:
        """Import lines needed by ``from_file`` to reference ``keys``.

        Components declared in ``from_file`` itself need no import. Lines
        and names are sorted so output is stable.
        """
        by_target: dict[Path, set[str]] = {}
        for key in keys:
            target = self.import_target(key, from_file)
            if target is None or target == from_file:
                continue
            by_target.setdefault(target, set()).add(self.refs.component(*key).identifier)
        lines = [
            ImportLine(module_specifier(from_file, target), tuple(sorted(names)))
            for target, names in by_target.items()
        ]
        return sorted(lines, key=lambda line: line.specifier)
