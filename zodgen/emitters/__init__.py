"""Render compiled declarations and operation manifests into TypeScript files."""

from .base import GENERATED_HEADER, GeneratedFile, GeneratorContext, ImportLine, module_specifier
from .clients import CLIENT_TARGETS, ClientOperation, cache_key, client_accessor, client_type, emit_client
from .components import Declaration, compile_components, emit_components
from .handlers import emit_handlers
from .layout import ComponentLayout
from .routes import emit_routes, route_entries

__all__ = [
    # Base
    "GENERATED_HEADER",
    "GeneratedFile",
    "GeneratorContext",
    "ImportLine",
    "module_specifier",
    # Clients
    "CLIENT_TARGETS",
    "ClientOperation",
    "cache_key",
    "client_accessor",
    "client_type",
    "emit_client",
    # Components
    "ComponentLayout",
    "Declaration",
    "compile_components",
    "emit_components",
    # Routes and handlers
    "emit_handlers",
    "emit_routes",
    "route_entries",
]
