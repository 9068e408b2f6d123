"""Assemble parameters, request bodies and responses into operation manifests."""

from .content import ContentShape, HoistedSchema, MediaEntry, compile_content
from .manifest import OperationManifest, build_manifests, handler_file_stem, to_hono_path
from .parameters import Parameter, compile_parameter, group_parameters, merge_parameters, read_parameter
from .request import BodyShape, RequestShape, assemble_body, assemble_request, body_literal
from .responses import ResponseBody, ResponseShape, assemble_responses, compile_headers, compile_response

__all__ = [
    "ContentShape",
    "HoistedSchema",
    "MediaEntry",
    "compile_content",
    "OperationManifest",
    "build_manifests",
    "handler_file_stem",
    "to_hono_path",
    "Parameter",
    "compile_parameter",
    "group_parameters",
    "merge_parameters",
    "read_parameter",
    "BodyShape",
    "RequestShape",
    "assemble_body",
    "assemble_request",
    "body_literal",
    "ResponseBody",
    "ResponseShape",
    "assemble_responses",
    "compile_headers",
    "compile_response",
]
