"""
Code generation core.

Descriptor indexing, name resolution, template functions and the template
engine that drives a generation run.
"""

from .config import PluginConfig
from .context import ExecutionContext, ListPayload, NoPayload, SinglePayload, pack_payload
from .descriptors import FlatIndex, NodeKind, TypeFinder, build_index, flatten_file, node_kind
from .generator import GenerationResult, build_response, generate, run_templates
from .naming import to_camel_case, to_pascal_case, to_snake_case
from .predicates import PREDICATES
from .templates import OutputBuffers, TemplateEngine

__all__ = [
    # Configuration
    "PluginConfig",
    # Execution context
    "ExecutionContext",
    "NoPayload",
    "SinglePayload",
    "ListPayload",
    "pack_payload",
    # Descriptor index
    "FlatIndex",
    "NodeKind",
    "TypeFinder",
    "build_index",
    "flatten_file",
    "node_kind",
    # Pipeline
    "GenerationResult",
    "build_response",
    "generate",
    "run_templates",
    # Naming
    "to_camel_case",
    "to_pascal_case",
    "to_snake_case",
    # Templates
    "PREDICATES",
    "OutputBuffers",
    "TemplateEngine",
]
