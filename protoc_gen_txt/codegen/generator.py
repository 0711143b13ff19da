"""
Generation pipeline for a single compiler request.

Parses parameters, indexes the descriptors, runs the entry templates and
packages the output buffers into a CodeGeneratorResponse.
"""

from typing import Dict, List, Optional

from google.protobuf.compiler import plugin_pb2

from ..errors import PluginError
from ..logging_config import get_logger, set_level
from ..params import parse_parameters
from .config import PluginConfig
from .context import ExecutionContext
from .descriptors import build_index
from .templates import TemplateEngine

logger = get_logger(__name__)


class GenerationResult:
    """Container for generated files or the error that aborted the run."""

    def __init__(
        self,
        files: Optional[Dict[str, str]] = None,
        warnings: Optional[List[str]] = None,
    ):
        """
        Initialize generation result.

        Args:
            files: Output file name to content
            warnings: Any warnings from generation
        """
        self.files = files or {}
        self.warnings = warnings or []
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls()
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def build_root_context(request: plugin_pb2.CodeGeneratorRequest, params) -> ExecutionContext:
    """Index the request and wrap it in the root execution context."""
    return ExecutionContext(
        request=request,
        visible=build_index(request),
        exported=build_index(request, exported=True),
        params=params,
    )


def run_templates(request: plugin_pb2.CodeGeneratorRequest) -> Dict[str, str]:
    """
    Render every entry template for ``request``.

    Args:
        request: Decoded compiler request

    Returns:
        Output file name to accumulated content

    Raises:
        PluginError: On parameter, configuration or template failures
    """
    params = parse_parameters(request.parameter)
    config = PluginConfig.from_params(params)
    if config.debug:
        set_level("DEBUG")

    root = build_root_context(request, params)
    engine = TemplateEngine(config, root)
    engine.load_templates(config.templates)

    for name in config.entry_points:
        engine.execute(name)

    return engine.outputs.contents()


def generate(request: plugin_pb2.CodeGeneratorRequest) -> GenerationResult:
    """
    Run generation with error handling.

    Args:
        request: Decoded compiler request

    Returns:
        GenerationResult with files, or the error that stopped the run
    """
    try:
        files = run_templates(request)
    except PluginError as e:
        logger.error("Generation failed: %s", e)
        return GenerationResult.error(str(e), exception=e)

    warnings = []
    for name, content in files.items():
        if not content:
            warnings.append(f"output file {name} is empty")

    return GenerationResult(files, warnings)


def build_response(result: GenerationResult) -> plugin_pb2.CodeGeneratorResponse:
    """Package a generation result into the reply protocol."""
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = (
        plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
    )

    if not result.success:
        response.error = result.error_message or "generation failed"
        return response

    for name, content in result.files.items():
        logger.info("OUT=%r", name)
        response.file.add(name=name, content=content)
    return response


def error_response(message: str) -> plugin_pb2.CodeGeneratorResponse:
    """Response carrying only an error string."""
    return build_response(GenerationResult.error(message))
