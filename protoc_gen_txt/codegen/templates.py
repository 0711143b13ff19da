"""
Template engine for code generation.

Wraps a Jinja2 environment holding every loaded template, the function
library bound to the current request, and the output buffers that
templates write into with ``fexec``.
"""

import io
from typing import Any, Dict, Iterable, Iterator, List, Optional

from jinja2 import (
    DictLoader,
    Environment,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    Undefined,
)

from ..errors import TemplateExecutionError, TemplateLoadError
from ..logging_config import get_logger
from ..utils import load_template, template_name
from .config import PluginConfig
from .context import ExecutionContext, pack_payload
from .descriptors import TypeFinder
from .functions import build_template_filters, build_template_functions

logger = get_logger(__name__)


class OutputBuffers:
    """Virtual output files, each an append-only text buffer."""

    def __init__(self):
        self._buffers: Dict[str, io.StringIO] = {}

    def open(self, name: str) -> io.StringIO:
        """Buffer for ``name``, created empty on first use."""
        buffer = self._buffers.get(name)
        if buffer is None:
            buffer = io.StringIO()
            self._buffers[name] = buffer
            logger.debug("Created output buffer %s", name)
        return buffer

    def write(self, name: str, text: str) -> None:
        self.open(name).write(text)

    def has_data(self, name: str) -> bool:
        """Whether anything has been written to ``name`` so far."""
        buffer = self._buffers.get(name)
        return buffer is not None and buffer.tell() > 0

    def contents(self) -> Dict[str, str]:
        """Accumulated text of every buffer, in creation order."""
        return {name: buffer.getvalue() for name, buffer in self._buffers.items()}


def finalize_value(value: Any) -> Any:
    """Render booleans as ``true``/``false`` and None as nothing."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class TemplateEngine:
    """Jinja2 environment plus the output buffers of one generation run."""

    def __init__(self, config: PluginConfig, root: ExecutionContext):
        """
        Initialize template engine.

        Args:
            config: Delimiters and loading options
            root: Root execution context handed to entry templates
        """
        self.config = config
        self.root = root
        self.outputs = OutputBuffers()
        self.finder = TypeFinder(root.request)
        self._default_name: Optional[str] = None
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with the plugin's function library."""
        self._env = Environment(
            loader=DictLoader({}),
            variable_start_string=self.config.left,
            variable_end_string=self.config.right,
            block_start_string=self.config.block_start,
            block_end_string=self.config.block_end,
            comment_start_string=self.config.comment_start,
            comment_end_string=self.config.comment_end,
            autoescape=False,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            finalize=finalize_value,
            undefined=StrictUndefined if self.config.strict else Undefined,
        )

        self._env.globals.update(build_template_functions(self))
        self._env.filters.update(build_template_filters())

    # Loading

    def add_template(self, name: str, content: str):
        """
        Add an in-memory template.

        Args:
            name: Template name
            content: Template content
        """
        mapping = self._env.loader.mapping
        if name in mapping and mapping[name] != content:
            logger.warning("Template %s redefined", name)
        mapping[name] = content

        if self._default_name is None:
            self._default_name = name

    def template_names(self) -> List[str]:
        return list(self._env.loader.mapping)

    def load_templates(self, locations: Iterable[str]) -> None:
        """
        Read and compile templates.

        Each template is registered under its location and its base name.

        Raises:
            TemplateLoadError: If a source cannot be read or parsed
        """
        for location in locations:
            source = load_template(location, timeout=self.config.timeout)
            self.add_template(location, source)
            short_name = template_name(location)
            if short_name != location:
                self.add_template(short_name, source)
            logger.debug("Loaded template %s", location)

        self.compile_all()

    def compile_all(self) -> None:
        """Parse every registered template so syntax errors surface early."""
        for name in self.template_names():
            try:
                self._env.get_template(name)
            except TemplateSyntaxError as e:
                raise TemplateLoadError(
                    f"error parsing template {name} (line {e.lineno}): {e.message}"
                ) from e

    # Rendering

    def _resolve(self, name: str):
        if not name:
            name = self._default_name
            if name is None:
                raise TemplateExecutionError("no templates loaded")

        try:
            return self._env.get_template(name)
        except TemplateNotFound as e:
            raise TemplateExecutionError(f"template {name!r} is not defined") from e
        except TemplateSyntaxError as e:
            raise TemplateLoadError(f"error parsing template {name}: {e}") from e

    def stream(self, name: str, data: Any) -> Iterator[str]:
        """
        Render a template chunk by chunk.

        Args:
            name: Template name (empty for the first loaded template)
            data: Value exposed to the template as ``dot``

        Yields:
            Rendered text as it is produced
        """
        template = self._resolve(name)
        root = data if isinstance(data, ExecutionContext) else self.root
        try:
            yield from template.generate(dot=data, root=root)
        except TemplateExecutionError:
            raise
        except Exception as e:
            raise TemplateExecutionError(
                f"failed to render template {template.name}: {e}"
            ) from e

    def render_template(self, name: str, data: Any = None) -> str:
        """Render a template to a string."""
        return "".join(self.stream(name, data))

    def exec_template(self, name: str, *args: Any) -> str:
        """``exec``: render ``name`` with the packed arguments and return the text."""
        return self.render_template(name, pack_payload(args).value)

    def fexec(self, name: str, outfile: str, *args: Any) -> str:
        """
        ``fexec``: render ``name`` and append the result to ``outfile``.

        The template receives a copy of the root context carrying the packed
        arguments and whether ``outfile`` already held data. Passing the root
        context itself keeps the root payload. An empty ``outfile`` renders
        and discards the output.

        Returns:
            Empty string, so the call leaves no trace in the caller's output
        """
        if len(args) == 1 and isinstance(args[0], ExecutionContext):
            payload = self.root.payload
        else:
            payload = pack_payload(args)

        if not outfile:
            for _ in self.stream(name, self.root.with_payload(payload)):
                pass
            return ""

        has_data = self.outputs.has_data(outfile)
        self.outputs.open(outfile)
        context = self.root.with_payload(payload, has_data=has_data)
        for chunk in self.stream(name, context):
            self.outputs.write(outfile, chunk)
        return ""

    def execute(self, name: str) -> None:
        """Run an entry template against the root context, discarding its text."""
        logger.debug("Executing entry template %s", name or "<root>")
        for _ in self.stream(name, self.root):
            pass
