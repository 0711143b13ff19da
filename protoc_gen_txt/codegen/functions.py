"""
Function library exposed to templates.

Helpers follow the calling convention of the template language: the subject
string comes last, e.g. ``rmprefix("Get", name)``. Engine-bound functions
(``exec``, ``fexec``, ``find``) are attached by the TemplateEngine.
"""

import json
import posixpath
import re
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from google.protobuf import json_format
from google.protobuf.message import Message

from ..errors import TemplateExecutionError
from ..logging_config import get_logger
from .context import ExecutionContext, Payload
from .descriptors import FlatIndex, NodeKind, flatten_file, node_kind
from .naming import to_camel_case, to_pascal_case, to_snake_case
from .predicates import PREDICATES

if TYPE_CHECKING:
    from .templates import TemplateEngine

template_logger = get_logger("template")

_OPTION_VALUE_FIELDS = (
    "identifier_value",
    "positive_int_value",
    "negative_int_value",
    "double_value",
    "aggregate_value",
)


# String helpers


def nl() -> str:
    return "\n"


def rmprefix(prefix: str, s: str) -> str:
    return s.removeprefix(prefix)


def rmsuffix(suffix: str, s: str) -> str:
    return s.removesuffix(suffix)


def trim(cuts: str, s: str) -> str:
    return s.strip(cuts)


def triml(cuts: str, s: str) -> str:
    return s.lstrip(cuts)


def trimr(cuts: str, s: str) -> str:
    return s.rstrip(cuts)


def trimws(s: str) -> str:
    return s.strip()


def repeat(count: int, s: str) -> str:
    return s * max(int(count), 0)


def indent(prefix: str, levels: int, s: str) -> str:
    """Prefix every non-empty line with ``prefix`` repeated ``levels`` times."""
    pad = prefix * levels
    return "\n".join(pad + line if line else line for line in s.split("\n"))


def unindent(prefix: str, levels: int, s: str) -> str:
    """Remove one ``prefix * levels`` from the start of every line having it."""
    pad = prefix * levels
    return "\n".join(line.removeprefix(pad) for line in s.split("\n"))


def gsub(old: str, new: str, s: str) -> str:
    return s.replace(old, new)


def subln(old: str, new: str, s: str, count: int) -> str:
    """Replace the first ``count`` occurrences (all when negative)."""
    return s.replace(old, new, int(count))


# Paths


def basename(path: str) -> str:
    """Last element of a slash-separated path."""
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def dirname(path: str) -> str:
    """Everything but the last element of a slash-separated path."""
    head = posixpath.dirname(path)
    return posixpath.normpath(head) if head else "."


# Regular expressions


def rxquote(s: str) -> str:
    return re.escape(s)


def gsubr(pattern: str, repl: str, subject: str) -> str:
    """Regex replace; ``repl`` may use group references such as ``\\1``."""
    try:
        return re.sub(pattern, repl, subject)
    except re.error as e:
        raise TemplateExecutionError(f"bad regular expression {pattern!r}: {e}") from e


def gsubl(pattern: str, repl: str, subject: str) -> str:
    """Regex replace with a literal replacement string."""
    try:
        return re.sub(pattern, lambda _match: repl, subject)
    except re.error as e:
        raise TemplateExecutionError(f"bad regular expression {pattern!r}: {e}") from e


# JSON


def _json_default(value: Any) -> Any:
    if isinstance(value, Message):
        return json_format.MessageToDict(value, preserving_proto_field_name=True)
    if isinstance(value, FlatIndex):
        return {
            "files": value.files,
            "messages": value.messages,
            "enums": value.enums,
            "extensions": value.extensions,
            "services": value.services,
        }
    if isinstance(value, ExecutionContext):
        return {
            "visible": value.visible,
            "exported": value.exported,
            "params": dict(value.params),
            "has_data": value.has_data,
            "param": value.param,
        }
    if isinstance(value, Payload):
        return value.value
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(value: Any) -> str:
    """Compact JSON encoding of ``value``; protobuf messages included."""
    return json.dumps(value, default=_json_default, separators=(",", ":"))


def pretty_json(prefix: str, indent_by: str, value: Any) -> str:
    """Indented JSON; every line after the first starts with ``prefix``."""
    text = json.dumps(value, default=_json_default, indent=indent_by)
    return text.replace("\n", "\n" + prefix)


# Miscellaneous


def make_map(*pairs: Any) -> Dict[Any, Any]:
    """Build a dict from alternating keys and values."""
    if len(pairs) % 2:
        raise TemplateExecutionError("map requires an even number of arguments")
    return {pairs[i]: pairs[i + 1] for i in range(0, len(pairs), 2)}


def raise_error(message: Any) -> None:
    """Abort the run with ``message``."""
    raise TemplateExecutionError(str(message))


def flatpkg(proto_file: Any) -> Optional[FlatIndex]:
    """Flat index of a single file, or None for anything else."""
    if node_kind(proto_file) != NodeKind.FILE:
        return None
    return flatten_file(proto_file)


def find_option(name: str, node: Any) -> Any:
    """
    Look up an uninterpreted custom option on a descriptor.

    Only the final segment of the option's name is compared with ``name``;
    dotted paths spread over several segments are not rebuilt. The first
    match wins, even when it carries no value.

    Args:
        name: Option name to look for
        node: File (or other) descriptor holding options

    Returns:
        Identifier, integer, double, aggregate text or string value, or None
    """
    if node_kind(node) == NodeKind.UNKNOWN:
        return None

    for option in node.options.uninterpreted_option:
        if not option.name or option.name[-1].name_part != name:
            continue

        for field_name in _OPTION_VALUE_FIELDS:
            if option.HasField(field_name):
                return getattr(option, field_name)
        if option.HasField("string_value"):
            return option.string_value.decode("utf-8", errors="replace")
        return None

    return None


# Logging


def log(*values: Any) -> str:
    template_logger.info("".join(str(v) for v in values))
    return ""


def logln(*values: Any) -> str:
    template_logger.info(" ".join(str(v) for v in values))
    return ""


def logf(fmt: str, *values: Any) -> str:
    template_logger.info(fmt % values if values else fmt)
    return ""


STATIC_FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "error": raise_error,
    "nl": nl,
    "rmprefix": rmprefix,
    "rmsuffix": rmsuffix,
    "trim": trim,
    "triml": triml,
    "trimr": trimr,
    "trimws": trimws,
    "repeat": repeat,
    "indent": indent,
    "unindent": unindent,
    "json": to_json,
    "prettyjson": pretty_json,
    "basename": basename,
    "dirname": dirname,
    "map": make_map,
    "flatpkg": flatpkg,
    "rxquote": rxquote,
    "gsubr": gsubr,
    "gsubl": gsubl,
    "gsub": gsub,
    "subln": subln,
    "log": log,
    "logln": logln,
    "logf": logf,
    "option": find_option,
    "camelcase": to_camel_case,
    "pascalcase": to_pascal_case,
    "snakecase": lambda sep, s: to_snake_case(s, sep),
}


def build_template_functions(engine: "TemplateEngine") -> Dict[str, Callable[..., Any]]:
    """Assemble the global function namespace for one engine."""
    functions = dict(STATIC_FUNCTIONS)
    functions.update(PREDICATES)
    functions["find"] = engine.finder.find
    functions["exec"] = engine.exec_template
    functions["fexec"] = engine.fexec
    return functions


def build_template_filters() -> Dict[str, Callable[..., Any]]:
    """Subject-first filters for use with the ``|`` syntax."""
    return {
        "snake_case": to_snake_case,
        "camel_case": to_camel_case,
        "pascal_case": to_pascal_case,
        "trimws": trimws,
        "json": to_json,
    }
