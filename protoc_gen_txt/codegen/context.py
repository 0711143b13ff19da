"""
Execution context handed to templates.

The root context carries the request, both type indexes and the parsed
parameters. Templates invoked through ``fexec`` receive a copy carrying
their own payload and the ``has_data`` flag of their output buffer.
"""

from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Sequence

from google.protobuf.compiler import plugin_pb2

from ..params import Params
from .descriptors import FlatIndex


class Payload:
    """Arguments passed by an invoking template."""

    @property
    def value(self) -> Any:
        raise NotImplementedError


class NoPayload(Payload):
    """No arguments were passed."""

    @property
    def value(self) -> Any:
        return None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NoPayload)

    def __repr__(self) -> str:
        return "NoPayload()"


@dataclass(frozen=True)
class SinglePayload(Payload):
    """Exactly one argument, passed through unwrapped."""

    item: Any

    @property
    def value(self) -> Any:
        return self.item


@dataclass(frozen=True)
class ListPayload(Payload):
    """Several arguments, passed as an ordered list."""

    items: List[Any] = field(default_factory=list)

    @property
    def value(self) -> Any:
        return list(self.items)


def pack_payload(args: Sequence[Any]) -> Payload:
    """Wrap template call arguments: none, one value, or a list of values."""
    if not args:
        return NoPayload()
    if len(args) == 1:
        return SinglePayload(args[0])
    return ListPayload(list(args))


@dataclass
class ExecutionContext:
    """The ``root`` value seen by templates."""

    request: plugin_pb2.CodeGeneratorRequest
    visible: FlatIndex
    exported: FlatIndex
    params: Params
    has_data: bool = False
    payload: Payload = field(default_factory=NoPayload)

    @property
    def param(self) -> Any:
        """Unwrapped payload: None, a single value, or a list."""
        return self.payload.value

    @property
    def files_to_generate(self) -> List[str]:
        return list(self.request.file_to_generate)

    def with_payload(
        self, payload: Optional[Payload] = None, has_data: bool = False
    ) -> "ExecutionContext":
        """Copy of this context with a new payload and data flag."""
        return replace(self, payload=payload or NoPayload(), has_data=has_data)
