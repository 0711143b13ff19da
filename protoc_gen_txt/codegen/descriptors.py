"""
Flat type index and name resolution over protobuf descriptors.

Flattens the nested descriptor tree of a CodeGeneratorRequest into
mappings keyed by fully-qualified dotted name (``.pkg.Outer.Inner``) and
resolves such names back to descriptor nodes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Union

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from ..logging_config import get_logger

logger = get_logger(__name__)

FileDescriptor = descriptor_pb2.FileDescriptorProto
MessageDescriptor = descriptor_pb2.DescriptorProto
EnumDescriptor = descriptor_pb2.EnumDescriptorProto
FieldDescriptor = descriptor_pb2.FieldDescriptorProto
ServiceDescriptor = descriptor_pb2.ServiceDescriptorProto

Node = Union[FileDescriptor, MessageDescriptor, EnumDescriptor, FieldDescriptor]


class NodeKind(Enum):
    """Closed set of descriptor node variants."""

    FILE = "file"
    MESSAGE = "message"
    ENUM = "enum"
    FIELD = "field"  # plain fields and extensions
    SERVICE = "service"
    UNKNOWN = "unknown"


_KIND_BY_TYPE = {
    FileDescriptor: NodeKind.FILE,
    MessageDescriptor: NodeKind.MESSAGE,
    EnumDescriptor: NodeKind.ENUM,
    FieldDescriptor: NodeKind.FIELD,
    ServiceDescriptor: NodeKind.SERVICE,
}


def node_kind(value: Any) -> NodeKind:
    """Classify ``value`` as one of the descriptor node variants."""
    return _KIND_BY_TYPE.get(type(value), NodeKind.UNKNOWN)


def package_prefix(proto_file: FileDescriptor) -> str:
    """Qualified-name prefix of a file: ``.pkg.``, or ``.`` without a package."""
    if proto_file.package:
        return f".{proto_file.package}."
    return "."


@dataclass
class FlatIndex:
    """Descriptors of one or more files keyed by fully-qualified name."""

    files: Dict[str, FileDescriptor] = field(default_factory=dict)
    messages: Dict[str, MessageDescriptor] = field(default_factory=dict)
    enums: Dict[str, EnumDescriptor] = field(default_factory=dict)
    extensions: Dict[str, FieldDescriptor] = field(default_factory=dict)
    services: Dict[str, ServiceDescriptor] = field(default_factory=dict)

    @property
    def package(self) -> Union[FileDescriptor, Dict[str, FileDescriptor], None]:
        """The only file when there is exactly one, otherwise all files."""
        if len(self.files) == 1:
            return next(iter(self.files.values()))
        if not self.files:
            return None
        return self.files

    def add_messages(self, messages: Iterable[MessageDescriptor], prefix: str) -> None:
        """Register messages and everything nested in them, depth first."""
        for message in messages:
            name = prefix + message.name
            self.messages.setdefault(name, message)

            nested_prefix = name + "."
            self.add_messages(message.nested_type, nested_prefix)
            self.add_enums(message.enum_type, nested_prefix)
            self.add_extensions(message.extension, nested_prefix)

    def add_enums(self, enums: Iterable[EnumDescriptor], prefix: str) -> None:
        for enum in enums:
            self.enums.setdefault(prefix + enum.name, enum)

    def add_extensions(self, extensions: Iterable[FieldDescriptor], prefix: str) -> None:
        for extension in extensions:
            self.extensions.setdefault(prefix + extension.name, extension)

    def add_services(self, services: Iterable[ServiceDescriptor], prefix: str) -> None:
        for service in services:
            self.services.setdefault(prefix + service.name, service)

    def type_count(self) -> int:
        """Number of named types held (messages, enums, extensions, services)."""
        return (
            len(self.messages)
            + len(self.enums)
            + len(self.extensions)
            + len(self.services)
        )


def flatten_file(
    proto_file: FileDescriptor, index: Optional[FlatIndex] = None
) -> FlatIndex:
    """
    Add every type declared in ``proto_file`` to ``index``.

    Args:
        proto_file: File descriptor to flatten
        index: Index to extend; a new one is created when omitted

    Returns:
        The extended index
    """
    if index is None:
        index = FlatIndex()

    index.files.setdefault(proto_file.name, proto_file)
    prefix = package_prefix(proto_file)
    index.add_messages(proto_file.message_type, prefix)
    index.add_enums(proto_file.enum_type, prefix)
    index.add_extensions(proto_file.extension, prefix)
    index.add_services(proto_file.service, prefix)
    return index


def build_index(
    request: plugin_pb2.CodeGeneratorRequest, exported: bool = False
) -> FlatIndex:
    """
    Build the flat index for a request.

    Args:
        request: Compiler request
        exported: Only include the files listed in ``file_to_generate``

    Returns:
        FlatIndex over the selected files
    """
    wanted = set(request.file_to_generate)
    index = FlatIndex()

    for proto_file in request.proto_file:
        if exported and proto_file.name not in wanted:
            continue
        flatten_file(proto_file, index)

    logger.debug(
        "Built %s index: %d files, %d types",
        "exported" if exported else "visible",
        len(index.files),
        index.type_count(),
    )
    return index


class TypeFinder:
    """Resolves fully-qualified names against the files of a request.

    Messages, enums and extensions are resolvable. Services, plain fields
    and groups are not.
    """

    def __init__(self, request: plugin_pb2.CodeGeneratorRequest):
        self.request = request

    def find(self, name: str) -> Optional[Node]:
        """Return the node named ``name`` or None when nothing matches."""
        if not name or not name.startswith("."):
            return None

        for proto_file in self.request.proto_file:
            if proto_file.package and name == "." + proto_file.package:
                return proto_file

        for proto_file in self.request.proto_file:
            prefix = package_prefix(proto_file)
            if not name.startswith(prefix):
                continue

            found = self._find_in_file(proto_file, prefix, name)
            if found is not None:
                return found

        return None

    def _find_in_file(
        self, proto_file: FileDescriptor, prefix: str, name: str
    ) -> Optional[Node]:
        for message in proto_file.message_type:
            found = self._find_in_message(message, prefix, name)
            if found is not None:
                return found

        found = self._find_named(proto_file.enum_type, prefix, name)
        if found is not None:
            return found
        return self._find_named(proto_file.extension, prefix, name)

    def _find_in_message(
        self, message: MessageDescriptor, prefix: str, name: str
    ) -> Optional[Node]:
        qualified = prefix + message.name
        if qualified == name:
            return message

        nested_prefix = qualified + "."
        if not name.startswith(nested_prefix):
            return None

        for nested in message.nested_type:
            found = self._find_in_message(nested, nested_prefix, name)
            if found is not None:
                return found

        found = self._find_named(message.enum_type, nested_prefix, name)
        if found is not None:
            return found
        return self._find_named(message.extension, nested_prefix, name)

    @staticmethod
    def _find_named(nodes: Iterable[Any], prefix: str, name: str) -> Optional[Node]:
        for node in nodes:
            if prefix + node.name == name:
                return node
        return None
