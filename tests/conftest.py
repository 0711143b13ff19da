"""Shared fixtures: descriptor requests and template helpers."""

from pathlib import Path

import pytest
from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from protoc_gen_txt.codegen.config import PluginConfig
from protoc_gen_txt.codegen.generator import build_root_context
from protoc_gen_txt.codegen.templates import TemplateEngine
from protoc_gen_txt.params import Params

Field = descriptor_pb2.FieldDescriptorProto


def build_example_file() -> descriptor_pb2.FileDescriptorProto:
    """example.proto: messages with nesting, enums, extensions and a service."""
    proto_file = descriptor_pb2.FileDescriptorProto(
        name="example/example.proto", package="example"
    )

    foo = proto_file.message_type.add(name="Foo")
    foo.field.add(
        name="bar", number=1, label=Field.LABEL_REPEATED, type=Field.TYPE_STRING
    )
    foo.field.add(
        name="count", number=2, label=Field.LABEL_OPTIONAL, type=Field.TYPE_INT32
    )
    foo.field.add(
        name="inner",
        number=3,
        label=Field.LABEL_OPTIONAL,
        type=Field.TYPE_MESSAGE,
        type_name=".example.Foo.Inner",
    )

    inner = foo.nested_type.add(name="Inner")
    inner.field.add(
        name="kind",
        number=1,
        label=Field.LABEL_REQUIRED,
        type=Field.TYPE_ENUM,
        type_name=".example.Foo.Inner.Kind",
    )
    kind = inner.enum_type.add(name="Kind")
    kind.value.add(name="KIND_UNSET", number=0)
    kind.value.add(name="KIND_SET", number=1)
    inner.nested_type.add(name="Deep")

    foo.enum_type.add(name="Mode").value.add(name="MODE_A", number=0)
    foo.extension.add(
        name="nested_ext",
        number=100,
        label=Field.LABEL_OPTIONAL,
        type=Field.TYPE_BOOL,
        extendee=".example.Bar",
    )

    bar = proto_file.message_type.add(name="Bar")
    bar.extension_range.add(start=100, end=200)

    color = proto_file.enum_type.add(name="Color")
    color.value.add(name="RED", number=0)

    proto_file.extension.add(
        name="top_ext",
        number=101,
        label=Field.LABEL_OPTIONAL,
        type=Field.TYPE_STRING,
        extendee=".example.Bar",
    )

    service = proto_file.service.add(name="Greeter")
    service.method.add(
        name="Greet", input_type=".example.Foo", output_type=".example.Bar"
    )

    option = proto_file.options.uninterpreted_option.add()
    option.name.add(name_part="gen_prefix", is_extension=True)
    option.string_value = b"Pb"
    option = proto_file.options.uninterpreted_option.add()
    option.name.add(name_part="gen_version", is_extension=True)
    option.positive_int_value = 3

    return proto_file


def build_other_file() -> descriptor_pb2.FileDescriptorProto:
    """other.proto: a dependency that is visible but not generated."""
    proto_file = descriptor_pb2.FileDescriptorProto(
        name="other/other.proto", package="other.deps"
    )
    baz = proto_file.message_type.add(name="Baz")
    baz.field.add(
        name="id", number=1, label=Field.LABEL_OPTIONAL, type=Field.TYPE_UINT64
    )
    proto_file.enum_type.add(name="Level").value.add(name="LOW", number=0)
    return proto_file


def build_request(parameter: str = "") -> plugin_pb2.CodeGeneratorRequest:
    request = plugin_pb2.CodeGeneratorRequest(parameter=parameter)
    request.proto_file.append(build_other_file())
    request.proto_file.append(build_example_file())
    request.file_to_generate.append("example/example.proto")
    return request


@pytest.fixture
def request_message() -> plugin_pb2.CodeGeneratorRequest:
    return build_request()


@pytest.fixture
def write_template(tmp_path: Path):
    """Write a template file and return its path as a string."""

    def _write(name: str, content: str) -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def make_engine(request_message):
    """Build an engine over the example request with in-memory templates."""

    def _make(templates: dict, params: Params | None = None, **config) -> TemplateEngine:
        config.setdefault("templates", list(templates))
        engine = TemplateEngine(
            PluginConfig(**config),
            build_root_context(request_message, params or Params()),
        )
        for name, content in templates.items():
            engine.add_template(name, content)
        engine.compile_all()
        return engine

    return _make
