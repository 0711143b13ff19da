"""
Field classification predicates for templates.

Each predicate accepts a raw label/type enum value (an int) or a
FieldDescriptorProto and answers a yes/no question about it. Unrecognized
input is never an error; it simply yields False.
"""

from typing import Any, Callable, Dict, Optional

from google.protobuf import descriptor_pb2

from .descriptors import NodeKind, node_kind

Predicate = Callable[[Any], bool]

_Field = descriptor_pb2.FieldDescriptorProto

LABEL_PREDICATES: Dict[str, int] = {
    "is_repeated": _Field.LABEL_REPEATED,
    "is_optional": _Field.LABEL_OPTIONAL,
    "is_required": _Field.LABEL_REQUIRED,
}

TYPE_PREDICATES: Dict[str, int] = {
    "is_double": _Field.TYPE_DOUBLE,
    "is_float": _Field.TYPE_FLOAT,
    "is_int64": _Field.TYPE_INT64,
    "is_uint64": _Field.TYPE_UINT64,
    "is_int32": _Field.TYPE_INT32,
    "is_fixed64": _Field.TYPE_FIXED64,
    "is_fixed32": _Field.TYPE_FIXED32,
    "is_bool": _Field.TYPE_BOOL,
    "is_string": _Field.TYPE_STRING,
    "is_group": _Field.TYPE_GROUP,
    "is_message": _Field.TYPE_MESSAGE,
    "is_bytes": _Field.TYPE_BYTES,
    "is_uint32": _Field.TYPE_UINT32,
    "is_enum": _Field.TYPE_ENUM,
    "is_sfixed32": _Field.TYPE_SFIXED32,
    "is_sfixed64": _Field.TYPE_SFIXED64,
    "is_sint32": _Field.TYPE_SINT32,
    "is_sint64": _Field.TYPE_SINT64,
}

# A bare node of these kinds satisfies the predicate by itself.
NODE_PREDICATES: Dict[str, NodeKind] = {
    "is_message": NodeKind.MESSAGE,
    "is_enum": NodeKind.ENUM,
}


def _raw_enum(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def field_label(value: Any) -> Optional[int]:
    """Label of a typed field, a raw label value, or None."""
    if node_kind(value) == NodeKind.FIELD:
        return value.label if value.HasField("type") else None
    return _raw_enum(value)


def field_type(value: Any) -> Optional[int]:
    """Wire type of a typed field, a raw type value, or None."""
    if node_kind(value) == NodeKind.FIELD:
        return value.type if value.HasField("type") else None
    return _raw_enum(value)


def label_predicate(label: int) -> Predicate:
    """Build a predicate comparing the field label with ``label``."""

    def check(value: Any) -> bool:
        return field_label(value) == label

    return check


def type_predicate(wire_type: int, node: Optional[NodeKind] = None) -> Predicate:
    """Build a predicate comparing the field type with ``wire_type``.

    When ``node`` is given, a bare descriptor of that kind also matches.
    """

    def check(value: Any) -> bool:
        if node is not None and node_kind(value) == node:
            return True
        return field_type(value) == wire_type

    return check


def build_predicates() -> Dict[str, Predicate]:
    """All predicates keyed by the name templates call them with."""
    predicates: Dict[str, Predicate] = {}

    for name, label in LABEL_PREDICATES.items():
        predicates[name] = label_predicate(label)

    for name, wire_type in TYPE_PREDICATES.items():
        predicates[name] = type_predicate(wire_type, NODE_PREDICATES.get(name))

    return predicates


PREDICATES = build_predicates()

is_repeated = PREDICATES["is_repeated"]
is_optional = PREDICATES["is_optional"]
is_required = PREDICATES["is_required"]
is_string = PREDICATES["is_string"]
is_message = PREDICATES["is_message"]
is_enum = PREDICATES["is_enum"]
