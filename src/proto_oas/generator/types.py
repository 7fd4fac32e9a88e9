"""Protobuf field type to OpenAPI data type mapping."""

from typing import Any

from proto_oas.schema.base import Node, SchemaLookupError, qualified_name

REF_PREFIX = "#/components/schemas/"

SCALAR_TYPES = {
    "int32": {"type": "integer", "format": "int32"},
    "uint32": {"type": "integer", "format": "int64"},
    "int64": {"type": "integer", "format": "int64"},
    "uint64": {"type": "integer", "format": "int64"},
    "float": {"type": "number", "format": "float"},
    "double": {"type": "number", "format": "double"},
    "bool": {"type": "boolean"},
    "bytes": {"type": "string", "format": "binary"},
    "Timestamp": {"type": "string", "format": "date"},
    "string": {"type": "string"},
}


def schema_ref(name: str) -> dict:
    return {"$ref": f"{REF_PREFIX}{name}"}


def to_data_type(field_type: str, default: Any = None, context: Node | None = None) -> dict:
    """Map a protobuf field type to an OpenAPI schema fragment.

    Scalars map to a type/format pair and carry ``default`` when it is truthy.
    Any other type becomes a ``$ref``: dotted names are referenced as written,
    bare names are resolved from ``context`` (the enclosing message) and
    referenced by the qualified name of the node they resolve to.
    """
    scalar = SCALAR_TYPES.get(field_type)
    if scalar is not None:
        data_type = dict(scalar)
        if default:
            data_type["default"] = default
        return data_type

    if "." in field_type:
        return schema_ref(field_type)
    if context is None:
        raise SchemaLookupError(f"cannot resolve {field_type} without an enclosing message")
    return schema_ref(qualified_name(context.lookup_type_or_enum(field_type)))
