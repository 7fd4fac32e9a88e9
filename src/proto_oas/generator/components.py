"""Component schema synthesis for messages and enums."""

import logging

from proto_oas.generator.types import to_data_type
from proto_oas.schema.base import EnumNode, FieldDef, MessageNode, qualified_name

logger = logging.getLogger(__name__)


def to_object_component(message: MessageNode) -> dict[str, dict]:
    """Build the ``components.schemas`` entry for a message.

    Returns ``{qualified_name: schema}``. A message without fields yields an
    empty schema.
    """
    name = qualified_name(message)
    logger.debug("Object component %s", name)
    if not message.fields:
        return {name: {}}

    properties = {field.name: _to_property(message, field) for field in message.fields}
    schema = {
        "type": "object",
        "description": message.comment or "",
        "properties": properties,
    }
    required = [field.name for field in message.fields if field.required]
    if required:
        schema["required"] = required
    return {name: schema}


def _to_property(message: MessageNode, field: FieldDef) -> dict:
    data_type = to_data_type(field.type, field.default, context=message)

    if field.rule == "map":
        return {
            "type": "object",
            "description": field.comment or "",
            "additionalProperties": data_type,
        }
    if field.rule == "repeated":
        return {
            "type": "array",
            "description": field.comment or "",
            "items": data_type,
        }
    if "$ref" not in data_type:
        data_type["description"] = field.comment or ""
    return data_type


def to_enum_component(enum: EnumNode) -> dict[str, dict]:
    """Build the integer ``components.schemas`` entry for an enum.

    The description lists one legend line per value.
    """
    name = qualified_name(enum)
    logger.debug("Enum component %s", name)
    legend = "\n".join(
        f" * `{value.value}` - {value.name}, {value.comment or ''}" for value in enum.values
    )
    return {
        name: {
            **to_data_type("uint32"),
            "enum": [value.value for value in enum.values],
            "description": f"{enum.comment or 'definitions'}\n " + legend,
        }
    }
