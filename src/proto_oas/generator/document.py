"""OpenAPI document assembly.

``generate`` walks a schema tree depth-first in declaration order and collects
component schemas, tags and paths into a single OpenAPI 3.0.1 document.
"""

import logging
from pathlib import Path

from proto_oas.generator.components import to_enum_component, to_object_component
from proto_oas.generator.paths import merge_paths, to_paths, to_tag
from proto_oas.options import GeneratorOptions
from proto_oas.schema.base import Node
from proto_oas.schema.loader import load_schema

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.1"
DEFAULT_TITLE = "Open API Specification"
LICENSE = {
    "name": "Apache 2.0",
    "url": "http://www.apache.org/licenses/LICENSE-2.0.html",
}


def new_document(options: GeneratorOptions) -> dict:
    """Return an empty document carrying the info block and servers."""
    info = {
        "title": options.title or DEFAULT_TITLE,
        "description": options.description or "",
        "termsOfService": "",
    }
    if options.email:
        info["contact"] = {"email": options.email}
    info["license"] = dict(LICENSE)
    info["version"] = "1.0.0"

    return {
        "openapi": OPENAPI_VERSION,
        "info": info,
        "externalDocs": {
            "description": "",
            "url": "",
        },
        "servers": [server.model_dump(exclude_none=True) for server in options.servers],
        "tags": [],
        "paths": {},
        "components": {
            "schemas": {},
        },
    }


def generate(root: Node, options: GeneratorOptions) -> dict:
    """Generate the OpenAPI document for the schema tree under ``root``."""
    document = new_document(options)
    _traverse(root, document, options.routes)
    logger.debug(
        "Generated %d schemas and %d paths",
        len(document["components"]["schemas"]),
        len(document["paths"]),
    )
    return document


def _traverse(node: Node, document: dict, routes: dict[str, str]) -> None:
    match node.kind:
        case "message":
            document["components"]["schemas"].update(to_object_component(node))
        case "enum":
            document["components"]["schemas"].update(to_enum_component(node))
        case "service":
            document["tags"].append(to_tag(node))
            merge_paths(document["paths"], to_paths(node, routes))

    for child in node.children:
        _traverse(child, document, routes)


def convert(schema_path: Path, options: GeneratorOptions) -> dict:
    """Load a schema file or directory and generate its OpenAPI document."""
    root = load_schema(schema_path, keep_case=options.keep_case)
    return generate(root, options)
