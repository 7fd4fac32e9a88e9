"""Schema tree loader.

Reads YAML/JSON serializations of a resolved protobuf schema tree (as produced
by an upstream .proto parser) into a single ``Root``.
"""

import logging
import re
from pathlib import Path

import yaml

from .base import Root

logger = logging.getLogger(__name__)

SCHEMA_SUFFIXES = (".yaml", ".yml", ".json")

_SNAKE_RE = re.compile(r"_([a-z0-9])")


def load_schema(path: Path, keep_case: bool = True) -> Root:
    """Load one schema file, or every schema file directly inside a directory.

    Top-level namespaces with the same name in different files are merged, the
    way a protobuf package spreads over several files.
    """
    path = Path(path)
    if path.is_dir():
        filenames = sorted(p for p in path.iterdir() if p.suffix in SCHEMA_SUFFIXES)
        if not filenames:
            raise FileNotFoundError(f"no schema files found in {path}")
    elif path.exists():
        filenames = [path]
    else:
        raise FileNotFoundError(f"{path} does not exist")

    nested: list[dict] = []
    for filename in filenames:
        doc = yaml.safe_load(filename.read_text(encoding="utf-8")) or {}
        if not isinstance(doc, dict):
            raise ValueError(f"{filename}: schema tree must be a mapping with a 'nested' list")
        logger.debug("Loaded schema tree from %s", filename)
        _merge_nested(nested, doc.get("nested", []))

    if not keep_case:
        _camel_case_fields(nested)

    return Root(nested=nested)


def _merge_nested(target: list[dict], items: list[dict]) -> None:
    """Append ``items`` to ``target``, merging namespaces that share a name."""
    for item in items:
        if item.get("kind") != "namespace":
            target.append(item)
            continue

        existing = next(
            (n for n in target if n.get("kind") == "namespace" and n.get("name") == item.get("name")),
            None,
        )
        if existing is None:
            existing = {**item, "nested": []}
            target.append(existing)
        _merge_nested(existing["nested"], item.get("nested", []))


def _camel_case_fields(items: list[dict]) -> None:
    for item in items:
        for field in item.get("fields", []):
            field["name"] = to_camel_case(field["name"])
        _camel_case_fields(item.get("nested", []))


def to_camel_case(name: str) -> str:
    """Convert a snake_case field name to lowerCamelCase."""
    return _SNAKE_RE.sub(lambda m: m.group(1).upper(), name)
