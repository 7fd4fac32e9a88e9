"""Generator options.

Options can come from keyword arguments, an options file (YAML or JSON), or
both, with keyword arguments taking precedence.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator


class Server(BaseModel):
    """A server entry of the generated document."""

    url: str = Field(default="", validate_default=True)
    description: str | None = None

    @field_validator("url")
    @classmethod
    def _url_required(cls, value: str) -> str:
        if not value:
            raise ValueError('"servers[].url" is required.')
        return value


class GeneratorOptions(BaseModel):
    """Caller-supplied options for one document generation."""

    title: str = Field(default="", validate_default=True)
    servers: list[Server] = Field(default_factory=list, validate_default=True)
    description: str | None = None
    email: str | None = None
    routes: dict[str, str] = {}  # "Service.Method" -> "verb /path/:param"
    keep_case: bool = True

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        if not value:
            raise ValueError('"title" is required.')
        return value

    @field_validator("servers")
    @classmethod
    def _servers_required(cls, value: list[Server]) -> list[Server]:
        if not value:
            raise ValueError('"servers" must be a non-empty array')
        return value


def read_options_file(config_path: Path) -> dict:
    """Read raw option values from a YAML or JSON file."""
    data = yaml.safe_load(Path(config_path).read_text(encoding="utf-8")) or {}
    if "keepCase" in data:
        data["keep_case"] = data.pop("keepCase")
    return data


def load_options(config_path: Path | None = None, **overrides) -> GeneratorOptions:
    """Build options from an optional options file plus overrides.

    Overrides that are ``None`` (or empty) leave the file value in place;
    ``routes`` overrides are merged into the file's table.
    """
    data = read_options_file(config_path) if config_path is not None else {}

    routes = {**data.get("routes", {}), **(overrides.pop("routes", None) or {})}
    for key, value in overrides.items():
        if value not in (None, []):
            data[key] = value
    data["routes"] = routes
    return GeneratorOptions(**data)
