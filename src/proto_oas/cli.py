"""CLI entry point for proto-oas."""

import json
import logging
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from proto_oas.generator.document import generate
from proto_oas.generator.paths import service_tag_name
from proto_oas.generator.routes import RouteError, resolve_route
from proto_oas.options import GeneratorOptions, load_options, read_options_file
from proto_oas.schema.base import Node, SchemaLookupError
from proto_oas.schema.loader import load_schema


def _parse_routes(values: tuple[str, ...]) -> dict[str, str]:
    """Parse ``Service.Method=verb /path`` pairs into a route table."""
    routes = {}
    for value in values:
        key, sep, route = value.partition("=")
        if not sep or not key.strip() or not route.strip():
            raise click.BadParameter(f'expected "Service.Method=VERB /path", got "{value}"', param_hint="--route")
        routes[key.strip()] = route.strip()
    return routes


def _build_options(config: Path | None, **overrides) -> GeneratorOptions:
    try:
        return load_options(config, **overrides)
    except ValidationError as e:
        messages = [str(err.get("ctx", {}).get("error", err["msg"])) for err in e.errors()]
        raise click.ClickException("; ".join(messages))


def _iter_services(node: Node):
    if node.kind == "service":
        yield node
    for child in node.children:
        yield from _iter_services(child)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug output.")
def main(verbose: bool):
    """proto-oas: generate OpenAPI 3.0 documents from protobuf schema trees."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@main.command()
@click.argument("schema_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output JSON file (default: stdout).")
@click.option("--config", default=None, type=click.Path(exists=True, path_type=Path), help="Options file (YAML or JSON).")
@click.option("--title", default=None, help="The title of the API.")
@click.option("--description", default=None, help="A short description of the API.")
@click.option("--server", "servers", multiple=True, help="Server URL, repeatable.")
@click.option("--email", default=None, help="Contact email address.")
@click.option("--route", "routes", multiple=True, help='Route override "Service.Method=VERB /path/:param", repeatable.')
@click.option("--keep-case/--no-keep-case", default=None, help="Keep field names as written instead of lowerCamelCase.")
def convert(
    schema_path: Path,
    output: Path | None,
    config: Path | None,
    title: str | None,
    description: str | None,
    servers: tuple[str, ...],
    email: str | None,
    routes: tuple[str, ...],
    keep_case: bool | None,
):
    """Convert a schema tree file or directory into an OpenAPI document."""
    options = _build_options(
        config,
        title=title,
        description=description,
        servers=[{"url": url} for url in servers],
        email=email,
        routes=_parse_routes(routes),
        keep_case=keep_case,
    )

    click.echo(f"Loading {schema_path}...", err=True)
    try:
        root = load_schema(schema_path, keep_case=options.keep_case)
        document = generate(root, options)
    except (SchemaLookupError, RouteError, FileNotFoundError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(str(e))

    text = json.dumps(document, indent=2, ensure_ascii=False)
    if output is None:
        click.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    click.echo(
        f"Wrote {len(document['paths'])} paths and {len(document['components']['schemas'])} schemas to {output}",
        err=True,
    )


@main.command()
@click.argument("schema_path", type=click.Path(exists=True, path_type=Path))
@click.option("--config", default=None, type=click.Path(exists=True, path_type=Path), help="Options file (YAML or JSON).")
@click.option("--route", "routes", multiple=True, help='Route override "Service.Method=VERB /path/:param", repeatable.')
def routes(schema_path: Path, config: Path | None, routes: tuple[str, ...]):
    """Print the resolved HTTP route of every RPC method."""
    table = _parse_routes(routes)
    if config is not None:
        table = {**read_options_file(config).get("routes", {}), **table}

    try:
        root = load_schema(schema_path)
        for service in _iter_services(root):
            tag = service_tag_name(service)
            for method in service.methods:
                route = resolve_route(tag, service.name, method.name, table)
                click.echo(f"{service.name}.{method.name}\t{route.verb.upper()} {route.url_template}")
    except (RouteError, FileNotFoundError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(str(e))
