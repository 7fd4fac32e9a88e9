"""Path and tag synthesis for services."""

from proto_oas.generator.routes import RouteError, resolve_route
from proto_oas.generator.types import schema_ref, to_data_type
from proto_oas.schema.base import MessageNode, MethodDef, ServiceNode, qualified_name

JSON_CONTENT = "application/json"

BODYLESS_VERBS = ("get", "delete")


def service_tag_name(service: ServiceNode) -> str:
    return service.full_name[1:]


def to_tag(service: ServiceNode) -> dict:
    return {
        "name": service_tag_name(service),
        "description": service.comment or "",
        "externalDocs": {
            "description": "",
            "url": "",
        },
    }


def to_paths(service: ServiceNode, routes: dict[str, str] | None = None) -> dict[str, dict]:
    """Build ``{path_template: {verb: operation}}`` for every method of a service.

    Methods sharing a template keep their distinct verbs; a repeated
    (template, verb) pair keeps the last method.
    """
    tag = service_tag_name(service)
    paths: dict[str, dict] = {}
    for method in service.methods:
        route = resolve_route(tag, service.name, method.name, routes)
        operation = to_operation(service, method, tag, route.verb, route.path_param_names)
        paths.setdefault(route.url_template, {})[route.verb] = operation
    return paths


def merge_paths(paths: dict[str, dict], new_paths: dict[str, dict]) -> dict[str, dict]:
    """Merge ``new_paths`` into ``paths`` verb by verb."""
    for template, operations in new_paths.items():
        paths.setdefault(template, {}).update(operations)
    return paths


def to_operation(
    service: ServiceNode,
    method: MethodDef,
    tag: str,
    verb: str,
    path_params: list[str],
) -> dict:
    request = service.lookup_type(method.request_type)
    response = service.lookup_type(method.response_type)

    operation = {
        "tags": [tag],
        "summary": method.comment or "",
        "operationId": method.full_name[1:],
    }
    parameters = []

    if request.fields:
        if verb in BODYLESS_VERBS and len(path_params) < len(request.fields):
            parameters.append({
                "name": request.name,
                "in": "query",
                "description": request.comment or "",
                "required": False,
                "schema": schema_ref(qualified_name(request)),
            })
        else:
            operation["requestBody"] = {
                "description": request.comment or "",
                "content": {
                    JSON_CONTENT: {
                        "schema": schema_ref(qualified_name(request)),
                    },
                },
                "required": True,
            }

    for name in path_params:
        parameters.append(_to_path_parameter(request, method, name))
    if parameters:
        operation["parameters"] = parameters

    operation["responses"] = {"200": _to_response(response)}
    return operation


def _to_path_parameter(request: MessageNode, method: MethodDef, name: str) -> dict:
    field = request.field(name)
    if field is None:
        raise RouteError(
            f'path parameter "{name}" of {method.full_name[1:]} is not a field of {qualified_name(request)}'
        )
    return {
        "name": name,
        "in": "path",
        "description": field.comment or "",
        "required": True,
        "schema": to_data_type(field.type, context=request),
    }


def _to_response(response: MessageNode) -> dict:
    if not response.fields:
        return {"description": response.comment or ""}
    return {
        "description": response.comment or "",
        "content": {
            JSON_CONTENT: {
                "schema": schema_ref(qualified_name(response)),
            },
        },
    }
