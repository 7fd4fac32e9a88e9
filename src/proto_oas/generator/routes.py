"""HTTP route resolution for RPC methods."""

import logging
import re

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_VERB = "post"

_PATH_PARAM_RE = re.compile(r":([\w-]+)")


class RouteError(ValueError):
    """A route override is malformed or does not fit its method."""


class ResolvedRoute(BaseModel):
    """HTTP verb, OpenAPI path template and path parameter names of one method."""

    verb: str
    url_template: str
    path_param_names: list[str] = []


def resolve_route(
    tag: str,
    service_name: str,
    method_name: str,
    routes: dict[str, str] | None = None,
) -> ResolvedRoute:
    """Resolve the route of ``service_name.method_name``.

    An override such as ``"get /users/:userId"`` yields verb ``get``, template
    ``/users/{userId}`` and path parameters ``["userId"]``. Without an override
    the method is posted to ``/<tag>/<method_name>``.
    """
    key = f"{service_name}.{method_name}"
    override = (routes or {}).get(key)
    if not override:
        return ResolvedRoute(verb=DEFAULT_VERB, url_template=f"/{tag}/{method_name}")

    parts = override.split(None, 1)
    if len(parts) != 2:
        raise RouteError(f'route for "{key}" must be "VERB /path", got "{override}"')
    verb, path = parts[0], parts[1].strip()

    route = ResolvedRoute(
        verb=verb.lower(),
        url_template=_PATH_PARAM_RE.sub(r"{\1}", path),
        path_param_names=_PATH_PARAM_RE.findall(path),
    )
    logger.debug("Route override %s -> %s %s", key, route.verb, route.url_template)
    return route
