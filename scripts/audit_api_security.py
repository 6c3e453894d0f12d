"""Report API routes that do not require authentication.

Walks the FastAPI route table and checks each endpoint's dependency tree for
the bearer-token user dependency (or the cron secret). Exits 1 when a route
outside the public allow-list is open.
"""

import os
import sys

# Add parent directory to path so we can import litework modules
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from fastapi.dependencies.models import Dependant
from fastapi.routing import APIRoute

from litework.api.deps import get_current_user
from litework.api.v1.endpoints.cron import verify_cron_secret
from litework.core.config import get_settings

AUTH_DEPENDENCIES = {get_current_user, verify_cron_secret}

# Paths that are public on purpose (relative to the API prefix)
PUBLIC_ROUTES = {
    ("GET", "/health"),
    ("GET", "/health/ready"),
    ("POST", "/auth/login"),
    ("POST", "/invites/accept"),
}


def _calls(dependant: Dependant):
    yield dependant.call
    for sub in dependant.dependencies:
        yield from _calls(sub)


def requires_auth(route: APIRoute) -> bool:
    return any(call in AUTH_DEPENDENCIES for call in _calls(route.dependant))


def audit(app) -> list[tuple[str, str]]:
    """(method, path) of every open route not in the allow-list."""
    prefix = get_settings().api_v1_prefix
    open_routes = []
    for route in app.routes:
        if not isinstance(route, APIRoute) or not route.path.startswith(prefix):
            continue
        if requires_auth(route):
            continue
        path = route.path[len(prefix):]
        for method in sorted(route.methods):
            if (method, path) not in PUBLIC_ROUTES:
                open_routes.append((method, route.path))
    return open_routes


def main() -> int:
    from litework.main import app

    routes = [r for r in app.routes if isinstance(r, APIRoute)]
    open_routes = audit(app)
    print(f"Checked {len(routes)} routes")
    if open_routes:
        print("Routes without authentication:")
        for method, path in open_routes:
            print(f"  {method:6} {path}")
        return 1
    print("All non-public routes require authentication.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
