"""HTTP Server module."""

from asset_rbac.server.app import create_app, create_database, serve
from asset_rbac.server.middleware import ProfileMiddleware
from asset_rbac.server.routes import create_routes, current_profile, require_capability

__all__ = [
    "ProfileMiddleware",
    "create_app",
    "create_database",
    "create_routes",
    "current_profile",
    "require_capability",
    "serve",
]
