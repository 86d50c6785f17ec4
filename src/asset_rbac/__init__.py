"""asset-rbac - role-based access control for the asset management application."""

from asset_rbac.auth import ProfileRepository, ProfileSession, UserProfile
from asset_rbac.config import Config
from asset_rbac.observability import (
    LogLevel,
    RequestContext,
    StructuredLogger,
    Timer,
    configure_logging,
    emit_counter,
    emit_metric,
    get_logger,
    register_metric_callback,
)
from asset_rbac.rbac import (
    ADMIN_AND_FACILITAIR,
    ADMIN_ONLY,
    AccessGuard,
    Capability,
    PermissionSet,
    Role,
    admin_and_facilitair,
    admin_only,
    derive_permissions,
)
from asset_rbac.views import Screen, ScreenLayout, ViewElement, compose_screen

__version__ = "0.1.0"
__all__ = [
    # RBAC
    "ADMIN_AND_FACILITAIR",
    "ADMIN_ONLY",
    "AccessGuard",
    "Capability",
    "PermissionSet",
    "Role",
    "admin_and_facilitair",
    "admin_only",
    "derive_permissions",
    # Views
    "Screen",
    "ScreenLayout",
    "ViewElement",
    "compose_screen",
    # Profiles
    "ProfileRepository",
    "ProfileSession",
    "UserProfile",
    # Config
    "Config",
    # Observability
    "LogLevel",
    "RequestContext",
    "StructuredLogger",
    "Timer",
    "configure_logging",
    "emit_counter",
    "emit_metric",
    "get_logger",
    "register_metric_callback",
]
