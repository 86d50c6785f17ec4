"""RBAC (Role-Based Access Control) module."""

from asset_rbac.rbac.guard import (
    ADMIN_AND_FACILITAIR,
    ADMIN_ONLY,
    AccessGuard,
    admin_and_facilitair,
    admin_only,
)
from asset_rbac.rbac.permissions import (
    CAPABILITY_ALLOW_LISTS,
    Capability,
    PermissionSet,
    allowed_roles,
    derive_permissions,
    has_any_role,
    has_role,
)
from asset_rbac.rbac.roles import DEFAULT_ROLE, ROLE_DESCRIPTIONS, Role

__all__ = [
    "ADMIN_AND_FACILITAIR",
    "ADMIN_ONLY",
    "AccessGuard",
    "CAPABILITY_ALLOW_LISTS",
    "Capability",
    "DEFAULT_ROLE",
    "PermissionSet",
    "ROLE_DESCRIPTIONS",
    "Role",
    "admin_and_facilitair",
    "admin_only",
    "allowed_roles",
    "derive_permissions",
    "has_any_role",
    "has_role",
]
