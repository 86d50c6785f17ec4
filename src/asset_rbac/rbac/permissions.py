"""Permission derivation.

Every capability is a membership test of the role against one fixed
allow-list in :data:`CAPABILITY_ALLOW_LISTS`. Guards, screen layouts and
HTTP routes all go through :func:`derive_permissions` or the same table,
so there is a single place where who-may-do-what is written down.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from asset_rbac.rbac.roles import Role


class Capability(str, Enum):
    """Named boolean permissions."""

    VIEW_ASSETS = "canViewAssets"
    CREATE_ASSETS = "canCreateAssets"
    EDIT_ASSETS = "canEditAssets"
    DELETE_ASSETS = "canDeleteAssets"
    MANAGE_RESERVATIONS = "canManageReservations"
    VIEW_ALL_RESERVATIONS = "canViewAllReservations"
    MANAGE_MAINTENANCE = "canManageMaintenance"
    VIEW_AUDIT_LOGS = "canViewAuditLogs"
    CREATE_NOTIFICATIONS = "canCreateNotifications"
    MANAGE_USERS = "canManageUsers"
    VIEW_SETTINGS = "canViewSettings"


_ADMIN = frozenset({Role.ICT_ADMIN})
_ASSET_MANAGERS = frozenset({Role.ICT_ADMIN, Role.FACILITAIR_MEDEWERKER})

CAPABILITY_ALLOW_LISTS: Mapping[Capability, frozenset[Role]] = MappingProxyType({
    Capability.VIEW_ASSETS: frozenset(
        {Role.ICT_ADMIN, Role.FACILITAIR_MEDEWERKER, Role.GEBRUIKER}
    ),
    Capability.CREATE_ASSETS: _ASSET_MANAGERS,
    Capability.EDIT_ASSETS: _ASSET_MANAGERS,
    Capability.DELETE_ASSETS: _ASSET_MANAGERS,
    Capability.MANAGE_RESERVATIONS: _ASSET_MANAGERS,
    Capability.VIEW_ALL_RESERVATIONS: _ASSET_MANAGERS,
    Capability.MANAGE_MAINTENANCE: _ASSET_MANAGERS,
    Capability.VIEW_AUDIT_LOGS: _ADMIN,
    Capability.CREATE_NOTIFICATIONS: _ASSET_MANAGERS,
    Capability.MANAGE_USERS: _ADMIN,
    Capability.VIEW_SETTINGS: frozenset({Role.ICT_ADMIN, Role.FACILITAIR_ADMIN}),
})


def allowed_roles(capability: Capability) -> frozenset[Role]:
    """Return the allow-list for a capability."""
    return CAPABILITY_ALLOW_LISTS[capability]


def has_role(role: Role | str | None, expected: Role) -> bool:
    """Check for one exact known role. Unknown roles never match."""
    parsed = Role.parse(role)
    return parsed.is_known and parsed is expected


def has_any_role(role: Role | str | None, roles: Iterable[Role | str]) -> bool:
    """Check membership of a role in a set of roles. Unknown roles never match."""
    parsed = Role.parse(role)
    if not parsed.is_known:
        return False
    return parsed in {Role.parse(r) for r in roles}


@dataclass(frozen=True)
class PermissionSet:
    """Capabilities derived from a single role.

    Build with :func:`derive_permissions`; instances are plain values and
    compare equal when derived from the same role.
    """

    role: Role
    can_view_assets: bool = False
    can_create_assets: bool = False
    can_edit_assets: bool = False
    can_delete_assets: bool = False
    can_manage_reservations: bool = False
    can_view_all_reservations: bool = False
    can_manage_maintenance: bool = False
    can_view_audit_logs: bool = False
    can_create_notifications: bool = False
    can_manage_users: bool = False
    can_view_settings: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ICT_ADMIN

    @property
    def is_facilitair(self) -> bool:
        return self.role is Role.FACILITAIR_MEDEWERKER

    @property
    def is_user(self) -> bool:
        return self.role is Role.GEBRUIKER

    def allows(self, capability: Capability) -> bool:
        return bool(getattr(self, _ATTRIBUTE_NAMES[capability]))

    def granted(self) -> frozenset[Capability]:
        """Capabilities that are switched on."""
        return frozenset(c for c in Capability if self.allows(c))

    def to_dict(self) -> dict[str, bool]:
        """Serialize using the camelCase capability names."""
        data: dict[str, Any] = {c.value: self.allows(c) for c in Capability}
        data["isAdmin"] = self.is_admin
        data["isFacilitair"] = self.is_facilitair
        data["isUser"] = self.is_user
        return data


def _attribute_name(capability: Capability) -> str:
    # canViewAuditLogs -> can_view_audit_logs
    name = capability.value
    return "".join(f"_{ch.lower()}" if ch.isupper() else ch for ch in name)


_ATTRIBUTE_NAMES: dict[Capability, str] = {c: _attribute_name(c) for c in Capability}


def derive_permissions(role: Role | str | None) -> PermissionSet:
    """Derive the permission set for a role.

    Args:
        role: A Role, a raw role string, or None for "not signed in"

    Returns:
        PermissionSet with every flag computed as "role in allow-list".
        Absent or unknown roles get all flags False.
    """
    parsed = Role.parse(role)
    flags = {
        _ATTRIBUTE_NAMES[capability]: parsed in roles
        for capability, roles in CAPABILITY_ALLOW_LISTS.items()
    }
    return PermissionSet(role=parsed, **flags)
