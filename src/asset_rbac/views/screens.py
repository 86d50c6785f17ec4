"""Screen layouts driven by derived permissions.

Each screen lists its role-dependent controls together with the capability
that unlocks them. Controls mapped to ``None`` are shown to every signed-in
profile with a known role. Nothing is shown without a profile.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from asset_rbac.rbac.permissions import Capability, PermissionSet, derive_permissions
from asset_rbac.rbac.roles import Role

if TYPE_CHECKING:
    from asset_rbac.auth.profile import UserProfile


class Screen(str, Enum):
    DASHBOARD_HEADER = "dashboard-header"
    MAIN_NAVIGATION = "main-navigation"
    ASSET_TABLE_ROW = "asset-table-row"
    ASSET_DETAILS = "asset-details"
    RESERVATIONS = "reservations"
    NOTIFICATIONS = "notifications"
    SETTINGS = "settings"
    AUDIT_LOG = "audit-log"


class ViewElement(str, Enum):
    # Header and navigation
    ROLE_BADGE = "role_badge"
    ACTIVITY_LOG_BUTTON = "activity_log_button"
    RESERVATIONS_BUTTON = "reservations_button"
    ADD_ASSET_BUTTON = "add_asset_button"
    DASHBOARD_TAB = "dashboard_tab"
    ASSETS_TAB = "assets_tab"
    USERS_TAB = "users_tab"
    SETTINGS_TAB = "settings_tab"
    SIGN_OUT_BUTTON = "sign_out_button"

    # Assets
    VIEW_ASSET_ACTION = "view_asset_action"
    RESERVE_ASSET_ACTION = "reserve_asset_action"
    EDIT_ASSET_ACTION = "edit_asset_action"
    DELETE_ASSET_ACTION = "delete_asset_action"
    PERMANENT_DELETE_ACTION = "permanent_delete_action"
    IMPORT_ASSETS_ACTION = "import_assets_action"
    MAINTENANCE_TRACKER = "maintenance_tracker"

    # Reservations
    OWN_RESERVATIONS = "own_reservations"
    ALL_RESERVATIONS_CALENDAR = "all_reservations_calendar"
    APPROVE_RESERVATION_ACTION = "approve_reservation_action"

    # Notifications
    NOTIFICATION_LIST = "notification_list"
    CREATE_NOTIFICATION_ACTION = "create_notification_action"

    # Settings
    SYSTEM_CONFIGURATION = "system_configuration"
    BRANDING_SETTINGS = "branding_settings"
    ROLE_MANAGEMENT = "role_management"
    EXPORT_IMPORT_SECTION = "export_import_section"
    SECURITY_AUDIT_LOG = "security_audit_log"
    AUDIT_LOG_TABLE = "audit_log_table"


def _rules(**entries: Any) -> Mapping[ViewElement, Capability | None]:
    return MappingProxyType({ViewElement[name.upper()]: cap for name, cap in entries.items()})


SCREEN_RULES: Mapping[Screen, Mapping[ViewElement, Capability | None]] = MappingProxyType({
    Screen.DASHBOARD_HEADER: _rules(
        role_badge=None,
        activity_log_button=None,
        reservations_button=Capability.MANAGE_RESERVATIONS,
        add_asset_button=Capability.CREATE_ASSETS,
    ),
    Screen.MAIN_NAVIGATION: _rules(
        dashboard_tab=None,
        assets_tab=Capability.VIEW_ASSETS,
        users_tab=Capability.MANAGE_USERS,
        settings_tab=Capability.VIEW_SETTINGS,
        sign_out_button=None,
    ),
    Screen.ASSET_TABLE_ROW: _rules(
        view_asset_action=Capability.VIEW_ASSETS,
        edit_asset_action=Capability.EDIT_ASSETS,
        delete_asset_action=Capability.DELETE_ASSETS,
    ),
    Screen.ASSET_DETAILS: _rules(
        reserve_asset_action=Capability.VIEW_ASSETS,
        edit_asset_action=Capability.EDIT_ASSETS,
        delete_asset_action=Capability.DELETE_ASSETS,
        permanent_delete_action=Capability.DELETE_ASSETS,
        maintenance_tracker=Capability.MANAGE_MAINTENANCE,
    ),
    Screen.RESERVATIONS: _rules(
        own_reservations=Capability.VIEW_ASSETS,
        all_reservations_calendar=Capability.VIEW_ALL_RESERVATIONS,
        approve_reservation_action=Capability.MANAGE_RESERVATIONS,
    ),
    Screen.NOTIFICATIONS: _rules(
        notification_list=None,
        create_notification_action=Capability.CREATE_NOTIFICATIONS,
    ),
    Screen.SETTINGS: _rules(
        system_configuration=Capability.VIEW_SETTINGS,
        branding_settings=Capability.VIEW_SETTINGS,
        export_import_section=Capability.VIEW_SETTINGS,
        import_assets_action=Capability.CREATE_ASSETS,
        role_management=Capability.MANAGE_USERS,
        security_audit_log=Capability.VIEW_AUDIT_LOGS,
    ),
    Screen.AUDIT_LOG: _rules(
        audit_log_table=Capability.VIEW_AUDIT_LOGS,
    ),
})

SCREEN_BANNERS: Mapping[Screen, Mapping[Role, str]] = MappingProxyType({
    Screen.SETTINGS: MappingProxyType({
        Role.ICT_ADMIN: (
            "Als ICT Admin heeft u volledige toegang tot alle "
            "systeeminstellingen en configuraties."
        ),
        Role.FACILITAIR_ADMIN: (
            "Als Facilitair Admin kunt u instellingen beheren die "
            "gerelateerd zijn aan facilitaire assets."
        ),
    }),
})


@dataclass(frozen=True)
class ScreenLayout:
    """What one profile gets to see on one screen."""

    screen: Screen
    role: Role | None
    elements: tuple[ViewElement, ...]
    banner: str | None = None

    def shows(self, element: ViewElement) -> bool:
        return element in self.elements

    def to_dict(self) -> dict[str, Any]:
        return {
            "screen": self.screen.value,
            "role": self.role.value if self.role and self.role.is_known else None,
            "elements": [e.value for e in self.elements],
            "banner": self.banner,
        }


def _element_visible(required: Capability | None, permissions: PermissionSet) -> bool:
    if not permissions.role.is_known:
        return False
    return required is None or permissions.allows(required)


def visible_elements(
    screen: Screen,
    profile: "UserProfile | None",
) -> tuple[ViewElement, ...]:
    """Controls of a screen visible to a profile, in table order."""
    if profile is None:
        return ()
    permissions = derive_permissions(profile.role)
    return tuple(
        element
        for element, required in SCREEN_RULES[screen].items()
        if _element_visible(required, permissions)
    )


def is_visible(
    screen: Screen,
    element: ViewElement,
    profile: "UserProfile | None",
) -> bool:
    """Whether a single control is visible. Unlisted controls never are."""
    rules = SCREEN_RULES[screen]
    if profile is None or element not in rules:
        return False
    return _element_visible(rules[element], derive_permissions(profile.role))


def compose_screen(screen: Screen, profile: "UserProfile | None") -> ScreenLayout:
    """Build the layout of a screen for a profile."""
    if profile is None:
        return ScreenLayout(screen=screen, role=None, elements=())

    role = Role.parse(profile.role)
    return ScreenLayout(
        screen=screen,
        role=role,
        elements=visible_elements(screen, profile),
        banner=SCREEN_BANNERS.get(screen, {}).get(role),
    )
