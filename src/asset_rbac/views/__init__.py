"""Role-aware screen composition."""

from asset_rbac.views.screens import (
    SCREEN_BANNERS,
    SCREEN_RULES,
    Screen,
    ScreenLayout,
    ViewElement,
    compose_screen,
    is_visible,
    visible_elements,
)

__all__ = [
    "SCREEN_BANNERS",
    "SCREEN_RULES",
    "Screen",
    "ScreenLayout",
    "ViewElement",
    "compose_screen",
    "is_visible",
    "visible_elements",
]
