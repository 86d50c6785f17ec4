"""Pytest configuration and fixtures."""

import pytest

from asset_rbac.auth.profile import UserProfile
from asset_rbac.rbac.roles import Role


def make_profile(role: Role | str, profile_id: str = "user-1") -> UserProfile:
    """Build a profile with the given role."""
    role_name = role.value if isinstance(role, Role) else role
    return UserProfile(
        id=profile_id,
        email=f"{profile_id}@assetspek.nl",
        full_name="Test User",
        role_name=role_name,
    )


@pytest.fixture
def profile_factory():
    """Factory for profiles with a given role."""
    return make_profile


@pytest.fixture
def ict_admin() -> UserProfile:
    return make_profile(Role.ICT_ADMIN, "user-ict")


@pytest.fixture
def facilitair_admin() -> UserProfile:
    return make_profile(Role.FACILITAIR_ADMIN, "user-fa")


@pytest.fixture
def facilitair_medewerker() -> UserProfile:
    return make_profile(Role.FACILITAIR_MEDEWERKER, "user-fm")


@pytest.fixture
def gebruiker() -> UserProfile:
    return make_profile(Role.GEBRUIKER, "user-g")


@pytest.fixture
def unknown_role_profile() -> UserProfile:
    return make_profile("Super Admin", "user-x")


@pytest.fixture
def sample_config_dict():
    """Sample configuration dictionary for testing."""
    return {
        "database": {"backend": "sqlite", "path": ":memory:"},
        "server": {"cors_origins": ["http://localhost:5173"]},
        "logging": {"level": "DEBUG", "format": "text"},
    }
