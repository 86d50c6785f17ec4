"""asset-rbac exceptions."""


class AssetRBACError(Exception):
    """Base exception for asset-rbac."""

    pass


class ConfigError(AssetRBACError):
    """Configuration error."""

    pass


class PermissionDeniedError(AssetRBACError):
    """Permission denied for the requested operation."""

    pass


class NotFoundError(AssetRBACError):
    """Resource not found."""

    pass


class ProfileNotFoundError(NotFoundError):
    """User profile not found."""

    pass


class InvalidRoleError(AssetRBACError):
    """Role string is not one of the known roles."""

    pass


class ProfileExistsError(AssetRBACError):
    """A profile with this e-mail address already exists."""

    pass
