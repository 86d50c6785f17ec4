"""User profiles and the signed-in session."""

from collections.abc import Callable
from dataclasses import dataclass, replace

from asset_rbac.observability import get_logger
from asset_rbac.rbac.permissions import PermissionSet, derive_permissions
from asset_rbac.rbac.roles import Role

logger = get_logger(__name__)


@dataclass(frozen=True)
class UserProfile:
    """A user profile as stored by the backend.

    ``role_name`` is the raw stored string; ``role`` is its parsed form,
    which is ``Role.UNKNOWN`` for anything unrecognised.
    """

    id: str
    email: str
    role_name: str
    full_name: str | None = None

    @property
    def role(self) -> Role:
        return Role.parse(self.role_name)

    def with_role(self, role: Role | str) -> "UserProfile":
        """Return a copy of this profile with another role."""
        role_name = role.value if isinstance(role, Role) else role
        return replace(self, role_name=role_name)

    def to_dict(self) -> dict[str, str | None]:
        role = self.role
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "role": role.value if role.is_known else None,
            "role_description": role.description,
        }


ProfileListener = Callable[[UserProfile | None, UserProfile | None], None]


class ProfileSession:
    """Holds the signed-in profile and tells listeners when it changes.

    The profile starts absent, becomes present when the auth backend has
    fetched it, and may change (e.g. an admin edits the role) or go away
    again on sign-out. Permissions are derived again on every read.
    """

    def __init__(self, profile: UserProfile | None = None) -> None:
        self._profile = profile
        self._listeners: list[ProfileListener] = []

    @property
    def profile(self) -> UserProfile | None:
        return self._profile

    @property
    def is_authenticated(self) -> bool:
        return self._profile is not None

    def permissions(self) -> PermissionSet:
        """Derive permissions for the current profile."""
        return derive_permissions(self._profile.role if self._profile else None)

    def subscribe(self, listener: ProfileListener) -> Callable[[], None]:
        """Register a listener called with (previous, current) on every change.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, profile: UserProfile) -> None:
        self._set(profile)

    def update(self, profile: UserProfile) -> None:
        """Replace the current profile, e.g. after a role change."""
        self._set(profile)

    def sign_out(self) -> None:
        self._set(None)

    def _set(self, profile: UserProfile | None) -> None:
        previous = self._profile
        if previous == profile:
            return
        self._profile = profile

        logger.debug(
            "Session profile changed",
            context={
                "previous_role": previous.role_name if previous else None,
                "role": profile.role_name if profile else None,
            },
        )
        for listener in list(self._listeners):
            try:
                listener(previous, profile)
            except Exception as e:
                logger.error("Profile listener failed", error=e)
