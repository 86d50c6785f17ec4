"""Access guard: choose between a protected and a fallback branch by role."""

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar

from asset_rbac.exceptions import PermissionDeniedError
from asset_rbac.observability import emit_counter, get_logger
from asset_rbac.rbac.permissions import CAPABILITY_ALLOW_LISTS, Capability
from asset_rbac.rbac.roles import Role

if TYPE_CHECKING:
    from asset_rbac.auth.profile import UserProfile

logger = get_logger(__name__)

T = TypeVar("T")
F = TypeVar("F")


class AccessGuard:
    """Gate that admits profiles whose role is in a fixed set.

    The decision is recomputed on every call from the profile passed in;
    the guard keeps no state besides its role set.
    """

    def __init__(self, allowed_roles: Iterable[Role | str]) -> None:
        parsed = (Role.parse(r) for r in allowed_roles)
        self.allowed_roles: frozenset[Role] = frozenset(r for r in parsed if r.is_known)

    @classmethod
    def for_capability(cls, capability: Capability) -> "AccessGuard":
        """Guard admitting exactly the roles that hold a capability."""
        return cls(CAPABILITY_ALLOW_LISTS[capability])

    def allows(self, profile: "UserProfile | None") -> bool:
        if profile is None:
            return False
        role = Role.parse(profile.role)
        return role.is_known and role in self.allowed_roles

    def render(
        self,
        profile: "UserProfile | None",
        protected: T | Callable[[], T],
        fallback: F | Callable[[], F] | None = None,
    ) -> T | F | None:
        """Return the protected branch if the profile is admitted, else the fallback.

        Callable branches are called lazily, so only the selected one runs.
        """
        if self.allows(profile):
            return _resolve(protected)

        self._record_denial(profile)
        return _resolve(fallback)

    def check(self, profile: "UserProfile | None") -> None:
        """Raise PermissionDeniedError unless the profile is admitted."""
        if not self.allows(profile):
            self._record_denial(profile)
            raise PermissionDeniedError(
                f"One of the roles {self._describe()} is required"
            )

    def _record_denial(self, profile: "UserProfile | None") -> None:
        logger.debug(
            "Access denied",
            context={
                "allowed_roles": self._describe(),
                "role": profile.role_name if profile is not None else None,
            },
        )
        emit_counter("access.denied", {"guard": self._describe()})

    def _describe(self) -> str:
        return ", ".join(sorted(r.value for r in self.allowed_roles)) or "<none>"

    def __repr__(self) -> str:
        return f"AccessGuard({self._describe()})"


def _resolve(branch: Any) -> Any:
    return branch() if callable(branch) else branch


ADMIN_ONLY = AccessGuard([Role.ICT_ADMIN])
ADMIN_AND_FACILITAIR = AccessGuard([Role.ICT_ADMIN, Role.FACILITAIR_MEDEWERKER])


def admin_only(
    profile: "UserProfile | None",
    protected: Any,
    fallback: Any = None,
) -> Any:
    """Render ``protected`` for ICT Admins only."""
    return ADMIN_ONLY.render(profile, protected, fallback)


def admin_and_facilitair(
    profile: "UserProfile | None",
    protected: Any,
    fallback: Any = None,
) -> Any:
    """Render ``protected`` for ICT Admins and Facilitair Medewerkers."""
    return ADMIN_AND_FACILITAIR.render(profile, protected, fallback)
