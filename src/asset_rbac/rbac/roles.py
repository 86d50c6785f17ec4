"""Role model.

The set of roles is closed. Stored or transmitted role strings are parsed
into :class:`Role`; anything that is not an exact match for a known role
becomes ``Role.UNKNOWN``, which every consumer treats as deny-all.
"""

from enum import Enum


class Role(str, Enum):
    """User roles, most privileged first."""

    ICT_ADMIN = "ICT Admin"
    FACILITAIR_ADMIN = "Facilitair Admin"
    FACILITAIR_MEDEWERKER = "Facilitair Medewerker"
    GEBRUIKER = "Gebruiker"

    # Fallback for missing or unrecognised role strings
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: "str | Role | None") -> "Role":
        """Parse a raw role string.

        Matching is exact (case and whitespace sensitive). Absent, unknown
        and malformed values map to ``Role.UNKNOWN``; this never raises.
        """
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        return _BY_VALUE.get(value, cls.UNKNOWN)

    @classmethod
    def known(cls) -> tuple["Role", ...]:
        """The real roles, excluding the fallback variant."""
        return _KNOWN_ROLES

    @property
    def is_known(self) -> bool:
        return self is not Role.UNKNOWN

    @property
    def description(self) -> str:
        return ROLE_DESCRIPTIONS[self]


_KNOWN_ROLES: tuple[Role, ...] = (
    Role.ICT_ADMIN,
    Role.FACILITAIR_ADMIN,
    Role.FACILITAIR_MEDEWERKER,
    Role.GEBRUIKER,
)

_BY_VALUE: dict[str, Role] = {role.value: role for role in _KNOWN_ROLES}

ROLE_DESCRIPTIONS: dict[Role, str] = {
    Role.ICT_ADMIN: "Volledige toegang tot alle functies",
    Role.FACILITAIR_ADMIN: "Beheer van facilitaire assets en instellingen",
    Role.FACILITAIR_MEDEWERKER: "Beheer van facilitaire assets",
    Role.GEBRUIKER: "Basis toegang en eigen reserveringen",
    Role.UNKNOWN: "",
}

# Role assigned to newly created profiles
DEFAULT_ROLE = Role.GEBRUIKER
